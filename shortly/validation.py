"""Validation rules for the JSON request body."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from .exceptions import ValidationError
from .ports import ValidationRule


def _sanitize(value: int, default: int) -> int:
    return value if 0 < value <= 2 else default


class KeyCountRule:
    """Requires the number of keys to lie within [min_keys, max_keys].

    Both bounds must be 1 or 2; anything else falls back to 1 and 2.
    """

    def __init__(self, min_keys: int, max_keys: int) -> None:
        self._min = 1
        self._max = 2
        self.min_keys = min_keys
        self.max_keys = max_keys

    @property
    def min_keys(self) -> int:
        return self._min

    @min_keys.setter
    def min_keys(self, value: int) -> None:
        self._min = _sanitize(value, 1)

    @property
    def max_keys(self) -> int:
        return self._max

    @max_keys.setter
    def max_keys(self, value: int) -> None:
        self._max = _sanitize(value, 2)

    def check(self, obj: Mapping[str, Any]) -> Optional[str]:
        if self._min <= len(obj) <= self._max:
            return None
        return (
            f"JSON must contain at least {self._min} key, "
            f"and maximum {self._max}"
        )


class KeyRule:
    """Requires every mandatory key and allows only mandatory or optional keys."""

    def __init__(
        self, mandatory_keys: Iterable[str], optional_keys: Iterable[str]
    ) -> None:
        self.mandatory_keys = list(mandatory_keys)
        self.allowed_keys = frozenset(self.mandatory_keys) | frozenset(optional_keys)

    def check(self, obj: Mapping[str, Any]) -> Optional[str]:
        missing = next((key for key in self.mandatory_keys if key not in obj), None)
        if missing is not None:
            return f"JSON must contain key {missing}"
        unexpected = next((key for key in obj if key not in self.allowed_keys), None)
        if unexpected is not None:
            return f"Key {unexpected} is not allowed."
        return None


class JsonValidator:
    """Applies a list of rules in order; the first failure is raised."""

    def __init__(self, rules: Iterable[Optional[ValidationRule]] = ()) -> None:
        self._rules: list[ValidationRule] = []
        for rule in rules:
            self.add_rule(rule)

    def add_rule(self, rule: Optional[ValidationRule]) -> None:
        """Append a rule; None is ignored."""
        if rule is not None:
            self._rules.append(rule)

    def validate(self, obj: Mapping[str, Any]) -> None:
        """Raise ValidationError if obj is empty or breaks any rule."""
        if not obj:
            raise ValidationError("Input is empty")
        for rule in self._rules:
            error = rule.check(obj)
            if error is not None:
                raise ValidationError(error)

    def __len__(self) -> int:
        return len(self._rules)