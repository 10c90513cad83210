import pytest

from shortly.exceptions import ValidationError
from shortly.parser import JsonParser, provider_type_from_name
from shortly.types import ProviderType


class RecordingValidator:
    def __init__(self, error=None):
        self.error = error
        self.seen = []

    def validate(self, obj):
        self.seen.append(obj)
        if self.error is not None:
            raise ValidationError(self.error)


def test_parse_valid_json_without_provider():
    validator = RecordingValidator()
    url, provider = JsonParser(validator).parse('{ "url":"http://example.com" }')
    assert url == "http://example.com"
    assert provider is ProviderType.BITLY
    assert len(validator.seen) == 1


def test_parse_valid_json_with_tinyurl_provider():
    validator = RecordingValidator()
    url, provider = JsonParser(validator).parse('{ "url":"abc", "provider":"tinyurl" }')
    assert url == "abc"
    assert provider is ProviderType.TINYURL
    assert len(validator.seen) == 1


def test_unknown_provider_defaults_to_bitly():
    validator = RecordingValidator()
    url, provider = JsonParser(validator).parse('{ "url":"xyz", "provider":"unknown" }')
    assert url == "xyz"
    assert provider is ProviderType.BITLY
    assert len(validator.seen) == 1


def test_throws_on_non_object_json():
    validator = RecordingValidator()
    with pytest.raises(ValidationError, match="JSON is not an object"):
        JsonParser(validator).parse(" [1,2,3] ")
    assert validator.seen == []


def test_throws_on_malformed_json():
    validator = RecordingValidator()
    with pytest.raises(ValidationError, match="Invalid JSON format"):
        JsonParser(validator).parse(' { "url":"u", ')
    assert validator.seen == []


@pytest.mark.parametrize(
    "text, error",
    [
        (" {} ", "too few keys"),
        (' { "url":"u", "provider":"p", "extra":"x" } ', "too many keys"),
        (' { "provider":"tinyurl" } ', "missing url"),
    ],
)
def test_validator_failures_propagate(text, error):
    validator = RecordingValidator(error)
    with pytest.raises(ValidationError) as info:
        JsonParser(validator).parse(text)
    assert str(info.value) == error
    assert len(validator.seen) == 1


def test_non_string_url_is_a_validation_error():
    with pytest.raises(ValidationError):
        JsonParser(RecordingValidator()).parse('{"url": 5}')


def test_provider_type_from_name():
    assert provider_type_from_name("tinyurl") is ProviderType.TINYURL
    assert provider_type_from_name("bitly") is ProviderType.BITLY
    assert provider_type_from_name("") is ProviderType.BITLY