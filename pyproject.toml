[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shortly"
version = "0.1.0"
description = "A small asynchronous HTTP service that shortens URLs through Bitly or TinyURL, with Redis-backed result caching."
requires-python = ">=3.10"
keywords = ["url-shortener", "bitly", "tinyurl", "http-server", "asyncio", "redis"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: No Input/Output (Daemon)",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "redis>=5.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
shortly = "shortly.app:main"

[tool.hatch.build.targets.wheel]
packages = ["shortly"]

[tool.hatch.build.targets.sdist]
include = ["shortly", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP", "SIM"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
