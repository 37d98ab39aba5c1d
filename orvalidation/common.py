"""Shared validation helpers and the error types raised by every validator."""

from __future__ import annotations

import datetime as _dt
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Hashable, TypeVar

__all__ = [
    "OpenRouterError",
    "ConfigError",
    "ContextLengthExceededError",
    "validate_required_string",
    "validate_non_empty_string",
    "validate_string_length",
    "validate_numeric_range",
    "validate_numeric_min",
    "validate_numeric_max",
    "validate_url",
    "validate_url_scheme",
    "validate_date_format",
    "validate_date_range",
    "validate_enum_value",
    "validate_non_empty_collection",
    "validate_collection_size",
    "validate_unique_items",
    "validate_json_object",
    "validate_json_type",
    "validate_optional_numeric_param",
    "validate_optional_integer_param",
    "validate_optional_string_param",
    "validate_sampling_parameters",
    "validate_model_id",
    "validate_regex_pattern",
    "validate_non_empty_strings",
]

_T = TypeVar("_T")

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1


class OpenRouterError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(OpenRouterError, ValueError):
    """A request or parameter failed validation."""


class ContextLengthExceededError(OpenRouterError):
    """A request is estimated to exceed the model's context length."""

    def __init__(self, model: str, message: str) -> None:
        super().__init__(f"Context length exceeded for model {model}: {message}")
        self.model = model
        self.message = message


def _display(value: Any) -> str:
    """Render a value the way it appears in error messages."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            text = str(int(value))
            if value == 0 and math.copysign(1.0, value) < 0:
                return "-0"
            return text
        return repr(value)
    return str(value)


def _byte_len(value: str) -> int:
    return len(value.encode("utf-8"))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_i64(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        if _I64_MIN <= value <= _I64_MAX:
            return value
    return None


def validate_required_string(value: str | None, field_name: str) -> str:
    """Return the value if present, else raise ConfigError."""
    if value is None:
        raise ConfigError(f"Required field '{field_name}' is missing")
    return value


def validate_non_empty_string(value: str, field_name: str) -> None:
    """Reject strings that are empty or only whitespace."""
    if not value.strip():
        raise ConfigError(f"Field '{field_name}' cannot be empty")


def validate_string_length(
    value: str, field_name: str, min_length: int, max_length: int
) -> None:
    """Check that the UTF-8 length of a string lies within bounds."""
    length = _byte_len(value)
    if length < min_length:
        raise ConfigError(
            f"Field '{field_name}' must be at least {min_length} characters"
        )
    if length > max_length:
        raise ConfigError(
            f"Field '{field_name}' must not exceed {max_length} characters"
        )


def validate_numeric_range(value: Any, field_name: str, minimum: Any, maximum: Any) -> None:
    """Check that minimum <= value <= maximum."""
    if value < minimum or value > maximum:
        raise ConfigError(
            f"Field '{field_name}' must be between {_display(minimum)} and {_display(maximum)}"
        )


def validate_numeric_min(value: Any, field_name: str, minimum: Any) -> None:
    """Check that value >= minimum."""
    if value < minimum:
        raise ConfigError(f"Field '{field_name}' must be at least {_display(minimum)}")


def validate_numeric_max(value: Any, field_name: str, maximum: Any) -> None:
    """Check that value <= maximum."""
    if value > maximum:
        raise ConfigError(f"Field '{field_name}' must be at most {_display(maximum)}")


_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):(.*)$", re.DOTALL)
_HOST_REQUIRED_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})
_FORBIDDEN_HOST_CHARS = frozenset(" <>^|\"`{}")
_EDGE_CHARS = "".join(chr(code) for code in range(0x21))


def _parse_scheme(url: str) -> str | None:
    """Return the lower-cased scheme of an absolute URL, or None if it is not one."""
    text = re.sub(r"[\t\n\r]", "", url.strip(_EDGE_CHARS))
    match = _SCHEME_RE.match(text)
    if match is None:
        return None
    scheme = match.group(1).lower()
    rest = match.group(2)
    if scheme in _HOST_REQUIRED_SCHEMES:
        authority = re.split(r"[/\\?#]", rest.lstrip("/\\"), maxsplit=1)[0]
        host_port = authority.rpartition("@")[2]
        if host_port.startswith("["):
            host, bracket, tail = host_port.partition("]")
            if not bracket or len(host) < 2:
                return None
            port = tail[1:] if tail.startswith(":") else None
            if tail and port is None:
                return None
        else:
            host, sep, port_text = host_port.partition(":")
            port = port_text if sep else None
            if not host or any(ch in _FORBIDDEN_HOST_CHARS for ch in host):
                return None
        if port:
            if not port.isascii() or not port.isdigit() or int(port) > 65535:
                return None
    return scheme


def validate_url(url: str, field_name: str) -> None:
    """Check that a string is an absolute URL."""
    if _parse_scheme(url) is None:
        raise ConfigError(f"Field '{field_name}' must be a valid URL")


def validate_url_scheme(url: str, field_name: str, allowed_schemes: Sequence[str]) -> None:
    """Check that a URL is valid and uses one of the allowed schemes."""
    scheme = _parse_scheme(url)
    if scheme is None:
        raise ConfigError(f"Field '{field_name}' must be a valid URL")
    if scheme not in allowed_schemes:
        raise ConfigError(
            f"Field '{field_name}' must use one of these schemes: {', '.join(allowed_schemes)}"
        )


_DATE_RE = re.compile(r"^([+-]?[0-9]+)-([0-9]{1,2})-([0-9]{1,2})$")


def _parse_date(text: str) -> _dt.date | None:
    match = _DATE_RE.match(text)
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return _dt.date(year, month, day)
    except ValueError:
        return None


def validate_date_format(date: str, field_name: str) -> None:
    """Check that a string is a real calendar date written as YYYY-MM-DD."""
    if _byte_len(date) != 10 or date[4:5] != "-" or date[7:8] != "-":
        raise ConfigError(f"Field '{field_name}' must be in YYYY-MM-DD format")
    if _parse_date(date) is None:
        raise ConfigError(
            f"Field '{field_name}' must be a valid date in YYYY-MM-DD format"
        )


def validate_date_range(start_date: str, end_date: str) -> None:
    """Check that both dates parse and start_date is not after end_date."""
    start = _parse_date(start_date)
    if start is None:
        raise ConfigError("Invalid start_date format. Use YYYY-MM-DD")
    end = _parse_date(end_date)
    if end is None:
        raise ConfigError("Invalid end_date format. Use YYYY-MM-DD")
    if start > end:
        raise ConfigError("start_date cannot be after end_date")


def validate_enum_value(value: str, field_name: str, allowed_values: Sequence[str]) -> None:
    """Check that a value is one of the allowed strings."""
    if str(value) not in allowed_values:
        raise ConfigError(
            f"Field '{field_name}' must be one of: {', '.join(allowed_values)}"
        )


def validate_non_empty_collection(collection: Sequence[Any], field_name: str) -> None:
    """Reject an empty collection."""
    if not collection:
        raise ConfigError(f"Field '{field_name}' cannot be empty")


def validate_collection_size(
    collection: Sequence[Any], field_name: str, min_size: int, max_size: int
) -> None:
    """Check that the number of items lies within bounds."""
    size = len(collection)
    if size < min_size:
        raise ConfigError(f"Field '{field_name}' must contain at least {min_size} items")
    if size > max_size:
        raise ConfigError(f"Field '{field_name}' must contain at most {max_size} items")


def validate_unique_items(items: Iterable[Hashable], field_name: str) -> None:
    """Reject a collection containing the same item twice."""
    seen: set[Hashable] = set()
    for index, item in enumerate(items):
        if item in seen:
            raise ConfigError(
                f"Duplicate item '{item}' found in field '{field_name}' at index {index}"
            )
        seen.add(item)


def validate_json_object(value: Any, field_name: str) -> None:
    """Check that a decoded JSON value is an object."""
    if not isinstance(value, dict):
        raise ConfigError(f"Field '{field_name}' must be a JSON object")


def _is_json_integer(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and _I64_MIN <= value <= _U64_MAX
    )


_JSON_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": _is_number,
    "integer": _is_json_integer,
    "boolean": lambda v: isinstance(v, bool),
    "array": lambda v: isinstance(v, list),
    "object": lambda v: isinstance(v, dict),
    "null": lambda v: v is None,
}


def validate_json_type(value: Any, field_name: str, expected_type: str) -> None:
    """Check that a decoded JSON value has the named JSON type."""
    check = _JSON_TYPE_CHECKS.get(expected_type)
    if check is None or not check(value):
        raise ConfigError(f"Field '{field_name}' must be of type {expected_type}")


def validate_optional_numeric_param(
    params: Mapping[str, Any], key: str, minimum: float, maximum: float
) -> None:
    """If params holds key, check it is a number within bounds."""
    if key not in params:
        return
    value = params[key]
    if not _is_number(value):
        raise ConfigError(f"Parameter '{key}' must be a number")
    validate_numeric_range(float(value), key, minimum, maximum)


def validate_optional_integer_param(
    params: Mapping[str, Any], key: str, minimum: int, maximum: int
) -> None:
    """If params holds key, check it is a 64-bit integer within bounds."""
    if key not in params:
        return
    number = _as_i64(params[key])
    if number is None:
        raise ConfigError(f"Parameter '{key}' must be an integer")
    validate_numeric_range(number, key, minimum, maximum)


def validate_optional_string_param(
    params: Mapping[str, Any], key: str, min_length: int, max_length: int
) -> None:
    """If params holds key, check it is a string of bounded length."""
    if key not in params:
        return
    value = params[key]
    if not isinstance(value, str):
        raise ConfigError(f"Parameter '{key}' must be a string")
    validate_string_length(value, key, min_length, max_length)


def validate_sampling_parameters(
    temperature: float | None = None,
    top_p: float | None = None,
    top_k: int | None = None,
    frequency_penalty: float | None = None,
    presence_penalty: float | None = None,
) -> None:
    """Check the common sampling parameters against their allowed ranges."""
    if temperature is not None:
        validate_numeric_range(temperature, "temperature", 0.0, 2.0)

    if top_p is not None and (top_p <= 0.0 or top_p > 1.0):
        raise ConfigError(
            "Top P must be between 0.0 (exclusive) and 1.0 (inclusive), "
            f"got {_display(top_p)}"
        )

    if top_k is not None and top_k != 0 and top_k < 1:
        raise ConfigError(f"Top K must be 0 (disabled) or >= 1, got {top_k}")

    if frequency_penalty is not None:
        validate_numeric_range(frequency_penalty, "frequency_penalty", -2.0, 2.0)

    if presence_penalty is not None:
        validate_numeric_range(presence_penalty, "presence_penalty", -2.0, 2.0)


def validate_model_id(model: str) -> None:
    """Check that a model identifier is non-empty and of the form provider/model."""
    validate_non_empty_string(model, "model")
    validate_string_length(model, "model", 1, 200)
    if "/" not in model:
        raise ConfigError(
            "Model ID should be in format 'provider/model' (e.g., 'openai/gpt-4')"
        )


def validate_regex_pattern(value: str, field_name: str, pattern: str) -> None:
    """Check that a regular expression matches somewhere in value."""
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        raise ConfigError(
            f"Invalid regex pattern for field '{field_name}': {exc}"
        ) from exc
    if regex.search(value) is None:
        raise ConfigError(f"Field '{field_name}' does not match required pattern")


def validate_non_empty_strings(strings: Iterable[str], field_name: str) -> None:
    """Reject any string in the collection that is empty or only whitespace."""
    for index, text in enumerate(strings):
        if not text.strip():
            raise ConfigError(
                f"String at index {index} in field '{field_name}' cannot be empty"
            )