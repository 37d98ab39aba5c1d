import pytest

from orvalidation.common import (
    ConfigError,
    ContextLengthExceededError,
    OpenRouterError,
    validate_collection_size,
    validate_date_format,
    validate_date_range,
    validate_enum_value,
    validate_json_object,
    validate_json_type,
    validate_model_id,
    validate_non_empty_collection,
    validate_non_empty_string,
    validate_non_empty_strings,
    validate_numeric_max,
    validate_numeric_min,
    validate_numeric_range,
    validate_optional_integer_param,
    validate_optional_numeric_param,
    validate_optional_string_param,
    validate_regex_pattern,
    validate_required_string,
    validate_sampling_parameters,
    validate_string_length,
    validate_unique_items,
    validate_url,
    validate_url_scheme,
)

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


def test_error_hierarchy():
    err = ContextLengthExceededError("openai/gpt-4", "too long")
    assert isinstance(err, OpenRouterError)
    assert err.model == "openai/gpt-4"
    assert err.message == "too long"
    assert "too long" in str(err)
    assert issubclass(ConfigError, OpenRouterError)


def test_validate_required_string():
    assert validate_required_string("value", "name") == "value"
    assert validate_required_string("", "name") == ""
    with pytest.raises(ConfigError, match="Required field 'name' is missing"):
        validate_required_string(None, "name")


def test_validate_non_empty_string():
    assert validate_non_empty_string("hello", "test") is None
    assert validate_non_empty_string("  hello  ", "test") is None
    assert validate_non_empty_string("🦀 Rust 编程语言", "test") is None
    with pytest.raises(ConfigError):
        validate_non_empty_string("", "test")
    with pytest.raises(ConfigError):
        validate_non_empty_string("   ", "test")


def test_non_empty_string_error_names_field():
    with pytest.raises(ConfigError) as info:
        validate_non_empty_string("", "test_field")
    assert "test_field" in str(info.value)


def test_validate_string_length():
    assert validate_string_length("hello", "test", 1, 10) is None
    assert validate_string_length("hello", "test", 5, 10) is None
    with pytest.raises(ConfigError, match="at least 6"):
        validate_string_length("hello", "test", 6, 10)
    with pytest.raises(ConfigError, match="must not exceed 5"):
        validate_string_length("hello world", "test", 1, 5)


def test_string_length_long_strings():
    long_string = "a" * 1000
    assert validate_string_length(long_string, "test", 1, 1000) is None
    with pytest.raises(ConfigError):
        validate_string_length(long_string, "test", 1, 999)


def test_string_length_counts_utf8_bytes():
    # "é" takes two bytes in UTF-8.
    assert validate_string_length("é", "test", 2, 2) is None
    with pytest.raises(ConfigError):
        validate_string_length("é", "test", 1, 1)


def test_validate_numeric_range():
    assert validate_numeric_range(5, "test", 1, 10) is None
    assert validate_numeric_range(1, "test", 1, 10) is None
    assert validate_numeric_range(10, "test", 1, 10) is None
    with pytest.raises(ConfigError, match="between 1 and 10"):
        validate_numeric_range(0, "test", 1, 10)
    with pytest.raises(ConfigError):
        validate_numeric_range(11, "test", 1, 10)


def test_numeric_range_boundaries():
    assert validate_numeric_range(I64_MIN, "test", I64_MIN, I64_MAX) is None
    assert validate_numeric_range(I64_MAX, "test", I64_MIN, I64_MAX) is None
    with pytest.raises(ConfigError):
        validate_numeric_range(I64_MAX + 1, "test", I64_MIN, I64_MAX)


def test_numeric_range_float_message():
    with pytest.raises(ConfigError) as info:
        validate_numeric_range(3.0, "temperature", 0.0, 2.0)
    assert str(info.value) == "Field 'temperature' must be between 0 and 2"


def test_validate_numeric_min_and_max():
    assert validate_numeric_min(5, "n", 5) is None
    with pytest.raises(ConfigError, match="at least 5"):
        validate_numeric_min(4, "n", 5)
    assert validate_numeric_max(5, "n", 5) is None
    with pytest.raises(ConfigError, match="at most 5"):
        validate_numeric_max(6, "n", 5)


def test_validate_url():
    assert validate_url("https://example.com", "test") is None
    assert validate_url("http://example.com", "test") is None
    with pytest.raises(ConfigError, match="must be a valid URL"):
        validate_url("not-a-url", "test")


@pytest.mark.parametrize("bad", ["", "http://", "https://:80", "http://example.com:99999", "://x"])
def test_validate_url_rejects(bad):
    with pytest.raises(ConfigError):
        validate_url(bad, "test")


def test_validate_url_scheme():
    assert validate_url_scheme("HTTPS://example.com", "u", ["http", "https"]) is None
    with pytest.raises(ConfigError, match="one of these schemes: http, https"):
        validate_url_scheme("ftp://example.com", "u", ["http", "https"])
    with pytest.raises(ConfigError, match="valid URL"):
        validate_url_scheme("nothing", "u", ["http"])


def test_validate_date_format():
    assert validate_date_format("2024-01-15", "test") is None
    assert validate_date_format("2024-02-29", "test") is None
    with pytest.raises(ConfigError):
        validate_date_format("2024-13-15", "test")
    with pytest.raises(ConfigError):
        validate_date_format("2024-01-32", "test")
    with pytest.raises(ConfigError, match="YYYY-MM-DD format"):
        validate_date_format("24-01-15", "test")
    with pytest.raises(ConfigError):
        validate_date_format("2023-02-29", "test")
    with pytest.raises(ConfigError):
        validate_date_format("2024/01/15", "test")


def test_validate_date_range():
    assert validate_date_range("2024-01-01", "2024-01-01") is None
    assert validate_date_range("2024-01-01", "2024-12-31") is None
    with pytest.raises(ConfigError, match="start_date cannot be after end_date"):
        validate_date_range("2024-02-01", "2024-01-01")
    with pytest.raises(ConfigError, match="Invalid start_date"):
        validate_date_range("bad", "2024-01-01")
    with pytest.raises(ConfigError, match="Invalid end_date"):
        validate_date_range("2024-01-01", "2024-02-30")


def test_validate_enum_value():
    allowed = ["user", "assistant", "system"]
    assert validate_enum_value("user", "test", allowed) is None
    with pytest.raises(ConfigError, match="one of: user, assistant, system"):
        validate_enum_value("invalid", "test", allowed)


def test_collections():
    assert validate_non_empty_collection([1], "c") is None
    with pytest.raises(ConfigError, match="cannot be empty"):
        validate_non_empty_collection([], "c")
    assert validate_collection_size([1, 2], "c", 1, 2) is None
    with pytest.raises(ConfigError, match="at least 3 items"):
        validate_collection_size([1, 2], "c", 3, 5)
    with pytest.raises(ConfigError, match="at most 1 items"):
        validate_collection_size([1, 2], "c", 0, 1)


def test_validate_unique_items():
    assert validate_unique_items(["a", "b"], "names") is None
    with pytest.raises(ConfigError) as info:
        validate_unique_items(["a", "b", "a"], "names")
    assert str(info.value) == "Duplicate item 'a' found in field 'names' at index 2"


def test_validate_json_object():
    assert validate_json_object({"a": 1}, "p") is None
    with pytest.raises(ConfigError, match="must be a JSON object"):
        validate_json_object([1], "p")


@pytest.mark.parametrize(
    "value, expected_type, ok",
    [
        ("x", "string", True),
        (1, "number", True),
        (1.5, "number", True),
        (True, "number", False),
        (3, "integer", True),
        (3.0, "integer", False),
        (2**64, "integer", False),
        (False, "boolean", True),
        ([], "array", True),
        ({}, "object", True),
        (None, "null", True),
        (0, "null", False),
        ("x", "unknown", False),
    ],
)
def test_validate_json_type(value, expected_type, ok):
    if ok:
        assert validate_json_type(value, "f", expected_type) is None
    else:
        with pytest.raises(ConfigError, match=f"must be of type {expected_type}"):
            validate_json_type(value, "f", expected_type)


def test_optional_numeric_param():
    assert validate_optional_numeric_param({}, "temperature", 0.0, 2.0) is None
    assert validate_optional_numeric_param({"temperature": 1}, "temperature", 0.0, 2.0) is None
    with pytest.raises(ConfigError):
        validate_optional_numeric_param({"temperature": 3.0}, "temperature", 0.0, 2.0)
    with pytest.raises(ConfigError, match="must be a number"):
        validate_optional_numeric_param({"temperature": "hot"}, "temperature", 0.0, 2.0)


def test_optional_integer_param():
    assert validate_optional_integer_param({"n": 3}, "n", 1, 5) is None
    with pytest.raises(ConfigError):
        validate_optional_integer_param({"n": 6}, "n", 1, 5)
    with pytest.raises(ConfigError, match="must be an integer"):
        validate_optional_integer_param({"n": 3.0}, "n", 1, 5)


def test_optional_string_param():
    assert validate_optional_string_param({"s": "abc"}, "s", 1, 3) is None
    with pytest.raises(ConfigError):
        validate_optional_string_param({"s": "abcd"}, "s", 1, 3)
    with pytest.raises(ConfigError, match="must be a string"):
        validate_optional_string_param({"s": 1}, "s", 1, 3)


def test_validate_sampling_parameters():
    assert validate_sampling_parameters(0.7, 0.9, 40, 0.5, 0.3) is None
    assert validate_sampling_parameters(None, None, 0, None, None) is None
    with pytest.raises(ConfigError):
        validate_sampling_parameters(3.0, None, None, None, None)
    with pytest.raises(ConfigError, match="Top P"):
        validate_sampling_parameters(None, 0.0, None, None, None)
    with pytest.raises(ConfigError):
        validate_sampling_parameters(None, 1.1, None, None, None)
    with pytest.raises(ConfigError):
        validate_sampling_parameters(None, None, None, -2.5, None)
    with pytest.raises(ConfigError):
        validate_sampling_parameters(None, None, None, None, 2.5)


def test_validate_model_id():
    assert validate_model_id("openai/gpt-4") is None
    assert validate_model_id("anthropic/claude-3") is None
    with pytest.raises(ConfigError, match="provider/model"):
        validate_model_id("invalid-model")
    with pytest.raises(ConfigError):
        validate_model_id("")
    with pytest.raises(ConfigError, match="must not exceed 200"):
        validate_model_id("a/" + "b" * 199)


def test_model_id_error_message_is_descriptive():
    with pytest.raises(ConfigError) as info:
        validate_model_id("")
    message = str(info.value)
    assert "empty" in message or "required" in message


def test_validate_regex_pattern():
    assert validate_regex_pattern("abc123", "code", r"\d+") is None
    with pytest.raises(ConfigError, match="does not match required pattern"):
        validate_regex_pattern("abc", "code", r"^\d+$")
    with pytest.raises(ConfigError, match="Invalid regex pattern for field 'code'"):
        validate_regex_pattern("abc", "code", "(")


def test_validate_non_empty_strings():
    assert validate_non_empty_strings(["a", " b "], "list") is None
    with pytest.raises(ConfigError) as info:
        validate_non_empty_strings(["a", "  "], "list")
    assert str(info.value) == "String at index 1 in field 'list' cannot be empty"