"""Text completion request type, validation and prompt token estimation."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from orvalidation.common import (
    ConfigError,
    ContextLengthExceededError,
    _byte_len,
    _display,
    _is_number,
    validate_collection_size,
    validate_model_id,
    validate_non_empty_string,
    validate_numeric_range,
    validate_optional_numeric_param,
    validate_string_length,
)

__all__ = [
    "CompletionRequest",
    "validate_completion_request",
    "estimate_prompt_tokens",
    "check_prompt_token_limits",
    "MAX_PROMPT_LENGTH",
    "MAX_COMPLETION_TOKENS",
]

MAX_PROMPT_LENGTH = 1_000_000
"""Maximum prompt length in bytes."""

MAX_COMPLETION_TOKENS = 200_000
"""Maximum recommended estimated prompt tokens for a completion."""

_U64_MAX = 2**64 - 1
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_TOKEN_ID_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class CompletionRequest:
    """A text completion request; extra_params holds optional JSON parameters."""

    model: str
    prompt: str
    extra_params: Any = field(default_factory=dict)


def _as_u64(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _U64_MAX:
        return value
    return None


def validate_completion_request(request: CompletionRequest) -> None:
    """Raise ConfigError if the completion request has a common mistake."""
    validate_model_id(request.model)
    validate_non_empty_string(request.prompt, "prompt")
    validate_string_length(request.prompt, "prompt", 1, MAX_PROMPT_LENGTH)
    if isinstance(request.extra_params, Mapping):
        _validate_extra_params(request.extra_params)


def _validate_extra_params(params: Mapping[str, Any]) -> None:
    validate_optional_numeric_param(params, "temperature", 0.0, 2.0)

    if "top_p" in params:
        value = params["top_p"]
        if not _is_number(value):
            raise ConfigError("Parameter 'top_p' must be a number")
        top_p = float(value)
        if top_p <= 0.0 or top_p > 1.0:
            raise ConfigError(
                "Top P must be between 0.0 (exclusive) and 1.0 (inclusive), "
                f"got {_display(top_p)}"
            )

    if "max_tokens" in params:
        tokens = _as_u64(params["max_tokens"])
        if tokens is None:
            raise ConfigError("Parameter 'max_tokens' must be an integer")
        if tokens != 0 and not 1 <= tokens <= 8192:
            raise ConfigError(
                "Max tokens must be 0 (unlimited) or between 1 and 8192, "
                f"got {tokens}"
            )

    validate_optional_numeric_param(params, "frequency_penalty", -2.0, 2.0)
    validate_optional_numeric_param(params, "presence_penalty", -2.0, 2.0)

    if "stop" in params:
        _validate_stop_sequence(params["stop"])

    if "logit_bias" in params:
        _validate_logit_bias(params["logit_bias"])

    if "echo" in params and not isinstance(params["echo"], bool):
        raise ConfigError("Parameter 'echo' must be a boolean")

    if "suffix" in params:
        suffix = params["suffix"]
        if isinstance(suffix, str):
            validate_string_length(suffix, "suffix", 0, 1000)
        elif suffix is not None:
            raise ConfigError("Parameter 'suffix' must be a string or null")

    if "best_of" in params:
        best_of = _as_u64(params["best_of"])
        if best_of is None:
            raise ConfigError("Parameter 'best_of' must be an integer")
        validate_numeric_range(best_of, "best_of", 1, 20)

    if "logprobs" in params:
        logprobs = _as_u64(params["logprobs"])
        if logprobs is None:
            raise ConfigError("Parameter 'logprobs' must be an integer")
        validate_numeric_range(logprobs, "logprobs", 0, 5)


def _validate_stop_sequence(value: Any) -> None:
    if isinstance(value, str):
        validate_string_length(value, "stop", 1, 100)
    elif isinstance(value, list):
        validate_collection_size(value, "stop", 1, 4)
        for index, stop in enumerate(value):
            if not isinstance(stop, str):
                raise ConfigError(f"Stop sequence at index {index} must be a string")
            validate_string_length(stop, f"stop[{index}]", 1, 100)
    else:
        raise ConfigError("Parameter 'stop' must be a string or array of strings")


def _is_i32_text(text: str) -> bool:
    return (
        _TOKEN_ID_RE.fullmatch(text) is not None and _I32_MIN <= int(text) <= _I32_MAX
    )


def _validate_logit_bias(value: Any) -> None:
    if not isinstance(value, Mapping):
        raise ConfigError("Parameter 'logit_bias' must be a JSON object")
    for token, bias in value.items():
        if not isinstance(token, str) or not _is_i32_text(token):
            raise ConfigError(f"Logit bias token '{token}' must be a valid integer")
        if not _is_number(bias):
            raise ConfigError(f"Logit bias for token '{token}' must be a number")
        bias_value = float(bias)
        if not -100.0 <= bias_value <= 100.0:
            raise ConfigError(
                f"Logit bias for token '{token}' must be between -100 and 100, "
                f"got {_display(bias_value)}"
            )


def estimate_prompt_tokens(prompt: str) -> int:
    """Roughly estimate prompt tokens as one per four bytes, rounded up."""
    return math.ceil(_byte_len(prompt) / 4)


def check_prompt_token_limits(prompt: str, model: str) -> None:
    """Raise ContextLengthExceededError if the prompt estimate is too large."""
    estimated = estimate_prompt_tokens(prompt)
    if estimated > MAX_COMPLETION_TOKENS:
        raise ContextLengthExceededError(
            model,
            f"Estimated prompt token count ({estimated}) exceeds maximum "
            f"recommended limit ({MAX_COMPLETION_TOKENS})",
        )