"""Chat completion request types, validation and token estimation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from orvalidation.common import ConfigError, ContextLengthExceededError, _byte_len, _display

__all__ = [
    "ChatRole",
    "FunctionCall",
    "ToolCall",
    "TextPart",
    "ImagePart",
    "AudioPart",
    "FilePart",
    "ContentPart",
    "Message",
    "FunctionDescription",
    "Tool",
    "ChatCompletionRequest",
    "validate_chat_request",
    "estimate_message_tokens",
    "estimate_request_tokens",
    "check_token_limits",
    "MAX_TOKENS",
]

MAX_TOKENS = 1_000_000
"""Maximum number of estimated tokens allowed in a chat completion request."""

_IMAGE_TOKENS = 85
_AUDIO_TOKENS = 100
_FILE_TOKENS = 100
_ROLE_TOKENS = 3
_TOOL_CALL_OVERHEAD = 10
_REQUEST_OVERHEAD = 10
_TOOL_OVERHEAD = 10


class ChatRole(str, Enum):
    """The author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"

    def __str__(self) -> str:
        return self.value


@dataclass
class FunctionCall:
    """A function invocation requested by the model."""

    name: str
    arguments: str = ""


@dataclass
class ToolCall:
    """A tool call attached to an assistant message."""

    id: str
    function_call: FunctionCall
    kind: str = "function"


@dataclass
class TextPart:
    """A text segment of multimodal content."""

    text: str


@dataclass
class ImagePart:
    """An image referenced by URL or data URI."""

    url: str


@dataclass
class AudioPart:
    """An audio clip referenced by URL."""

    url: str


@dataclass
class FilePart:
    """A file referenced by URL."""

    url: str


ContentPart = Union[TextPart, ImagePart, AudioPart, FilePart]


@dataclass
class Message:
    """A single chat message; content is plain text or a list of parts."""

    role: ChatRole
    content: str | list[ContentPart]
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None

    @classmethod
    def text(cls, role: ChatRole, content: str) -> Message:
        """Build a plain text message."""
        return cls(role=role, content=content)


@dataclass
class FunctionDescription:
    """A function the model may call."""

    name: str
    parameters: Any = field(default_factory=dict)
    description: str | None = None


@dataclass
class Tool:
    """A tool offered to the model; only functions are supported."""

    function: FunctionDescription


@dataclass
class ChatCompletionRequest:
    """A chat completion request and its sampling options."""

    model: str
    messages: list[Message]
    tools: list[Tool] | None = None
    stream: bool | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    repetition_penalty: float | None = None
    min_p: float | None = None
    top_a: float | None = None
    seed: int | None = None
    top_logprobs: int | None = None
    user: str | None = None


def validate_chat_request(request: ChatCompletionRequest) -> None:
    """Raise ConfigError if the request has a common mistake."""
    if not request.model.strip():
        raise ConfigError("Model ID cannot be empty")
    if not request.messages:
        raise ConfigError("Messages array cannot be empty")

    _validate_sampling_parameters(request)

    for index, message in enumerate(request.messages):
        _validate_message(message, index)

    if request.tools is not None:
        _validate_tools(request.tools)


def _validate_sampling_parameters(request: ChatCompletionRequest) -> None:
    temp = request.temperature
    if temp is not None and not (0.0 <= temp <= 2.0):
        raise ConfigError(
            f"Temperature must be between 0.0 and 2.0, got {_display(temp)}"
        )

    top_p = request.top_p
    if top_p is not None and (top_p <= 0.0 or top_p > 1.0):
        raise ConfigError(
            "Top P must be between 0.0 (exclusive) and 1.0 (inclusive), "
            f"got {_display(top_p)}"
        )

    top_k = request.top_k
    if top_k is not None and top_k != 0 and top_k < 1:
        raise ConfigError(f"Top K must be 0 (disabled) or >= 1, got {top_k}")

    fp = request.frequency_penalty
    if fp is not None and not (-2.0 <= fp <= 2.0):
        raise ConfigError(
            f"Frequency penalty must be between -2.0 and 2.0, got {_display(fp)}"
        )

    pp = request.presence_penalty
    if pp is not None and not (-2.0 <= pp <= 2.0):
        raise ConfigError(
            f"Presence penalty must be between -2.0 and 2.0, got {_display(pp)}"
        )

    rp = request.repetition_penalty
    if rp is not None and (rp <= 0.0 or rp > 2.0):
        raise ConfigError(
            "Repetition penalty must be between 0.0 (exclusive) and 2.0 (inclusive), "
            f"got {_display(rp)}"
        )

    min_p = request.min_p
    if min_p is not None and not (0.0 <= min_p <= 1.0):
        raise ConfigError(f"Min P must be between 0.0 and 1.0, got {_display(min_p)}")

    top_a = request.top_a
    if top_a is not None and not (0.0 <= top_a <= 1.0):
        raise ConfigError(f"Top A must be between 0.0 and 1.0, got {_display(top_a)}")

    tlp = request.top_logprobs
    if tlp is not None and tlp > 20:
        raise ConfigError(f"Top logprobs must be <= 20, got {tlp}")


def _validate_message(message: Message, index: int) -> None:
    role = ChatRole(message.role)
    _validate_message_content(message, role, index)

    if message.tool_calls is not None:
        if role is not ChatRole.ASSISTANT:
            raise ConfigError(
                f"Message at index {index} has tool_calls but role is '{role}', "
                "not 'assistant'"
            )
        for tc_idx, call in enumerate(message.tool_calls):
            if not call.id:
                raise ConfigError(f"Tool call {tc_idx} at message {index} has empty id")
            if call.kind != "function":
                raise ConfigError(
                    f"Tool call {tc_idx} at message {index} has invalid type: "
                    f"'{call.kind}'. Must be 'function'"
                )
            if not call.function_call.name.strip():
                raise ConfigError(
                    f"Function name in tool call {tc_idx} at message {index} "
                    "cannot be empty"
                )

    if role is ChatRole.TOOL and not message.tool_call_id:
        raise ConfigError(
            f"Tool message at index {index} must have a non-empty tool_call_id"
        )


def _validate_message_content(message: Message, role: ChatRole, index: int) -> None:
    content = message.content
    if isinstance(content, str):
        if role is not ChatRole.TOOL and not content.strip() and message.tool_calls is None:
            raise ConfigError(
                f"Message at index {index} must have either non-empty content "
                "or tool_calls"
            )
        return

    if role is not ChatRole.USER:
        raise ConfigError(
            "Multimodal content (ContentParts) is only allowed for user messages, "
            f"got role '{role}' at index {index}"
        )
    if not content:
        raise ConfigError(
            f"Content parts array cannot be empty for message at index {index}"
        )
    for part_idx, part in enumerate(content):
        _validate_content_part(part, index, part_idx)


def _validate_content_part(part: ContentPart, msg_index: int, part_index: int) -> None:
    if isinstance(part, TextPart):
        if not part.text.strip():
            raise ConfigError(
                f"Text content part {part_index} at message {msg_index} cannot be empty"
            )
    elif isinstance(part, ImagePart):
        if not part.url.strip():
            raise ConfigError(
                f"Image URL cannot be empty for image part {part_index} "
                f"at message {msg_index}"
            )
        if not part.url.startswith(("http://", "https://", "data:image/")):
            raise ConfigError(
                "Image URL must be a valid HTTP(S) URL or base64 data URI for image "
                f"part {part_index} at message {msg_index}"
            )
    elif isinstance(part, AudioPart):
        if not part.url.strip():
            raise ConfigError(
                f"Audio URL cannot be empty for audio part {part_index} "
                f"at message {msg_index}"
            )
    elif isinstance(part, FilePart):
        if not part.url.strip():
            raise ConfigError(
                f"File URL cannot be empty for file part {part_index} "
                f"at message {msg_index}"
            )
    else:
        raise ConfigError(
            f"Unknown content part {part_index} at message {msg_index}"
        )


def _validate_tools(tools: list[Tool]) -> None:
    names: set[str] = set()
    for i, tool in enumerate(tools):
        function = tool.function
        if not function.name.strip():
            raise ConfigError(f"Function name in tool[{i}] cannot be empty")
        if function.name in names:
            raise ConfigError(f"Duplicate function name '{function.name}' in tools")
        names.add(function.name)
        if not isinstance(function.parameters, dict):
            raise ConfigError(
                f"Parameters for function '{function.name}' must be a JSON object"
            )


def _part_tokens(part: ContentPart) -> int:
    if isinstance(part, TextPart):
        return _byte_len(part.text) // 4
    if isinstance(part, ImagePart):
        return _IMAGE_TOKENS
    if isinstance(part, AudioPart):
        return _AUDIO_TOKENS
    return _FILE_TOKENS


def estimate_message_tokens(message: Message) -> int:
    """Roughly estimate the tokens a message uses (about 4 bytes per token)."""
    content = message.content
    if isinstance(content, str):
        content_tokens = _byte_len(content) // 4
    else:
        content_tokens = sum(_part_tokens(part) for part in content)

    tool_call_tokens = sum(
        _byte_len(call.function_call.name) // 4
        + _byte_len(call.function_call.arguments) // 4
        + _TOOL_CALL_OVERHEAD
        for call in message.tool_calls or ()
    )

    id_tokens = _byte_len(message.tool_call_id) // 4 if message.tool_call_id else 0

    return _ROLE_TOKENS + content_tokens + tool_call_tokens + id_tokens


def _tool_tokens(tool: Tool) -> int:
    function = tool.function
    name_tokens = _byte_len(function.name) // 4
    desc_tokens = _byte_len(function.description) // 4 if function.description else 0
    try:
        params_text = json.dumps(
            function.parameters, separators=(",", ":"), ensure_ascii=False, sort_keys=True
        )
    except (TypeError, ValueError):
        params_tokens = 0
    else:
        params_tokens = _byte_len(params_text) // 4
    return name_tokens + desc_tokens + params_tokens + _TOOL_OVERHEAD


def estimate_request_tokens(request: ChatCompletionRequest) -> int:
    """Roughly estimate the tokens a whole request uses."""
    message_tokens = sum(estimate_message_tokens(m) for m in request.messages)
    tool_tokens = sum(_tool_tokens(t) for t in request.tools or ())
    return message_tokens + _REQUEST_OVERHEAD + tool_tokens


def check_token_limits(request: ChatCompletionRequest) -> None:
    """Raise ContextLengthExceededError if the estimate exceeds MAX_TOKENS."""
    estimated = estimate_request_tokens(request)
    if estimated > MAX_TOKENS:
        raise ContextLengthExceededError(
            request.model,
            f"Estimated token count ({estimated}) exceeds maximum context length "
            f"({MAX_TOKENS})",
        )