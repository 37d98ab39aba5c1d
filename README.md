# orvalidation

Client-side validation for requests to an LLM routing API. Run the checks
before sending a request, so that a malformed request fails locally with a
clear message instead of coming back as an error from the server.

The package uses only the standard library.

## Modules

- `orvalidation.chat`: chat completion request types, their validation and
  a rough token estimate.
- `orvalidation.completion`: the text completion request type, validation
  of the prompt and its extra parameters, and a prompt token estimate.
- `orvalidation.web_search`: the web search request type, query checks,
  result count limits and a query complexity score.
- `orvalidation.common`: the error types and general helpers for strings,
  numbers, URLs, dates, enums, collections and decoded JSON values.

## Errors

A check that passes returns `None` (a few helpers return a value, as noted
below). A check that fails raises:

- `ConfigError`: the request or one of its fields is invalid. It is also a
  `ValueError`.
- `ContextLengthExceededError`: the estimated token count is above the
  limit. It has `model` and `message` attributes.

Both subclass `OpenRouterError`, and all three live in `orvalidation.common`.

String lengths are counted in UTF-8 bytes, not in characters.

## Chat requests

```python
from orvalidation.chat import (
    ChatCompletionRequest, ChatRole, Message,
    validate_chat_request, check_token_limits, estimate_request_tokens,
)
from orvalidation.common import ConfigError

request = ChatCompletionRequest(
    model="openai/gpt-4o",
    messages=[Message.text(ChatRole.USER, "Hello, world!")],
    temperature=0.7,
)

validate_chat_request(request)
check_token_limits(request)
print(estimate_request_tokens(request))

try:
    validate_chat_request(ChatCompletionRequest(model="", messages=[]))
except ConfigError as exc:
    print(exc)  # Model ID cannot be empty
```

Types used to build a request:

- `ChatRole`: `USER`, `ASSISTANT`, `SYSTEM`, `TOOL`.
- `Message(role, content, tool_calls=None, tool_call_id=None)`, where
  `content` is a string or a list of content parts; `Message.text(role,
  content)` builds a plain text message.
- Content parts: `TextPart(text)`, `ImagePart(url)`, `AudioPart(url)`,
  `FilePart(url)`.
- `ToolCall(id, function_call, kind="function")` with
  `FunctionCall(name, arguments="")`.
- `Tool(function)` with `FunctionDescription(name, parameters={},
  description=None)`.
- `ChatCompletionRequest` with `model`, `messages`, `tools` and the optional
  fields `stream`, `max_tokens`, `temperature`, `top_p`, `top_k`,
  `frequency_penalty`, `presence_penalty`, `repetition_penalty`, `min_p`,
  `top_a`, `seed`, `top_logprobs` and `user`.

`validate_chat_request` checks:

- The model and the message list are not empty.
- Sampling ranges: temperature 0–2, top_p above 0 up to 1, frequency and
  presence penalty −2 to 2, repetition penalty above 0 up to 2, min_p and
  top_a 0–1, top_logprobs at most 20.
- Text content is non-empty unless the message is a tool message or has
  tool calls.
- Multimodal content appears only in user messages, with non-empty parts.
- Image URLs start with `http://`, `https://` or `data:image/`.
- Tool calls appear only on assistant messages, with a non-empty id, kind
  `"function"` and a function name.
- Tool messages carry a `tool_call_id`.
- Tool function names are non-empty and unique, and their parameters are
  dicts.

`estimate_message_tokens` and `estimate_request_tokens` give a rough count
of about one token per four bytes, plus fixed amounts for images (85),
audio and files (100 each), roles, tool calls and tools.
`check_token_limits` raises `ContextLengthExceededError` above `MAX_TOKENS`
(1,000,000).

## Completion requests

```python
from orvalidation.completion import (
    CompletionRequest, validate_completion_request,
    check_prompt_token_limits, estimate_prompt_tokens,
)

request = CompletionRequest(
    model="openai/gpt-4",
    prompt="Once upon a time,",
    extra_params={"temperature": 0.7, "max_tokens": 100, "stop": ["END"]},
)
validate_completion_request(request)
check_prompt_token_limits(request.prompt, request.model)
estimate_prompt_tokens("Hello, world!")  # 4
```

`validate_completion_request` requires a model ID of the form
`provider/model` and a non-blank prompt of at most `MAX_PROMPT_LENGTH`
bytes. When `extra_params` is a mapping, these keys are checked if present:

| key | rule |
| --- | --- |
| `temperature` | number, 0–2 |
| `top_p` | number, above 0 up to 1 |
| `max_tokens` | integer, 0 or 1–8192 |
| `frequency_penalty`, `presence_penalty` | number, −2 to 2 |
| `stop` | string of 1–100 bytes, or a list of 1–4 such strings |
| `logit_bias` | mapping of 32-bit integer strings to numbers in −100 to 100 |
| `echo` | boolean |
| `suffix` | string of at most 1000 bytes, or `None` |
| `best_of` | integer, 1–20 |
| `logprobs` | integer, 0–5 |

`estimate_prompt_tokens` divides the byte length by four and rounds up.
`check_prompt_token_limits` raises `ContextLengthExceededError` above
`MAX_COMPLETION_TOKENS` (200,000).

## Web search requests

```python
from orvalidation.web_search import (
    WebSearchRequest, validate_web_search_request,
    validate_results_for_complexity, estimate_query_complexity,
    validate_and_suggest_query_improvement,
)

request = WebSearchRequest(query="rust programming language", num_results=10)
validate_web_search_request(request)
validate_results_for_complexity(request)

estimate_query_complexity('"exact phrase" search')   # 2
validate_and_suggest_query_improvement("rust")
# ['Consider using a more specific search query for better results',
#  'Consider adding more keywords to your search query']
```

`validate_web_search_request` rejects queries that:

- are blank or longer than 1000 bytes;
- have no alphanumeric character;
- contain script-like patterns such as `javascript:`, `data:`, `<script`,
  `onclick` or `eval(`, in any case;
- repeat one character more than ten times in a row
  (`has_excessive_repetition`);
- hold more than two `http` or `://` fragments
  (`looks_like_url_injection`).

`num_results`, if given, must be 1–100.

`estimate_query_complexity` scores a query from 1 to 8. Points are added
for length (50 bytes or more), double quotes, `AND:`/`OR:`/`NOT:`
operators, `site:` and `filetype:`. `validate_results_for_complexity`
limits `num_results` by that score: 100 for 1–2, 50 for 3–4, 25 for 5–6,
and 10 above. `validate_and_suggest_query_improvement` validates the query
and returns a list of suggestion strings, which is empty for a good query.

## General helpers

```python
from orvalidation.common import (
    validate_model_id, validate_date_range, validate_url_scheme,
    validate_sampling_parameters,
)

validate_model_id("anthropic/claude-3")
validate_date_range("2024-01-01", "2024-01-31")
validate_url_scheme("https://example.com", "endpoint", ["https"])
validate_sampling_parameters(0.7, 0.9, 40, 0.5, 0.3)
```

`orvalidation.common` provides the following helpers:

- `validate_required_string`, which returns the value when it is not
  `None`.
- Strings: `validate_non_empty_string`, `validate_string_length`,
  `validate_non_empty_strings`, `validate_regex_pattern`.
- Numbers: `validate_numeric_range`, `validate_numeric_min`,
  `validate_numeric_max`.
- URLs and dates: `validate_url`, `validate_url_scheme`,
  `validate_date_format` (`YYYY-MM-DD`), `validate_date_range`.
- Enums and collections: `validate_enum_value`,
  `validate_non_empty_collection`, `validate_collection_size`,
  `validate_unique_items`.
- Decoded JSON values: `validate_json_object`, `validate_json_type`,
  `validate_optional_numeric_param`, `validate_optional_integer_param`,
  `validate_optional_string_param`.
- Requests: `validate_sampling_parameters`, `validate_model_id`.

## What it does not do

This package only checks requests and estimates their size. It does not
send requests, hold API keys, or parse or stream responses. It provides no
command-line tool. Token counts are rough estimates from byte lengths, not
the output of a real tokenizer.

## Running the tests

```
pip install -e ".[test]"
pytest
```