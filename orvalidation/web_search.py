"""Web search request type, query validation and complexity estimation."""

from __future__ import annotations

from dataclasses import dataclass

from orvalidation.common import (
    ConfigError,
    _byte_len,
    validate_non_empty_string,
    validate_numeric_range,
    validate_string_length,
)

__all__ = [
    "WebSearchRequest",
    "validate_web_search_request",
    "has_excessive_repetition",
    "looks_like_url_injection",
    "validate_and_suggest_query_improvement",
    "estimate_query_complexity",
    "validate_results_for_complexity",
    "MAX_QUERY_LENGTH",
    "MIN_QUERY_LENGTH",
    "MAX_RESULTS",
    "MIN_RESULTS",
]

MAX_QUERY_LENGTH = 1000
"""Maximum query length in bytes."""

MIN_QUERY_LENGTH = 1
"""Minimum query length in bytes."""

MAX_RESULTS = 100
"""Maximum number of results that can be requested."""

MIN_RESULTS = 1
"""Minimum number of results that can be requested."""

_PROBLEMATIC_PATTERNS = (
    "javascript:",
    "data:",
    "vbscript:",
    "file:",
    "ftp:",
    "<script",
    "</script",
    "onclick",
    "onerror",
    "onload",
    "onmouseover",
    "eval(",
    "alert(",
    "confirm(",
    "prompt(",
)

_QUESTION_PREFIXES = ("what is", "how do", "why does")
_MAX_COMPLEXITY = 8


@dataclass
class WebSearchRequest:
    """A web search query and the optional number of results wanted."""

    query: str
    num_results: int | None = None


def validate_web_search_request(request: WebSearchRequest) -> None:
    """Raise ConfigError if the search request has a common mistake."""
    validate_non_empty_string(request.query, "query")
    validate_string_length(request.query, "query", MIN_QUERY_LENGTH, MAX_QUERY_LENGTH)
    _validate_query_content(request.query)
    if request.num_results is not None:
        validate_numeric_range(request.num_results, "num_results", MIN_RESULTS, MAX_RESULTS)


def _validate_query_content(query: str) -> None:
    trimmed = query.strip()
    if not trimmed:
        raise ConfigError("Search query cannot be empty or contain only whitespace")
    if not any(ch.isalnum() for ch in trimmed):
        raise ConfigError(
            "Search query must contain at least some alphanumeric characters"
        )
    _validate_query_safety(trimmed)


def _validate_query_safety(query: str) -> None:
    lowered = query.lower()
    for pattern in _PROBLEMATIC_PATTERNS:
        if pattern in lowered:
            raise ConfigError(
                f"Search query contains potentially unsafe content: {pattern}"
            )
    if has_excessive_repetition(query):
        raise ConfigError(
            "Search query appears to contain excessive repetitive content"
        )
    if looks_like_url_injection(query):
        raise ConfigError("Search query appears to contain URL injection patterns")


def has_excessive_repetition(query: str) -> bool:
    """Return True if one character repeats more than 10 times in a row."""
    if len(query) < 10:
        return False
    longest = run = 1
    for previous, current in zip(query, query[1:]):
        if current == previous:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest > 10


def looks_like_url_injection(query: str) -> bool:
    """Return True if the query holds more than two URL-like fragments."""
    return query.count("http") > 2 or query.count("://") > 2


def validate_and_suggest_query_improvement(query: str) -> list[str]:
    """Validate a query and return suggestions for improving it."""
    validate_web_search_request(WebSearchRequest(query=query))

    suggestions: list[str] = []
    length = _byte_len(query)

    if length < 5:
        suggestions.append(
            "Consider using a more specific search query for better results"
        )

    if (
        length < 15
        and "+" not in query
        and "-" not in query
        and not any(ch.isspace() for ch in query)
    ):
        suggestions.append("Consider adding more keywords to your search query")

    if query.lower().startswith(_QUESTION_PREFIXES):
        suggestions.append(
            "Your query looks like a question - consider rephrasing as keywords"
        )

    return suggestions


def estimate_query_complexity(query: str) -> int:
    """Score a query from 1 to 8 for rate limiting purposes."""
    complexity = 1
    lowered = query.lower()

    if _byte_len(query) >= 50:
        complexity += 1
    if '"' in query:
        complexity += 1
    if "AND:" in query or "OR:" in query or "NOT:" in query:
        complexity += 2
    if "site:" in lowered:
        complexity += 1
    if "filetype:" in lowered:
        complexity += 1

    return min(complexity, _MAX_COMPLEXITY)


def _max_results_for(complexity: int) -> int:
    if 1 <= complexity <= 2:
        return 100
    if 3 <= complexity <= 4:
        return 50
    if 5 <= complexity <= 6:
        return 25
    return 10


def validate_results_for_complexity(request: WebSearchRequest) -> None:
    """Raise ConfigError if too many results are requested for a complex query."""
    complexity = estimate_query_complexity(request.query)
    if request.num_results is None:
        return
    max_allowed = _max_results_for(complexity)
    if request.num_results > max_allowed:
        raise ConfigError(
            f"Query complexity ({complexity}) limits maximum results to "
            f"{max_allowed}. Consider simplifying your query or requesting "
            "fewer results."
        )