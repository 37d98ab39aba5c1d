"""Validation and token estimation for chat, completion and web search requests."""

__version__ = "0.5.0"
__all__ = ["common", "chat", "completion", "web_search"]