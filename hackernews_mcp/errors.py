from __future__ import annotations

from typing import Optional


class HackerNewsToolError(Exception):
    """Base exception for all tool errors surfaced to the MCP host."""
    pass


class ToolClientError(HackerNewsToolError):
    """Caller-side errors - bad arguments, unknown ids, unknown tools."""
    pass


class InvalidArgumentError(ToolClientError):
    """A required argument is missing, not a number, or out of range."""
    pass


class UnknownToolError(ToolClientError):
    """The tool name is not one of the five Hacker News tools."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class NotFoundError(ToolClientError):
    """Upstream returned no item for the requested id."""

    def __init__(self, item_id: int, message: Optional[str] = None) -> None:
        self.item_id = item_id
        super().__init__(message or f"Story with ID {item_id} not found")
