from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated, Any, Dict

import httpx
from mcp.server.fastmcp import Context, FastMCP
from pydantic import WithJsonSchema

from .client import HackerNewsClient
from .config import resolve_config
from .dispatcher import ToolDispatcher
from .errors import ToolClientError
from .fetcher import StoryFetcher
from .observability import InMemoryMetrics, format_metrics
from .session import StorySession


CONFIG = resolve_config()
server_cfg = CONFIG.get("server", {})
hn_cfg = CONFIG.get("hackernews", {})
tools_cfg = CONFIG.get("tools", {})

MAX_LIMIT = int(tools_cfg.get("max_limit", 50))
DEFAULT_LIMIT = int(tools_cfg.get("default_limit", 10))


def setup_logger(config: Dict[str, Any]) -> logging.Logger:
    logger = logging.getLogger("hackernews_mcp")
    if logger.handlers:
        return logger
    level_name = str(config.get("server", {}).get("log_level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)
    # StreamHandler defaults to stderr; stdout carries the MCP stream
    handler = logging.StreamHandler()

    class StructuredFormatter(logging.Formatter):
        """Fills in structured fields that a record did not set."""

        def format(self, record: logging.LogRecord) -> str:
            for name in ("tool", "correlation_id", "duration_ms"):
                if not hasattr(record, name):
                    setattr(record, name, "")
            return super().format(record)

    handler.setFormatter(StructuredFormatter(
        '{"ts":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","tool":"%(tool)s",'
        '"correlation_id":"%(correlation_id)s","duration_ms":"%(duration_ms)s","msg":"%(message)s"}'
    ))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def build_http_client(config: Dict[str, Any]) -> httpx.AsyncClient:
    http_limits = config.get("server", {}).get("http_limits", {})
    user_agent = config.get("hackernews", {}).get("user_agent", "mcp-claude-hackernews/1.0")
    return httpx.AsyncClient(
        limits=httpx.Limits(
            max_connections=int(http_limits.get("max_connections", 100)),
            max_keepalive_connections=int(http_limits.get("max_keepalive_connections", 20)),
        ),
        timeout=httpx.Timeout(
            connect=float(http_limits.get("connect_timeout", 5.0)),
            read=float(http_limits.get("read_timeout", 30.0)),
            write=float(http_limits.get("write_timeout", 10.0)),
            pool=float(http_limits.get("pool_timeout", 5.0)),
        ),
        headers={"User-Agent": user_agent},
        follow_redirects=False,
    )


@dataclass
class AppContext:
    config: Dict[str, Any]
    dispatcher: ToolDispatcher
    session: StorySession
    logger: logging.Logger
    metrics: InMemoryMetrics


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    logger = setup_logger(CONFIG)
    http_client = build_http_client(CONFIG)
    client = HackerNewsClient(http_client, base_url=hn_cfg.get("base_url", "https://hacker-news.firebaseio.com/v0"))
    fetcher = StoryFetcher(client, max_concurrency=int(hn_cfg.get("max_concurrency", MAX_LIMIT)))
    dispatcher = ToolDispatcher(
        fetcher,
        default_limit=DEFAULT_LIMIT,
        time_format=str(hn_cfg.get("time_format", "%c")),
    )
    metrics = InMemoryMetrics()
    app_ctx = AppContext(
        config=CONFIG,
        dispatcher=dispatcher,
        # one session per host connection
        session=StorySession(),
        logger=logger,
        metrics=metrics,
    )
    logger.info(f"Hacker News MCP server ready (upstream {client.base_url})")
    try:
        yield app_ctx
    finally:
        logger.info(f"Tool metrics at shutdown: {format_metrics(metrics)}")
        await http_client.aclose()


mcp = FastMCP(
    server_cfg.get("name", "mcp-claude-hackernews"),
    lifespan=lifespan,
    host=server_cfg.get("host", "127.0.0.1"),
    port=int(server_cfg.get("port", 9000)),
)


def _generate_correlation_id() -> str:
    return str(uuid.uuid4())


def _require_context(ctx: Context | None) -> Context:
    if ctx is None:
        raise RuntimeError("Context is required")
    return ctx


async def _call_tool(ctx: Context | None, tool_name: str, arguments: Dict[str, Any]) -> str:
    """Run one tool through the dispatcher with logging and metrics around it."""
    ctx = _require_context(ctx)
    app: AppContext = ctx.request_context.lifespan_context
    correlation_id = _generate_correlation_id()
    start = time.perf_counter()
    log_extra: Dict[str, Any] = {"tool": tool_name, "correlation_id": correlation_id}

    try:
        text = await app.dispatcher.call(tool_name, arguments, app.session)
    except ToolClientError as exc:
        duration_ms = (time.perf_counter() - start) * 1000.0
        app.metrics.record(tool_name, duration_ms, error=True)
        app.logger.warning(
            f"Tool call rejected: {exc}",
            extra={**log_extra, "duration_ms": duration_ms},
        )
        raise
    except Exception as exc:
        duration_ms = (time.perf_counter() - start) * 1000.0
        app.metrics.record(tool_name, duration_ms, error=True)
        app.logger.error(
            f"Tool call failed: {type(exc).__name__}",
            extra={**log_extra, "duration_ms": duration_ms},
            exc_info=True,
        )
        raise

    duration_ms = (time.perf_counter() - start) * 1000.0
    app.metrics.record(tool_name, duration_ms, error=False)
    app.logger.info("Tool call succeeded", extra={**log_extra, "duration_ms": duration_ms})
    return text


# Arguments reach the dispatcher as raw JSON values; decode_request decides
# what counts as a number. The bounds below are advertised, not enforced.
def _number_schema(description: str, **bounds: Any) -> WithJsonSchema:
    return WithJsonSchema({"type": "number", "description": description, **bounds})


Limit = Annotated[
    Any,
    _number_schema(
        f"Number of stories to fetch (1-{MAX_LIMIT}, default: {DEFAULT_LIMIT})",
        minimum=1,
        maximum=MAX_LIMIT,
        default=DEFAULT_LIMIT,
    ),
]


@mcp.tool(
    name="hn_latest",
    description="Get the latest/newest stories from Hacker News",
)
async def hn_latest(
    limit: Limit = DEFAULT_LIMIT,
    ctx: Context | None = None,
) -> str:
    return await _call_tool(ctx, "hn_latest", {"limit": limit})


@mcp.tool(
    name="hn_top",
    description="Get the top-ranked stories from Hacker News",
)
async def hn_top(
    limit: Limit = DEFAULT_LIMIT,
    ctx: Context | None = None,
) -> str:
    return await _call_tool(ctx, "hn_top", {"limit": limit})


@mcp.tool(
    name="hn_best",
    description="Get the best stories from Hacker News",
)
async def hn_best(
    limit: Limit = DEFAULT_LIMIT,
    ctx: Context | None = None,
) -> str:
    return await _call_tool(ctx, "hn_best", {"limit": limit})


@mcp.tool(
    name="hn_story",
    description="Get details for a specific story by ID",
)
async def hn_story(
    story_id: Annotated[Any, _number_schema("The ID of the story to fetch")],
    ctx: Context | None = None,
) -> str:
    return await _call_tool(ctx, "hn_story", {"story_id": story_id})


@mcp.tool(
    name="hn_comments",
    description=(
        "Get comments for a story (by story ID or index from last story list). "
        "Only direct replies are returned; story_id takes precedence over story_index."
    ),
)
async def hn_comments(
    story_id: Annotated[Any, _number_schema("The ID of the story to get comments for")] = None,
    story_index: Annotated[
        Any,
        _number_schema("The index (1-based) of the story from the last fetched list", minimum=1),
    ] = None,
    ctx: Context | None = None,
) -> str:
    return await _call_tool(ctx, "hn_comments", {"story_id": story_id, "story_index": story_index})
