"""
Main entry point for the Hacker News MCP server.

- stdio (default): one host talks to us over stdin/stdout
- streamable-http: MCP mounted under /mcp, served by uvicorn
"""
from __future__ import annotations

import sys

import uvicorn

from .server import mcp, server_cfg


def main() -> None:
    """Start the MCP server on the configured transport."""
    transport = str(server_cfg.get("transport", "stdio")).strip().lower()
    try:
        if transport == "stdio":
            print("MCP Hacker News server running on stdio", file=sys.stderr)
            mcp.run(transport="stdio")
        elif transport == "streamable-http":
            host = server_cfg.get("host", "127.0.0.1")
            port = int(server_cfg.get("port", 9000))
            print(f"MCP Hacker News server on http://{host}:{port}/mcp", file=sys.stderr)
            uvicorn.run(
                mcp.streamable_http_app(),
                host=host,
                port=port,
                log_level=str(server_cfg.get("log_level", "INFO")).lower(),
                server_header=False,
            )
        else:
            raise ValueError(f"Unsupported transport '{transport}' (expected stdio or streamable-http)")
    except KeyboardInterrupt:
        print("\nServer shutdown requested...", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Fatal error starting MCP server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
