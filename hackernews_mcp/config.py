from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "server.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {
        "name": "mcp-claude-hackernews",
        "log_level": "INFO",
        "transport": "stdio",
        "host": "127.0.0.1",
        "port": 9000,
        "http_limits": {
            "max_connections": 100,
            "max_keepalive_connections": 20,
            "connect_timeout": 5.0,
            "read_timeout": 30.0,
            "write_timeout": 10.0,
            "pool_timeout": 5.0,
        },
    },
    "hackernews": {
        "base_url": "https://hacker-news.firebaseio.com/v0",
        "user_agent": "mcp-claude-hackernews/1.0",
        "max_concurrency": 50,
        "time_format": "%c",
    },
    "tools": {
        "default_limit": 10,
        "max_limit": 50,
    },
}

# env var -> (section, key)
ENV_OVERRIDES = {
    "HN_API_BASE_URL": ("hackernews", "base_url"),
    "HN_MCP_LOG_LEVEL": ("server", "log_level"),
    "HN_MCP_TRANSPORT": ("server", "transport"),
    "MCP_SERVER_HOST": ("server", "host"),
    "MCP_SERVER_PORT": ("server", "port"),
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Path, required: bool = True) -> Dict[str, Any]:
    """
    Load the YAML config at ``path`` and merge it over ``DEFAULT_CONFIG``.

    A missing file is an error only when ``required`` is set; otherwise the
    built-in defaults are returned unchanged.
    """
    if not path.exists():
        if required:
            raise FileNotFoundError(f"MCP server config not found at {path}")
        return copy.deepcopy(DEFAULT_CONFIG)
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return _merge(DEFAULT_CONFIG, data)


def apply_env_overrides(config: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    result = copy.deepcopy(config)
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var, "").strip()
        if not value:
            continue
        result.setdefault(section, {})[key] = value
    result["server"]["port"] = int(result["server"]["port"])
    return result


def resolve_config() -> Dict[str, Any]:
    """Config path from HN_MCP_CONFIG (must exist) or the bundled default (optional)."""
    explicit = os.getenv("HN_MCP_CONFIG", "").strip()
    if explicit:
        config = load_config(Path(explicit), required=True)
    else:
        config = load_config(DEFAULT_CONFIG_PATH, required=False)
    return apply_env_overrides(config)
