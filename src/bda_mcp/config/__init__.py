"""Configuration system for bda-mcp using environment variables."""

from .config import (
    get_config,
    get_poll_settings,
    load_bindings,
    parse_bindings,
)
