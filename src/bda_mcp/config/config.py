"""Simple environment variable-based configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..models import DatabaseBinding, DatabaseBindings
from ..query.poller import PollSettings
from ..utils.yaml_utils import parse_yaml

logger = logging.getLogger("bda-mcp.config")

# Environment variables holding the database bindings
DATABASES_FILE_ENV_VAR = "BDA_DATABASES_FILE"
DATABASES_ENV_VAR = "BDA_DATABASES"

# Defaults for the remaining environment variables
DEFAULTS = {
    "AWS_REGION": "us-east-1",
    "BDA_QUERY_SERVICE": "athena",
    "BDA_BLOB_STORE": "s3",
    "BDA_LOCAL_ROOT": "./blobs",
    "BDA_POLL_INITIAL_DELAY": "0.5",
    "BDA_POLL_MAX_DELAY": "10",
    "BDA_POLL_MULTIPLIER": "2.0",
    "BDA_POLL_TIMEOUT": "600",
    "BDA_STRICT_CONVERSION": "0",
}


def _get(name: str) -> str:
    return os.getenv(name, DEFAULTS[name])


def _get_float(name: str) -> float:
    value = _get(name)
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got '{value}'") from e


def _get_bool(name: str) -> bool:
    return _get(name).strip().lower() in ("1", "true", "yes", "on")


def get_config() -> Dict[str, Any]:
    """
    Get configuration based on environment variables.

    Returns:
        Dictionary with configuration
    """
    config: Dict[str, Any] = {}

    config["aws"] = {
        "region": os.getenv("AWS_REGION", os.getenv("AWS_DEFAULT_REGION", DEFAULTS["AWS_REGION"])),
        "profile": os.getenv("AWS_PROFILE"),
        "endpoint_url": os.getenv("AWS_ENDPOINT_URL"),
    }

    config["query_service"] = {
        "type": _get("BDA_QUERY_SERVICE"),
        "strict_conversion": _get_bool("BDA_STRICT_CONVERSION"),
    }

    config["blob_store"] = {
        "type": _get("BDA_BLOB_STORE"),
        "local_root": _get("BDA_LOCAL_ROOT"),
    }

    config["databases"] = {
        "file": os.getenv(DATABASES_FILE_ENV_VAR),
        "inline": bool(os.getenv(DATABASES_ENV_VAR)),
    }

    return config


def get_poll_settings() -> PollSettings:
    """
    Get polling settings from environment variables.

    A timeout of 0 disables the overall timeout.

    Raises:
        ConfigurationError: If a value is not a valid number or the settings are inconsistent
    """
    timeout = _get_float("BDA_POLL_TIMEOUT")
    try:
        return PollSettings(
            initial_delay=_get_float("BDA_POLL_INITIAL_DELAY"),
            max_delay=_get_float("BDA_POLL_MAX_DELAY"),
            multiplier=_get_float("BDA_POLL_MULTIPLIER"),
            timeout=timeout if timeout > 0 else None,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid poll settings: {str(e)}") from e


def parse_bindings(document: Dict[str, Any]) -> DatabaseBindings:
    """
    Build database bindings from a parsed configuration document.

    The document either has a top-level 'databases' mapping or is the mapping
    itself. Each entry maps a logical name to 'database', 'output_location'
    and an optional 'source_location'; 'database' defaults to the logical name.

    Args:
        document: Parsed YAML or JSON document

    Returns:
        The database bindings

    Raises:
        ConfigurationError: If an entry is invalid
    """
    databases = document.get("databases", document)
    if not isinstance(databases, dict):
        raise ConfigurationError("'databases' must be a mapping of logical names to bindings")

    bindings: List[DatabaseBinding] = []
    for logical_name, entry in databases.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Binding for database '{logical_name}' must be a mapping")
        try:
            bindings.append(DatabaseBinding(
                logical_name=str(logical_name),
                database=entry.get("database", str(logical_name)),
                output_location=entry.get("output_location", ""),
                source_location=entry.get("source_location"),
            ))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid binding for database '{logical_name}': {str(e)}") from e

    return DatabaseBindings(bindings)


def load_bindings(path: Optional[str | Path] = None) -> DatabaseBindings:
    """
    Load database bindings from a file or from the environment.

    Args:
        path: Optional YAML file, defaults to BDA_DATABASES_FILE, then to the
              inline BDA_DATABASES document

    Returns:
        The database bindings, empty if nothing is configured

    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    path = path or os.getenv(DATABASES_FILE_ENV_VAR)
    if path:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read database bindings from {path}: {str(e)}") from e
        logger.debug(f"Loading database bindings from {path}")
        return parse_bindings(parse_yaml(content))

    inline = os.getenv(DATABASES_ENV_VAR)
    if inline:
        return parse_bindings(parse_yaml(inline))

    logger.warning("No database bindings configured")
    return DatabaseBindings()
