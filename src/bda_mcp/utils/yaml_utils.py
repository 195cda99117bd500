"""YAML utilities for bda-mcp."""

import logging
from typing import Any, Dict

import yaml

from ..errors import ConfigurationError

logger = logging.getLogger("bda-mcp.utils.yaml_utils")


def parse_yaml(content: str | bytes) -> Dict[str, Any]:
    """
    Parse a YAML string or bytes into a dictionary.

    JSON documents are accepted as well, since JSON is a subset of YAML.

    Args:
        content: YAML content (string or bytes)

    Returns:
        Dictionary representation of the YAML content

    Raises:
        ConfigurationError: If YAML is invalid or not a mapping
    """
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing YAML: {str(e)}") from e

    if document is None:
        logger.warning("Empty YAML document")
        return {}

    if not isinstance(document, dict):
        raise ConfigurationError("YAML content does not represent a dictionary")

    return document
