"""Query service plugins for submitting queries and reading their results."""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Optional, Type

from ..errors import ConfigurationError
from ..models import QueryHandle, QueryStatus, ResultPage

logger = logging.getLogger("bda-mcp.sources.query_service")


class ServiceType:
    """Enumeration of supported query service types."""
    ATHENA = "athena"


class QueryServicePlugin(ABC):
    """Base interface for query service plugins.

    A query service runs submitted queries asynchronously and exposes their
    status and their results page by page. Plugins only translate between
    the remote protocol and the bda-mcp models; errors from the remote side
    propagate to the caller, which wraps them.
    """

    # Class-level registry of available plugins by service type
    _registry: ClassVar[Dict[str, Type['QueryServicePlugin']]] = {}

    @property
    @abstractmethod
    def service_type(self) -> str:
        """The service type this plugin supports (e.g., 'athena')."""
        pass

    @abstractmethod
    def submit_query(self, database: str, sql: str, output_location: str) -> QueryHandle:
        """Start a query execution.

        Args:
            database: Physical database name
            sql: Query text
            output_location: URI the service writes result files to

        Returns:
            Handle of the new execution
        """
        pass

    @abstractmethod
    def get_status(self, handle: QueryHandle) -> QueryStatus:
        """Get the current status of a query execution."""
        pass

    @abstractmethod
    def get_result_page(self, handle: QueryHandle, continuation_token: Optional[str] = None) -> ResultPage:
        """Fetch one page of results.

        Args:
            handle: Execution handle
            continuation_token: Token from the previous page, None for the first page

        Returns:
            The result page
        """
        pass

    @classmethod
    def register(cls, service_type: str) -> callable:
        """Decorator to register a plugin class for a specific service type.

        Args:
            service_type: The service type this plugin handles

        Returns:
            Decorator function
        """
        def decorator(plugin_class: Type['QueryServicePlugin']) -> Type['QueryServicePlugin']:
            if service_type not in cls._registry:
                cls._registry[service_type] = plugin_class
                logger.debug(f"Registered query service plugin for service type: {service_type}")
            return plugin_class
        return decorator

    @classmethod
    def get_plugin_class(cls, service_type: str) -> Optional[Type['QueryServicePlugin']]:
        """Get a plugin class by service type, None if not registered."""
        return cls._registry.get(service_type)

    @classmethod
    def get_registered_types(cls) -> List[str]:
        """Get a list of all registered service types."""
        return list(cls._registry.keys())


def create_query_service(service_type: str, **options: Any) -> QueryServicePlugin:
    """Factory function to create a query service plugin.

    Args:
        service_type: Type of query service
        **options: Keyword arguments passed to the plugin constructor

    Returns:
        A query service instance

    Raises:
        ConfigurationError: If the service type is not supported
    """
    from . import service_plugins  # noqa: F401

    plugin_class = QueryServicePlugin.get_plugin_class(service_type)
    if not plugin_class:
        supported = ", ".join(QueryServicePlugin.get_registered_types())
        raise ConfigurationError(f"Unsupported query service: {service_type}. Available services: {supported}")
    return plugin_class(**options)
