"""Query service plugins."""

from .athena import AthenaQueryService
