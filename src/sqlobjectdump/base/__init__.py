"""Base classes and shared interfaces."""

from .connection import BaseConnection
from .extractor import BaseExtractor
from .models import (
    DefinitionBuffer,
    DefinitionStrategy,
    ExportResult,
    ObjectDescriptor,
    TableColumn,
)

__all__ = [
    "BaseConnection",
    "BaseExtractor",
    "DefinitionBuffer",
    "DefinitionStrategy",
    "ExportResult",
    "ObjectDescriptor",
    "TableColumn",
]
