"""MS SQL Server backend.

The pyodbc-backed connection lives in ``.connection`` and is imported on
demand by ``get_backend`` so the extractors stay importable without an
ODBC driver manager.
"""

from .extractors import CatalogExtractor, DefinitionExtractor


def get_extractors() -> dict:
    """Get all extractors for MSSQL."""
    return {
        "catalog": CatalogExtractor,
        "definitions": DefinitionExtractor,
    }


__all__ = [
    "get_extractors",
    "CatalogExtractor",
    "DefinitionExtractor",
]
