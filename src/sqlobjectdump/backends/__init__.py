"""Database backend implementations."""

from typing import TYPE_CHECKING, Type

from .. import SUPPORTED_BACKENDS
from ..exceptions import BackendNotAvailableError, ConfigurationError

if TYPE_CHECKING:
    from ..base import BaseConnection


def get_backend(db_type: str = "mssql") -> tuple[Type["BaseConnection"], dict]:
    """
    Get the connection class and extractors for a database type.

    Returns:
        Tuple of (ConnectionClass, extractors_dict)
    """
    if db_type == "mssql":
        try:
            from .mssql import get_extractors
            from .mssql.connection import MSSQLConnection
            return MSSQLConnection, get_extractors()
        except ImportError as e:
            raise BackendNotAvailableError(
                f"MSSQL backend requires pyodbc and an ODBC driver manager. "
                f"Install with: pip install pyodbc\n"
                f"Error: {e}"
            )

    raise ConfigurationError(
        f"Unknown database type: {db_type}. Supported types: {', '.join(SUPPORTED_BACKENDS)}"
    )
