"""Export SQL Server object definitions to individual .sql files."""

__version__ = "0.1.0"

SUPPORTED_BACKENDS = ["mssql"]
