"""Custom exceptions for sqlobjectdump."""


class SqlObjectDumpError(Exception):
    """Base exception for all sqlobjectdump errors."""

    pass


class ConnectionError(SqlObjectDumpError):
    """Error establishing database connection."""

    pass


class ConfigurationError(SqlObjectDumpError):
    """Error in configuration or parameters."""

    pass


class ExtractionError(SqlObjectDumpError):
    """Error querying the catalog or an object definition."""

    pass


class VersionControlError(SqlObjectDumpError):
    """A git step failed."""

    pass


class BackendNotAvailableError(SqlObjectDumpError):
    """Required backend driver is not installed."""

    pass
