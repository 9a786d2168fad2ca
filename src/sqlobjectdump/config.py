"""Configuration dataclass and connection descriptor parsing."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_PORT = 1433
DESCRIPTOR_FORMAT = "<username>:<password>@<host>:<port>/<database>"


@dataclass
class ConnectionDescriptor:
    """Parts of a ``user:password@host:port/database`` argument."""

    username: str
    password: str
    host: str
    port: int
    database: str


def is_valid_descriptor(text: str) -> bool:
    """Structural check: at least two ':', one '@' and one '/'."""
    return text.count(":") >= 2 and text.count("@") >= 1 and text.count("/") >= 1


def parse_connection_descriptor(text: str) -> ConnectionDescriptor:
    """
    Split a connection descriptor into its parts.

    Credentials end at the last '@' so a password may contain ':' or '@'.
    The address runs up to the first '/' after it and the port follows the
    last ':' of the address.

    Raises:
        ConfigurationError: If the descriptor is malformed.
    """
    if not is_valid_descriptor(text):
        raise ConfigurationError(f"Connection descriptor must look like {DESCRIPTOR_FORMAT}")

    credentials, _, location = text.rpartition("@")
    username, sep, password = credentials.partition(":")
    address, slash, database = location.partition("/")
    host, colon, port = address.rpartition(":")

    if not sep or not slash or not colon:
        raise ConfigurationError(f"Connection descriptor must look like {DESCRIPTOR_FORMAT}")
    if not username or not host or not database:
        raise ConfigurationError(
            f"Username, host and database are required in {DESCRIPTOR_FORMAT}"
        )
    if not port.isdigit():
        raise ConfigurationError(f"Port must be numeric, got {port!r}")

    return ConnectionDescriptor(
        username=username,
        password=password,
        host=host,
        port=int(port),
        database=database,
    )


@dataclass
class DumpConfig:
    """Configuration for an export run."""

    # Connection parameters
    host: Optional[str] = None
    port: Optional[int] = None
    database: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    driver: Optional[str] = None
    timeout: int = 30

    # Output settings
    output_dir: Path = field(default_factory=lambda: Path("."))

    # Filtering
    schema: str = ""
    object_type: str = ""
    exclude_schemas: list[str] = field(default_factory=lambda: ["sys", "INFORMATION_SCHEMA"])

    # Version control
    git: bool = False
    git_address: Optional[str] = None

    # Behavior
    skip_incomplete: bool = False
    dry_run: bool = False
    verbosity: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        self.schema = (self.schema or "").strip()
        self.object_type = (self.object_type or "").strip().upper()
        if self.port is None and self.host:
            self.port = DEFAULT_PORT

    @classmethod
    def from_descriptor(cls, descriptor: str, **kwargs) -> "DumpConfig":
        """Build a config from a connection descriptor plus extra settings."""
        parts = parse_connection_descriptor(descriptor)
        return cls(
            host=parts.host,
            port=parts.port,
            database=parts.database,
            username=parts.username,
            password=parts.password,
            **kwargs,
        )

    @property
    def export_root(self) -> Path:
        """Directory that holds the schema folders: ``output_dir/host/database``."""
        return self.output_dir / (self.host or "") / (self.database or "")

    def validate(self) -> None:
        """Validate the configuration is complete and consistent."""
        if not self.host:
            raise ConfigurationError("Host is required")
        if not self.database:
            raise ConfigurationError("Database is required")
        if not self.username:
            raise ConfigurationError("Username is required")
        if self.port is not None and not 0 < self.port < 65536:
            raise ConfigurationError(f"Port out of range: {self.port}")
        if len(self.object_type) > 2:
            raise ConfigurationError(
                f"Object type must be a catalog type code such as U, V, P or FN, got {self.object_type!r}"
            )

    def should_include_schema(self, schema_name: str) -> bool:
        """Check if a schema should be included based on filters.

        Comparison is case-insensitive to match the default server collation.
        """
        if self.schema:
            return schema_name.lower() == self.schema.lower()
        return schema_name.lower() not in {s.lower() for s in self.exclude_schemas}
