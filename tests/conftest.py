"""Shared fixtures: an in-memory stand-in for a SQL Server catalog."""

import pytest

from sqlobjectdump.backends.mssql.extractors import EXCLUDED_OBJECT_TYPES
from sqlobjectdump.base.connection import BaseConnection
from sqlobjectdump.config import DumpConfig

CATALOG_COLUMNS = ["schema_name", "object_id", "object_name", "object_type", "object_type_desc"]
TABLE_COLUMNS = ["column_name", "data_type", "max_length", "is_nullable", "ordinal_position"]


class FakeDriverError(Exception):
    """Plays the role of pyodbc.Error."""


class FakeServer:
    """Answers the three queries the extractors issue."""

    def __init__(self):
        self.objects: list[tuple] = []
        self.columns: dict[tuple[str, str], list[tuple]] = {}
        self.texts: dict[str, list[str]] = {}
        self.failing: set[str] = set()
        self.catalog_error = False
        self.cursor_error = False
        self.queries: list[tuple[str, tuple]] = []

    def add_object(self, schema, object_id, name, object_type, type_desc, text=None):
        # type is char(2) in sys.all_objects
        self.objects.append((schema, object_id, name, object_type.ljust(2), type_desc))
        if text is not None:
            self.texts[f"[{schema}].[{name}]"] = text

    def add_table(self, schema, object_id, name, columns):
        self.add_object(schema, object_id, name, "U", "USER_TABLE")
        self.columns[(schema, name)] = [
            (col, dtype, length, nullable, position)
            for position, (col, dtype, length, nullable) in enumerate(columns, start=1)
        ]

    def respond(self, query: str, params: tuple) -> tuple[list[str], list[tuple]]:
        self.queries.append((query, params))
        if "sys.all_objects" in query:
            if self.catalog_error:
                raise FakeDriverError("Invalid object name 'sys.all_objects'")
            schema_len, schema, type_len, object_type = params
            rows = [
                row for row in self.objects
                if ((schema_len == 0 and row[0] != "sys") or (schema_len > 0 and row[0] == schema))
                and row[3].strip() not in EXCLUDED_OBJECT_TYPES
                and (type_len == 0 or row[3].strip() == object_type)
            ]
            return CATALOG_COLUMNS, rows
        if "INFORMATION_SCHEMA.COLUMNS" in query:
            if params[1] in self.failing:
                raise FakeDriverError(f"Permission denied on {params[1]}")
            return TABLE_COLUMNS, self.columns.get(params, [])
        if "sp_helptext" in query:
            if params[0] in self.failing:
                raise FakeDriverError(f"There is no text for object '{params[0]}'")
            return ["Text"], [(line,) for line in self.texts.get(params[0], [])]
        raise AssertionError(f"Unexpected query: {query}")


class FakeCursor:
    def __init__(self, server: FakeServer):
        self.server = server
        self.description = None
        self._rows: list[tuple] = []
        self.closed = False

    def execute(self, query, params=()):
        columns, rows = self.server.respond(query, tuple(params))
        self.description = [(name,) for name in columns]
        self._rows = list(rows)

    def fetchall(self):
        return list(self._rows)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        self.closed = True


class FakeHandle:
    def __init__(self, server: FakeServer):
        self.server = server

    def cursor(self):
        if self.server.cursor_error:
            raise FakeDriverError("Communication link failure")
        return FakeCursor(self.server)


class FakeConnection(BaseConnection):
    driver_errors = (FakeDriverError,)

    def __init__(self, config, server: FakeServer):
        super().__init__(config)
        self.server = server
        self.connected = False

    def connect(self) -> None:
        self._connection = FakeHandle(self.server)
        self.connected = True

    def disconnect(self) -> None:
        self._connection = None
        self.connected = False

    @property
    def connection(self):
        return self._connection

    def get_version(self) -> str:
        return "Microsoft SQL Server 2022 (RTM)"


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def config(tmp_path):
    return DumpConfig(
        host="dbhost",
        port=1433,
        database="Sales",
        username="sa",
        password="secret",
        output_dir=tmp_path,
    )


@pytest.fixture
def connection(config, server):
    with FakeConnection(config, server) as conn:
        yield conn


@pytest.fixture
def connection_class(server):
    """Stands in for MSSQLConnection: called with a config, used as a context manager."""
    return lambda cfg: FakeConnection(cfg, server)
