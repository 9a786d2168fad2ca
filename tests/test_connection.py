"""Tests for the MSSQL connection helpers."""

import pytest

pytest.importorskip("pyodbc", exc_type=ImportError)

from sqlobjectdump.backends.mssql.connection import MSSQLConnection  # noqa: E402
from sqlobjectdump.config import DumpConfig  # noqa: E402


def make_connection(**kwargs) -> MSSQLConnection:
    fields = {
        "host": "dbhost",
        "database": "Sales",
        "username": "sa",
        "password": "secret",
        "driver": "ODBC Driver 18 for SQL Server",
    }
    fields.update(kwargs)
    return MSSQLConnection(DumpConfig(**fields))


class TestMSSQLConnection:
    """Tests for MSSQLConnection."""

    def test_connection_string(self):
        conn_str = make_connection()._build_connection_string()
        assert conn_str == (
            "Driver={ODBC Driver 18 for SQL Server};Server=dbhost;Database=Sales;"
            "UID=sa;PWD={secret};TrustServerCertificate=yes"
        )

    def test_non_default_port(self):
        conn_str = make_connection(port=1500, driver="ODBC Driver 17 for SQL Server")._build_connection_string()
        assert "Server=dbhost,1500;" in conn_str
        assert "TrustServerCertificate" not in conn_str

    def test_password_escaped(self):
        conn_str = make_connection(password="a;b}c")._build_connection_string()
        assert "PWD={a;b}}c}" in conn_str

    def test_mask_password(self):
        conn = make_connection(password="a;b}c")
        masked = conn._mask_connection_string(conn._build_connection_string())
        assert "a;b" not in masked
        assert "PWD=***" in masked

    def test_not_connected(self):
        from sqlobjectdump.exceptions import ConnectionError

        with pytest.raises(ConnectionError, match="Not connected"):
            make_connection().connection
