"""MS SQL Server catalog and definition extractors."""

import logging
from typing import Callable

from ...base import BaseExtractor
from ...base.models import DefinitionBuffer, DefinitionStrategy, ObjectDescriptor, TableColumn
from ...exceptions import ExtractionError

logger = logging.getLogger(__name__)

# Object types with no standalone definition: defaults, keys and constraints,
# sequences, synonyms, service queues, system and internal tables, CLR
# procedures/functions and aggregates.
EXCLUDED_OBJECT_TYPES = ("D", "PK", "SO", "SQ", "UQ", "PC", "FS", "FT", "F", "SN", "S", "IT", "AF")

CATALOG_QUERY = """
    SET NOCOUNT ON;
    DECLARE @schema_len INT = ?, @schema SYSNAME = ?, @type_len INT = ?, @type CHAR(2) = ?;
    SELECT
        s.name AS schema_name,
        ao.object_id,
        ao.name AS object_name,
        ao.type AS object_type,
        ao.type_desc AS object_type_desc
    FROM sys.all_objects ao
    JOIN sys.schemas s ON s.schema_id = ao.schema_id
    WHERE ((@schema_len = 0 AND ao.schema_id <> SCHEMA_ID('sys'))
           OR (@schema_len > 0 AND ao.schema_id = SCHEMA_ID(@schema)))
    AND ao.type NOT IN ({excluded})
    AND ((@type_len = 0) OR (@type_len > 0 AND ao.type = @type))
    ORDER BY s.name, ao.type, ao.name
""".format(excluded=", ".join(f"'{t}'" for t in EXCLUDED_OBJECT_TYPES))

TABLE_COLUMNS_QUERY = """
    SELECT
        COLUMN_NAME AS column_name,
        DATA_TYPE AS data_type,
        CHARACTER_MAXIMUM_LENGTH AS max_length,
        IS_NULLABLE AS is_nullable,
        ORDINAL_POSITION AS ordinal_position
    FROM INFORMATION_SCHEMA.COLUMNS
    WHERE TABLE_SCHEMA = ? AND TABLE_NAME = ?
    ORDER BY ORDINAL_POSITION ASC
"""

STORED_TEXT_QUERY = "EXEC sp_helptext ?"


class CatalogExtractor(BaseExtractor):
    """Lists every exportable object in the connected database."""

    def extract(self) -> list[ObjectDescriptor]:
        """Query sys.all_objects honouring the schema and object type filters.

        Raises:
            ExtractionError: If the catalog cannot be read.
        """
        schema = self.config.schema
        object_type = self.config.object_type
        params = (len(schema), schema, len(object_type), object_type)

        rows = self.connection.execute_dict(CATALOG_QUERY, params)
        objects = [
            ObjectDescriptor(
                schema_name=row["schema_name"],
                object_id=row["object_id"],
                name=row["object_name"],
                object_type=row["object_type"],
                object_type_desc=row["object_type_desc"],
            )
            for row in rows
            if self._should_include_schema(row["schema_name"])
        ]
        logger.info(f"Prepared {len(objects)} objects for export")
        return objects


class DefinitionExtractor(BaseExtractor):
    """Fills in ``ObjectDescriptor.definition`` for one object at a time."""

    def __init__(self, connection, config):
        super().__init__(connection, config)
        self._strategies: dict[DefinitionStrategy, Callable[[ObjectDescriptor, DefinitionBuffer], str]] = {
            DefinitionStrategy.TABLE_VARIABLE: self._table_variable,
            DefinitionStrategy.STORED_TEXT: self._stored_text,
        }

    def extract(self, obj: ObjectDescriptor) -> ObjectDescriptor:
        """Reconstruct the definition of ``obj`` in place.

        A failed query is logged and leaves whatever text was accumulated
        before the failure, with ``retrieved_definition`` left False.
        """
        strategy = self._strategies[obj.strategy]
        buffer = DefinitionBuffer()
        try:
            obj.definition = strategy(obj, buffer)
            obj.retrieved_definition = True
        except ExtractionError as e:
            obj.definition = buffer.finalize()
            logger.error(f"Failed to retrieve definition for {obj.full_name} [{obj.object_type}]: {e}")
        return obj

    def get_table_columns(self, schema_name: str, table_name: str) -> list[TableColumn]:
        """Get the columns of a table in ordinal order."""
        rows = self.connection.execute_dict(TABLE_COLUMNS_QUERY, (schema_name, table_name))
        return [
            TableColumn(
                name=row["column_name"],
                data_type=row["data_type"],
                max_length=row["max_length"],
                is_nullable=row["is_nullable"] == "YES",
                ordinal_position=row["ordinal_position"],
            )
            for row in rows
        ]

    def _table_variable(self, obj: ObjectDescriptor, buffer: DefinitionBuffer) -> str:
        """Render a table as a ``DECLARE @name TABLE (...)`` approximation."""
        buffer.append(f"DECLARE @{obj.name} TABLE (\n")
        columns = DefinitionBuffer(separator=",\n")
        columns_by_position = sorted(self.get_table_columns(obj.schema_name, obj.name),
                                     key=lambda c: c.ordinal_position)
        for column in columns_by_position:
            columns.append_item(f"\t{column.declaration}")
        if len(columns):
            buffer.append(columns.finalize() + "\n")
        buffer.append(");")
        return buffer.finalize()

    def _stored_text(self, obj: ObjectDescriptor, buffer: DefinitionBuffer) -> str:
        """Concatenate the rows returned by sp_helptext verbatim."""
        for row in self.connection.execute(STORED_TEXT_QUERY, (obj.quoted_name,)):
            buffer.append(row[0] or "")
        return buffer.finalize()
