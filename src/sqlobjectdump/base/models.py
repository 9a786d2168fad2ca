"""Dataclasses for exported database objects."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

TABLE_TYPE = "U"
MAX_LENGTH = -1


def _escape_identifier(name: str) -> str:
    return name.replace("]", "]]")


class DefinitionStrategy(Enum):
    """How an object's definition text is produced."""

    TABLE_VARIABLE = "table_variable"  # synthesized from column metadata
    STORED_TEXT = "stored_text"  # read back from sp_helptext

    @classmethod
    def for_object_type(cls, object_type: str) -> "DefinitionStrategy":
        if object_type.strip() == TABLE_TYPE:
            return cls.TABLE_VARIABLE
        return cls.STORED_TEXT


@dataclass
class TableColumn:
    """A column row from INFORMATION_SCHEMA.COLUMNS."""

    name: str
    data_type: str
    max_length: Optional[int] = None
    is_nullable: bool = True
    ordinal_position: int = 0

    @property
    def full_type(self) -> str:
        """Bracketed type with ``(n)`` or ``(MAX)`` for bounded character types."""
        if self.max_length == MAX_LENGTH:
            return f"[{self.data_type}](MAX)"
        elif self.max_length:
            return f"[{self.data_type}]({self.max_length})"
        return f"[{self.data_type}]"

    @property
    def declaration(self) -> str:
        nullability = "NULL" if self.is_nullable else "NOT NULL"
        return f"[{self.name}] {self.full_type} {nullability}"


class DefinitionBuffer:
    """Ordered lines of one object's definition, joined once at the end.

    Lines appended with ``append_item`` are followed by ``separator``; the
    terminal separator is dropped by ``finalize``.
    """

    def __init__(self, separator: str = ""):
        self.separator = separator
        self._lines: list[str] = []

    def __len__(self) -> int:
        return len(self._lines)

    def append(self, text: str) -> None:
        self._lines.append(text)

    def append_item(self, text: str) -> None:
        self._lines.append(text + self.separator)

    def finalize(self) -> str:
        text = "".join(self._lines)
        if self.separator and text.endswith(self.separator):
            text = text[: -len(self.separator)]
        return text


@dataclass
class ObjectDescriptor:
    """One exportable object from sys.all_objects."""

    schema_name: str
    object_id: int
    name: str
    object_type: str
    object_type_desc: str
    definition: str = ""
    retrieved_definition: bool = False

    def __post_init__(self) -> None:
        # type is char(2) in the catalog, e.g. "U "
        self.object_type = self.object_type.strip()

    @property
    def full_name(self) -> str:
        return f"{self.schema_name}.{self.name}"

    @property
    def quoted_name(self) -> str:
        return f"[{_escape_identifier(self.schema_name)}].[{_escape_identifier(self.name)}]"

    @property
    def strategy(self) -> DefinitionStrategy:
        return DefinitionStrategy.for_object_type(self.object_type)

    @property
    def is_table(self) -> bool:
        return self.strategy is DefinitionStrategy.TABLE_VARIABLE

    @property
    def file_name(self) -> str:
        return f"{self.schema_name}_{self.name}.{self.object_type}_{self.object_id}.sql"


@dataclass
class ExportResult:
    """Outcome of materializing a set of objects."""

    written: list[Path] = field(default_factory=list)
    skipped: list[ObjectDescriptor] = field(default_factory=list)
    failed: list[ObjectDescriptor] = field(default_factory=list)
