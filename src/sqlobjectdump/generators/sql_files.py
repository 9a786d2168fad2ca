"""Writes annotated object definitions to the on-disk layout."""

import logging
from pathlib import Path

from ..base.models import ExportResult, ObjectDescriptor
from ..config import DumpConfig

logger = logging.getLogger(__name__)


def object_path(
    directory: Path,
    host: str,
    database: str,
    obj: ObjectDescriptor,
) -> Path:
    """Path of an object's file:
    ``directory/host/database/schema/type_desc/schema_name.type_id.sql``.
    """
    return Path(directory) / host / database / obj.schema_name / obj.object_type_desc / obj.file_name


class SqlFileGenerator:
    """Materializes one .sql file per object, best-effort per object."""

    def __init__(self, config: DumpConfig):
        self.config = config
        self.output_dir = config.output_dir

    def path_for(self, obj: ObjectDescriptor) -> Path:
        return object_path(self.output_dir, self.config.host, self.config.database, obj)

    def generate(self, objects: list[ObjectDescriptor]) -> ExportResult:
        """Write every object, continuing past individual failures."""
        result = ExportResult()
        for obj in objects:
            if not obj.retrieved_definition:
                if self.config.skip_incomplete:
                    logger.warning(f"Skipping {obj.full_name} [{obj.object_type}]: definition not retrieved")
                    result.skipped.append(obj)
                    continue
                logger.warning(f"Writing incomplete definition for {obj.full_name} [{obj.object_type}]")

            path = self.path_for(obj)
            if not self._is_contained(path):
                logger.error(f"Refusing to write {obj.full_name}: {path} is outside {self.config.export_root}")
                result.failed.append(obj)
                continue
            if any(sep in part for part in (obj.schema_name, obj.name) for sep in ("/", "\\")):
                logger.warning(f"Name of {obj.full_name} contains a path separator; writing to {path}")
            try:
                result.written.append(self._write_file(path, obj.definition))
            except OSError as e:
                logger.error(f"Failed to write {path}: {e}")
                result.failed.append(obj)
        return result

    def _is_contained(self, path: Path) -> bool:
        """Whether ``path`` stays under the export root once resolved."""
        return path.resolve().is_relative_to(self.config.export_root.resolve())

    def _write_file(self, path: Path, content: str) -> Path:
        """Write content to a file, creating parent directories."""
        if self.config.dry_run:
            logger.info(f"[DRY RUN] Would write: {path}")
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8", newline="")
            logger.debug(f"Wrote: {path}")
        return path
