"""Output generators."""

from .comment_block import annotate, generate_comment_block
from .sql_files import SqlFileGenerator, object_path

__all__ = ["SqlFileGenerator", "annotate", "generate_comment_block", "object_path"]
