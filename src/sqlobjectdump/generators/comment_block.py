"""Provenance header prepended to every exported definition."""

from ..base.models import ObjectDescriptor

TABLE_DISCLAIMER = "NOTE: User table is generated as table variable for reference purposes only"
DEFINITION_DISCLAIMER = "NOTE: Object is exported with definition only"

# Reproduced byte for byte, including the trailing space after "/*".
COMMENT_BLOCK = """/* 
\t{type_desc} Object Generated by sqlobjectdump

\t{full_name}

\t{disclaimer}
*/

"""


def generate_comment_block(obj: ObjectDescriptor) -> str:
    """Build the header for ``obj``."""
    disclaimer = TABLE_DISCLAIMER if obj.is_table else DEFINITION_DISCLAIMER
    return COMMENT_BLOCK.format(
        type_desc=obj.object_type_desc,
        full_name=obj.full_name,
        disclaimer=disclaimer,
    )


def annotate(obj: ObjectDescriptor) -> ObjectDescriptor:
    """Prefix ``obj.definition`` with its comment block."""
    obj.definition = generate_comment_block(obj) + obj.definition
    return obj
