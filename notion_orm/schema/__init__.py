"""Schema parsing, type mapping and validation."""

from notion_orm.schema.type_mappings import TypeMapper
from notion_orm.schema.parser import SchemaParser, parse_schema
from notion_orm.schema.validator import SchemaValidator, validate_and_sync
from notion_orm.schema.emitter import SchemaEmitter

__all__ = [
    "TypeMapper",
    "SchemaParser",
    "parse_schema",
    "SchemaValidator",
    "validate_and_sync",
    "SchemaEmitter",
]
