"""
notion_orm - Schema-driven client generator and query layer for Notion databases.

Main entry point for parsing schemas, validating them against live databases,
generating typed clients and building queries.
"""

from notion_orm.config import NotionOrmConfig
from notion_orm.core.property_types import NotionPropertyType
from notion_orm.core.errors import (
    NotionOrmError,
    ParseError,
    MappingError,
    BuilderConsumedError,
    SchemaValidationError,
    RemoteError,
    NotFoundError,
    UnauthorizedError,
    RemoteValidationError,
)
from notion_orm.schema import SchemaParser, parse_schema, SchemaValidator, validate_and_sync
from notion_orm.query import QueryBuilder
from notion_orm.adapters.notion import NotionRemoteClient
from notion_orm.orchestrator import NotionOrchestrator, introspect

__all__ = [
    "NotionOrmConfig",
    "NotionPropertyType",
    "NotionOrmError",
    "ParseError",
    "MappingError",
    "BuilderConsumedError",
    "SchemaValidationError",
    "RemoteError",
    "NotFoundError",
    "UnauthorizedError",
    "RemoteValidationError",
    "SchemaParser",
    "parse_schema",
    "SchemaValidator",
    "validate_and_sync",
    "QueryBuilder",
    "NotionRemoteClient",
    "NotionOrchestrator",
    "introspect",
]
