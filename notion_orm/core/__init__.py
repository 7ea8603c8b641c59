"""Core interfaces, models and errors."""

from notion_orm.core.interfaces import IRemoteClient
from notion_orm.core.property_types import NotionPropertyType, FIELD_PROPERTY_TYPES
from notion_orm.core.models import (
    Field,
    Model,
    Schema,
    OutputConfig,
    RemoteProperty,
    RemoteDatabaseDescriptor,
    FieldMismatch,
    ValidationReport,
)
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

__all__ = [
    "IRemoteClient",
    "NotionPropertyType",
    "FIELD_PROPERTY_TYPES",
    "Field",
    "Model",
    "Schema",
    "OutputConfig",
    "RemoteProperty",
    "RemoteDatabaseDescriptor",
    "FieldMismatch",
    "ValidationReport",
    "NotionOrmError",
    "ParseError",
    "MappingError",
    "BuilderConsumedError",
    "SchemaValidationError",
    "RemoteError",
    "NotFoundError",
    "UnauthorizedError",
    "RemoteValidationError",
]
