"""
Schema validation against live remote database definitions.

Confirms that every model can be realized against its remote database before
any code generation or querying happens.
"""

import logging
from typing import Dict, List, Tuple

from notion_orm.core.errors import (
    NotFoundError,
    RemoteError,
    SchemaValidationError,
    UnauthorizedError,
)
from notion_orm.core.interfaces import IRemoteClient
from notion_orm.core.models import (
    FieldMismatch,
    Model,
    RemoteDatabaseDescriptor,
    Schema,
    ValidationReport,
)
from notion_orm.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)

NOT_FOUND = "not found"


class SchemaValidator:
    """
    Reconciles parsed models with remote database descriptors.

    Type mismatches are fatal and reported together per model. Fields missing
    from the remote database are logged as an advisory; by default they are
    also recorded as ``got: not found`` mismatches, unless ``allow_missing``
    is set, in which case only the advisory remains. Once a model validates,
    fields matched under a different letter case take the remote spelling.
    """

    def __init__(self, remote_client: IRemoteClient, allow_missing: bool = False):
        """
        Initialize schema validator.

        Args:
            remote_client: Client used to fetch database definitions
            allow_missing: Treat fields absent from the remote database as advisory only
        """
        self.remote_client = remote_client
        self.allow_missing = allow_missing

    async def validate_and_sync(self, schema: Schema) -> ValidationReport:
        """
        Validate every model in declaration order, stopping at the first failure.

        Args:
            schema: Parsed schema

        Returns:
            ValidationReport listing validated models and advisory missing fields

        Raises:
            SchemaValidationError: Missing database id, bad title field, database
                not found, or type mismatches
            RemoteError: Other remote failures, after the client's retries
        """
        logger.info("Starting database validation...")
        report = ValidationReport()

        for model in schema.models:
            missing, renamed = await self._validate_model(model)
            if missing:
                report.missing_fields[model.name] = missing
            if renamed:
                report.remote_names[model.name] = renamed
            report.validated_models.append(model.name)

        logger.info("Database validation completed successfully")
        return report

    async def validate_model(self, model: Model) -> List[str]:
        """
        Validate one model.

        Returns:
            Remote property names declared by the model but absent remotely
        """
        missing, _ = await self._validate_model(model)
        return missing

    async def _validate_model(self, model: Model) -> Tuple[List[str], Dict[str, str]]:
        extra = {"model": model.name}
        if not model.database_id:
            raise SchemaValidationError(
                f"No Notion database ID specified for model {model.name}",
                model_name=model.name,
            )

        self.check_title_field(model)

        logger.info(f"Validating model: {model.name}", extra=extra)
        descriptor = await self._fetch_descriptor(model)

        missing = self.find_missing_fields(model, descriptor)
        if missing:
            logger.warning(
                f"Missing fields in Notion database for model {model.name}: {', '.join(missing)}",
                extra=extra,
            )

        mismatches = self.find_type_mismatches(model, descriptor)
        if mismatches:
            details = "; ".join(str(m) for m in mismatches)
            logger.error(f"Type mismatches in model {model.name}: {details}", extra=extra)
            raise SchemaValidationError(
                f"Invalid field types in model {model.name}:\n"
                + "\n".join(f"  {m}" for m in mismatches),
                model_name=model.name,
                mismatches=mismatches,
            )

        renamed = self.sync_remote_names(model, descriptor)
        logger.info(f"Model {model.name} validated", extra=extra)
        return missing, renamed

    @staticmethod
    def check_title_field(model: Model) -> None:
        """A model backing remote records needs exactly one title field."""
        titles = model.title_fields()
        if len(titles) != 1:
            found = ", ".join(f.name for f in titles) or "none"
            raise SchemaValidationError(
                f"Model {model.name} must have exactly one title field (found: {found})",
                model_name=model.name,
            )

    async def _fetch_descriptor(self, model: Model) -> RemoteDatabaseDescriptor:
        try:
            return await self.remote_client.retrieve_database(model.database_id)
        except NotFoundError as e:
            raise SchemaValidationError(
                f"Notion database not found for model {model.name} (ID: {model.database_id})",
                model_name=model.name,
            ) from e
        except UnauthorizedError as e:
            raise UnauthorizedError(
                f"Unauthorized access to database {model.database_id} for model {model.name}; "
                f"check that NOTION_API_KEY is valid and the database is shared with the integration",
                code=e.code,
                status=e.status,
            ) from e
        except RemoteError as e:
            logger.error(
                f"Failed to retrieve database {model.database_id} for model {model.name}: {e}",
                extra={"model": model.name},
            )
            raise

    @staticmethod
    def sync_remote_names(model: Model, descriptor: RemoteDatabaseDescriptor) -> Dict[str, str]:
        """
        Adopt the live spelling of properties matched case-insensitively.

        Queries and decoded rows use the exact remote name, so a field ``name``
        matched against remote ``Name`` is rewritten to ``@map("Name")``.

        Returns:
            Field name -> remote name for every field that was rewritten
        """
        renamed: Dict[str, str] = {}
        for field in model.fields:
            prop = descriptor.find_property(field.remote_name)
            if prop is None or prop.name == field.remote_name:
                continue
            logger.info(
                f'Field "{field.name}" of {model.name} uses remote spelling "{prop.name}"',
                extra={"model": model.name},
            )
            field.mapped_name = prop.name
            field.attributes = [a for a in field.attributes if not a.startswith("@map(")]
            field.attributes.append(f'@map("{prop.name}")')
            renamed[field.name] = prop.name
        return renamed

    @staticmethod
    def find_missing_fields(model: Model, descriptor: RemoteDatabaseDescriptor) -> List[str]:
        """Remote names of fields with no case-insensitive match in the descriptor."""
        return [
            field.remote_name
            for field in model.fields
            if descriptor.find_property(field.remote_name) is None
        ]

    def find_type_mismatches(
        self, model: Model, descriptor: RemoteDatabaseDescriptor
    ) -> List[FieldMismatch]:
        """Every field whose expected type disagrees with the live property."""
        mismatches: List[FieldMismatch] = []
        for field in model.fields:
            expected = TypeMapper.expected_remote_type(field)
            prop = descriptor.find_property(field.remote_name)
            if prop is None:
                if not self.allow_missing:
                    mismatches.append(FieldMismatch(field=field.name, expected=expected, got=NOT_FOUND))
                continue
            if expected != prop.type.lower():
                mismatches.append(FieldMismatch(field=field.name, expected=expected, got=prop.type))
        return mismatches


async def validate_and_sync(schema: Schema, remote_client: IRemoteClient) -> ValidationReport:
    """Validate a schema with a default SchemaValidator."""
    return await SchemaValidator(remote_client).validate_and_sync(schema)
