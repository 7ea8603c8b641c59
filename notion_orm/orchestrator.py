"""
Notion orchestrator - main entry point.

Coordinates schema parsing, validation, code generation and querying.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from notion_orm.config import NotionOrmConfig
from notion_orm.core.interfaces import IRemoteClient
from notion_orm.core.models import Model, OutputConfig, Schema, ValidationReport
from notion_orm.generator.generator import generate
from notion_orm.query.builder import QueryBuilder
from notion_orm.schema.emitter import SchemaEmitter, model_name_from_title
from notion_orm.schema.parser import SchemaParser
from notion_orm.schema.validator import SchemaValidator


class NotionOrchestrator:
    """
    Main orchestrator for a schema-described set of Notion databases.

    Holds the parsed schema and a remote client, and hands out query builders
    preconfigured from the schema.
    """

    def __init__(
        self,
        schema: Schema,
        remote_client: Optional[IRemoteClient] = None,
        config: Optional[NotionOrmConfig] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            schema: Parsed schema
            remote_client: Remote client; created from config on first use if omitted
            config: Runtime configuration
        """
        self.schema = schema
        self.config = config or NotionOrmConfig()
        self._remote_client = remote_client

    @classmethod
    def from_schema_text(
        cls,
        text: str,
        remote_client: Optional[IRemoteClient] = None,
        config: Optional[NotionOrmConfig] = None,
    ) -> "NotionOrchestrator":
        return cls(SchemaParser().parse(text), remote_client=remote_client, config=config)

    @classmethod
    def from_schema_file(
        cls,
        path: Union[str, Path],
        remote_client: Optional[IRemoteClient] = None,
        config: Optional[NotionOrmConfig] = None,
    ) -> "NotionOrchestrator":
        """
        Create orchestrator from a schema file.

        Args:
            path: Path to the schema text file
            remote_client: Optional remote client
            config: Optional runtime configuration

        Returns:
            Configured NotionOrchestrator
        """
        text = Path(path).read_text(encoding="utf-8")
        return cls.from_schema_text(text, remote_client=remote_client, config=config)

    @property
    def remote_client(self) -> IRemoteClient:
        if self._remote_client is None:
            from notion_orm.adapters.notion import NotionRemoteClient

            self._remote_client = NotionRemoteClient(self.config)
        return self._remote_client

    def get_model(self, model_name: str) -> Model:
        model = self.schema.get_model(model_name)
        if model is None:
            known = ", ".join(m.name for m in self.schema.models)
            raise KeyError(f"Unknown model '{model_name}' (known: {known})")
        return model

    async def validate(self, allow_missing: bool = False) -> ValidationReport:
        """Validate every model against its live remote database."""
        validator = SchemaValidator(self.remote_client, allow_missing=allow_missing)
        return await validator.validate_and_sync(self.schema)

    def generate(self, output: Optional[OutputConfig] = None) -> List[Path]:
        """Write the generated models and client package."""
        return generate(self.schema, output)

    def query(self, model_name: str) -> QueryBuilder:
        """
        Start a query on one model.

        Args:
            model_name: Name of a model in the schema

        Returns:
            QueryBuilder configured with the model's database id and mapping tables
        """
        model = self.get_model(model_name)
        # Compiling a query needs no credentials; execute() does
        remote_client = self._remote_client
        if remote_client is None and self.config.api_key:
            remote_client = self.remote_client
        return QueryBuilder(
            remote_client,
            model.database_id,
            model.name,
            relation_mappings=self.schema.relation_mappings(model),
            property_mappings=model.property_mappings(),
            property_types=model.property_types(),
            config=self.config,
        )

    def print_model_summary(self):
        """Print summary of the parsed models."""
        print(f"\n=== Schema Summary ===")
        print(f"Total Models: {len(self.schema.models)}")

        for model in self.schema.models:
            print(f"\n=== {model.name} ({model.database_id}) ===")
            for field in model.fields:
                suffix = "?" if field.optional else ""
                remote = f" -> {field.remote_name}" if field.mapped_name else ""
                print(f"  {field.name}{suffix}: {field.resolved_type.value}{remote}")


async def introspect(
    remote_client: IRemoteClient,
    database_ids: List[str],
    model_names: Optional[Dict[str, str]] = None,
) -> Schema:
    """
    Build a schema mirroring live remote databases.

    Args:
        remote_client: Client used to fetch database definitions
        database_ids: Databases to mirror, in output order
        model_names: Optional database id -> model name overrides

    Returns:
        Schema with one model per database
    """
    emitter = SchemaEmitter()
    model_names = model_names or {}
    models = []
    for index, database_id in enumerate(database_ids, 1):
        descriptor = await remote_client.retrieve_database(database_id)
        name = model_names.get(database_id) or model_name_from_title(descriptor.title, f"Model{index}")
        models.append(emitter.model_from_descriptor(descriptor, name))
    return Schema(models=models)
