"""
Typed client generation.

Renders a client class with one QueryBuilder factory per model, each
preconfigured with the model's database id and property, type and relation
tables.
"""

import re
from pathlib import PurePath
from typing import Dict, List

from notion_orm.core.models import Model, OutputConfig, Schema
from notion_orm.generator.model_generator import HEADER


def to_snake_case(name: str) -> str:
    name = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name).lower()


def pluralize(name: str) -> str:
    if name.endswith("s"):
        return name
    if name.endswith("y") and len(name) > 1 and name[-2] not in "aeiou":
        return f"{name[:-1]}ies"
    return f"{name}s"


def _render_dict(values: Dict[str, str], indent: str = "    ") -> str:
    if not values:
        return "{}"
    lines = ["{"]
    lines.extend(f"{indent}{key!r}: {value}," for key, value in values.items())
    lines.append("}")
    return "\n".join(lines)


def render_model_settings(model: Model, schema: Schema) -> str:
    prefix = to_snake_case(model.name).upper()
    mappings = {name: repr(remote) for name, remote in model.property_mappings().items()}
    types = {
        name: f"NotionPropertyType.{property_type.name}"
        for name, property_type in model.property_types().items()
    }
    relations = {name: repr(db_id) for name, db_id in schema.relation_mappings(model).items()}
    return "\n".join(
        [
            "",
            f"{prefix}_DATABASE_ID = {model.database_id!r}",
            f"{prefix}_PROPERTY_MAPPINGS = {_render_dict(mappings)}",
            f"{prefix}_PROPERTY_TYPES = {_render_dict(types)}",
            f"{prefix}_RELATION_MAPPINGS = {_render_dict(relations)}",
        ]
    )


def render_query_method(model: Model) -> str:
    prefix = to_snake_case(model.name).upper()
    method = f"query_{pluralize(to_snake_case(model.name))}"
    return f'''
    def {method}(self) -> QueryBuilder[{model.name}]:
        """Start a query on {model.name} rows."""
        return QueryBuilder(
            self.remote,
            {prefix}_DATABASE_ID,
            "{model.name}",
            relation_mappings={prefix}_RELATION_MAPPINGS,
            property_mappings={prefix}_PROPERTY_MAPPINGS,
            property_types={prefix}_PROPERTY_TYPES,
            result_model={model.name},
            config=self.config,
        )'''


def render_client(schema: Schema, output: OutputConfig) -> str:
    """Render the client module for a whole schema."""
    models_module = PurePath(output.models_file).stem
    model_names = ", ".join(model.name for model in schema.models)

    parts: List[str] = [
        HEADER,
        "from typing import Optional\n",
        "from notion_orm import NotionOrmConfig, NotionPropertyType, NotionRemoteClient, QueryBuilder\n",
        f"from .{models_module} import {model_names}",
    ]
    parts.extend(render_model_settings(model, schema) for model in schema.models)
    parts.append(
        '''

class NotionOrmClient:
    """Query entry point for every model of the schema."""

    def __init__(self, config: Optional[NotionOrmConfig] = None):
        self.config = config or NotionOrmConfig.from_env()
        self.remote = NotionRemoteClient(self.config)

    async def __aenter__(self) -> "NotionOrmClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.remote.aclose()'''
    )
    parts.extend(render_query_method(model) for model in schema.models)
    return "\n".join(parts) + "\n"


def render_package_init(output: OutputConfig) -> str:
    client_module = PurePath(output.client_file).stem
    return f"{HEADER}\nfrom .{client_module} import NotionOrmClient\n\n__all__ = [\"NotionOrmClient\"]\n"
