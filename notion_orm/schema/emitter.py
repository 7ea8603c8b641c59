"""
Schema text emission and introspection.

Renders the IR back into schema text and bootstraps models from live remote
database definitions.
"""

import logging
import re
from typing import List

from notion_orm.core.models import Field, Model, RemoteDatabaseDescriptor, Schema
from notion_orm.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^\w+$")


class SchemaEmitter:
    """Turns IR or remote descriptors into schema text."""

    def emit(self, schema: Schema) -> str:
        """Render a whole schema; reparsing the result yields an equivalent IR."""
        return "\n\n".join(self.emit_model(model) for model in schema.models) + "\n"

    def emit_model(self, model: Model) -> str:
        lines = [f'model {model.name} @notionDatabase("{model.database_id}") {{']
        for field in model.fields:
            lines.append(f"  {self._emit_field(field)}")
        lines.append("}")
        return "\n".join(lines)

    def _emit_field(self, field: Field) -> str:
        name = field.name if _IDENTIFIER_RE.match(field.name) else f'"{field.name}"'
        type_token = field.declared_type
        if field.is_array:
            type_token += "[]"
        if field.optional:
            type_token += "?"
        parts = [name, type_token] + list(field.attributes)
        return " ".join(parts)

    def model_from_descriptor(self, descriptor: RemoteDatabaseDescriptor, model_name: str) -> Model:
        """
        Build a Model mirroring a live remote database.

        Properties whose names are not identifiers get a generated local name
        and an ``@map`` back to the remote name. Remote-only types (rollup,
        created_time, ...) are skipped with a warning.

        Args:
            descriptor: Remote database snapshot
            model_name: Name for the generated model

        Returns:
            Model with one field per supported remote property
        """
        fields: List[Field] = []
        used_names = set()

        for property_name, prop in descriptor.properties.items():
            spelled = TypeMapper.to_schema_type(prop.type)
            if spelled is None:
                logger.warning(
                    f"Skipping property '{property_name}' of type {prop.type} in {model_name}: "
                    f"no schema equivalent"
                )
                continue
            type_token, is_array, attributes = spelled

            local_name = self._local_name(property_name, used_names)
            used_names.add(local_name)
            mapped_name = None
            if local_name != property_name:
                mapped_name = property_name
                attributes.append(f'@map("{property_name}")')

            fields.append(
                Field(
                    name=local_name,
                    mapped_name=mapped_name,
                    declared_type=type_token,
                    is_array=is_array,
                    resolved_type=TypeMapper.resolve(type_token, attributes, is_array),
                    optional=prop.type != "title",
                    attributes=attributes,
                )
            )

        return Model(name=model_name, database_id=descriptor.id, fields=fields)

    def _local_name(self, property_name: str, used_names: set) -> str:
        if _IDENTIFIER_RE.match(property_name) and not property_name[0].isdigit():
            candidate = property_name
        else:
            words = re.findall(r"\w+", property_name)
            if words:
                candidate = words[0][0].lower() + words[0][1:] + "".join(w[:1].upper() + w[1:] for w in words[1:])
            else:
                candidate = "field"
            if candidate[0].isdigit():
                candidate = f"field{candidate}"

        name = candidate
        suffix = 2
        while name in used_names:
            name = f"{candidate}{suffix}"
            suffix += 1
        return name


def model_name_from_title(title: str, fallback: str = "Model") -> str:
    """PascalCase model name from a database title."""
    words = re.findall(r"[A-Za-z0-9]+", title)
    name = "".join(w[:1].upper() + w[1:] for w in words)
    if not name or name[0].isdigit():
        return fallback
    return name
