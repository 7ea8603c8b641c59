"""
Pydantic record model generation.

Renders one pydantic class per schema model. Attributes are named after the
local field names and aliased to the remote property names, so decoded query
rows validate directly into them.
"""

import keyword
from typing import Dict, List, Tuple

from notion_orm.core.models import Field, Model, Schema
from notion_orm.core.property_types import NotionPropertyType

HEADER = '"""Generated by notion-orm from the schema file. Do not edit."""\n'

# Resolved type -> (annotation, default expression)
PYDANTIC_TYPE_MAP: Dict[NotionPropertyType, Tuple[str, str]] = {
    NotionPropertyType.TITLE: ("str", '""'),
    NotionPropertyType.RICH_TEXT: ("str", '""'),
    NotionPropertyType.NUMBER: ("float", "0"),
    NotionPropertyType.SELECT: ("str", '""'),
    NotionPropertyType.MULTI_SELECT: ("List[str]", "list"),
    NotionPropertyType.DATE: ("Optional[str]", "None"),
    NotionPropertyType.CHECKBOX: ("bool", "False"),
    NotionPropertyType.URL: ("str", '""'),
    NotionPropertyType.EMAIL: ("str", '""'),
    NotionPropertyType.PHONE_NUMBER: ("str", '""'),
    NotionPropertyType.PEOPLE: ("List[PersonRef]", "list"),
    NotionPropertyType.RELATION: ("List[RelatedRecord]", "list"),
    NotionPropertyType.FORMULA: ("str", '""'),
    NotionPropertyType.FILES: ("List[FileRef]", "list"),
}

RESERVED_NAMES = {"id", "created_time", "last_edited_time", "model_config", "model_fields"}

SUPPORT_CLASSES = '''

class PersonRef(BaseModel):
    id: str
    name: str = ""
    avatar_url: Optional[str] = None


class FileRef(BaseModel):
    name: str = ""
    url: Optional[str] = None


class RelatedRecord(BaseModel):
    """A relation stub, or the full related row once included."""
    model_config = ConfigDict(extra="allow")

    id: str
'''


def python_attribute_name(field_name: str) -> str:
    """Make a field name usable as a pydantic attribute."""
    name = "".join(c if c.isalnum() or c == "_" else "_" for c in field_name)
    if not name or name[0].isdigit():
        name = f"field_{name}"
    if keyword.iskeyword(name) or name in RESERVED_NAMES or name.startswith("model_") or name.startswith("_"):
        name = f"{name.lstrip('_')}_"
    return name


def render_field(field: Field) -> str:
    annotation, default = PYDANTIC_TYPE_MAP.get(field.resolved_type, ("Any", "None"))
    if field.optional and not annotation.startswith(("Optional", "List")):
        annotation = f"Optional[{annotation}]"
        default = "None"

    alias = repr(field.remote_name)
    if default == "list":
        spec = f"Field(default_factory=list, alias={alias})"
    else:
        spec = f"Field(default={default}, alias={alias})"
    return f"    {python_attribute_name(field.name)}: {annotation} = {spec}"


def render_model(model: Model) -> str:
    lines: List[str] = [
        "",
        "",
        f"class {model.name}(BaseModel):",
        f'    """Row of Notion database {model.database_id}."""',
        "    model_config = ConfigDict(populate_by_name=True)",
        "",
        "    id: str",
    ]
    lines.extend(render_field(field) for field in model.fields)
    lines.append('    created_time: Optional[str] = Field(default=None, alias="createdTime")')
    lines.append('    last_edited_time: Optional[str] = Field(default=None, alias="lastEditedTime")')
    return "\n".join(lines)


def render_models(schema: Schema) -> str:
    """Render the models module for a whole schema."""
    parts = [
        HEADER,
        "from typing import Any, List, Optional\n",
        "from pydantic import BaseModel, ConfigDict, Field",
        SUPPORT_CLASSES.rstrip("\n"),
    ]
    parts.extend(render_model(model) for model in schema.models)
    return "\n".join(parts) + "\n"
