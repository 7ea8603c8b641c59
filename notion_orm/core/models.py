"""
Shared data models for the schema compiler and query layer.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field as PydanticField

from notion_orm.core.property_types import NotionPropertyType


class Field(BaseModel):
    """A single field declaration inside a model block."""

    name: str
    mapped_name: Optional[str] = None  # from @map("...")
    declared_type: str  # type token as written, without [] or ?
    is_array: bool = False
    resolved_type: NotionPropertyType
    optional: bool = False
    attributes: List[str] = PydanticField(default_factory=list)

    @property
    def remote_name(self) -> str:
        """Effective remote property name: the @map override, else the field name."""
        return self.mapped_name or self.name

    def has_attribute(self, name: str) -> bool:
        """True if a bare or parameterized attribute with this name is present."""
        token = f"@{name}"
        return any(a == token or a.startswith(f"{token}(") for a in self.attributes)

    def attribute_argument(self, name: str) -> Optional[str]:
        """Return the quoted argument of a parameterized attribute, if any."""
        prefix = f"@{name}("
        for attribute in self.attributes:
            if attribute.startswith(prefix) and attribute.endswith(")"):
                return attribute[len(prefix):-1].strip().strip("\"'")
        return None


class Model(BaseModel):
    """A model block bound to one remote database."""

    name: str
    database_id: str
    fields: List[Field] = PydanticField(default_factory=list)

    def title_fields(self) -> List[Field]:
        return [f for f in self.fields if f.resolved_type == NotionPropertyType.TITLE]

    def get_field(self, name: str) -> Optional[Field]:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def property_mappings(self) -> Dict[str, str]:
        """Local field name -> remote property name."""
        return {f.name: f.remote_name for f in self.fields}

    def property_types(self) -> Dict[str, NotionPropertyType]:
        """Local field name -> resolved remote property type."""
        return {f.name: f.resolved_type for f in self.fields}


class OutputConfig(BaseModel):
    """Where generators write their files."""

    directory: str = "./generated"
    models_file: str = "models.py"
    client_file: str = "client.py"


class Schema(BaseModel):
    """Root of the parsed schema, models in declaration order."""

    models: List[Model] = PydanticField(default_factory=list)
    output: Optional[OutputConfig] = None
    skipped_lines: List[str] = PydanticField(default_factory=list)

    def get_model(self, name: str) -> Optional[Model]:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def relation_mappings(self, model: Model) -> Dict[str, str]:
        """
        Relation field name -> related database id for one model.

        ``@relation("Target")`` names a model of this schema, or is taken as a
        raw database id. Relation fields without an argument are left out.
        """
        mappings: Dict[str, str] = {}
        for field in model.fields:
            if field.resolved_type != NotionPropertyType.RELATION:
                continue
            target = field.attribute_argument("relation")
            if not target:
                continue
            target_model = self.get_model(target)
            mappings[field.name] = target_model.database_id if target_model else target
        return mappings


class RemoteProperty(BaseModel):
    """One property of a remote database definition."""

    id: str = ""
    name: str
    type: str  # raw wire tag, kept as str so unknown tags survive
    options: List[str] = PydanticField(default_factory=list)  # select / multi_select
    config: Dict[str, Any] = PydanticField(default_factory=dict)


class RemoteDatabaseDescriptor(BaseModel):
    """Read-only snapshot of a remote database definition."""

    id: str
    title: str = ""
    properties: Dict[str, RemoteProperty] = PydanticField(default_factory=dict)

    def find_property(self, name: str) -> Optional[RemoteProperty]:
        """Case-insensitive lookup by property name."""
        wanted = name.lower()
        for key, prop in self.properties.items():
            if key.lower() == wanted:
                return prop
        return None


class FieldMismatch(BaseModel):
    """A field whose expected remote type disagrees with the live database."""

    field: str
    expected: str
    got: str

    def __str__(self) -> str:
        return f"{self.field}: expected {self.expected}, got {self.got}"


class ValidationReport(BaseModel):
    """Outcome of a successful schema validation."""

    validated_models: List[str] = PydanticField(default_factory=list)
    missing_fields: Dict[str, List[str]] = PydanticField(default_factory=dict)
    remote_names: Dict[str, Dict[str, str]] = PydanticField(default_factory=dict)
