"""
Type mapping between schema type tokens and Notion property types.

Resolution runs schema -> remote (what a declared field should be on the
remote side) and remote -> schema (how to spell a live property in schema text).
"""

import logging
from typing import Iterable, List, Optional, Tuple

from notion_orm.core.models import Field
from notion_orm.core.property_types import FIELD_PROPERTY_TYPES, NotionPropertyType

logger = logging.getLogger(__name__)


class TypeMapper:
    """Maps declared schema types and attributes to Notion property types."""

    # Checked in order, first present attribute wins
    ATTRIBUTE_OVERRIDES: Tuple[Tuple[str, NotionPropertyType], ...] = (
        ("title", NotionPropertyType.TITLE),
        ("checkbox", NotionPropertyType.CHECKBOX),
        ("date", NotionPropertyType.DATE),
        ("people", NotionPropertyType.PEOPLE),
        ("select", NotionPropertyType.SELECT),
        ("multiSelect", NotionPropertyType.MULTI_SELECT),
        ("multi_select", NotionPropertyType.MULTI_SELECT),
        ("relation", NotionPropertyType.RELATION),
        ("formula", NotionPropertyType.FORMULA),
        ("richText", NotionPropertyType.RICH_TEXT),
        ("rich_text", NotionPropertyType.RICH_TEXT),
    )

    DECLARED_TYPE_MAP = {
        "String": NotionPropertyType.RICH_TEXT,
        "Boolean": NotionPropertyType.CHECKBOX,
        "DateTime": NotionPropertyType.DATE,
        "Json": NotionPropertyType.PEOPLE,
        "String[]": NotionPropertyType.MULTI_SELECT,
        "PhoneNumber": NotionPropertyType.PHONE_NUMBER,
    }

    # Remote tag -> (type token, is_array, attributes) used when writing schema text
    SCHEMA_TYPE_MAP = {
        NotionPropertyType.TITLE: ("String", False, ["@title"]),
        NotionPropertyType.RICH_TEXT: ("String", False, []),
        NotionPropertyType.NUMBER: ("Number", False, []),
        NotionPropertyType.SELECT: ("String", False, ["@select"]),
        NotionPropertyType.MULTI_SELECT: ("String", True, ["@multiSelect"]),
        NotionPropertyType.DATE: ("DateTime", False, []),
        NotionPropertyType.CHECKBOX: ("Boolean", False, []),
        NotionPropertyType.URL: ("Url", False, []),
        NotionPropertyType.EMAIL: ("Email", False, []),
        NotionPropertyType.PHONE_NUMBER: ("PhoneNumber", False, []),
        NotionPropertyType.PEOPLE: ("Json", False, ["@people"]),
        NotionPropertyType.RELATION: ("String", True, ["@relation"]),
        NotionPropertyType.FORMULA: ("String", False, ["@formula"]),
        NotionPropertyType.FILES: ("Files", False, []),
    }

    @staticmethod
    def has_attribute(attributes: Iterable[str], name: str) -> bool:
        """True if ``@name`` or ``@name(...)`` is among the raw attribute tokens."""
        token = f"@{name}"
        return any(a == token or a.startswith(f"{token}(") for a in attributes)

    @classmethod
    def resolve(
        cls,
        declared_type: str,
        attributes: Iterable[str] = (),
        is_array: bool = False,
    ) -> NotionPropertyType:
        """
        Resolve the remote property type of a field.

        Attribute overrides win over the declared type. A declared token whose
        lowercase form is a field property tag passes through. An unknown
        collection element type is a relation. Anything else is rich_text.

        Args:
            declared_type: Type token without ``[]`` or ``?``
            attributes: Raw attribute tokens, e.g. ``["@title", '@map("Name")']``
            is_array: Whether the token carried a ``[]`` suffix

        Returns:
            Resolved NotionPropertyType
        """
        attributes = list(attributes)
        for attribute_name, property_type in cls.ATTRIBUTE_OVERRIDES:
            if cls.has_attribute(attributes, attribute_name):
                return property_type

        type_key = f"{declared_type}[]" if is_array else declared_type
        if type_key in cls.DECLARED_TYPE_MAP:
            return cls.DECLARED_TYPE_MAP[type_key]

        passthrough = NotionPropertyType.from_tag(declared_type.lower())
        if passthrough in FIELD_PROPERTY_TYPES:
            return passthrough

        if is_array:
            logger.debug(f"Collection type {declared_type}[] treated as relation")
            return NotionPropertyType.RELATION

        logger.warning(f"Unknown type mapping for: {type_key}, using rich_text as default")
        return NotionPropertyType.RICH_TEXT

    @classmethod
    def expected_remote_type(cls, field: Field) -> str:
        """Lowercase wire tag a live database property must carry for this field."""
        return field.resolved_type.value.lower()

    @classmethod
    def to_schema_type(cls, tag: str) -> Optional[Tuple[str, bool, List[str]]]:
        """
        Spell a remote property type in schema terms.

        Args:
            tag: Remote property type tag

        Returns:
            ``(type_token, is_array, attributes)`` or None for remote-only types
        """
        property_type = NotionPropertyType.from_tag(tag)
        if property_type is None or property_type not in cls.SCHEMA_TYPE_MAP:
            return None
        token, is_array, attributes = cls.SCHEMA_TYPE_MAP[property_type]
        return token, is_array, list(attributes)
