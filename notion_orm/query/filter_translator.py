"""
Notion query translator.

Lowers accumulated filter and sort conditions into the Notion query JSON shape.
"""

import logging
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel

from notion_orm.core.property_types import NotionPropertyType

logger = logging.getLogger(__name__)


class FilterCondition(BaseModel):
    """A direct ``{property, operator, value}`` condition."""

    field: str  # key as given by the caller
    property: str  # effective remote property name
    operator: str
    value: Any = None


class RelationFilter(BaseModel):
    """A condition on a relation property, taken from a sub-query."""

    property: str
    operator: str
    value: Any = None


class SortCondition(BaseModel):
    field: str
    property: str
    direction: Literal["ascending", "descending"] = "ascending"


AnyFilter = Union[FilterCondition, RelationFilter]


def infer_property_type(property_name: str) -> NotionPropertyType:
    """
    Guess a property's type from its name.

    Only used when no explicit type is known for the property.
    """
    name = property_name.lower()
    if name in ("title", "name"):
        return NotionPropertyType.TITLE
    if name.endswith("at") or "date" in name:
        return NotionPropertyType.DATE
    if name.startswith("is") or name == "active":
        return NotionPropertyType.CHECKBOX
    if "tags" in name:
        return NotionPropertyType.MULTI_SELECT
    if "status" in name:
        return NotionPropertyType.SELECT
    return NotionPropertyType.RICH_TEXT


def looks_like_relation(property_name: str) -> bool:
    """Guess from its name whether a property is a relation."""
    name = property_name.lower()
    return name in ("domain", "documents") or "relation" in name


class NotionFilterTranslator:
    """
    Translates filter and sort conditions to Notion query clauses.

    Explicit ``property_types`` and ``relation_mappings`` entries (keyed by
    local field name or remote property name) take precedence over the
    name-based guesses.
    """

    TEXT_OPERATORS = {
        "equals": "equals",
        "contains": "contains",
        "startsWith": "starts_with",
        "starts_with": "starts_with",
        "endsWith": "ends_with",
        "ends_with": "ends_with",
    }
    DATE_OPERATORS = frozenset({"before", "after", "on_or_before", "on_or_after"})
    EMPTY_OPERATORS = frozenset({"is_empty", "is_not_empty"})

    SYSTEM_TIMESTAMP_ALIASES = {
        "createdTime": "created_time",
        "Created At": "created_time",
        "lastEditedTime": "last_edited_time",
    }
    SYSTEM_TIMESTAMPS = frozenset({"created_time", "last_edited_time"})

    def __init__(
        self,
        relation_mappings: Optional[Dict[str, str]] = None,
        property_types: Optional[Dict[str, NotionPropertyType]] = None,
    ):
        self.relation_mappings = relation_mappings or {}
        self.property_types = property_types or {}

    def translate_filters(self, conditions: List[AnyFilter]) -> Optional[Dict[str, Any]]:
        """
        Combine conditions as a conjunction.

        Returns:
            None for no conditions, the bare clause for one, ``{"and": [...]}`` otherwise
        """
        if not conditions:
            return None
        clauses = [self.translate_filter(c) for c in conditions]
        if len(clauses) == 1:
            return clauses[0]
        return {"and": clauses}

    def translate_filter(self, condition: AnyFilter) -> Dict[str, Any]:
        """Translate a single condition to a Notion filter clause."""
        if isinstance(condition, RelationFilter):
            return {"property": condition.property, "relation": {"contains": condition.value}}

        # The requested operator does not apply to relation properties
        if self.is_relation_property(condition):
            return {"property": condition.property, "relation": {"contains": condition.value}}

        operator = condition.operator
        value = condition.value

        if operator in self.DATE_OPERATORS:
            return {"property": condition.property, "date": {operator: value}}

        type_tag = self.property_type_of(condition).value
        if operator in self.EMPTY_OPERATORS:
            clause = {operator: True}
        elif operator in self.TEXT_OPERATORS:
            clause = {self.TEXT_OPERATORS[operator]: value}
        else:
            logger.warning(
                f"Unsupported operator '{operator}' on property '{condition.property}', using equals"
            )
            clause = {"equals": value}

        return {"property": condition.property, type_tag: clause}

    def translate_sort(self, sort: SortCondition) -> Dict[str, Any]:
        """Translate a sort condition; system timestamps sort by ``timestamp``."""
        name = self.SYSTEM_TIMESTAMP_ALIASES.get(sort.property, sort.property)
        if name in self.SYSTEM_TIMESTAMPS:
            return {"timestamp": name, "direction": sort.direction}
        return {"property": name, "direction": sort.direction}

    def is_relation_property(self, condition: FilterCondition) -> bool:
        if condition.field in self.relation_mappings or condition.property in self.relation_mappings:
            return True
        explicit = self._explicit_type(condition)
        if explicit is not None:
            return explicit == NotionPropertyType.RELATION
        return looks_like_relation(condition.property)

    def property_type_of(self, condition: FilterCondition) -> NotionPropertyType:
        explicit = self._explicit_type(condition)
        if explicit is not None:
            return explicit
        return infer_property_type(condition.property)

    def _explicit_type(self, condition: FilterCondition) -> Optional[NotionPropertyType]:
        explicit = self.property_types.get(condition.field)
        if explicit is None:
            explicit = self.property_types.get(condition.property)
        return explicit
