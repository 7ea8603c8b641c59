"""
Notion property type tags.

The closed set of property types a field can resolve to, plus the read-only
system types that only ever appear on the remote side.
"""

from enum import Enum
from typing import Optional


class NotionPropertyType(str, Enum):
    """Remote property type tags, valued by their wire name."""

    TITLE = "title"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    PEOPLE = "people"
    RELATION = "relation"
    FORMULA = "formula"
    FILES = "files"

    # Remote-only system types
    ROLLUP = "rollup"
    CREATED_TIME = "created_time"
    CREATED_BY = "created_by"
    LAST_EDITED_TIME = "last_edited_time"
    LAST_EDITED_BY = "last_edited_by"

    @classmethod
    def from_tag(cls, tag: str) -> Optional["NotionPropertyType"]:
        """Return the member for a wire tag, or None if the tag is unknown."""
        try:
            return cls(tag)
        except ValueError:
            return None


# Types a schema field may declare; system types are excluded.
FIELD_PROPERTY_TYPES = frozenset(
    {
        NotionPropertyType.TITLE,
        NotionPropertyType.RICH_TEXT,
        NotionPropertyType.NUMBER,
        NotionPropertyType.SELECT,
        NotionPropertyType.MULTI_SELECT,
        NotionPropertyType.DATE,
        NotionPropertyType.CHECKBOX,
        NotionPropertyType.URL,
        NotionPropertyType.EMAIL,
        NotionPropertyType.PHONE_NUMBER,
        NotionPropertyType.PEOPLE,
        NotionPropertyType.RELATION,
        NotionPropertyType.FORMULA,
        NotionPropertyType.FILES,
    }
)
