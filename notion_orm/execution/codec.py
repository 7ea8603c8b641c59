"""
Property value codec.

Decodes remote property JSON (tagged by its ``type`` discriminator) into plain
Python values. Unknown tags never fail: they decode to an empty string and log
a warning.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from notion_orm.core.property_types import NotionPropertyType

logger = logging.getLogger(__name__)


def _first_plain_text(segments: Optional[List[Dict[str, Any]]]) -> str:
    if not segments:
        return ""
    return segments[0].get("plain_text") or ""


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class PropertyValueCodec:
    """Maps remote property values to local values."""

    def __init__(self):
        self._decoders: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            NotionPropertyType.TITLE.value: lambda p: _first_plain_text(p.get("title")),
            NotionPropertyType.RICH_TEXT.value: lambda p: _first_plain_text(p.get("rich_text")),
            NotionPropertyType.NUMBER.value: self._decode_number,
            NotionPropertyType.SELECT.value: lambda p: (p.get("select") or {}).get("name") or "",
            NotionPropertyType.MULTI_SELECT.value: lambda p: [
                option.get("name") for option in (p.get("multi_select") or [])
            ],
            NotionPropertyType.DATE.value: lambda p: (p.get("date") or {}).get("start"),
            NotionPropertyType.CHECKBOX.value: lambda p: bool(p.get("checkbox") or False),
            NotionPropertyType.PEOPLE.value: self._decode_people,
            NotionPropertyType.RELATION.value: lambda p: [
                {"id": r.get("id")} for r in (p.get("relation") or [])
            ],
            NotionPropertyType.FORMULA.value: self._decode_formula,
            NotionPropertyType.URL.value: lambda p: p.get("url") or "",
            NotionPropertyType.EMAIL.value: lambda p: p.get("email") or "",
            NotionPropertyType.PHONE_NUMBER.value: lambda p: p.get("phone_number") or "",
            NotionPropertyType.FILES.value: self._decode_files,
            NotionPropertyType.CREATED_TIME.value: lambda p: p.get("created_time"),
            NotionPropertyType.LAST_EDITED_TIME.value: lambda p: p.get("last_edited_time"),
        }

    def decode(self, prop: Optional[Dict[str, Any]]) -> Any:
        """
        Decode one remote property value.

        Args:
            prop: Remote property JSON, e.g. ``{"type": "checkbox", "checkbox": true}``

        Returns:
            Local value; None when the property is absent or untyped
        """
        if not prop or not prop.get("type"):
            return None

        decoder = self._decoders.get(prop["type"])
        if decoder is None:
            logger.warning(f"Unsupported Notion property type: {prop['type']}")
            return ""
        return decoder(prop)

    def decode_properties(self, properties: Dict[str, Any]) -> Dict[str, Any]:
        """Decode a whole ``properties`` object, keyed by remote property name."""
        return {name: self.decode(value) for name, value in (properties or {}).items()}

    @staticmethod
    def _decode_number(prop: Dict[str, Any]) -> Any:
        value = prop.get("number")
        return 0 if value is None else value

    @staticmethod
    def _decode_people(prop: Dict[str, Any]) -> List[Dict[str, Any]]:
        people = []
        for user in prop.get("people") or []:
            person = {"id": user.get("id"), "name": user.get("name") or ""}
            if user.get("avatar_url"):
                person["avatar_url"] = user["avatar_url"]
            people.append(person)
        return people

    @staticmethod
    def _decode_formula(prop: Dict[str, Any]) -> str:
        formula = prop.get("formula") or {}
        if formula.get("string"):
            return formula["string"]
        if formula.get("number") is not None:
            return _format_number(formula["number"])
        return ""

    @staticmethod
    def _decode_files(prop: Dict[str, Any]) -> List[Dict[str, Any]]:
        files = []
        for item in prop.get("files") or []:
            hosted = item.get("file") or item.get("external") or {}
            files.append({"name": item.get("name") or "", "url": hosted.get("url")})
        return files
