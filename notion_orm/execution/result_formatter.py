"""
Result formatting utilities.

Flattens remote records into plain dictionaries keyed by remote property name.
"""

from typing import Any, Dict, List, Optional

from notion_orm.execution.codec import PropertyValueCodec


class ResultFormatter:
    """
    Formats remote records into a consistent structure.

    Every formatted record carries ``id``, ``createdTime`` and
    ``lastEditedTime`` next to its decoded properties.
    """

    def __init__(self, codec: Optional[PropertyValueCodec] = None):
        self.codec = codec or PropertyValueCodec()

    def format_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Format a single remote record.

        Args:
            record: Raw record from the remote client

        Returns:
            Flat dictionary of decoded values
        """
        formatted: Dict[str, Any] = {"id": record.get("id")}
        formatted.update(self.codec.decode_properties(record.get("properties", {})))
        formatted["createdTime"] = record.get("created_time")
        formatted["lastEditedTime"] = record.get("last_edited_time")
        return formatted

    def format_records(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Format multiple remote records, preserving order."""
        return [self.format_record(record) for record in records]
