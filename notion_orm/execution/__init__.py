"""Result decoding."""

from notion_orm.execution.codec import PropertyValueCodec
from notion_orm.execution.result_formatter import ResultFormatter

__all__ = ["PropertyValueCodec", "ResultFormatter"]
