"""Notion adapter for the query builder."""

from notion_orm.adapters.notion.client import NotionRemoteClient

__all__ = ["NotionRemoteClient"]
