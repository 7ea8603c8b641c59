"""
Abstract interface for the remote document-database client.

The validator and query builder only depend on this protocol, so tests and
alternative transports can stand in for the Notion adapter.
"""

from typing import Any, Dict, Protocol

from notion_orm.core.models import RemoteDatabaseDescriptor


class IRemoteClient(Protocol):
    """
    Asynchronous access to remote databases and pages.

    Implementations apply their own bounded retry envelope and raise
    ``NotFoundError`` / ``UnauthorizedError`` / ``RemoteValidationError`` /
    ``RemoteError`` from ``notion_orm.core.errors``.
    """

    async def retrieve_database(self, database_id: str) -> RemoteDatabaseDescriptor:
        """
        Fetch a database definition.

        Args:
            database_id: Remote database id

        Returns:
            Snapshot of the database's named, typed properties
        """
        ...

    async def query_database(self, query: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run a compiled query.

        Args:
            query: Compiled query including ``database_id``

        Returns:
            ``{"results": [...], "next_cursor": str | None, "has_more": bool}``
        """
        ...

    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        """
        Fetch one record.

        Args:
            page_id: Remote record id

        Returns:
            Raw record JSON with ``id``, ``properties``, ``created_time``, ``last_edited_time``
        """
        ...
