"""
Notion API client.

Implements IRemoteClient over httpx with a bounded retry envelope.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

import httpx

from notion_orm.config import NotionOrmConfig
from notion_orm.core.errors import (
    NotFoundError,
    RemoteError,
    RemoteValidationError,
    UnauthorizedError,
)
from notion_orm.core.models import RemoteDatabaseDescriptor, RemoteProperty

logger = logging.getLogger(__name__)

R = TypeVar("R")


class NotionRemoteClient:
    """
    Talks to the Notion REST API.

    Implements the IRemoteClient interface. Each call is retried up to
    ``config.max_retries`` times with a linearly increasing delay; not-found,
    unauthorized and validation errors are raised immediately.
    """

    def __init__(
        self,
        config: NotionOrmConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Notion client.

        Args:
            config: Runtime configuration; ``api_key`` is required
            http_client: Optional preconfigured client (tests pass a mock transport)

        Raises:
            ValueError: If no API key is configured
        """
        if not config.api_key:
            raise ValueError("api_key is required (provide it in the config or set NOTION_API_KEY)")

        self.config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)
        self._headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Notion-Version": config.notion_version,
            "Content-Type": "application/json",
        }

    async def __aenter__(self) -> "NotionRemoteClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def retrieve_database(self, database_id: str) -> RemoteDatabaseDescriptor:
        """Fetch a database definition as a read-only descriptor."""
        data = await self._with_retry(lambda: self._request("GET", f"/databases/{database_id}"))
        return self.to_descriptor(data)

    async def query_database(self, query: Dict[str, Any]) -> Dict[str, Any]:
        """Run a compiled query; ``database_id`` selects the endpoint."""
        body = dict(query)
        database_id = body.pop("database_id")
        data = await self._with_retry(
            lambda: self._request("POST", f"/databases/{database_id}/query", json=body)
        )
        return {
            "results": data.get("results", []),
            "next_cursor": data.get("next_cursor"),
            "has_more": data.get("has_more", False),
        }

    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        return await self._with_retry(lambda: self._request("GET", f"/pages/{page_id}"))

    async def search_databases(self, page_size: int = 100) -> List[Dict[str, Any]]:
        """List every database shared with the integration."""
        databases: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            body: Dict[str, Any] = {
                "filter": {"property": "object", "value": "database"},
                "page_size": page_size,
            }
            if cursor:
                body["start_cursor"] = cursor
            data = await self._with_retry(lambda: self._request("POST", "/search", json=body))
            databases.extend(data.get("results", []))
            if not data.get("has_more"):
                return databases
            cursor = data.get("next_cursor")

    @staticmethod
    def to_descriptor(data: Dict[str, Any]) -> RemoteDatabaseDescriptor:
        """Copy a database response into a RemoteDatabaseDescriptor."""
        properties = {}
        for name, prop in (data.get("properties") or {}).items():
            prop_type = prop.get("type", "")
            type_config = prop.get(prop_type) or {}
            options = [o.get("name") for o in type_config.get("options", [])] if prop_type in (
                "select",
                "multi_select",
            ) else []
            properties[name] = RemoteProperty(
                id=prop.get("id", ""),
                name=prop.get("name", name),
                type=prop_type,
                options=options,
                config=type_config,
            )
        title = "".join(t.get("plain_text", "") for t in data.get("title") or [])
        return RemoteDatabaseDescriptor(id=data.get("id", ""), title=title, properties=properties)

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self._http.request(
                method, f"{self.config.base_url}{path}", headers=self._headers, json=json
            )
        except httpx.HTTPError as e:
            raise RemoteError(f"{method} {path} failed: {e}") from e

        if response.is_success:
            return response.json()
        raise self._to_error(response, f"{method} {path}")

    @staticmethod
    def _to_error(response: httpx.Response, request: str) -> RemoteError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        code = body.get("code")
        message = f"{request} returned {response.status_code}: {body.get('message') or response.text}"

        if code == "object_not_found" or response.status_code == 404:
            return NotFoundError(message, code=code, status=response.status_code)
        if code == "unauthorized" or response.status_code == 401:
            return UnauthorizedError(message, code=code, status=response.status_code)
        if code == "validation_error":
            return RemoteValidationError(message, code=code, status=response.status_code)
        return RemoteError(message, code=code, status=response.status_code)

    async def _with_retry(self, operation: Callable[[], Awaitable[R]]) -> R:
        last_error: Optional[RemoteError] = None
        for attempt in range(1, self.config.max_retries + 1):
            try:
                return await operation()
            except RemoteError as e:
                if not e.is_retryable:
                    raise
                last_error = e
                if attempt < self.config.max_retries:
                    delay = self.config.retry_delay * attempt
                    logger.warning(
                        f"Attempt {attempt}/{self.config.max_retries} failed ({e}); retrying in {delay:.1f}s"
                    )
                    await asyncio.sleep(delay)
        raise last_error
