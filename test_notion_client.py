"""Tests for the Notion HTTP client using an in-process mock transport."""

import asyncio
import json

import httpx
import pytest

from notion_orm import (
    NotFoundError,
    NotionOrmConfig,
    NotionRemoteClient,
    RemoteError,
    RemoteValidationError,
    UnauthorizedError,
)


DATABASE = {
    "object": "database",
    "id": "db1",
    "title": [{"plain_text": "Team "}, {"plain_text": "Tasks"}],
    "properties": {
        "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
        "Status": {
            "id": "s1",
            "name": "Status",
            "type": "select",
            "select": {"options": [{"name": "Open"}, {"name": "Done"}]},
        },
    },
}


def make_client(handler, **config):
    settings = {"api_key": "secret-token", "retry_delay": 0.0}
    settings.update(config)
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NotionRemoteClient(NotionOrmConfig(**settings), http_client=http)


def run(client, call):
    async def go():
        async with client:
            return await call(client)

    return asyncio.run(go())


def test_requires_api_key():
    with pytest.raises(ValueError, match="api_key is required"):
        NotionRemoteClient(NotionOrmConfig())


def test_retrieve_database_returns_descriptor():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=DATABASE)

    descriptor = run(make_client(handler), lambda c: c.retrieve_database("db1"))

    assert seen[0].method == "GET"
    assert seen[0].url == "https://api.notion.com/v1/databases/db1"
    assert seen[0].headers["Authorization"] == "Bearer secret-token"
    assert seen[0].headers["Notion-Version"] == "2022-06-28"
    assert descriptor.title == "Team Tasks"
    assert descriptor.find_property("status").options == ["Open", "Done"]
    assert descriptor.properties["Name"].type == "title"


def test_query_database_posts_body_without_database_id():
    bodies = []

    def handler(request):
        bodies.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"results": [{"id": "p1"}], "next_cursor": "c2", "has_more": True})

    query = {"database_id": "db1", "filter": {"property": "Done", "checkbox": {"equals": True}}, "page_size": 5}
    response = run(make_client(handler), lambda c: c.query_database(query))

    assert bodies == [("/v1/databases/db1/query", {"filter": {"property": "Done", "checkbox": {"equals": True}}, "page_size": 5})]
    assert response == {"results": [{"id": "p1"}], "next_cursor": "c2", "has_more": True}
    assert "database_id" in query


def test_transient_errors_are_retried():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503, json={"code": "service_unavailable", "message": "try later"})
        return httpx.Response(200, json={"id": "p1", "properties": {}})

    record = run(make_client(handler), lambda c: c.retrieve_page("p1"))

    assert record["id"] == "p1"
    assert len(attempts) == 3


def test_last_error_surfaces_after_retries():
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(429, json={"code": "rate_limited", "message": "slow down"})

    with pytest.raises(RemoteError) as exc_info:
        run(make_client(handler, max_retries=2), lambda c: c.retrieve_page("p1"))

    assert len(attempts) == 2
    assert exc_info.value.status == 429
    assert exc_info.value.code == "rate_limited"


@pytest.mark.parametrize(
    "status, code, error_type",
    [
        (404, "object_not_found", NotFoundError),
        (401, "unauthorized", UnauthorizedError),
        (400, "validation_error", RemoteValidationError),
    ],
)
def test_permanent_errors_are_not_retried(status, code, error_type):
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(status, json={"object": "error", "code": code, "message": "nope"})

    with pytest.raises(error_type) as exc_info:
        run(make_client(handler), lambda c: c.retrieve_database("db1"))

    assert len(attempts) == 1
    assert exc_info.value.code == code
    assert "nope" in str(exc_info.value)


def test_transport_errors_become_remote_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteError, match="connection refused"):
        run(make_client(handler, max_retries=1), lambda c: c.retrieve_page("p1"))


def test_search_databases_follows_cursors():
    bodies = []

    def handler(request):
        body = json.loads(request.content)
        bodies.append(body)
        if "start_cursor" not in body:
            return httpx.Response(200, json={"results": [{"id": "db1"}], "has_more": True, "next_cursor": "c2"})
        return httpx.Response(200, json={"results": [{"id": "db2"}], "has_more": False, "next_cursor": None})

    databases = run(make_client(handler), lambda c: c.search_databases())

    assert [d["id"] for d in databases] == ["db1", "db2"]
    assert bodies[0]["filter"] == {"property": "object", "value": "database"}
    assert bodies[1]["start_cursor"] == "c2"
