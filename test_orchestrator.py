"""Tests for the orchestrator and the command line entry point."""

import asyncio
import json
import logging

import pytest

from notion_orm import NotionOrchestrator, NotionOrmConfig
from notion_orm.cli import main
from notion_orm.core.logging_config import ContextFormatter
from notion_orm.core.models import RemoteDatabaseDescriptor, RemoteProperty
from notion_orm.execution import ResultFormatter
from notion_orm.generator import generate_files


SCHEMA_TEXT = """
model Project @notionDatabase("proj-db") {
  name String @title
}

model Task @notionDatabase("task-db") {
  name    String  @title
  done    Boolean @checkbox @map("Done")
  project Project[] @relation("Project")
}
"""


class FakeRemoteClient:
    def __init__(self):
        self.queries = []

    async def retrieve_database(self, database_id):
        tables = {
            "proj-db": {"Name": "title"},
            "task-db": {"Name": "title", "Done": "checkbox", "project": "relation"},
        }
        return RemoteDatabaseDescriptor(
            id=database_id,
            properties={n: RemoteProperty(name=n, type=t) for n, t in tables[database_id].items()},
        )

    async def query_database(self, query):
        self.queries.append(query)
        return {"results": [], "next_cursor": None, "has_more": False}

    async def retrieve_page(self, page_id):
        raise AssertionError("not used")


@pytest.fixture(autouse=True)
def restore_logging():
    # main() reconfigures the root logger onto the captured stdout
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, ContextFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.prisma"
    path.write_text(SCHEMA_TEXT, encoding="utf-8")
    return path


def test_query_is_preconfigured_from_schema(schema_file):
    client = FakeRemoteClient()
    orchestrator = NotionOrchestrator.from_schema_file(schema_file, remote_client=client)

    builder = orchestrator.query("Task").where("done", "equals", True)
    builder.where_relation("project", lambda sub: sub.where("name", "equals", "proj-1"))
    asyncio.run(builder.execute())

    assert client.queries == [
        {
            "database_id": "task-db",
            "filter": {
                "and": [
                    {"property": "Done", "checkbox": {"equals": True}},
                    {"property": "project", "relation": {"contains": "proj-1"}},
                ]
            },
        }
    ]


def test_validate_uses_remote_client(schema_file):
    orchestrator = NotionOrchestrator.from_schema_file(schema_file, remote_client=FakeRemoteClient())

    report = asyncio.run(orchestrator.validate())

    assert report.validated_models == ["Project", "Task"]


def test_validate_adopts_remote_spelling(schema_file):
    orchestrator = NotionOrchestrator.from_schema_file(schema_file, remote_client=FakeRemoteClient())

    report = asyncio.run(orchestrator.validate())

    assert report.remote_names == {"Project": {"name": "Name"}, "Task": {"name": "Name"}}
    task = orchestrator.get_model("Task")
    assert task.property_mappings() == {"name": "Name", "done": "Done", "project": "project"}
    assert '@map("Name")' in task.fields[0].attributes

    query = orchestrator.query("Task").where("name", "equals", "Write docs").build_query()
    assert query["filter"] == {"property": "Name", "title": {"equals": "Write docs"}}

    models_source = {f.path: f.content for f in generate_files(orchestrator.schema)}["models.py"]
    namespace = {"__name__": "generated_models"}
    exec(compile(models_source, "models.py", "exec"), namespace)
    page = {
        "id": "page-1",
        "properties": {
            "Name": {"type": "title", "title": [{"plain_text": "Write docs"}]},
            "Done": {"type": "checkbox", "checkbox": True},
        },
    }
    record = namespace["Task"].model_validate(ResultFormatter().format_record(page))
    assert record.name == "Write docs"
    assert record.done is True


def test_unknown_model():
    orchestrator = NotionOrchestrator.from_schema_text(SCHEMA_TEXT)

    with pytest.raises(KeyError, match="Unknown model 'Story'"):
        orchestrator.query("Story")


def test_remote_client_needs_credentials():
    orchestrator = NotionOrchestrator.from_schema_text(SCHEMA_TEXT, config=NotionOrmConfig())

    with pytest.raises(ValueError, match="api_key is required"):
        orchestrator.remote_client


def test_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("NOTION_API_KEY", "env-token")
    monkeypatch.setenv("NOTION_ORM_DEBUG", "true")
    monkeypatch.delenv("NOTION_VERSION", raising=False)

    config = NotionOrmConfig.from_env(str(tmp_path / "missing.env"), max_retries=5)

    assert config.api_key == "env-token"
    assert config.debug is True
    assert config.notion_version == "2022-06-28"
    assert config.max_retries == 5


def test_cli_compile_prints_query(schema_file, capsys, monkeypatch):
    monkeypatch.delenv("NOTION_API_KEY", raising=False)

    exit_code = main(
        [
            "--env-file", str(schema_file.parent / "missing.env"),
            "compile", str(schema_file), "Task",
            "--where", "done", "equals", "true",
            "--order-by", "createdTime:desc",
            "--limit", "5",
        ]
    )

    assert exit_code == 0
    query = json.loads(capsys.readouterr().out)
    assert query == {
        "database_id": "task-db",
        "filter": {"property": "Done", "checkbox": {"equals": True}},
        "sorts": [{"timestamp": "created_time", "direction": "descending"}],
        "page_size": 5,
    }


def test_cli_generate_without_validation(schema_file, tmp_path, capsys):
    out_dir = tmp_path / "client"

    exit_code = main(["generate", str(schema_file), "--no-validate", "--output", str(out_dir)])

    assert exit_code == 0
    assert (out_dir / "client.py").exists()
    assert "Wrote" in capsys.readouterr().out


def test_cli_reports_parse_errors(tmp_path, capsys):
    path = tmp_path / "broken.prisma"
    path.write_text("model Task {\n}\n", encoding="utf-8")

    exit_code = main(["compile", str(path), "Task"])

    assert exit_code == 1
    assert "Invalid model declaration" in capsys.readouterr().err
