"""Tests for schema emission and introspection of live databases."""

import asyncio
import logging

from notion_orm import NotionPropertyType, introspect, parse_schema
from notion_orm.core.models import RemoteDatabaseDescriptor, RemoteProperty
from notion_orm.schema import SchemaEmitter
from notion_orm.schema.emitter import model_name_from_title


SCHEMA_TEXT = """
model Project @notionDatabase("proj-db") {
  name String @title @map("Project Name")
  "Due Date" DateTime?
  tags String[]
  owner Json? @people
  tasks Task[] @relation("task-db")
  budget Number?
}
"""


def field_summary(schema):
    return [
        (m.name, m.database_id, [(f.name, f.remote_name, f.resolved_type, f.optional) for f in m.fields])
        for m in schema.models
    ]


def test_emitted_text_reparses_to_same_models():
    schema = parse_schema(SCHEMA_TEXT)

    text = SchemaEmitter().emit(schema)

    assert '  "Due Date" DateTime?' in text
    assert '  name String @title @map("Project Name")' in text
    assert field_summary(parse_schema(text)) == field_summary(schema)


def remote_descriptor():
    properties = {
        "Name": "title",
        "Due Date": "date",
        "Done": "checkbox",
        "Tags": "multi_select",
        "Owner": "people",
        "Tasks": "relation",
        "Budget": "number",
        "Roll up": "rollup",
    }
    return RemoteDatabaseDescriptor(
        id="proj-db",
        title="Team Projects",
        properties={name: RemoteProperty(name=name, type=tag) for name, tag in properties.items()},
    )


def test_model_from_descriptor(caplog):
    with caplog.at_level(logging.WARNING):
        model = SchemaEmitter().model_from_descriptor(remote_descriptor(), "Project")

    types = {f.remote_name: f.resolved_type for f in model.fields}
    assert types == {
        "Name": NotionPropertyType.TITLE,
        "Due Date": NotionPropertyType.DATE,
        "Done": NotionPropertyType.CHECKBOX,
        "Tags": NotionPropertyType.MULTI_SELECT,
        "Owner": NotionPropertyType.PEOPLE,
        "Tasks": NotionPropertyType.RELATION,
        "Budget": NotionPropertyType.NUMBER,
    }
    due = model.get_field("dueDate")
    assert due.mapped_name == "Due Date"
    assert '@map("Due Date")' in due.attributes
    assert model.get_field("Name").optional is False
    assert model.get_field("Done").optional is True
    assert "Skipping property 'Roll up' of type rollup" in caplog.text


class DescriptorClient:
    def __init__(self, descriptors):
        self.descriptors = descriptors

    async def retrieve_database(self, database_id):
        return self.descriptors[database_id]


def test_introspect_builds_parseable_schema():
    client = DescriptorClient({"proj-db": remote_descriptor()})

    schema = asyncio.run(introspect(client, ["proj-db"]))
    text = SchemaEmitter().emit(schema)

    assert text.startswith('model TeamProjects @notionDatabase("proj-db") {')
    reparsed = parse_schema(text)
    assert field_summary(reparsed) == field_summary(schema)


def test_introspect_model_name_override():
    client = DescriptorClient({"proj-db": remote_descriptor()})

    schema = asyncio.run(introspect(client, ["proj-db"], model_names={"proj-db": "Project"}))

    assert schema.models[0].name == "Project"


def test_model_name_from_title():
    assert model_name_from_title("team projects") == "TeamProjects"
    assert model_name_from_title("2024 plans", "Model1") == "Model1"
    assert model_name_from_title("", "Model2") == "Model2"
