"""Tests for generated model and client sources."""

import pytest

from notion_orm import SchemaValidationError, parse_schema
from notion_orm.core.models import OutputConfig
from notion_orm.generator import generate, generate_files
from notion_orm.generator.client_generator import pluralize, to_snake_case
from notion_orm.generator.model_generator import python_attribute_name


SCHEMA = parse_schema(
    """
    model Project @notionDatabase("proj-db") {
      name String @title @map("Project Name")
      "Due Date" DateTime?
    }

    model TaskItem @notionDatabase("task-db") {
      title    String   @title
      done     Boolean
      tags     String[]
      owner    Json?    @people
      estimate Number?
      project  Project[] @relation("Project")
    }
    """
)


def files_by_path(schema=SCHEMA, output=None):
    return {f.path: f.content for f in generate_files(schema, output)}


def test_generates_three_files():
    assert sorted(files_by_path()) == ["__init__.py", "client.py", "models.py"]


def test_models_module():
    models = files_by_path()["models.py"]

    assert "class Project(BaseModel):" in models
    assert "class TaskItem(BaseModel):" in models
    assert "    name: str = Field(default=\"\", alias='Project Name')" in models
    assert "    Due_Date: Optional[str] = Field(default=None, alias='Due Date')" in models
    assert "    done: bool = Field(default=False, alias='done')" in models
    assert "    tags: List[str] = Field(default_factory=list, alias='tags')" in models
    assert "    owner: List[PersonRef] = Field(default_factory=list, alias='owner')" in models
    assert "    estimate: Optional[float] = Field(default=None, alias='estimate')" in models
    assert "    project: List[RelatedRecord] = Field(default_factory=list, alias='project')" in models
    assert '    created_time: Optional[str] = Field(default=None, alias="createdTime")' in models
    compile(models, "models.py", "exec")


def test_client_module():
    client = files_by_path()["client.py"]

    assert "from .models import Project, TaskItem" in client
    assert "TASK_ITEM_DATABASE_ID = 'task-db'" in client
    assert "    'project': 'proj-db'," in client
    assert "    'done': NotionPropertyType.CHECKBOX," in client
    assert "    def query_task_items(self) -> QueryBuilder[TaskItem]:" in client
    assert "    def query_projects(self) -> QueryBuilder[Project]:" in client
    assert "result_model=TaskItem," in client
    compile(client, "client.py", "exec")


def test_custom_output_file_names():
    output = OutputConfig(directory="out", models_file="records.py", client_file="api_client.py")

    files = files_by_path(output=output)

    assert sorted(files) == ["__init__.py", "api_client.py", "records.py"]
    assert "from .records import Project, TaskItem" in files["api_client.py"]
    assert "from .api_client import NotionOrmClient" in files["__init__.py"]


def test_generate_writes_package(tmp_path):
    out_dir = tmp_path / "generated"

    written = generate(SCHEMA, OutputConfig(directory=str(out_dir)))

    assert sorted(p.name for p in written) == ["__init__.py", "client.py", "models.py"]
    assert (out_dir / "models.py").read_text(encoding="utf-8").startswith('"""Generated by notion-orm')


def test_title_field_is_required():
    schema = parse_schema(
        """
        model Note @notionDatabase("notes") {
          body String
        }
        """
    )

    with pytest.raises(SchemaValidationError, match="exactly one title field"):
        generate_files(schema)


@pytest.mark.parametrize(
    "name, expected",
    [("done", "done"), ("Due Date", "Due_Date"), ("class", "class_"), ("id", "id_"), ("2nd", "field_2nd")],
)
def test_python_attribute_name(name, expected):
    assert python_attribute_name(name) == expected


def test_naming_helpers():
    assert to_snake_case("TaskItem") == "task_item"
    assert to_snake_case("HTTPRequest") == "http_request"
    assert pluralize("task_item") == "task_items"
    assert pluralize("category") == "categories"
    assert pluralize("status") == "status"
