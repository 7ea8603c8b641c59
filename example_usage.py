import asyncio
import json
import os

from dotenv import load_dotenv

from notion_orm import NotionOrchestrator, NotionOrmConfig
from notion_orm.core.logging_config import configure_logging

load_dotenv()

# Replace the database ids with databases shared with your integration
SCHEMA_TEXT = """
model Project @notionDatabase("PROJECTS_DATABASE_ID") {
  name   String   @title @map("Project Name")
  status String   @select
  tags   String[]
}

model Task @notionDatabase("TASKS_DATABASE_ID") {
  name     String    @title
  done     Boolean   @checkbox
  due      DateTime? @map("Due Date")
  assignee Json?     @people
  project  Project[] @relation("Project")
}
"""


async def main():
    configure_logging(debug=os.getenv("NOTION_ORM_DEBUG", "").lower() == "true")
    config = NotionOrmConfig.from_env()
    orchestrator = NotionOrchestrator.from_schema_text(SCHEMA_TEXT, config=config)
    orchestrator.print_model_summary()

    builder = (
        orchestrator.query("Task")
        .where("done", "equals", False)
        .where_relation("project", lambda q: q.where("name", "equals", "Apollo"))
        .include("project")
        .order_by("due")
        .limit(10)
    )
    print("\n=== Compiled query ===")
    print(json.dumps(builder.build_query(), indent=2, ensure_ascii=False))

    if not config.api_key:
        print("\nSet NOTION_API_KEY to run the query against Notion")
        return

    client = orchestrator.remote_client
    try:
        await orchestrator.validate(allow_missing=True)
        tasks = await builder.execute()
    finally:
        await client.aclose()

    print(f"\n=== {len(tasks)} open task(s) ===")
    for task in tasks:
        projects = ", ".join(p.get("Project Name", "") for p in task.get("project") or [])
        print(f"- {task['name']} (due {task.get('Due Date') or 'n/a'}) [{projects}]")


if __name__ == "__main__":
    asyncio.run(main())
