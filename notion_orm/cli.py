"""CLI: validate schemas, generate clients, introspect databases, compile queries."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from notion_orm.config import NotionOrmConfig
from notion_orm.core.errors import NotionOrmError
from notion_orm.core.logging_config import configure_logging
from notion_orm.core.models import OutputConfig
from notion_orm.orchestrator import NotionOrchestrator, introspect
from notion_orm.schema.emitter import SchemaEmitter

logger = logging.getLogger(__name__)


def _parse_value(raw: str) -> Any:
    """Interpret a CLI value as JSON when possible (true, 3, "x"), else as a plain string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


async def _validate(args: argparse.Namespace, config: NotionOrmConfig) -> int:
    orchestrator = NotionOrchestrator.from_schema_file(args.schema, config=config)
    client = orchestrator.remote_client
    try:
        report = await orchestrator.validate(allow_missing=args.allow_missing)
    finally:
        await client.aclose()
    print(f"Validated {len(report.validated_models)} model(s): {', '.join(report.validated_models)}")
    for model_name, missing in report.missing_fields.items():
        print(f"  {model_name}: missing {', '.join(missing)}")
    return 0


async def _generate(args: argparse.Namespace, config: NotionOrmConfig) -> int:
    orchestrator = NotionOrchestrator.from_schema_file(args.schema, config=config)
    if not args.no_validate:
        client = orchestrator.remote_client
        try:
            await orchestrator.validate(allow_missing=args.allow_missing)
        finally:
            await client.aclose()

    output = OutputConfig(directory=args.output) if args.output else None
    for path in orchestrator.generate(output):
        print(f"Wrote {path}")
    return 0


async def _introspect(args: argparse.Namespace, config: NotionOrmConfig) -> int:
    from notion_orm.adapters.notion import NotionRemoteClient

    async with NotionRemoteClient(config) as client:
        database_ids: List[str] = args.database_ids
        if not database_ids:
            databases = await client.search_databases()
            database_ids = [db["id"] for db in databases]
            logger.info(f"Found {len(database_ids)} shared database(s)")
        schema = await introspect(client, database_ids)

    text = SchemaEmitter().emit(schema)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Saved to: {args.output}")
    else:
        print(text)
    return 0


def _compile(args: argparse.Namespace, config: NotionOrmConfig) -> int:
    orchestrator = NotionOrchestrator.from_schema_file(args.schema, config=config)
    builder = orchestrator.query(args.model)
    for field, operator, value in args.where or []:
        builder.where(field, operator, _parse_value(value))
    for sort in args.order_by or []:
        field, _, direction = sort.partition(":")
        builder.order_by(field, "descending" if direction.lower() in ("desc", "descending") else "ascending")
    if args.limit:
        builder.limit(args.limit)
    if args.after:
        builder.after(args.after)
    print(json.dumps(builder.build_query(), indent=2, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notion-orm", description="Schema-driven Notion client tooling")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--env-file", help="Path to a .env file with NOTION_API_KEY")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Check a schema against the live databases")
    validate.add_argument("schema", help="Path to the schema file")
    validate.add_argument("--allow-missing", action="store_true", help="Only warn about absent properties")

    generate = sub.add_parser("generate", help="Generate pydantic models and a typed client")
    generate.add_argument("schema", help="Path to the schema file")
    generate.add_argument("--output", "-o", help="Output directory (default ./generated)")
    generate.add_argument("--no-validate", action="store_true", help="Skip remote validation")
    generate.add_argument("--allow-missing", action="store_true", help="Only warn about absent properties")

    inspect = sub.add_parser("introspect", help="Write schema text mirroring live databases")
    inspect.add_argument("database_ids", nargs="*", help="Database ids (default: every shared database)")
    inspect.add_argument("--output", "-o", help="Schema file to write")

    compile_ = sub.add_parser("compile", help="Print the query JSON for a model without running it")
    compile_.add_argument("schema", help="Path to the schema file")
    compile_.add_argument("model", help="Model name")
    compile_.add_argument("--where", nargs=3, action="append", metavar=("FIELD", "OPERATOR", "VALUE"))
    compile_.add_argument("--order-by", action="append", metavar="FIELD[:desc]")
    compile_.add_argument("--limit", type=int)
    compile_.add_argument("--after", help="Start cursor")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(debug=args.verbose)
    config = NotionOrmConfig.from_env(args.env_file, debug=args.verbose or None)

    try:
        if args.command == "compile":
            return _compile(args, config)
        handlers = {"validate": _validate, "generate": _generate, "introspect": _introspect}
        return asyncio.run(handlers[args.command](args, config))
    except (NotionOrmError, ValueError, KeyError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
