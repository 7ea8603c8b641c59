"""Generated-source emitters."""

from notion_orm.generator.generator import generate, generate_files
from notion_orm.generator.types import GeneratedFile

__all__ = ["generate", "generate_files", "GeneratedFile"]
