"""
Source generation coordinator.

Turns a parsed schema into the generated models module, client module and
package init.
"""

import logging
from pathlib import Path
from typing import List, Optional

from notion_orm.core.models import OutputConfig, Schema
from notion_orm.generator.client_generator import render_client, render_package_init
from notion_orm.generator.model_generator import render_models
from notion_orm.generator.types import GeneratedFile
from notion_orm.generator.writer import write_files
from notion_orm.schema.validator import SchemaValidator

logger = logging.getLogger(__name__)


def generate_files(schema: Schema, output: Optional[OutputConfig] = None) -> List[GeneratedFile]:
    """
    Render every generated file for a schema without touching the filesystem.

    Args:
        schema: Parsed schema
        output: Output settings; falls back to ``schema.output`` then defaults

    Returns:
        Files relative to the output directory

    Raises:
        SchemaValidationError: A model does not have exactly one title field
    """
    output = output or schema.output or OutputConfig()
    for model in schema.models:
        SchemaValidator.check_title_field(model)

    return [
        GeneratedFile(path=output.models_file, content=render_models(schema)),
        GeneratedFile(path=output.client_file, content=render_client(schema, output)),
        GeneratedFile(path="__init__.py", content=render_package_init(output)),
    ]


def generate(schema: Schema, output: Optional[OutputConfig] = None) -> List[Path]:
    """Render and write the generated package; returns the written paths."""
    output = output or schema.output or OutputConfig()
    files = generate_files(schema, output)
    written = write_files(files, Path(output.directory))
    logger.info(f"Generated client for {len(schema.models)} model(s) in {output.directory}")
    return written
