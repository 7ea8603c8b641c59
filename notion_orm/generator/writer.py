"""File writer for code generation."""
import logging
from pathlib import Path
from typing import List

from notion_orm.generator.types import GeneratedFile

logger = logging.getLogger(__name__)


def write_files(files: List[GeneratedFile], out_dir: Path) -> List[Path]:
    """
    Write generated files to the output directory.

    Args:
        files: List of GeneratedFile objects to write
        out_dir: Base output directory path

    Returns:
        Paths of the written files
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for file in files:
        file_path = out_dir / file.path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(file.content, encoding="utf-8")
        logger.info(f"Generated {file_path}")
        written.append(file_path)
    return written
