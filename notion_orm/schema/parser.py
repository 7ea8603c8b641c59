"""
Schema text parser.

Compiles the model-block schema language into the Schema/Model/Field IR:

    model Task @notionDatabase("db1") {
      name  String  @title
      done  Boolean @checkbox
      owner Json?   @people @map("Assignee")
    }
"""

import logging
import re
from typing import List, Optional

from notion_orm.core.errors import ParseError
from notion_orm.core.models import Field, Model, Schema
from notion_orm.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)


class SchemaParser:
    """
    Line-oriented parser for schema text.

    Pure: no I/O beyond diagnostic logging. Field lines that do not match the
    field grammar are skipped with a warning and collected on
    ``Schema.skipped_lines``. Trailing ``//`` comments are dropped, and text left
    over after a field's attributes is ignored with a warning.
    """

    HEADER_START_RE = re.compile(r"^model\b")
    HEADER_RE = re.compile(
        r'^model\s+(\w+)\s*@notionDatabase\(\s*"([^"]+)"\s*\)\s*(\{)?$'
    )
    # One level of nested parentheses, e.g. @default(now())
    ATTRIBUTE_PATTERN = r'@\w+(?:\((?:[^()"]|"[^"]*"|\([^()]*\))*\))?'
    FIELD_RE = re.compile(
        r'^(?:"([^"]+)"|(\w+))\s+(\w+)(\[\])?(\?)?'
        r"((?:\s+" + ATTRIBUTE_PATTERN + r")*)(.*)$"
    )
    ATTRIBUTE_RE = re.compile(ATTRIBUTE_PATTERN)
    MAP_RE = re.compile(r'^@map\(\s*"([^"]*)"\s*\)$')

    def parse(self, text: str) -> Schema:
        """
        Parse schema text.

        Args:
            text: Raw schema text

        Returns:
            Schema with models in declaration order

        Raises:
            ParseError: On a malformed model header or when no models are found
        """
        models: List[Model] = []
        skipped: List[str] = []
        current: Optional[Model] = None

        for raw_line in text.splitlines():
            line = strip_comment(raw_line).strip()
            if not line:
                continue

            if current is None:
                if self.HEADER_START_RE.match(line):
                    current = self._parse_header(line)
                else:
                    logger.debug(f"Ignoring line outside model block: {line}")
                continue

            if line == "}":
                models.append(current)
                current = None
                continue

            if line == "{":
                continue

            if "@notionDatabase" in line and self.HEADER_START_RE.match(line):
                logger.warning(f"Model {current.name} is missing a closing brace")
                models.append(current)
                current = self._parse_header(line)
                continue

            field = self._parse_field(line, current.name)
            if field is None:
                logger.warning(f"Skipping unparseable field line in model {current.name}: {line}")
                skipped.append(line)
                continue

            logger.debug(f'Field "{field.name}" mapped to "{field.remote_name}"')
            current.fields.append(field)

        if current is not None:
            models.append(current)

        if not models:
            raise ParseError("No valid models found in schema")

        return Schema(models=models, skipped_lines=skipped)

    def _parse_header(self, line: str) -> Model:
        match = self.HEADER_RE.match(line)
        if not match:
            raise ParseError(f"Invalid model declaration: {line}", line=line)
        name, database_id, _ = match.groups()
        return Model(name=name, database_id=database_id)

    def _parse_field(self, line: str, model_name: str) -> Optional[Field]:
        match = self.FIELD_RE.match(line)
        if not match:
            return None

        quoted_name, bare_name, type_token, array_suffix, optional_suffix, attrs, rest = match.groups()
        attributes = self.ATTRIBUTE_RE.findall(attrs or "")
        rest = rest.strip()
        if rest:
            # Text right after the type is not a field line at all
            if not attributes:
                return None
            logger.warning(
                f"Ignoring unrecognized text after field {quoted_name or bare_name} "
                f"in model {model_name}: {rest}"
            )

        mapped_name = None
        for attribute in attributes:
            map_match = self.MAP_RE.match(attribute)
            if map_match:
                mapped_name = map_match.group(1)

        is_array = bool(array_suffix)
        return Field(
            name=quoted_name or bare_name,
            mapped_name=mapped_name,
            declared_type=type_token,
            is_array=is_array,
            resolved_type=TypeMapper.resolve(type_token, attributes, is_array),
            optional=bool(optional_suffix),
            attributes=attributes,
        )


def strip_comment(line: str) -> str:
    """Drop a trailing ``//`` comment, leaving ``//`` inside double quotes alone."""
    in_quotes = False
    for index, char in enumerate(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == "/" and not in_quotes and line.startswith("//", index):
            return line[:index]
    return line


def parse_schema(text: str) -> Schema:
    """Parse schema text with a default SchemaParser."""
    return SchemaParser().parse(text)
