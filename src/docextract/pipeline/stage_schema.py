"""Schema Stage - Compile authored JSON Schemas into strict schemas.

Structured-output APIs in strict mode require every object to list all of
its properties as required and to forbid additional properties, and they
reject the ``format`` keyword. Authored schemas rarely satisfy that, so the
first-page schema is rewritten here. The inner-page schema is fixed and
does not depend on the schema document.
"""

import copy
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from docextract.config import settings
from docextract.models import ExtractionSchema, ParagraphStyle
from docextract.pipeline.stage_prompt import synthesize_first_page_prompt

logger = logging.getLogger(__name__)

# Keys of the schema document holding the two page schemas
FIRST_PAGE_KEY = "firstPage"
INNER_PAGES_KEY = "innerPagesParagraphs"

# Keywords strict mode does not accept
UNSUPPORTED_KEYWORDS = ("format",)

_INNER_PAGE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "paragraphs": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "style": {
                        "type": "string",
                        "enum": [style.value for style in ParagraphStyle],
                    },
                    "text": {
                        "type": ["string", "null"],
                    },
                    "table": {
                        "type": ["object", "null"],
                        "properties": {
                            "headers": {
                                "type": "array",
                                "items": {"type": "string"},
                            },
                            "rows": {
                                "type": "array",
                                "items": {
                                    "type": "array",
                                    "items": {"type": "string"},
                                },
                            },
                        },
                        "required": ["headers", "rows"],
                        "additionalProperties": False,
                    },
                },
                "required": ["style", "text", "table"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["paragraphs"],
    "additionalProperties": False,
}


class SchemaLoadError(ValueError):
    """Raised when a schema document cannot be read or parsed."""

    def __init__(self, schema_file: Union[str, Path], reason: str):
        self.schema_file = str(schema_file)
        self.reason = reason
        super().__init__(f"Failed to load schema from {self.schema_file}: {reason}")


def _strip_leaf(node: Mapping) -> dict[str, Any]:
    """Shallow-copy a node without unsupported keywords."""
    clean = dict(node)
    for keyword in UNSUPPORTED_KEYWORDS:
        clean.pop(keyword, None)
    return clean


def _has_properties(node: Mapping) -> bool:
    return isinstance(node.get("properties"), Mapping)


def _strict_object(properties: Any) -> dict[str, Any]:
    """Build a strict object node from a properties mapping.

    Every declared property becomes required, in declaration order.
    """
    if not isinstance(properties, Mapping):
        properties = {}

    strict_properties: dict[str, Any] = {}
    for name, node in properties.items():
        strict_properties[name] = _normalize_property(node)

    return {
        "type": "object",
        "properties": strict_properties,
        "required": list(strict_properties),
        "additionalProperties": False,
    }


def _normalize_property(node: Any) -> dict[str, Any]:
    """Normalize a single property node."""
    if not isinstance(node, Mapping):
        return {}

    node_type = node.get("type")
    if node_type == "array":
        items = node.get("items")
        if isinstance(items, Mapping) and items.get("type") == "object" and _has_properties(items):
            return {
                "type": "array",
                "items": _strict_object(items["properties"]),
            }
        array = _strip_leaf(node)
        if isinstance(items, Mapping):
            array["items"] = _normalize_property(items)
        return array

    if node_type == "object" and _has_properties(node):
        return _strict_object(node["properties"])

    return _strip_leaf(node)


def normalize_object_schema(raw: Any) -> dict[str, Any]:
    """Compile an authored object schema into a strict schema.

    Args:
        raw: Object schema node; anything without a ``properties`` mapping
            yields an empty strict object.

    Returns:
        Strict schema with ``additionalProperties: false`` and all declared
        properties required at every object level, and no ``format`` keys.
    """
    properties = raw.get("properties") if isinstance(raw, Mapping) else None
    if properties is None:
        logger.debug("Schema has no properties; using empty strict object")
    return _strict_object(properties)


def inner_page_schema() -> dict[str, Any]:
    """Fixed strict schema for inner-page content blocks."""
    return copy.deepcopy(_INNER_PAGE_SCHEMA)


def build_extraction_schema(name: str, document: Any) -> ExtractionSchema:
    """Build the extraction schema for a parsed schema document.

    Args:
        name: Schema identifier (file stem)
        document: Parsed schema document with ``properties.firstPage``

    Returns:
        ExtractionSchema with strict first-page and inner-page schemas
    """
    properties = document.get("properties") if isinstance(document, Mapping) else None
    if not isinstance(properties, Mapping):
        properties = {}

    if INNER_PAGES_KEY in properties:
        logger.debug(
            "Schema %s declares %s; the fixed inner-page schema is used instead",
            name,
            INNER_PAGES_KEY,
        )

    first_page_schema = normalize_object_schema(properties.get(FIRST_PAGE_KEY, {}))
    return ExtractionSchema(
        name=name,
        first_page_schema=first_page_schema,
        inner_page_schema=inner_page_schema(),
        first_page_prompt=synthesize_first_page_prompt(first_page_schema, name),
    )


def load_schema(
    schema_file: Union[str, Path],
    schemas_dir: Optional[Union[str, Path]] = None,
) -> ExtractionSchema:
    """Load a schema document from the schemas directory.

    Args:
        schema_file: File name, e.g. ``stock_report.json``
        schemas_dir: Directory holding schema files (default from settings)

    Returns:
        ExtractionSchema named after the file stem

    Raises:
        SchemaLoadError: If the file cannot be read or is not valid JSON
    """
    schemas_dir = Path(schemas_dir or settings.schemas_directory)
    schema_path = schemas_dir / schema_file

    try:
        document = json.loads(schema_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SchemaLoadError(schema_file, str(exc)) from exc

    schema = build_extraction_schema(schema_path.stem, document)
    logger.info("Schema loaded: %s (%d fields)", schema.name, len(schema.field_names))
    return schema
