"""Prompt Stage - Instructions for first-page extraction.

The prompt lists the schema's top-level fields so the model knows what to
look for, and names the kind of report based on the schema name.
"""

from collections.abc import Mapping
from typing import Any

SECTOR_KEYWORD = "sector"

FIRST_PAGE_PROMPT = """\
You are analyzing the first page of a {report_type} report. Extract all information from this image.

Extract the following fields:
{fields_list}

Instructions:
- Extract all text exactly as shown
- For dates, format as YYYY-MM-DD
- For numbers, extract as numeric values
- For arrays (like authors, bulletPoints), extract all items
- If a field is not visible, use an appropriate default value"""


def report_type_label(schema_name: str) -> str:
    """Human-readable report type for a schema name."""
    return "sector" if SECTOR_KEYWORD in schema_name else "stock research"


def synthesize_first_page_prompt(schema: Any, schema_name: str) -> str:
    """Build the first-page extraction prompt.

    Args:
        schema: Object schema whose top-level properties are listed
        schema_name: Schema identifier used to pick the report type

    Returns:
        Prompt text
    """
    properties = schema.get("properties") if isinstance(schema, Mapping) else None
    if not isinstance(properties, Mapping):
        properties = {}

    fields_list = "\n".join(f"- {name}" for name in properties)
    return FIRST_PAGE_PROMPT.format(
        report_type=report_type_label(schema_name),
        fields_list=fields_list,
    )
