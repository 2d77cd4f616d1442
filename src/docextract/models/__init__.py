"""IR models for the report extractor.

Pydantic models for the data exchanged with the extraction service and
persisted as the JSON artifact. Extracted records use camelCase JSON keys
and snake_case attributes.

Model Hierarchy:
- Report → FirstPage → Author / SummaryParagraph
- Report → ContentBlock → TableData
- ExtractionSchema (one per run)
- TokenUsage / Pricing (cost statistics)
"""

from .base import (
    BaseReportModel,
    ParagraphStyle,
)
from .report import (
    METADATA_FIELDS,
    Author,
    ContentBlock,
    FirstPage,
    Report,
    SummaryParagraph,
    TableData,
    display_text,
    display_value,
    field_label,
)
from .schema import (
    FIRST_PAGE_RESPONSE_NAME,
    INNER_PAGE_RESPONSE_NAME,
    ExtractionSchema,
    build_response_format,
)
from .usage import (
    Pricing,
    TokenUsage,
    estimate_cost,
)

__all__ = [
    # Base types
    "BaseReportModel",
    "ParagraphStyle",
    # Report
    "METADATA_FIELDS",
    "Author",
    "ContentBlock",
    "FirstPage",
    "Report",
    "SummaryParagraph",
    "TableData",
    "display_text",
    "display_value",
    "field_label",
    # Schema
    "FIRST_PAGE_RESPONSE_NAME",
    "INNER_PAGE_RESPONSE_NAME",
    "ExtractionSchema",
    "build_response_format",
    # Usage
    "Pricing",
    "TokenUsage",
    "estimate_cost",
]
