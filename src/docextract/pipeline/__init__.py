"""Pipeline stages for report extraction.

Deterministic Stages (No LLM):
1. stage_schema - Authored JSON Schema to strict structured-output schema
2. stage_prompt - First-page extraction instructions
3. stage_markdown - Extracted report to Markdown
4. stage_artifacts - JSON/Markdown artifacts and Markdown regeneration

Rendering a page to an image and calling the vision model happen outside
these stages; they consume the schema and produce the Report.
"""

from .stage_artifacts import (
    ArtifactPaths,
    artifact_paths,
    dump_report_json,
    is_already_processed,
    load_report,
    parse_statistics,
    regenerate_markdown,
    save_report,
)
from .stage_markdown import (
    assemble_document,
    render_first_page,
    render_inner_blocks,
)
from .stage_prompt import synthesize_first_page_prompt
from .stage_schema import (
    SchemaLoadError,
    build_extraction_schema,
    inner_page_schema,
    load_schema,
    normalize_object_schema,
)

__all__ = [
    # Schema
    "SchemaLoadError",
    "build_extraction_schema",
    "inner_page_schema",
    "load_schema",
    "normalize_object_schema",
    # Prompt
    "synthesize_first_page_prompt",
    # Markdown
    "assemble_document",
    "render_first_page",
    "render_inner_blocks",
    # Artifacts
    "ArtifactPaths",
    "artifact_paths",
    "dump_report_json",
    "is_already_processed",
    "load_report",
    "parse_statistics",
    "regenerate_markdown",
    "save_report",
]
