"""Markdown Stage - Render an extracted report as a Markdown document.

Output layout:
1. Processing statistics table (schema, tokens, estimated cost)
2. First page: title, subtitle, metadata table, authors, highlights, summary
3. Inner pages: content blocks in reading order, with a marker each time
   the source page changes

Rendering is deterministic: the same report always produces the same text.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Union

from docextract.models import (
    ContentBlock,
    FirstPage,
    ParagraphStyle,
    Report,
    TableData,
    TokenUsage,
    display_text,
)

logger = logging.getLogger(__name__)

PAGE_RULE = "-" * 41

BlockRenderer = Callable[[ContentBlock], list[str]]


def page_marker(page_number: int) -> list[str]:
    """Divider lines introducing a new source page."""
    return ["", f"Page {page_number}", PAGE_RULE, ""]


def render_table(table: TableData) -> list[str]:
    """Render a table as a Markdown pipe table.

    Rows are written with their own cell counts, so ragged rows pass
    through unchanged. A table without headers renders nothing.
    """
    if not table.headers:
        return []

    lines = [
        "| " + " | ".join(table.headers) + " |",
        "| " + " | ".join(["---"] * len(table.headers)) + " |",
    ]
    for row in table.rows:
        lines.append("| " + " | ".join(row) + " |")
    lines.append("")
    return lines


def render_first_page(first_page: Union[FirstPage, Mapping[str, Any]]) -> list[str]:
    """Render the first-page fields.

    Every section is optional; a missing or empty field omits its section.

    Args:
        first_page: Extracted first-page fields

    Returns:
        Markdown lines
    """
    if not isinstance(first_page, FirstPage):
        first_page = FirstPage.model_validate(first_page)

    lines = [f"# {first_page.display_title}", ""]

    if first_page.report_sub_title:
        lines.extend([f"## {display_text(first_page.report_sub_title)}", ""])

    metadata = first_page.metadata_rows()
    if metadata:
        lines.append("| Field | Value |")
        lines.append("|-------|-------|")
        for label, value in metadata:
            lines.append(f"| {label} | {value} |")
        lines.append("")

    if first_page.authors:
        lines.extend(["## Authors", ""])
        for author in first_page.authors:
            lines.append(f"- **{display_text(author.name)}**")
            if author.email:
                lines.append(f"  - Email: {display_text(author.email)}")
            if author.phone:
                lines.append(f"  - Phone: {display_text(author.phone)}")
        lines.append("")

    if first_page.bullet_points:
        lines.extend(["## Key Highlights", ""])
        lines.extend(f"- {display_text(point)}" for point in first_page.bullet_points)
        lines.append("")

    if first_page.summary_paragraphs:
        lines.extend(["## Summary", ""])
        for paragraph in first_page.summary_paragraphs:
            if paragraph.heading:
                lines.extend([f"### {display_text(paragraph.heading)}", ""])
            lines.extend([display_text(paragraph.content), ""])

    return lines


def _skip(block: ContentBlock) -> list[str]:
    return []


def _wrap(prefix: str, suffix: str = "", blank: bool = True) -> BlockRenderer:
    def render(block: ContentBlock) -> list[str]:
        line = f"{prefix}{block.text or ''}{suffix}"
        return [line, ""] if blank else [line]

    return render


def _table(block: ContentBlock) -> list[str]:
    if block.table is None:
        return []
    return render_table(block.table)


STYLE_RENDERERS: dict[ParagraphStyle, BlockRenderer] = {
    ParagraphStyle.PAGE_HEADER: _skip,
    ParagraphStyle.CHAPTER_HEADING: _wrap("## "),
    ParagraphStyle.SUBHEADING_1: _wrap("### "),
    ParagraphStyle.SUBHEADING_2: _wrap("#### "),
    ParagraphStyle.BODY_TEXT: _wrap(""),
    ParagraphStyle.CALLOUT: _wrap("> **", "**"),
    ParagraphStyle.EXHIBIT_TITLE: _wrap("**", "**"),
    ParagraphStyle.EXHIBIT_SOURCE: _wrap("*", "*"),
    ParagraphStyle.BULLET_LEVEL_1: _wrap("- ", blank=False),
    ParagraphStyle.BULLET_LEVEL_2: _wrap("  - ", blank=False),
    ParagraphStyle.BULLET_LEVEL_3: _wrap("    - ", blank=False),
    ParagraphStyle.PAGE_FOOTER: _skip,
    ParagraphStyle.FOOTNOTE: _wrap("<sup>", "</sup>"),
    ParagraphStyle.TABLE: _table,
}


def render_block(block: ContentBlock) -> list[str]:
    """Render a single content block according to its style."""
    style = block.known_style
    if style is None:
        # Unknown tag: keep the text as a plain paragraph
        logger.debug("Unrecognized block style %r", block.style)
        return [block.text, ""] if block.text else []
    return STYLE_RENDERERS[style](block)


def render_inner_blocks(
    blocks: Iterable[Union[ContentBlock, Mapping[str, Any]]],
) -> list[str]:
    """Render inner-page content blocks in order.

    A page marker is emitted whenever a block carries a page number that
    differs from the previous one. Blocks without a page number never
    start a new page.

    Args:
        blocks: Content blocks in reading order

    Returns:
        Markdown lines
    """
    lines: list[str] = []
    current_page = None

    for block in blocks:
        if not isinstance(block, ContentBlock):
            block = ContentBlock.model_validate(block)

        if block.page_number is not None and block.page_number != current_page:
            current_page = block.page_number
            lines.extend(page_marker(current_page))

        lines.extend(render_block(block))

    return lines


def render_statistics(
    schema_name: str,
    token_usage: TokenUsage,
    estimated_cost: float,
) -> list[str]:
    """Render the processing statistics table."""
    return [
        "## 📊 Processing Statistics",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Schema | {schema_name} |",
        f"| Input Tokens | {token_usage.input_tokens:,} |",
        f"| Output Tokens | {token_usage.output_tokens:,} |",
        f"| Total Tokens | {token_usage.total_tokens:,} |",
        f"| **Estimated Cost (USD)** | **${estimated_cost:.4f}** |",
        "",
        "---",
        "",
    ]


def assemble_document(
    report: Report,
    schema_name: str,
    token_usage: TokenUsage,
    estimated_cost: float,
) -> str:
    """Assemble the complete Markdown document for a report.

    Args:
        report: Extracted report
        schema_name: Name of the schema used for extraction
        token_usage: Aggregated token usage of the run
        estimated_cost: Estimated cost in USD

    Returns:
        Markdown text
    """
    lines = render_statistics(schema_name, token_usage, estimated_cost)
    lines.extend(["Page 1", PAGE_RULE, ""])
    lines.extend(render_first_page(report.first_page))
    lines.extend(render_inner_blocks(report.blocks))
    return "\n".join(lines)
