"""Report IR models: first-page fields and inner-page content blocks."""

import re
from typing import Annotated, Any, Optional, Union

from pydantic import Field

from .base import BaseReportModel, ParagraphStyle

# Metadata fields shown in the first-page table, in display order
METADATA_FIELDS = (
    "report_type",
    "report_date",
    "company_name",
    "sector_name",
    "bloomberg_code",
    "rating",
    "previous_rating",
    "target_price",
    "market_price",
    "upside_downside",
)

PERCENT_FIELDS = frozenset({"upside_downside"})


def field_label(json_name: str) -> str:
    """Turn a camelCase field name into a display label.

    >>> field_label("bloombergCode")
    'Bloomberg Code'
    """
    spaced = re.sub(r"([A-Z])", r" \1", json_name)
    return (spaced[:1].upper() + spaced[1:]).strip()


def display_value(value: Any) -> str:
    """Render a JSON value the way it reads in the source document."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(display_value(v) for v in value)
    return str(value)


def display_text(value: Any) -> str:
    """Like display_value, with None rendered as an empty string."""
    if value is None:
        return ""
    return display_value(value)


class TableData(BaseReportModel):
    """Tabular payload of a table-styled content block."""

    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)


class ContentBlock(BaseReportModel):
    """
    One classified unit of inner-page content.

    Only one of ``text`` and ``table`` is meaningful for a given style:
    table blocks carry ``table``, every other style carries ``text``.
    A style outside the known tag set is kept as a plain string.
    """

    style: Annotated[
        Union[ParagraphStyle, str], Field(union_mode="left_to_right")
    ]
    text: Optional[str] = None
    table: Optional[TableData] = None
    page_number: Optional[int] = Field(None, description="1-indexed source page")

    @property
    def known_style(self) -> Optional[ParagraphStyle]:
        """The style as a ParagraphStyle, or None for out-of-band tags."""
        if isinstance(self.style, ParagraphStyle):
            return self.style
        return None


class Author(BaseReportModel):
    """Report author listed on the first page."""

    name: Any = None
    email: Any = None
    phone: Any = None


class SummaryParagraph(BaseReportModel):
    """Summary entry on the first page."""

    heading: Any = None
    content: Any = None


class FirstPage(BaseReportModel):
    """
    Fields extracted from the first page.

    The set of fields depends on the schema in use. The renderer only reads
    the typed fields below; anything else the schema declares is kept for
    the JSON artifact and otherwise ignored. Values are whatever JSON the
    extraction returned; the renderer formats them for display.
    """

    report_title: Any = None
    title: Any = None
    report_sub_title: Any = None

    # Metadata table
    report_type: Any = None
    report_date: Any = None
    company_name: Any = None
    sector_name: Any = None
    bloomberg_code: Any = None
    rating: Any = None
    previous_rating: Any = None
    target_price: Any = None
    market_price: Any = None
    upside_downside: Any = None

    # Sections
    authors: Optional[list[Author]] = None
    bullet_points: Optional[list[Any]] = None
    summary_paragraphs: Optional[list[SummaryParagraph]] = None

    @property
    def display_title(self) -> str:
        """Title heading text, falling back to a generic label."""
        return display_text(self.report_title or self.title or "Report")

    def metadata_rows(self) -> list[tuple[str, str]]:
        """(label, value) pairs for the metadata fields that are present."""
        rows = []
        for name in METADATA_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            text = display_value(value)
            if name in PERCENT_FIELDS:
                text = f"{text}%"
            rows.append((field_label(type(self).model_fields[name].alias), text))
        return rows


class Report(BaseReportModel):
    """Everything extracted from one source document."""

    first_page: FirstPage = Field(default_factory=FirstPage)
    inner_pages_paragraphs: list[ContentBlock] = Field(default_factory=list)

    @property
    def blocks(self) -> list[ContentBlock]:
        """Inner-page content blocks in reading order."""
        return self.inner_pages_paragraphs

    @property
    def page_count(self) -> int:
        """Highest page number seen, counting the first page."""
        pages = [b.page_number for b in self.blocks if b.page_number is not None]
        return max(pages, default=1)
