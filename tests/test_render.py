"""Tests for Markdown rendering stage."""

import pytest

from docextract.models import ContentBlock, FirstPage, ParagraphStyle, Report, TokenUsage
from docextract.pipeline.stage_markdown import (
    PAGE_RULE,
    STYLE_RENDERERS,
    assemble_document,
    render_first_page,
    render_inner_blocks,
)


def _block(style, text=None, page=None, table=None):
    data = {"style": style, "text": text, "table": table}
    if page is not None:
        data["pageNumber"] = page
    return data


class TestRenderFirstPage:
    """Tests for first-page rendering."""

    def test_title_and_empty_bullets(self):
        """Empty bullet list omits the Key Highlights section."""
        lines = render_first_page({"title": "X", "bulletPoints": []})

        assert lines == ["# X", ""]

    def test_report_title_preferred(self):
        lines = render_first_page({"reportTitle": "Main", "title": "Other"})

        assert lines[0] == "# Main"

    def test_title_fallback(self):
        assert render_first_page({})[0] == "# Report"

    def test_subtitle(self):
        lines = render_first_page({"title": "T", "reportSubTitle": "Sub"})

        assert lines == ["# T", "", "## Sub", ""]

    def test_metadata_table(self):
        """Allowlisted fields become labelled rows in allowlist order."""
        lines = render_first_page(
            {
                "upsideDownside": -5.5,
                "bloombergCode": "ACME US",
                "reportType": "Initiation",
                "previousRating": None,
                "unlistedField": "skip me",
            }
        )

        assert lines[2:] == [
            "| Field | Value |",
            "|-------|-------|",
            "| Report Type | Initiation |",
            "| Bloomberg Code | ACME US |",
            "| Upside Downside | -5.5% |",
            "",
        ]

    def test_metadata_values(self):
        """Whole floats print without a decimal part."""
        lines = render_first_page({"targetPrice": 42.0, "marketPrice": 35.25, "rating": "BUY"})

        assert "| Target Price | 42 |" in lines
        assert "| Market Price | 35.25 |" in lines
        assert "| Rating | BUY |" in lines

    def test_no_metadata_table(self):
        """Table is omitted when no allowlisted field is present."""
        lines = render_first_page({"title": "T", "somethingElse": 1})

        assert "| Field | Value |" not in lines

    def test_authors(self):
        lines = render_first_page(
            {
                "authors": [
                    {"name": "Jane", "email": "jane@example.com", "phone": ""},
                    {"name": "Bob", "email": "", "phone": "+1 555"},
                ]
            }
        )

        assert lines[2:] == [
            "## Authors",
            "",
            "- **Jane**",
            "  - Email: jane@example.com",
            "- **Bob**",
            "  - Phone: +1 555",
            "",
        ]

    def test_key_highlights(self):
        lines = render_first_page({"bulletPoints": ["One", "Two"]})

        assert lines[2:] == ["## Key Highlights", "", "- One", "- Two", ""]

    def test_summary(self):
        """Summary headings are rendered only when non-empty."""
        lines = render_first_page(
            {
                "summaryParagraphs": [
                    {"heading": "Outlook", "content": "Good."},
                    {"heading": "", "content": "Plain."},
                ]
            }
        )

        assert lines[2:] == ["## Summary", "", "### Outlook", "", "Good.", "", "Plain.", ""]

    def test_non_string_values(self):
        """Numbers and booleans in text fields are rendered, not rejected."""
        lines = render_first_page({"title": 2024, "bulletPoints": [1.5, "x"]})

        assert lines == ["# 2024", "", "## Key Highlights", "", "- 1.5", "- x", ""]

    def test_non_string_author_and_summary(self):
        lines = render_first_page(
            {
                "reportSubTitle": 3.0,
                "authors": [{"name": "Jane", "phone": 5551234}],
                "summaryParagraphs": [{"heading": 1, "content": True}],
            }
        )

        assert lines[2:] == [
            "## 3",
            "",
            "## Authors",
            "",
            "- **Jane**",
            "  - Phone: 5551234",
            "",
            "## Summary",
            "",
            "### 1",
            "",
            "true",
            "",
        ]

    def test_accepts_model(self):
        first_page = FirstPage(report_title="Model Title")

        assert render_first_page(first_page)[0] == "# Model Title"


class TestRenderInnerBlocks:
    """Tests for inner-page rendering."""

    def test_heading_and_bullet_scenario(self):
        """One page marker, then the heading and the bullet."""
        lines = render_inner_blocks(
            [
                _block("chapter heading", "Intro", page=2),
                _block("bullet level 1", "A", page=2),
            ]
        )

        assert lines == ["", "Page 2", PAGE_RULE, "", "## Intro", "", "- A"]

    @pytest.mark.parametrize(
        "style,expected",
        [
            ("chapter heading", ["## T", ""]),
            ("subheading 1", ["### T", ""]),
            ("subheading 2", ["#### T", ""]),
            ("body text", ["T", ""]),
            ("callout", ["> **T**", ""]),
            ("exhibit title", ["**T**", ""]),
            ("exhibit source", ["*T*", ""]),
            ("bullet level 1", ["- T"]),
            ("bullet level 2", ["  - T"]),
            ("bullet level 3", ["    - T"]),
            ("footnote", ["<sup>T</sup>", ""]),
            ("page header", []),
            ("page footer", []),
        ],
    )
    def test_style_rendering(self, style, expected):
        assert render_inner_blocks([_block(style, "T")]) == expected

    def test_every_style_has_renderer(self):
        """Dispatch table covers the whole style set."""
        assert set(STYLE_RENDERERS) == set(ParagraphStyle)

    def test_unknown_style_fallback(self):
        """Unrecognized styles render their text as a paragraph."""
        assert render_inner_blocks([_block("sidebar", "Note")]) == ["Note", ""]
        assert render_inner_blocks([_block("sidebar")]) == []

    def test_table(self):
        """Separator has one marker per header; ragged rows pass through."""
        table = {"headers": ["A", "B", "C"], "rows": [["1", "2", "3"], ["4"], ["5", "6", "7", "8"]]}

        lines = render_inner_blocks([_block("table", table=table)])

        assert lines == [
            "| A | B | C |",
            "| --- | --- | --- |",
            "| 1 | 2 | 3 |",
            "| 4 |",
            "| 5 | 6 | 7 | 8 |",
            "",
        ]
        assert lines[1].count("---") == 3

    def test_table_without_headers(self):
        table = {"headers": [], "rows": [["1"]]}

        assert render_inner_blocks([_block("table", table=table)]) == []

    def test_table_without_payload(self):
        assert render_inner_blocks([_block("table")]) == []

    def test_page_marker_count(self):
        """One marker per maximal run of equal page numbers."""
        blocks = [
            _block("body text", "a", page=2),
            _block("body text", "b", page=2),
            _block("body text", "c"),
            _block("body text", "d", page=3),
            _block("body text", "e", page=2),
            _block("body text", "f", page=2),
        ]

        lines = render_inner_blocks(blocks)

        assert lines.count(PAGE_RULE) == 3
        assert [line for line in lines if line.startswith("Page ")] == ["Page 2", "Page 3", "Page 2"]

    def test_no_page_numbers(self):
        """Blocks without page numbers never start a page."""
        lines = render_inner_blocks([_block("body text", "a"), _block("body text", "b")])

        assert PAGE_RULE not in lines

    def test_skipped_block_still_starts_page(self):
        """A page header on a new page emits the marker but no content."""
        lines = render_inner_blocks([_block("page header", "Header", page=4)])

        assert lines == ["", "Page 4", PAGE_RULE, ""]

    def test_accepts_models(self):
        block = ContentBlock(style=ParagraphStyle.CALLOUT, text="Buy", page_number=5)

        assert render_inner_blocks([block])[-2:] == ["> **Buy**", ""]


class TestAssembleDocument:
    """Tests for full document assembly."""

    def test_statistics_header(self, report_data):
        report = Report.model_validate(report_data)
        usage = TokenUsage(input_tokens=1234567, output_tokens=8901, total_tokens=1243468)

        markdown = assemble_document(report, "stock_report", usage, 2.540346)
        lines = markdown.split("\n")

        assert lines[:15] == [
            "## 📊 Processing Statistics",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            "| Schema | stock_report |",
            "| Input Tokens | 1,234,567 |",
            "| Output Tokens | 8,901 |",
            "| Total Tokens | 1,243,468 |",
            "| **Estimated Cost (USD)** | **$2.5403** |",
            "",
            "---",
            "",
            "Page 1",
            PAGE_RULE,
            "",
        ]
        assert lines[15] == "# Acme Corp Initiation"

    def test_order_of_sections(self, report_data):
        report = Report.model_validate(report_data)

        markdown = assemble_document(report, "stock_report", TokenUsage(), 0.0)

        positions = [
            markdown.index(marker)
            for marker in ("Page 1", "# Acme Corp Initiation", "## Summary", "Page 2", "## Introduction", "Page 3", "| Year | EPS |")
        ]
        assert positions == sorted(positions)
        assert "ignored by the renderer" not in markdown
        assert "| Upside Downside | 18% |" in markdown

    def test_deterministic(self, report_data):
        report = Report.model_validate(report_data)

        first = assemble_document(report, "s", TokenUsage(), 0.0)
        second = assemble_document(report, "s", TokenUsage(), 0.0)

        assert first == second
