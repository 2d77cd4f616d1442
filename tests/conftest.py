"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture
def stock_schema_document():
    """Schema document in the authored (non-strict) form."""
    return {
        "type": "object",
        "properties": {
            "firstPage": {
                "type": "object",
                "properties": {
                    "reportTitle": {"type": "string"},
                    "reportDate": {"type": "string", "format": "date"},
                    "targetPrice": {"type": "number"},
                    "authors": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "name": {"type": "string"},
                                "email": {"type": "string", "format": "email"},
                                "phone": {"type": "string"},
                            },
                        },
                    },
                    "bulletPoints": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["reportTitle"],
            },
            "innerPagesParagraphs": {"type": "array"},
        },
    }


@pytest.fixture
def schemas_dir(tmp_path, stock_schema_document):
    """Directory with a stock and a sector schema file."""
    directory = tmp_path / "schemas"
    directory.mkdir()
    (directory / "stock_report.json").write_text(json.dumps(stock_schema_document))
    (directory / "sector_report.json").write_text(json.dumps(stock_schema_document))
    return directory


@pytest.fixture
def report_data():
    """Report as persisted in the JSON artifact."""
    return {
        "firstPage": {
            "reportTitle": "Acme Corp Initiation",
            "reportSubTitle": "Strong growth ahead",
            "companyName": "Acme Corp",
            "rating": "BUY",
            "targetPrice": 42.5,
            "upsideDownside": 18,
            "analystNote": "ignored by the renderer",
            "authors": [
                {"name": "Jane Doe", "email": "jane@example.com", "phone": ""},
            ],
            "bulletPoints": ["Revenue up 20%", "Margins expanding"],
            "summaryParagraphs": [
                {"heading": "Outlook", "content": "Positive."},
                {"heading": "", "content": "No heading here."},
            ],
        },
        "innerPagesParagraphs": [
            {"style": "chapter heading", "text": "Introduction", "table": None, "pageNumber": 2},
            {"style": "body text", "text": "Ünïcode body.", "table": None, "pageNumber": 2},
            {
                "style": "table",
                "text": None,
                "table": {"headers": ["Year", "EPS"], "rows": [["2024", "1.2"]]},
                "pageNumber": 3,
            },
        ],
    }


@pytest.fixture
def output_dir(tmp_path):
    """Create a temporary output directory."""
    out_dir = tmp_path / "extraction"
    out_dir.mkdir()
    return out_dir
