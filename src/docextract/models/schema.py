"""Extraction schema model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

FIRST_PAGE_RESPONSE_NAME = "first_page_response"
INNER_PAGE_RESPONSE_NAME = "inner_page_response"


def build_response_format(name: str, schema: dict[str, Any]) -> dict[str, Any]:
    """Wrap a strict schema in a structured-output response format payload."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": name,
            "strict": True,
            "schema": schema,
        },
    }


class ExtractionSchema(BaseModel):
    """
    Schema governing one extraction run.

    Built once from a schema document and not modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Schema identifier, e.g. 'stock_report'")
    first_page_schema: dict[str, Any] = Field(
        ..., description="Normalized strict schema for the first page"
    )
    inner_page_schema: dict[str, Any] = Field(
        ..., description="Fixed strict schema for inner pages"
    )
    first_page_prompt: str = Field(..., description="Instructions for first-page extraction")

    @property
    def field_names(self) -> list[str]:
        """Top-level first-page field names in declaration order."""
        return list(self.first_page_schema.get("properties", {}))

    def first_page_response_format(self) -> dict[str, Any]:
        """Response format payload for first-page extraction."""
        return build_response_format(FIRST_PAGE_RESPONSE_NAME, self.first_page_schema)

    def inner_page_response_format(self) -> dict[str, Any]:
        """Response format payload for inner-page extraction."""
        return build_response_format(INNER_PAGE_RESPONSE_NAME, self.inner_page_schema)
