"""Base models and common types for the report extractor."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ParagraphStyle(str, Enum):
    """Style tags assigned to inner-page content blocks."""

    PAGE_HEADER = "page header"
    CHAPTER_HEADING = "chapter heading"
    SUBHEADING_1 = "subheading 1"
    SUBHEADING_2 = "subheading 2"
    BODY_TEXT = "body text"
    CALLOUT = "callout"
    EXHIBIT_TITLE = "exhibit title"
    EXHIBIT_SOURCE = "exhibit source"
    BULLET_LEVEL_1 = "bullet level 1"
    BULLET_LEVEL_2 = "bullet level 2"
    BULLET_LEVEL_3 = "bullet level 3"
    PAGE_FOOTER = "page footer"
    FOOTNOTE = "footnote"
    TABLE = "table"


class BaseReportModel(BaseModel):
    """Base class for extracted-report models.

    Fields are exposed in snake_case and serialized with their camelCase
    JSON names, which is the shape the extraction service returns.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_json_dict(self) -> dict:
        """Dump only the keys that were present in the source data."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
