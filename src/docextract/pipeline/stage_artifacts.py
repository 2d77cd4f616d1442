"""Artifacts Stage - Persist reports and regenerate Markdown.

Each processed document gets its own directory under the output base:

    <output_base>/<name>/<name>.json   extracted report (source of truth)
    <output_base>/<name>/<NAME>.md     rendered Markdown

The JSON artifact can be edited by hand and the Markdown regenerated from
it without re-running extraction. Token and cost figures are recovered from
the statistics table of the previous Markdown file when one exists.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from docextract.config import settings
from docextract.models import Report, TokenUsage
from docextract.pipeline.stage_markdown import assemble_document

logger = logging.getLogger(__name__)

# Patterns matching the statistics table written by render_statistics
INPUT_TOKENS_PATTERN = re.compile(r"Input Tokens \| ([\d,]+)")
OUTPUT_TOKENS_PATTERN = re.compile(r"Output Tokens \| ([\d,]+)")
TOTAL_TOKENS_PATTERN = re.compile(r"Total Tokens \| ([\d,]+)")
COST_PATTERN = re.compile(r"Estimated Cost \(USD\)\*\* \| \*\*\$([\d.]+)")


@dataclass
class ArtifactPaths:
    """Locations of the two artifacts for one document."""

    directory: Path
    json_path: Path
    markdown_path: Path


def artifact_paths(output_base: Union[str, Path], document_name: str) -> ArtifactPaths:
    """Artifact locations for a document under the output base."""
    directory = Path(output_base) / document_name
    return ArtifactPaths(
        directory=directory,
        json_path=directory / f"{document_name}.json",
        markdown_path=directory / f"{document_name.upper()}.md",
    )


def is_already_processed(output_base: Union[str, Path], document_name: str) -> bool:
    """Check whether a document already has a Markdown artifact."""
    return artifact_paths(output_base, document_name).markdown_path.exists()


def dump_report_json(report: Report) -> str:
    """Serialize a report as the JSON artifact (2-space indent)."""
    return json.dumps(report.to_json_dict(), indent=2, ensure_ascii=False)


def load_report(json_path: Union[str, Path]) -> Report:
    """Load a report from its JSON artifact.

    Raises:
        FileNotFoundError: If the artifact does not exist
        UnicodeDecodeError: If the artifact is not UTF-8 text
        pydantic.ValidationError: If the JSON is malformed or has the wrong shape
    """
    return Report.model_validate_json(Path(json_path).read_text(encoding="utf-8"))


def _parse_int(pattern: re.Pattern, markdown: str) -> int:
    match = pattern.search(markdown)
    if match is None:
        return 0
    return int(match.group(1).replace(",", ""))


def parse_statistics(markdown: str) -> tuple[TokenUsage, float]:
    """Recover token usage and cost from a rendered statistics table.

    Figures that cannot be found default to zero.
    """
    usage = TokenUsage(
        input_tokens=_parse_int(INPUT_TOKENS_PATTERN, markdown),
        output_tokens=_parse_int(OUTPUT_TOKENS_PATTERN, markdown),
        total_tokens=_parse_int(TOTAL_TOKENS_PATTERN, markdown),
    )

    cost = 0.0
    match = COST_PATTERN.search(markdown)
    if match is not None:
        try:
            cost = float(match.group(1))
        except ValueError:
            logger.debug("Unparseable cost figure %r", match.group(1))
    return usage, cost


def save_report(
    report: Report,
    document_name: str,
    schema_name: str,
    token_usage: TokenUsage,
    estimated_cost: float,
    output_base: Optional[Union[str, Path]] = None,
) -> ArtifactPaths:
    """Write the JSON and Markdown artifacts for a report.

    Args:
        report: Extracted report
        document_name: Source document name without extension
        schema_name: Name of the schema used for extraction
        token_usage: Aggregated token usage
        estimated_cost: Estimated cost in USD
        output_base: Output base directory (default from settings)

    Returns:
        ArtifactPaths of the written files
    """
    paths = artifact_paths(output_base or settings.output_base_directory, document_name)
    paths.directory.mkdir(parents=True, exist_ok=True)

    paths.json_path.write_text(dump_report_json(report), encoding="utf-8")
    logger.info("JSON saved to: %s", paths.json_path)

    markdown = assemble_document(report, schema_name, token_usage, estimated_cost)
    paths.markdown_path.write_text(markdown, encoding="utf-8")
    logger.info(
        "Markdown saved to: %s (%d pages, %d content blocks)",
        paths.markdown_path,
        report.page_count,
        len(report.blocks),
    )
    return paths


def regenerate_markdown(
    schema_name: str,
    output_base: Optional[Union[str, Path]] = None,
) -> list[Path]:
    """Re-render the Markdown artifact of every report under the output base.

    Directories without a JSON artifact are skipped. A JSON artifact that
    cannot be decoded or parsed is logged and skipped. An unreadable
    previous Markdown file leaves the statistics at zero.

    Args:
        schema_name: Schema name shown in the statistics table
        output_base: Output base directory (default from settings)

    Returns:
        Paths of the regenerated Markdown files
    """
    output_base = Path(output_base or settings.output_base_directory)
    if not output_base.is_dir():
        logger.warning("Output directory not found: %s", output_base)
        return []

    regenerated: list[Path] = []
    for directory in sorted(p for p in output_base.iterdir() if p.is_dir()):
        paths = artifact_paths(output_base, directory.name)
        if not paths.json_path.exists():
            continue

        try:
            report = load_report(paths.json_path)
        except (OSError, ValueError) as exc:
            logger.warning("Skipping %s: %s", paths.json_path, exc)
            continue

        token_usage, estimated_cost = TokenUsage(), 0.0
        if paths.markdown_path.exists():
            try:
                previous = paths.markdown_path.read_text(encoding="utf-8")
            except (OSError, ValueError) as exc:
                logger.warning("Statistics not recovered from %s: %s", paths.markdown_path, exc)
            else:
                token_usage, estimated_cost = parse_statistics(previous)

        markdown = assemble_document(report, schema_name, token_usage, estimated_cost)
        paths.markdown_path.write_text(markdown, encoding="utf-8")
        logger.info("Regenerated: %s", paths.markdown_path)
        regenerated.append(paths.markdown_path)

    return regenerated
