"""Report Extractor CLI."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from docextract.config import settings
from docextract.models import TokenUsage, estimate_cost
from docextract.pipeline import (
    SchemaLoadError,
    assemble_document,
    load_report,
    load_schema,
    regenerate_markdown,
)

app = typer.Typer(
    name="docextract",
    help="Strict extraction schemas and Markdown rendering for research reports",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, help="Logging level"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_schema_or_exit(schema_file: str, schemas_dir: Optional[str]):
    try:
        return load_schema(schema_file, schemas_dir)
    except SchemaLoadError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def schema(
    schema_file: str = typer.Argument(..., help="Schema file name, e.g. stock_report.json"),
    schemas_dir: Optional[str] = typer.Option(None, help="Directory holding schema files"),
    inner: bool = typer.Option(False, "--inner", help="Show the inner-page schema instead"),
) -> None:
    """Print the strict response format for a schema."""
    extraction_schema = _load_schema_or_exit(schema_file, schemas_dir)
    if inner:
        payload = extraction_schema.inner_page_response_format()
    else:
        payload = extraction_schema.first_page_response_format()
    console.print_json(json.dumps(payload))


@app.command()
def prompt(
    schema_file: str = typer.Argument(..., help="Schema file name, e.g. stock_report.json"),
    schemas_dir: Optional[str] = typer.Option(None, help="Directory holding schema files"),
) -> None:
    """Print the first-page extraction prompt for a schema."""
    extraction_schema = _load_schema_or_exit(schema_file, schemas_dir)
    typer.echo(extraction_schema.first_page_prompt)


@app.command()
def render(
    json_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON artifact"),
    schema_name: str = typer.Option(..., "--schema-name", help="Schema name for the statistics table"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Markdown output path"),
    input_tokens: int = typer.Option(0, min=0, help="Input tokens used"),
    output_tokens: int = typer.Option(0, min=0, help="Output tokens used"),
) -> None:
    """Render a JSON artifact as Markdown."""
    try:
        report = load_report(json_path)
    except ValidationError as exc:
        console.print(f"[bold red]Invalid report {json_path}:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    usage = TokenUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
    )
    markdown = assemble_document(report, schema_name, usage, estimate_cost(usage))

    if output is None:
        typer.echo(markdown)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markdown, encoding="utf-8")
    console.print(f"[green]Markdown saved to:[/green] {output}")


@app.command()
def regenerate(
    schema_file: Optional[str] = typer.Argument(None, help="Schema file name (default from settings)"),
    schemas_dir: Optional[str] = typer.Option(None, help="Directory holding schema files"),
    output_dir: Optional[str] = typer.Option(None, help="Output base directory"),
) -> None:
    """Regenerate Markdown files from existing JSON artifacts."""
    schema_file = schema_file or settings.schema_file
    if not schema_file:
        console.print("[bold red]Schema file is not configured. Set SCHEMA_FILE or pass it.[/bold red]")
        raise typer.Exit(code=1)

    extraction_schema = _load_schema_or_exit(schema_file, schemas_dir)
    console.print("[bold blue]Regenerating markdown files from existing JSON...[/bold blue]")
    regenerated = regenerate_markdown(extraction_schema.name, output_dir)
    console.print(f"[green]Regenerated {len(regenerated)} markdown file(s)[/green]")


if __name__ == "__main__":
    app()
