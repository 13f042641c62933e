"""
Command Line Interface

CLI for the clinical extraction pipeline.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress

app = typer.Typer(
    name="clinical-extract",
    help="Deterministic extraction from clinical document analyses",
    add_completion=False,
)
console = Console()


def _load_pipeline(config: Optional[Path]):
    from clinical_extract import Pipeline, PipelineConfig
    from clinical_extract.pipeline.config import configure_logging

    if config:
        if not config.exists():
            console.print(f"[red]Error: Config file not found: {config}[/red]")
            raise typer.Exit(1)
        pipeline = Pipeline.from_config(config)
    else:
        pipeline = Pipeline(PipelineConfig())

    configure_logging(pipeline.config.log_level)
    return pipeline


@app.command()
def extract(
    input_file: Path = typer.Argument(..., help="Analysis text file to process"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
    indent: Optional[int] = typer.Option(None, "--indent", help="JSON indent"),
) -> None:
    """Extract fields and structured records from an analysis text file."""
    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    pipeline = _load_pipeline(config)
    text = input_file.read_text(encoding="utf-8")
    result = pipeline.process_text(text)

    json_output = pipeline.to_json(result, indent, raw_text=text)

    if output:
        output.write_text(json_output, encoding="utf-8")
        console.print(f"[green]Output saved to: {output}[/green]")
    else:
        console.print_json(json_output)

    record_count = len(result.structured_data or [])
    console.print(
        f"\n[dim]{result.fields.document_type_label}: {record_count} structured records[/dim]"
    )


@app.command()
def classify(
    text: str = typer.Argument(..., help="Document type string to normalize"),
) -> None:
    """Normalize a document type string to its canonical category."""
    from clinical_extract.extraction.document_types import normalize_document_type

    normalized = normalize_document_type(text)
    console.print(f"{normalized.canonical.value}")
    if not normalized.recognized:
        console.print(f"[yellow]Unrecognized type, label kept as: {normalized.label}[/yellow]")


@app.command()
def batch(
    input_dir: Path = typer.Argument(..., help="Directory containing analysis text files"),
    output_dir: Path = typer.Argument(..., help="Output directory for JSON files"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
    pattern: str = typer.Option("*.txt", "--pattern", "-p", help="File pattern"),
) -> None:
    """Batch process analysis text files to JSON."""
    if not input_dir.exists():
        console.print(f"[red]Error: Directory not found: {input_dir}[/red]")
        raise typer.Exit(1)

    output_dir.mkdir(parents=True, exist_ok=True)

    # Find files
    files = sorted(input_dir.glob(pattern))
    if not files:
        console.print(f"[yellow]No files matching '{pattern}' in {input_dir}[/yellow]")
        raise typer.Exit(0)

    pipeline = _load_pipeline(config)

    console.print(f"Processing {len(files)} files...")

    success_count = 0
    error_count = 0

    with Progress(console=console) as progress:
        task = progress.add_task("Processing...", total=len(files))

        for text_file in files:
            try:
                text = text_file.read_text(encoding="utf-8")
                result = pipeline.process_text(text)
                output_file = output_dir / f"{text_file.stem}.json"
                pipeline.save(result, output_file, raw_text=text)
                success_count += 1
            except (OSError, UnicodeDecodeError) as e:
                console.print(f"[red]Error processing {text_file}: {e}[/red]")
                error_count += 1

            progress.update(task, advance=1)

    console.print(f"\n[green]Processed: {success_count}[/green]")
    if error_count:
        console.print(f"[red]Errors: {error_count}[/red]")


@app.command()
def prompt(
    question: Optional[str] = typer.Option(None, "--question", "-q", help="User question"),
    multi_file: bool = typer.Option(False, "--multi-file", help="Prefix multi-file instructions"),
) -> None:
    """Print the analysis prompt that produces extractable text."""
    from clinical_extract.extraction.prompts import build_analysis_prompt

    typer.echo(build_analysis_prompt(question=question, multi_file=multi_file))


@app.command()
def version() -> None:
    """Show version information."""
    from clinical_extract import __version__

    console.print(f"clinical-extract version {__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
