"""CLI entry point (Typer).

`fetch` prints the redacted document to stdout. Every diagnostic goes to
stderr as `Error: <message> at <file>:<line>` lines, and any failure exits
with status 1.
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from meteofetch.adapters.json_exporter import export_document_json
from meteofetch.cli import doctor
from meteofetch.cli.ui_components import build_request_table
from meteofetch.core.config import AppSettings
from meteofetch.core.errors import WeatherError
from meteofetch.core.log import configure_logging
from meteofetch.core.services.weather_pipeline import PipelineStage, run_pipeline

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Fetch a Meteomatics weather dataset and print it with credentials redacted.",
)
app.add_typer(doctor.app, name="doctor")

_err_console = Console(stderr=True)


def _source_location(frame: traceback.FrameSummary | None) -> str:
    if frame is None:
        return "<unknown>"
    return f"{Path(frame.filename).name}:{frame.lineno}"


def _raise_site(exc: BaseException) -> traceback.FrameSummary | None:
    frames = traceback.extract_tb(exc.__traceback__)
    return frames[-1] if frames else None


def _pipeline_site(exc: BaseException) -> traceback.FrameSummary | None:
    frames = [f for f in traceback.extract_tb(exc.__traceback__) if f.name == "run_pipeline"]
    return frames[-1] if frames else _raise_site(exc)


def error_lines(exc: WeatherError) -> list[str]:
    """Build the stderr report for a pipeline failure, innermost cause first."""

    chain: list[WeatherError] = []
    current: BaseException | None = exc
    while isinstance(current, WeatherError):
        chain.append(current)
        current = current.__cause__

    lines = [
        f"Error: {err.message} at {_source_location(_raise_site(err))}"
        for err in reversed(chain)
    ]
    if isinstance(exc.stage, PipelineStage):
        lines.append(f"Error: {exc.stage.failure_label()} at {_source_location(_pipeline_site(exc))}")
    return lines


def _print_error(line: str) -> None:
    _err_console.print(line, markup=False, highlight=False, soft_wrap=True)


def _print_validation_error(exc: ValidationError) -> None:
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "settings"
        _print_error(f"Error: {err.get('msg')} at {loc}")


@app.command()
def fetch(
    datetime: Optional[str] = typer.Option(None, "--datetime", help="Datetime segment (ISO-8601)."),
    parameters: Optional[str] = typer.Option(None, "--parameters", help="Comma-separated parameter list."),
    location: Optional[str] = typer.Option(None, "--location", help="Location as 'lat,lon'."),
    format: Optional[str] = typer.Option(None, "--format", help="Response format token."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the redacted document to this file instead of stdout."
    ),
    summary: bool = typer.Option(False, "--summary", help="Show a request summary on stderr."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    """Fetch one dataset, redact credential fields and print it."""

    try:
        settings = AppSettings()
        config = settings.to_request_config(
            datetime=datetime,
            parameters=parameters,
            location=location,
            format=format,
        )
    except ValidationError as exc:
        configure_logging("WARNING")
        _print_validation_error(exc)
        raise typer.Exit(code=1)

    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        result = run_pipeline(settings=settings, config=config)
    except WeatherError as exc:
        for line in error_lines(exc):
            _print_error(line)
        raise typer.Exit(code=1)

    if summary:
        _err_console.print(build_request_table(config, result))

    if output is not None:
        path = export_document_json(output=result.output, output_path=output)
        _err_console.print(f"[green]Saved:[/green] {path}")
    else:
        typer.echo(result.output)


def run() -> None:
    app()
