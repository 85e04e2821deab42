"""Command-line interface for CityLens."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Annotated

import typer
from openai import APIError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from citylens.analysis.image_description import (
    GenerateImageDescriptionInput,
    generate_image_description,
)
from citylens.config import CityLensSettings
from citylens.config_validation import validate_port, validate_provider_name
from citylens.errors import CityLensError
from citylens.logging_utils import configure_logging
from citylens.providers.factory import create_provider
from citylens.report.data_uri import encode_data_uri, is_image_media_type
from citylens.report.schemas import ReportFormValues, validate_report_form

__version__ = "0.1.0"

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"citylens {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the CityLens version and exit.",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(help="Write logs to this file (truncated on every run)."),
    ] = None,
    verbose: Annotated[bool, typer.Option(help="Enable debug logging.")] = False,
) -> None:
    """Photograph an urban issue, let AI describe it, and report it."""
    _ = version
    if log_file is not None:
        configure_logging(log_file=log_file, verbose=verbose)


def _resolve_settings(
    provider: str | None,
    model: str | None,
    mock_description: str | None,
) -> CityLensSettings:
    """Merge environment settings with CLI overrides."""
    try:
        if provider is not None:
            validate_provider_name(provider)
        return CityLensSettings.from_env().with_overrides(
            provider=provider, model=model, mock_description=mock_description
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Host interface for the web form.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="TCP port for the web form.")] = 8080,
    reload: Annotated[
        bool,
        typer.Option("--reload/--no-reload", help="Restart the server on code changes."),
    ] = False,
) -> None:
    """Serve the CityLens report form and API with uvicorn."""
    import uvicorn

    try:
        validate_port(port)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.print(f"Serving CityLens on http://{host}:{port}")
    uvicorn.run("ui.backend.app:app", host=host, port=port, reload=reload)


@app.command()
def describe(
    image: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Image file to describe."),
    ],
    provider: Annotated[
        str | None,
        typer.Option(help="Model provider to use: openai or mock."),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option(help="Model name when using the OpenAI provider."),
    ] = None,
    mock_description: Annotated[
        str | None,
        typer.Option(help="Description returned by the mock provider."),
    ] = None,
    media_type: Annotated[
        str | None,
        typer.Option(help="Override the media type guessed from the file name."),
    ] = None,
) -> None:
    """Print the AI-generated description of a local image."""
    resolved_type = media_type or mimetypes.guess_type(image.name)[0]
    if not is_image_media_type(resolved_type):
        raise typer.BadParameter(f"{image.name} is not an image file.")
    settings = _resolve_settings(provider, model, mock_description)
    photo_data_uri = encode_data_uri(image.read_bytes(), resolved_type or "")
    try:
        vision = create_provider(settings)
        result = generate_image_description(
            GenerateImageDescriptionInput(photo_data_uri=photo_data_uri), vision
        )
    except (APIError, CityLensError, ValueError, RuntimeError) as exc:
        console.print(f"[red]Failed to analyze image:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    console.print(result.description, markup=False)


@app.command("check-report")
def check_report(
    description: Annotated[str, typer.Option(help="Issue description.")] = "",
    location: Annotated[str, typer.Option(help="Photo location.")] = "",
    email: Annotated[str, typer.Option(help="Optional contact email.")] = "",
    comments: Annotated[str, typer.Option(help="Optional comments.")] = "",
    local_police: Annotated[
        bool,
        typer.Option("--local-police/--no-local-police", help="Send to local police."),
    ] = False,
    city_hall: Annotated[
        bool,
        typer.Option("--city-hall/--no-city-hall", help="Send to city hall."),
    ] = False,
) -> None:
    """Validate report fields without submitting anything."""
    values = ReportFormValues(
        description=description,
        location=location,
        email=email,
        comments=comments,
        send_to_local_police=local_police,
        send_to_city_hall=city_hall,
    )
    errors = validate_report_form(values)
    if not errors:
        console.print("[green]Report is valid.[/green]")
        return
    table = Table(title="Report validation errors")
    table.add_column("Field")
    table.add_column("Reason")
    table.add_column("Message")
    for field, reason in errors.items():
        table.add_row(field, reason.value, reason.message)
    console.print(table)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
