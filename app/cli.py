from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.camera_catalog_source import FileSystemCameraCatalogSource
from adapters.filesystem.fdl_repository import FileSystemFdlRepository
from app.config import AppSettings, load_settings
from domain.ports.repositories import FdlImportError
from domain.services.document_editing import create_empty_document
from domain.services.framing_geometry import recompute_all_decisions, sync_decisions
from domain.services.identifiers import generate_document_id, generate_element_id
from domain.services.precision import format_aspect_ratio
from domain.services.validate_document import validate_document

app = typer.Typer(no_args_is_help=True)
ids_app = typer.Typer(no_args_is_help=True)
app.add_typer(ids_app, name="ids")
console = Console()

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _settings(ctx: typer.Context) -> AppSettings:
    settings = ctx.obj
    if isinstance(settings, AppSettings):
        return settings
    return load_settings()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    log_level: Optional[str] = typer.Option(None, help="Override the configured log level."),
) -> None:
    settings = load_settings(config)
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level.upper()})
    _configure_logging(settings.log_level)
    ctx.obj = settings


@app.command("validate")
def validate(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="FDL file to validate."),
) -> None:
    if not input_path.is_file():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    repo = FileSystemFdlRepository(indent=_settings(ctx).indent_output)
    try:
        payload = repo.load_raw(input_path)
    except FdlImportError as exc:
        console.print(f"[red]Import failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    report = validate_document(payload)
    if report.is_valid:
        console.print(f"[green]Valid FDL:[/] {input_path}")
        return
    for error in report.errors:
        console.print(f"[red]-[/] {error}", highlight=False)
    console.print(
        f"[red]Invalid FDL:[/] {input_path} "
        f"({len(report.schema_errors)} schema, {len(report.id_tree_errors)} id tree)"
    )
    raise typer.Exit(code=1)


@app.command("recompute")
def recompute(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="FDL file to refresh."),
    output_path: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Where to write the result. Defaults to overwriting the input.",
    ),
    sync: bool = typer.Option(False, help="Also create missing decisions for every intent on every canvas."),
) -> None:
    settings = _settings(ctx)
    repo = FileSystemFdlRepository(indent=settings.indent_output)
    if not input_path.is_file():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        payload = repo.load_raw(input_path)
        report = validate_document(payload)
        if not report.is_valid:
            for error in report.errors:
                console.print(f"[red]-[/] {error}", highlight=False)
            console.print(f"[red]Refusing to recompute an invalid FDL:[/] {input_path}")
            raise typer.Exit(code=1)
        document = repo.parse(input_path, payload)
    except FdlImportError as exc:
        console.print(f"[red]Import failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    rounding = settings.rounding.to_config()
    updated = sync_decisions(document, rounding) if sync else recompute_all_decisions(document, rounding)
    target_path = output_path or input_path
    repo.save(updated, target_path)
    decision_count = sum(len(canvas.framing_decisions) for canvas in updated.iter_canvases())
    logger.info("Recomputed %d framing decision(s) for %s", decision_count, input_path)
    console.print(f"[green]Wrote[/] {target_path}")


@app.command("new")
def new(
    ctx: typer.Context,
    output_path: Path = typer.Argument(..., help="Path of the FDL file to create."),
    creator: Optional[str] = typer.Option(None, help="fdl_creator value. Defaults to the configured creator."),
) -> None:
    settings = _settings(ctx)
    if output_path.exists():
        console.print(f"[red]Refusing to overwrite existing file:[/] {output_path}")
        raise typer.Exit(code=1)
    document = create_empty_document(creator or settings.fdl_creator, version_minor=settings.version_minor)
    FileSystemFdlRepository(indent=settings.indent_output).save(document, output_path)
    console.print(f"[green]Wrote[/] {output_path} ({document.uuid})")


@ids_app.command("document")
def document_id() -> None:
    console.print(generate_document_id(), highlight=False)


@ids_app.command("element")
def element_id(seed: str = typer.Argument(..., help="Label to slug into an element id.")) -> None:
    console.print(generate_element_id(seed), highlight=False, markup=False)


@app.command("cameras")
def cameras(
    ctx: typer.Context,
    table_path: Optional[Path] = typer.Option(None, "--table", help="Camera reference table (YAML or JSON)."),
) -> None:
    path = table_path or _settings(ctx).camera_table_path
    if path is None or not path.is_file():
        console.print(f"[yellow]No camera table found[/] {path or ''}".rstrip())
        raise typer.Exit(code=1)
    try:
        manufacturers = FileSystemCameraCatalogSource().load_all(path)
    except FdlImportError as exc:
        console.print(f"[red]Import failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    table = Table("Manufacturer", "Model", "Resolution", "Pixels", "Aspect")
    for manufacturer in manufacturers:
        for model in manufacturer.models:
            for resolution in model.resolutions:
                table.add_row(
                    manufacturer.name,
                    model.name,
                    resolution.name,
                    f"{resolution.width}x{resolution.height}",
                    format_aspect_ratio(resolution.width, resolution.height),
                )
    console.print(table)


if __name__ == "__main__":
    app()
