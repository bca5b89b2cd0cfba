"""Command-line front end: list, show and check presets."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from palettekit.config.settings import PaletteSettings
from palettekit.errors import classify_error, format_error_for_user
from palettekit.themes.contrast import ContrastLevel, validate_palette
from palettekit.themes.models import PaletteError
from palettekit.themes.registry import PresetRegistry

console = Console()
err_console = Console(stderr=True)

_LEVEL_CHOICES = [level.value for level in ContrastLevel]


def _configure_logger(settings: PaletteSettings, *, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("palettekit")
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    try:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            settings.log_dir / "palettekit.log",
            maxBytes=512_000,
            backupCount=3,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(handler)
    except OSError as exc:
        err_console.print(f"[yellow]file logging disabled: {exc}[/yellow]")
    if verbose:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(stream)
    logger.propagate = False
    return logger


def _build_registry(settings: PaletteSettings, themes_dir: Path | None) -> PresetRegistry:
    registry = PresetRegistry(
        max_depth=settings.max_inheritance_depth,
        directory_policy=settings.directory_policy,
    )
    user_dir = themes_dir or settings.user_themes_dir
    if user_dir.is_dir():
        registry.add_directory(user_dir)
    return registry


@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Path to config.yaml")
@click.option("--themes-dir", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None,
              help="Directory of user theme files")
@click.option("--verbose", "-v", is_flag=True, help="Log to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, themes_dir: Path | None, verbose: bool) -> None:
    """palettekit: resolve and inspect theme presets."""
    settings = PaletteSettings(config_path)
    logger = _configure_logger(settings, verbose=verbose)
    try:
        registry = _build_registry(settings, themes_dir)
    except PaletteError as exc:
        logger.error("theme load failed: %s", classify_error(exc).to_dict())
        err_console.print(f"[red]{escape(format_error_for_user(exc))}[/red]", soft_wrap=True)
        ctx.exit(2)
    errors = registry.load_errors()
    if errors:
        logger.warning("theme load warnings: %s", " | ".join(errors[:6]))
    ctx.obj = {"settings": settings, "registry": registry}


@cli.command("list")
@click.option("--style", default=None, help="Only presets with this style tag")
@click.pass_obj
def list_presets(obj: dict, style: str | None) -> None:
    """List registered presets."""
    registry: PresetRegistry = obj["registry"]
    rows = registry.by_style(style) if style else registry.list()
    table = Table(title="Presets")
    table.add_column("id")
    table.add_column("name")
    table.add_column("style")
    table.add_column("source", style="dim")
    for row in rows:
        table.add_row(row.preset_id, escape(row.name), escape(row.style), row.source.value)
    console.print(table)


@cli.command()
@click.argument("preset_id", required=False)
@click.pass_obj
def show(obj: dict, preset_id: str | None) -> None:
    """Print every resolved slot of a preset."""
    settings: PaletteSettings = obj["settings"]
    palette = _load_or_exit(obj["registry"], preset_id or settings.default_preset)
    table = Table(title=escape(f"{palette.meta.name} ({palette.meta.style})"))
    table.add_column("section")
    table.add_column("slot")
    table.add_column("color")
    for section, slot, color in palette.iter_slots():
        if color is None:
            table.add_row(section, slot, "[red]absent[/red]")
        else:
            hex_value = color.to_hex()
            table.add_row(section, slot, f"[on {hex_value}]   [/] {hex_value}")
    for target in palette.platform.values():
        for slot, color in target.populated_slots():
            hex_value = color.to_hex()
            table.add_row(target.name, slot, f"[on {hex_value}]   [/] {hex_value}")
    console.print(table)


@cli.command()
@click.argument("preset_id", required=False)
@click.option("--level", type=click.Choice(_LEVEL_CHOICES), default=None,
              help="WCAG level to check against")
@click.pass_obj
def check(obj: dict, preset_id: str | None, level: str | None) -> None:
    """Report foreground/background pairs below a WCAG contrast level."""
    settings: PaletteSettings = obj["settings"]
    palette = _load_or_exit(obj["registry"], preset_id or settings.default_preset)
    contrast_level = ContrastLevel(level or settings.contrast_level)
    violations = validate_palette(palette, contrast_level)
    if not violations:
        console.print(f"[green]{palette.meta.preset_id}: no contrast violations at {contrast_level.value}[/green]")
        return

    table = Table(title=f"{palette.meta.preset_id}: {len(violations)} violations at {contrast_level.value}")
    table.add_column("foreground")
    table.add_column("background")
    table.add_column("ratio", justify="right")
    table.add_column("required", justify="right")
    for violation in violations:
        table.add_row(
            violation.foreground_label,
            violation.background_label,
            f"{violation.ratio:.2f}",
            f"{violation.required:.1f}",
        )
    console.print(table)
    click.get_current_context().exit(1)


def _load_or_exit(registry: PresetRegistry, preset_id: str):
    try:
        return registry.load(preset_id)
    except PaletteError as exc:
        logging.getLogger("palettekit").error("load failed: %s", classify_error(exc).to_dict())
        err_console.print(f"[red]{escape(format_error_for_user(exc))}[/red]", soft_wrap=True)
        click.get_current_context().exit(2)


def run_app() -> int:
    """Run the CLI and return its exit code."""
    try:
        result = cli.main(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        return 1
    return result if isinstance(result, int) else 0
