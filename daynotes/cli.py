"""
CLI interface for daily note activity.

Usage:
    daynotes day 2026-01-15
    daynotes color-set Projects/plan.md "#e03131"
    daynotes watch --vault ~/notes
"""

import json
import os
import time
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .activity import DailyActivity
from .annotations import AnnotationStore
from .blob_store import JsonFileBlobStore
from .config import (
    StoreConfig,
    add_palette_color,
    get_store_dir,
    load_or_create_config,
    remove_palette_color,
    reset_palette,
    update_palette_color,
)
from .errors import PersistenceError
from .events import DocumentCreated, DocumentDeleted, DocumentModified, DocumentRenamed, VaultEvent
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .types import DayActivity, Document, parse_day, today
from .vault import FIRST_SEEN_FILENAME, FileSystemVault


# Configure quiet mode by default
# Set DAYNOTES_VERBOSE=1 to enable debug mode via environment
if os.environ.get("DAYNOTES_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"daynotes {version('daynotes')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False
_store_override: Optional[Path] = None
_vault_override: Optional[Path] = None


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


def _store_callback(value: Optional[Path]):
    global _store_override
    _store_override = value


def _vault_callback(value: Optional[Path]):
    global _vault_override
    _vault_override = value


app = typer.Typer(
    name="daynotes",
    help="Notes created and updated each day, with color labels.",
    no_args_is_help=False,
    invoke_without_command=True,
    rich_markup_mode=None,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
        callback=_json_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    store: Annotated[Optional[Path], typer.Option(
        "--store", "-s",
        envvar="DAYNOTES_STORE_PATH",
        help="Path to the store directory (default: ~/.daynotes/)",
        callback=_store_callback,
        is_eager=True,
    )] = None,
    vault: Annotated[Optional[Path], typer.Option(
        "--vault", "-V",
        envvar="DAYNOTES_VAULT",
        help="Notes directory (overrides [vault] root in the config)",
        callback=_vault_callback,
        is_eager=True,
    )] = None,
):
    """Notes created and updated each day, with color labels."""
    # If no subcommand provided, show today
    if ctx.invoked_subcommand is None:
        day()


# -----------------------------------------------------------------------------
# Setup helpers
# -----------------------------------------------------------------------------

def _get_config() -> StoreConfig:
    try:
        config = load_or_create_config(get_store_dir(_store_override))
        configure_ops_log(config.path)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return config


def _get_annotations(config: StoreConfig) -> AnnotationStore:
    try:
        return AnnotationStore.load(JsonFileBlobStore(config.data_path))
    except OSError as e:
        typer.echo(f"Error: cannot read {config.data_path}: {e}", err=True)
        raise typer.Exit(1)


def _get_vault(config: StoreConfig) -> FileSystemVault:
    root = _vault_override or config.vault_root
    if root is None:
        typer.echo("Error: No vault configured.", err=True)
        typer.echo(f"Hint: pass --vault DIR, or set [vault] root in {config.config_path}", err=True)
        raise typer.Exit(1)
    vault = FileSystemVault(
        root,
        tuple(config.suffixes),
        first_seen=JsonFileBlobStore(config.path / FIRST_SEEN_FILENAME),
    )
    if not vault.root.is_dir():
        typer.echo(f"Error: Vault directory not found: {vault.root}", err=True)
        raise typer.Exit(1)
    return vault


def _persist_or_exit(action, *args) -> None:
    """Run a mutating store call, turning a failed save into a clean exit."""
    try:
        action(*args)
    except PersistenceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


# -----------------------------------------------------------------------------
# Output Formatting
# -----------------------------------------------------------------------------

def _document_dict(doc: Document, color: Optional[str]) -> dict:
    return {
        "path": doc.path,
        "created_at": doc.created_at.isoformat(),
        "modified_at": doc.modified_at.isoformat(),
        "color": color,
    }


def _format_line(doc: Document, ts, color: Optional[str]) -> str:
    label = color or "-"
    return f"  {ts.strftime('%H:%M')}  {label:<9} {doc.path}"


def format_day(result: DayActivity, annotations: AnnotationStore, as_json: bool = False) -> str:
    """Render a day's activity with each note's color label."""
    if as_json:
        return json.dumps({
            "day": result.day.isoformat(),
            "created": [_document_dict(d, annotations.get(d.path)) for d in result.created],
            "updated": [_document_dict(d, annotations.get(d.path)) for d in result.updated],
        }, indent=2)

    lines = [result.day.isoformat()]
    lines.append("created:")
    if result.created:
        lines.extend(_format_line(d, d.created_at, annotations.get(d.path)) for d in result.created)
    else:
        lines.append("  No notes found.")
    lines.append("updated:")
    if result.updated:
        lines.extend(_format_line(d, d.modified_at, annotations.get(d.path)) for d in result.updated)
    else:
        lines.append("  No notes found.")
    return "\n".join(lines)


def _describe_event(event: VaultEvent) -> str:
    if isinstance(event, DocumentRenamed):
        return f"renamed {event.old_path} -> {event.new_path}"
    if isinstance(event, DocumentDeleted):
        return f"deleted {event.path}"
    if isinstance(event, DocumentCreated):
        return f"created {event.path}"
    if isinstance(event, DocumentModified):
        return f"modified {event.path}"
    return repr(event)


def _parse_slot(slot: int, config: StoreConfig) -> int:
    """Convert a 1-based palette slot to an index, exiting if out of range."""
    if not 1 <= slot <= len(config.palette):
        typer.echo(f"Error: No palette slot {slot} (palette has {len(config.palette)})", err=True)
        raise typer.Exit(1)
    return slot - 1


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command()
def day(
    date_arg: Annotated[Optional[str], typer.Argument(
        metavar="DATE",
        help="Day to show: YYYY-MM-DD, 'today' or 'yesterday' (default: today)",
    )] = None,
):
    """Show notes created and updated on a day."""
    try:
        target = parse_day(date_arg) if date_arg else today()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    config = _get_config()
    annotations = _get_annotations(config)
    vault = _get_vault(config)
    activity = DailyActivity(annotations, vault.list_documents, day=target)
    typer.echo(format_day(activity.refresh(), annotations, as_json=_get_json_output()))


@app.command()
def color(
    path: Annotated[str, typer.Argument(help="Note path, relative to the vault")],
):
    """Show the color label of a note."""
    annotations = _get_annotations(_get_config())
    value = annotations.get(path)
    if _get_json_output():
        typer.echo(json.dumps({"path": path, "color": value}))
    elif value is None:
        typer.echo(f"No color for {path}", err=True)
        raise typer.Exit(1)
    else:
        typer.echo(value)


@app.command("color-set")
def color_set(
    path: Annotated[str, typer.Argument(help="Note path, relative to the vault")],
    value: Annotated[Optional[str], typer.Argument(
        metavar="COLOR",
        help="Color token, stored as given (e.g. '#e03131')",
    )] = None,
    palette: Annotated[Optional[int], typer.Option(
        "--palette", "-p",
        help="Use the color in this palette slot (1-based)",
    )] = None,
):
    """Set the color label of a note."""
    if (value is None) == (palette is None):
        typer.echo("Error: Specify either a COLOR or --palette N", err=True)
        raise typer.Exit(1)
    config = _get_config()
    if palette is not None:
        value = config.palette[_parse_slot(palette, config)]
    annotations = _get_annotations(config)
    _persist_or_exit(annotations.set, path, value)
    typer.echo(f"{path}: {value}")


@app.command("color-reset")
def color_reset(
    path: Annotated[str, typer.Argument(help="Note path, relative to the vault")],
):
    """Remove the color label of a note."""
    annotations = _get_annotations(_get_config())
    if path not in annotations:
        typer.echo(f"No color for {path}", err=True)
        return
    _persist_or_exit(annotations.remove, path)
    typer.echo(f"Reset color for {path}")


@app.command()
def colors():
    """List every color label."""
    annotations = _get_annotations(_get_config())
    mapping = annotations.colors()
    if _get_json_output():
        typer.echo(json.dumps(mapping, indent=2, sort_keys=True))
        return
    if not mapping:
        typer.echo("No colors set.")
        return
    for path in sorted(mapping):
        typer.echo(f"{mapping[path]:<9} {path}")


@app.command()
def rename(
    old_path: Annotated[str, typer.Argument(help="Previous note path")],
    new_path: Annotated[str, typer.Argument(help="Current note path")],
):
    """Move a color label after a note was renamed outside daynotes."""
    annotations = _get_annotations(_get_config())
    moved = annotations.get(old_path)
    _persist_or_exit(annotations.reconcile_rename, old_path, new_path)
    if moved is None:
        typer.echo(f"No color for {old_path}, nothing to move.", err=True)
    else:
        typer.echo(f"{new_path}: {moved}")


@app.command()
def delete(
    path: Annotated[str, typer.Argument(help="Path of the deleted note")],
):
    """Forget the color label of a note that was deleted outside daynotes."""
    annotations = _get_annotations(_get_config())
    existed = path in annotations
    _persist_or_exit(annotations.reconcile_delete, path)
    if existed:
        typer.echo(f"Cleaned up color for {path}")
    else:
        typer.echo(f"No color for {path}, nothing to clean up.", err=True)


@app.command()
def watch(
    date_arg: Annotated[Optional[str], typer.Argument(
        metavar="DATE",
        help="Day to follow (default: today, rolling over at midnight)",
    )] = None,
    interval: Annotated[float, typer.Option(
        "--interval", "-i",
        help="Seconds between vault scans",
        min=0.1,
    )] = 2.0,
):
    """Follow vault changes, keeping color labels in sync with renames and deletes."""
    try:
        target = parse_day(date_arg) if date_arg else None
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    config = _get_config()
    annotations = _get_annotations(config)
    vault = _get_vault(config)
    activity = DailyActivity(annotations, vault.list_documents, day=target)
    activity.subscribe(
        lambda result: typer.echo(format_day(result, annotations, as_json=_get_json_output()))
    )

    vault.poll()  # baseline
    activity.refresh()
    try:
        while True:
            time.sleep(interval)
            if target is None and activity.day != today():
                activity.go_to_today()
            events = vault.poll()
            for event in events:
                typer.echo(_describe_event(event), err=True)
                try:
                    activity.handle(event)
                except PersistenceError as e:
                    typer.echo(f"Error: {e}", err=True)
                    raise typer.Exit(1)
    except KeyboardInterrupt:
        typer.echo("", err=True)


@app.command("palette")
def palette_list():
    """Show the label color palette."""
    config = _get_config()
    if _get_json_output():
        typer.echo(json.dumps(config.palette))
        return
    for i, value in enumerate(config.palette, start=1):
        typer.echo(f"{i:>2}  {value}")


@app.command("palette-add")
def palette_add(
    value: Annotated[Optional[str], typer.Argument(
        metavar="COLOR", help="Color token (default: #ffffff)",
    )] = None,
):
    """Add a color slot to the palette."""
    config = _get_config()
    if value is None:
        add_palette_color(config)
    else:
        add_palette_color(config, value)
    typer.echo(f"{len(config.palette):>2}  {config.palette[-1]}")


@app.command("palette-set")
def palette_set(
    slot: Annotated[int, typer.Argument(help="Palette slot (1-based)")],
    value: Annotated[str, typer.Argument(metavar="COLOR", help="Color token")],
):
    """Change the color in a palette slot."""
    config = _get_config()
    update_palette_color(config, _parse_slot(slot, config), value)
    typer.echo(f"{slot:>2}  {value}")


@app.command("palette-remove")
def palette_remove(
    slot: Annotated[int, typer.Argument(help="Palette slot (1-based)")],
):
    """Remove a color slot from the palette."""
    config = _get_config()
    removed = remove_palette_color(config, _parse_slot(slot, config))
    typer.echo(f"Removed {removed}")


@app.command("palette-reset")
def palette_reset():
    """Restore the default palette."""
    config = _get_config()
    reset_palette(config)
    typer.echo("Color palette has been reset to defaults.")


# -----------------------------------------------------------------------------

def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="daynotes CLI", store_path=_store_override)
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
