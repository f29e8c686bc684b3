"""Click-based CLI for SignSync - S3 media sync for digital signage."""

from __future__ import annotations

import json
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

import click
import yaml

from signsync import __version__
from signsync.config import (
    ConfigError,
    SignSyncConfig,
    ensure_config_exists,
    generate_default_config,
    get_config_path,
    load_config,
    validate_config_file,
)
from signsync.context import build_context
from signsync.errors import FilesystemError, ListingError, ScanError
from signsync.logger import setup_logging
from signsync.output import Console, create_console
from signsync.sync import SyncEngine, inventory_payload
from signsync.sync.state import StateManager


def _load(ctx: click.Context) -> tuple[SignSyncConfig, Console]:
    """Load configuration and set up logging, exiting with status 1 on errors."""
    obj = ctx.ensure_object(dict)
    verbose = obj.get("verbose", False)

    try:
        config = load_config(obj.get("config_path"))
    except ConfigError as e:
        create_console(verbose=verbose).print_error(str(e))
        sys.exit(1)

    verbose = verbose or config.output.verbose
    console = create_console(verbose=verbose, colored=config.output.colored)
    setup_logging(verbose=verbose, log_file=config.output.log_file)
    return config, console


@click.group()
@click.version_option(version=__version__, prog_name="signsync")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (default: $SIGNSYNC_CONFIG or ~/.config/signsync/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """SignSync - keep a signage media directory in sync with S3.

    Mirrors a bucket into the local media directory and publishes the
    name-sorted list of playable videos.

    \b
    Workflows:
      signsync run             Serve: initial scan, then sync on an interval
      signsync sync            One reconciliation cycle now
      signsync sync --dry-run  Show what a cycle would download and delete
      signsync media           Print the media list as JSON
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Run the sync service until interrupted.

    Creates the media directory, publishes the local inventory, and when a
    bucket is configured syncs immediately and then every interval.
    """
    config, console = _load(ctx)
    context = build_context(config)

    try:
        context.start()
    except FilesystemError as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_info(f"Media directory: {config.media_root}")
    if context.scheduler is not None:
        console.print_info(f"Remote sync: {config.storage.bucket} (every {config.sync.interval_minutes:g} min)")
    else:
        console.print_warning("No bucket configured - serving local media only")

    stop = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: stop.set())
    try:
        while not stop.wait(1.0):
            pass
    except KeyboardInterrupt:
        pass
    finally:
        console.print_info("Shutting down...")
        context.stop()


@cli.command()
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
@click.pass_context
def sync(ctx: click.Context, dry_run: bool) -> None:
    """Run one reconciliation cycle against the bucket.

    Downloads objects missing locally, then removes previously synced files
    that are no longer in the bucket.
    """
    config, console = _load(ctx)
    context = build_context(config)
    engine = context.engine

    if not engine.remote_enabled:
        console.print_error("No bucket configured. Set storage.bucket in the config or S3_BUCKET.")
        sys.exit(1)

    try:
        if dry_run:
            console.print_plan(engine.plan())
            console.print_info("Dry-run mode - no changes applied")
            return
        engine.prepare()
        result = engine.sync_now()
    except (FilesystemError, ListingError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_sync_result(result)
    if not result.success:
        sys.exit(1)


@cli.command()
@click.pass_context
def scan(ctx: click.Context) -> None:
    """Scan the media directory and show the playback order."""
    config, console = _load(ctx)
    engine = SyncEngine(config)

    try:
        entries = engine.rescan_local(strict=True)
    except ScanError as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_inventory(entries)


@cli.command()
@click.option("--indent", default=2, show_default=True, help="JSON indentation")
@click.pass_context
def media(ctx: click.Context, indent: int) -> None:
    """Print the media list as served to the player (JSON)."""
    config, _ = _load(ctx)
    engine = SyncEngine(config)
    click.echo(json.dumps(inventory_payload(engine.rescan_local()), indent=indent or None))


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration and the last synchronization status."""
    config, console = _load(ctx)
    state = StateManager(config.state_path).state
    local_count = len(SyncEngine(config).scan().entries)

    console.print_status(
        root=str(config.media_root),
        bucket=config.storage.bucket,
        interval_minutes=config.sync.interval_minutes,
        state=state,
        local_count=local_count,
    )


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group("config")
def config_group() -> None:
    """Manage the configuration file."""


@config_group.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration file")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Create a configuration file with default values."""
    console = create_console()
    path = ctx.obj.get("config_path") or get_config_path()

    if force and path.exists():
        path.write_text(generate_default_config(), encoding="utf-8")
        console.print_success(f"Configuration overwritten: {path}")
        return

    path, created = ensure_config_exists(path)
    if created:
        console.print_success(f"Configuration created: {path}")
    else:
        console.print_warning(f"Configuration already exists: {path} (use --force to overwrite)")


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration (file, defaults and environment)."""
    config, _ = _load(ctx)
    click.echo(yaml.dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False))


@config_group.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Validate the configuration file."""
    console = create_console()
    path = ctx.obj.get("config_path") or get_config_path()

    valid, errors = validate_config_file(path)
    if valid:
        console.print_success(f"Configuration is valid: {path}")
        return

    console.print_error(f"Invalid configuration: {path}")
    for error in errors:
        console.print(f"  • {error}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
