"""CLI entry point for the multi-disc organizer."""

import json
import os
from pathlib import Path

import click
from loguru import logger

from .config import OrganizerConfig
from .errors import RootNotFoundError
from .ops.audit import format_audit_table
from .runner import OrganizerRunner

log = logger.bind(stage="cli")


def _load_env_file(env_file: Path) -> None:
    """Load a shell-style .env file into os.environ (without overriding)."""
    for line in env_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        # Don't override existing env vars (CLI > env > file)
        if key not in os.environ:
            os.environ[key] = value


@click.command()
@click.argument("root", required=False, type=click.Path())
@click.option(
    "-r", "--recurse", is_flag=True, help="Scan subdirectories of ROOT as well."
)
@click.option(
    "-n", "--dry-run", is_flag=True, help="Show what would happen without doing it."
)
@click.option("--no-audit", is_flag=True, help="Skip the final playlist audit.")
@click.option(
    "--json-output",
    "json_out",
    is_flag=True,
    help="Print the audit report as JSON instead of a table.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    default=None,
    help="Path to .env file.",
)
def main(
    root: str | None,
    recurse: bool,
    dry_run: bool,
    no_audit: bool,
    json_out: bool,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Group multi-disc images into per-title folders and build .m3u playlists."""
    if config_file:
        _load_env_file(Path(config_file))

    # Pass CLI flags as kwargs to avoid env pollution
    config_kwargs: dict = {}
    if root:
        config_kwargs["root"] = Path(root)
    if recurse:
        config_kwargs["recurse"] = True
    if dry_run:
        config_kwargs["dry_run"] = True
    if no_audit:
        config_kwargs["audit"] = False
    if verbose:
        config_kwargs["verbose"] = True

    config = OrganizerConfig(**config_kwargs)
    config.setup_logging()

    try:
        summary = OrganizerRunner(config).run()
    except RootNotFoundError as e:
        raise click.UsageError(str(e)) from e

    if summary.audit is None:
        return

    click.echo("")
    if json_out:
        click.echo(json.dumps(summary.audit.to_dict(), indent=2))
    else:
        click.echo(format_audit_table(summary.audit))

    if summary.failed:
        raise SystemExit(1)
