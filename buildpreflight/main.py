"""
Build Preflight — CLI entrypoint.

Usage:
    python -m buildpreflight.main --help
    python -m buildpreflight.main check
    python -m buildpreflight.main which cmake ninja
    python -m buildpreflight.main config show
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
import yaml

from buildpreflight import __version__
from buildpreflight.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="buildpreflight")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to preflight.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Build Preflight — check the build environment before building."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("PREFLIGHT_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("PREFLIGHT_LOG_FILE"),
        log_file_level=os.environ.get("PREFLIGHT_LOG_FILE_LEVEL"),
    )


_STATUS_MARKS = {
    "passed": ("✓", "green"),
    "updated": ("↻", "cyan"),
    "fatal": ("✗", "red"),
}


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--emit",
    "emit_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the amended configuration to this JSON file.",
)
@click.option("--dry-run", is_flag=True, help="Skip compiler presence checks.")
@click.pass_context
def check(ctx: click.Context, as_json: bool, emit_path: str | None, dry_run: bool) -> None:
    """Run every preflight check, stopping at the first failure."""
    from buildpreflight.core.config.loader import ConfigError, load_config
    from buildpreflight.core.config.writer import save_config
    from buildpreflight.core.use_cases.preflight import run_preflight

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"ok": False, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if dry_run:
        config.dry_run = True

    report = run_preflight(config)

    if report.ok and emit_path:
        save_config(report.config, Path(emit_path))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.ok else 1)
        return

    if not ctx.obj.get("quiet"):
        click.secho(f"\n🔍 Preflight: {config.build}", fg="cyan", bold=True)
        click.echo(f"   Hosts:   {', '.join(config.hosts)}")
        click.echo(f"   Targets: {', '.join(config.targets)}")
        click.echo()

        for outcome in report.outcomes:
            if outcome.fatal:
                continue
            mark, color = _STATUS_MARKS[outcome.status]
            click.secho(f"   {mark} {outcome.check}", fg=color, nl=False)
            click.echo(f"  {outcome.message}" if outcome.message else "")
            if ctx.obj.get("verbose") and not outcome.overrides.is_empty():
                for key, val in outcome.overrides.to_dict().items():
                    click.echo(f"     │ {key}: {val}")

    if not report.ok:
        click.secho(f"\n❌ {report.failed_check}: {report.error}", fg="red", err=True)
        sys.exit(1)

    if not ctx.obj.get("quiet"):
        click.echo()
        click.secho("✅ Build environment looks good", fg="green", bold=True)
        if emit_path:
            click.secho(f"   💾 Resolved config written to {emit_path}", fg="cyan")
        click.echo()


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def which(names: tuple[str, ...], as_json: bool) -> None:
    """Locate commands on the search path."""
    from buildpreflight.core.services.resolver import CommandResolver

    resolver = CommandResolver()
    found = {name: resolver.query(name) for name in names}

    if as_json:
        click.echo(json.dumps(
            {name: str(path) if path else None for name, path in found.items()},
            indent=2,
        ))
    else:
        for name, path in found.items():
            if path is not None:
                click.secho(f"   ✓ {name} ", fg="green", nl=False)
                click.echo(f"→ {path}")
            else:
                click.secho(f"   ✗ {name} ", fg="red", nl=False)
                click.echo("(not found)")

    if any(path is None for path in found.values()):
        sys.exit(1)


@cli.group()
def config() -> None:
    """Build configuration commands."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Print the loaded configuration with defaults filled in."""
    from buildpreflight.core.config.loader import ConfigError, load_config

    try:
        cfg = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    data = cfg.model_dump(mode="json")
    if as_json:
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(yaml.safe_dump(data, sort_keys=False).rstrip())


if __name__ == "__main__":
    cli()
