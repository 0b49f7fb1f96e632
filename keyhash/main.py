"""
Android key hash — CLI entrypoint.

Usage:
    python -m keyhash.main --help
    python -m keyhash.main resolve
    python -m keyhash.main doctor --json
    python -m keyhash.main explain no_openssl
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from keyhash import __version__
from keyhash.core.observability.logging_config import resolve_level, setup_logging


def _load_resolver(ctx: click.Context):
    """Build the process-wide resolver once and keep it on the context."""
    from keyhash.core.config.loader import ConfigError, load_settings
    from keyhash.core.services.key_hash_resolver import create_resolver

    if "resolver" not in ctx.obj:
        try:
            settings = load_settings(ctx.obj.get("config_path"))
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
        ctx.obj["resolver"] = create_resolver(settings)
    return ctx.obj["resolver"]


@click.group()
@click.version_option(version=__version__, prog_name="keyhash")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to keyhash.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Android key hash — signing-key fingerprint for app whitelisting."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("KEYHASH_LOG_LEVEL"),
        ),
        log_file=os.environ.get("KEYHASH_LOG_FILE"),
        log_file_level=os.environ.get("KEYHASH_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(ctx: click.Context, as_json: bool) -> None:
    """Print the key hash of the signing keystore."""
    from keyhash.core.use_cases.resolve import resolve as run_resolve

    result = run_resolve(_load_resolver(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho(f"❌ {result.message}", fg="red")
        if not ctx.obj.get("quiet"):
            click.echo(f"   cause: {result.cause.value}")
        sys.exit(1)

    if ctx.obj.get("quiet"):
        click.echo(result.key_hash)
        return

    kind = "debug" if result.debug_keystore else "release"
    click.secho(f"🔑 {result.key_hash}", fg="green", bold=True)
    click.echo(f"   {kind} keystore: {result.keystore} (alias {result.alias})")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doctor(ctx: click.Context, as_json: bool) -> None:
    """Check the SDK, keystore, OpenSSL and keytool one by one."""
    from keyhash.core.use_cases.doctor import run_doctor

    result = run_doctor(_load_resolver(ctx).probe)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ready else 1)

    click.secho(f"\n🩺 Environment ({result.platform})", fg="cyan", bold=True)
    for check in result.checks:
        if check.passed:
            click.secho(f"   ✓ {check.name} ", fg="green", nl=False)
            click.echo(f"→ {check.detail}")
        else:
            click.secho(f"   ✗ {check.name} ", fg="red", nl=False)
            click.echo(f"→ {check.detail}")
            click.echo(f"     {check.message}")
    click.echo()

    if not result.ready:
        sys.exit(1)


@cli.command()
@click.argument("cause")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def explain(ctx: click.Context, cause: str, as_json: bool) -> None:
    """Show the remediation message for a failure CAUSE."""
    from keyhash.core.config.loader import ConfigError, load_settings
    from keyhash.core.services.error_reporter import remediation_for
    from keyhash.core.services.platform_info import detect_platform

    try:
        host = detect_platform(load_settings(ctx.obj.get("config_path")).platform)
    except ConfigError:
        host = detect_platform()

    info = remediation_for(cause, host)

    if as_json:
        click.echo(json.dumps(info, indent=2))
        return

    click.echo(info["message"] or "No failure.")


@cli.group()
def config() -> None:
    """Settings commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate keyhash.yml."""
    from keyhash.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        if result.config_path:
            click.echo(f"   File: {result.config_path}")
        assert result.settings is not None  # guaranteed when valid
        keystore = "release" if result.settings.release.configured else "debug"
        click.echo(f"   Keystore: {keystore}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
