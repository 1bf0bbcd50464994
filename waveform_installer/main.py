"""
waveform-installer — CLI entrypoint.

Usage:
    waveform-installer --help
    waveform-installer install
    waveform-installer generate tone.wav --zoom 128
    python -m waveform_installer.main doctor --json
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from waveform_installer import __version__
from waveform_installer.core.config.loader import ConfigError, load_config
from waveform_installer.core.context import set_config
from waveform_installer.core.errors import InstallerError
from waveform_installer.core.observability.logging_config import (
    resolve_level,
    setup_logging,
)


def _waveform(ctx: click.Context):
    from waveform_installer.core.services.waveform import Waveform

    return Waveform(ctx.obj["config"])


def _fail(message: str) -> None:
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="waveform-installer")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to waveform.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """waveform-installer — install and run the audiowaveform binary."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get("WAVEFORM_LOG_FILE"),
        log_file_level=os.environ.get("WAVEFORM_LOG_FILE_LEVEL"),
    )

    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        _fail(str(e))
    ctx.obj["config"] = config
    set_config(config)


@cli.command()
@click.option("--force", is_flag=True, help="Reinstall even if the binary exists.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, force: bool, as_json: bool) -> None:
    """Download and install audiowaveform."""
    waveform = _waveform(ctx)
    try:
        path = waveform.install(force=force)
    except InstallerError as e:
        _fail(str(e))

    # None when the binary was already present
    audit = waveform.installer.audit

    if as_json:
        click.echo(json.dumps({
            "path": str(path),
            "audit": audit.to_dict() if audit is not None else None,
        }, indent=2))
        return

    if audit is not None and audit.installed_packages:
        click.echo(f"Installed missing libraries: {', '.join(audit.installed_packages)}")
    elif audit is not None and not audit.checked:
        click.secho("⚠️  ldd not available, shared libraries were not checked", fg="yellow", err=True)
    click.echo(f"Audiowaveform binary is installed at: {path}")


@cli.command()
@click.pass_context
def path(ctx: click.Context) -> None:
    """Print the path the binary is (or will be) installed to."""
    try:
        click.echo(str(_waveform(ctx).binary_path))
    except InstallerError as e:
        _fail(str(e))


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doctor(ctx: click.Context, as_json: bool) -> None:
    """Show platform, asset, install state and tool availability."""
    from waveform_installer.core.services.installer.detection.platform import (
        detect_platform,
        resolve_asset,
    )

    waveform = _waveform(ctx)
    config = waveform.config
    key = detect_platform(config.os, config.arch)

    asset: dict | None = None
    error: str | None = None
    try:
        asset = resolve_asset(key, config.version).model_dump(mode="json")
    except InstallerError as e:
        error = str(e)

    target = config.install_dir / key.binary_name
    tools = waveform.installer.registry.tool_status()

    report = {
        "platform": {"os": key.os, "arch": key.arch},
        "version": config.version,
        "asset": asset,
        "error": error,
        "install_target": str(target),
        "installed": target.is_file(),
        "tools": tools,
    }

    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    click.secho(f"\n🔍 audiowaveform {config.version} — {key}", fg="cyan", bold=True)
    if asset:
        label = asset["file_name"] or f"via {asset['kind']}"
        click.echo(f"   Asset:   {label}")
    else:
        click.secho(f"   ⚠️  {error.splitlines()[0] if error else 'unsupported'}", fg="yellow")
    marker = "✓" if report["installed"] else "✗ (not installed)"
    click.echo(f"   Target:  {target} {marker}")
    click.echo()

    click.secho("   Tools:", fg="white", bold=True)
    for name, info in tools.items():
        if info["available"]:
            click.secho(f"     ✓ {name}", fg="green")
        else:
            click.secho(f"     ✗ {name}", fg="red")
    click.echo()


@cli.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
              help="Output image (default: INPUT with a .png suffix).")
@click.option("--bits", type=click.Choice(["8", "16"]), default="8", show_default=True,
              help="Bit depth of the waveform data.")
@click.option("--zoom", type=click.IntRange(min=1), default=64, show_default=True,
              help="Samples per pixel.")
@click.pass_context
def generate(
    ctx: click.Context,
    input_path: str,
    output: str | None,
    bits: str,
    zoom: int,
) -> None:
    """Render a waveform image from an audio file."""
    from waveform_installer.core.services.waveform import GenerateOptions

    options = GenerateOptions(
        input=Path(input_path),
        output=Path(output) if output else None,
        bits=int(bits),
        zoom=zoom,
    )
    try:
        result = _waveform(ctx).generate(options)
    except InstallerError as e:
        _fail(str(e))
    click.echo(str(result))


@cli.command(
    "exec",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def exec_(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Run audiowaveform with ARGS and mirror its output and exit code.

    Example:

        waveform-installer exec -- --version
    """
    try:
        receipt = _waveform(ctx).run(list(args))
    except InstallerError as e:
        _fail(str(e))

    if receipt.output:
        click.echo(receipt.output, nl=False)
    stderr = receipt.error if receipt.failed else receipt.metadata.get("stderr", "")
    if stderr:
        click.echo(stderr, nl=False, err=True)
    sys.exit(receipt.exit_code if receipt.failed else 0)


if __name__ == "__main__":
    cli()
