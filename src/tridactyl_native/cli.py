"""CLI entry point for tridactyl-native."""

import sys
from pathlib import Path
from typing import Annotated

import typer

from tridactyl_native.config import VERSION, Config
from tridactyl_native.log import setup_logging
from tridactyl_native.manifest import install_manifests
from tridactyl_native.messaging.server import run_server
from tridactyl_native.output import Output

app = typer.Typer(add_completion=False)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tridactyl-native {VERSION}")
        raise typer.Exit


# Browsers append their own arguments (manifest path, extension id, --parent-window=...).
@app.command(context_settings={"help_option_names": ["-h", "--help"], "allow_extra_args": True, "ignore_unknown_options": True})
def main(
    *,
    setup: Annotated[bool, typer.Option("--setup", help="Install the native messaging manifest and exit.")] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output setup results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory holding the log file.")] = None,
    version: Annotated[
        bool, typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit.")
    ] = False,
    browser_args: Annotated[list[str] | None, typer.Argument(hidden=True)] = None,
) -> None:
    """Native messaging host executing file and process commands for Tridactyl."""
    cfg = Config.build(data_dir)
    setup_logging(cfg.log_path)

    if setup:
        out = Output(json_mode=json_output)
        installed = install_manifests(cfg, Path(sys.argv[0]).resolve())
        if not installed:
            out.print_error_and_exit("no_browser", f"No browser profile found under {cfg.home_dir} ({', '.join(cfg.browsers)}).")
        out.print_manifests_installed(installed)
        return

    run_server(cfg)
