import logging
from pathlib import Path
from typing import Optional

import typer

from lz4_playground import __version__
from lz4_playground.config import Config
from lz4_playground.logging_utils import configure_logging

from .codec_commands import codec_app
from .config_commands import config_app
from .history_commands import history_app
from .process_commands import process_app
from .share_commands import share_app

app = typer.Typer(
    help="LZ4 Playground: compress and decompress data with versioned LZ4 codecs, track history and share sessions."
)

app.add_typer(process_app, name="process")
app.add_typer(history_app, name="history")
app.add_typer(share_app, name="share")
app.add_typer(codec_app, name="codec")
app.add_typer(config_app, name="config")


def version_callback(value: bool):
    if value:
        typer.echo(f"LZ4 Playground version: {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Path to write debug logs. If not set, logs are not written to file.",
        resolve_path=True,
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose (DEBUG level) logging.",
    ),
    data_path: Optional[str] = typer.Option(
        None,
        "--data-path",
        "-d",
        help="Directory holding history and last metrics. Overrides env var and config.",
        show_default=False,
    ),
    codec_version: Optional[str] = typer.Option(
        None,
        "--codec-version",
        "-c",
        help="Codec version to use by default. Overrides env var and config.",
        show_default=False,
    ),
    version: Optional[bool] = typer.Option(
        None,
        "-v",
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the application version and exit.",
    ),
):
    """
    LZ4 Playground CLI entry point.
    Resolves configuration and logging before any subcommand runs.
    """
    if ctx.obj is None:
        ctx.obj = {}

    config = Config()
    config.update_from_cli("verbose", verbose or None)
    config.update_from_cli("data_path", data_path)
    config.update_from_cli("default_codec_version", codec_version)

    resolved_verbose = bool(config.get("verbose", False))
    resolved_log_file = log_file or (Path(config.get("log_file")) if config.get("log_file") else None)
    configure_logging(resolved_log_file, verbose=resolved_verbose)
    logging.debug("Using data path %s", config.get("data_path"))

    ctx.obj["config"] = config
    ctx.obj["verbose"] = resolved_verbose
    ctx.obj["data_path"] = config.get("data_path")
    ctx.obj["codec_version"] = config.get("default_codec_version")

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


if __name__ == "__main__":
    app()
