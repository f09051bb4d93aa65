from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lz4_playground import config as cfg
from lz4_playground.config import Config, DEFAULT_CONFIG

config_app = typer.Typer(help="Manage LZ4 Playground configuration settings.")


@config_app.command(
    "set",
    help="Sets a configuration key in the user's global config file.\n\nUsage Examples:\n  lz4-playground config set default_codec_version 0.3.4\n  lz4-playground config set history_page_size 20",
)
def set_config_command(
    ctx: typer.Context,
    key: str = typer.Argument(
        ...,
        help=f"The configuration key to set. Valid keys: {', '.join(DEFAULT_CONFIG.keys())}.",
    ),
    value: str = typer.Argument(..., help="The new value for the configuration key."),
) -> None:
    config: Config = ctx.obj["config"]
    if not config.set(key, value):
        raise typer.Exit(code=1)
    typer.secho(
        f"Successfully set '{key}' to '{value}' in the user global configuration: {cfg.USER_CONFIG_PATH}",
        fg=typer.colors.GREEN,
    )


@config_app.command(
    "show",
    help="Displays configuration values and where each one came from.",
)
def show_config_command(
    ctx: typer.Context,
    key: Optional[str] = typer.Option(
        None,
        "--key",
        "-k",
        help=f"Specific configuration key to display. Valid keys: {', '.join(DEFAULT_CONFIG.keys())}.",
    ),
) -> None:
    config: Config = ctx.obj["config"]
    console = Console(width=200)
    table = Table(title="LZ4 Playground Configuration")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Effective Value", style="magenta", overflow="fold")
    table.add_column("Source", style="green", overflow="fold")

    if key:
        if key not in config.get_all_keys():
            typer.secho(f"Error: Configuration key '{key}' is not a recognized key.", fg=typer.colors.RED, err=True)
            typer.echo("Known configuration keys are:")
            for known_key in sorted(config.get_all_keys()):
                typer.echo(f"- {known_key}")
            raise typer.Exit(code=1)
        rows = {key: config.get_with_source(key)}
    else:
        rows = config.get_all_with_sources()

    for k_val in sorted(rows):
        value, source_info = rows[k_val]
        table.add_row(k_val, str(value) if value not in (None, "") else "Not Set", source_info)
    console.print(table)
