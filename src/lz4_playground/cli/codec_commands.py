import typer
from rich.console import Console
from rich.table import Table

from lz4_playground.codec.registry import all_codec_metadata, available_codec_versions
from lz4_playground.versions import VersionRegistry

console = Console()

codec_app = typer.Typer(help="Inspect registered codecs and published versions.")


@codec_app.command("list", help="Lists codec versions that can be loaded locally.")
def list_command() -> None:
    versions = available_codec_versions()
    meta = all_codec_metadata()
    if not versions:
        typer.echo("No codecs registered.")
        return
    table = Table("Version", "Display Name", "Source", "Overrides", title="Registered Codecs")
    for version in versions:
        info = meta.get(version, {})
        table.add_row(
            version,
            info.get("display_name") or version,
            info.get("source") or "",
            info.get("overrides") or "",
        )
    console.print(table)


@codec_app.command("versions", help="Lists versions published in the codec registry.")
def versions_command(
    ctx: typer.Context,
    refresh: bool = typer.Option(False, "--refresh", help="Ignore cached results"),
) -> None:
    registry = VersionRegistry(ctx.obj["config"].get("registry_url"))
    table = Table("Version", "Latest", title="Published Versions")
    for info in registry.fetch_versions(force_refresh=refresh):
        table.add_row(info.version, "yes" if info.latest else "")
    console.print(table)
