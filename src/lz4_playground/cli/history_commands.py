from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lz4_playground.history import ALL_VERSIONS, HistoryFilter

from .session import fail, get_history

console = Console()

history_app = typer.Typer(help="Inspect and edit the history of processed operations.")


def _filter(compress: bool, decompress: bool, version: str, name: str) -> HistoryFilter:
    return HistoryFilter(
        include_compress=compress,
        include_decompress=decompress,
        version=version,
        file_name_query=name,
    )


def _per_page(ctx: typer.Context, per_page: Optional[int]) -> int:
    if per_page is not None:
        return per_page
    return int(ctx.obj["config"].get("history_page_size"))


def _format_ts(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


_COMPRESS_OPT = typer.Option(True, "--compress/--no-compress", help="Include compress operations")
_DECOMPRESS_OPT = typer.Option(True, "--decompress/--no-decompress", help="Include decompress operations")
_VERSION_OPT = typer.Option(ALL_VERSIONS, "--version", help="Only show this codec version, or 'all'")
_NAME_OPT = typer.Option("", "--name", help="Case-insensitive file name filter")
_PAGE_OPT = typer.Option(1, "--page", min=1, help="Page number")
_PER_PAGE_OPT = typer.Option(None, "--per-page", min=1, help="Entries per page")


@history_app.command("list", help="List recorded operations, newest first.")
def list_command(
    ctx: typer.Context,
    compress: bool = _COMPRESS_OPT,
    decompress: bool = _DECOMPRESS_OPT,
    version: str = _VERSION_OPT,
    name: str = _NAME_OPT,
    page: int = _PAGE_OPT,
    per_page: Optional[int] = _PER_PAGE_OPT,
) -> None:
    history = get_history(ctx)
    result = history.page(
        _filter(compress, decompress, version, name),
        page=page,
        per_page=_per_page(ctx, per_page),
    )
    if not result.entries:
        typer.echo("No history entries found.")
        return
    table = Table("#", "Time", "Mode", "Version", "File", "Original", "Result", "Ratio", "MB/s",
                  title="Compression History")
    for idx, entry in enumerate(result.entries):
        table.add_row(
            str(idx),
            _format_ts(entry.timestamp),
            entry.mode.value,
            entry.codec_version,
            entry.file_name or "-",
            str(entry.original_size),
            str(entry.result_size),
            f"{entry.ratio:.3f}",
            f"{entry.throughput_mbps:.2f}",
        )
    console.print(table)
    if result.total_pages > 1:
        end = min(result.start_index + result.per_page, result.total)
        typer.echo(
            f"Showing {result.start_index + 1}-{end} of {result.total} entries "
            f"(page {result.page} of {result.total_pages})"
        )


@history_app.command("delete", help="Delete the entry shown at INDEX of the filtered page.")
def delete_command(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Index as shown by 'history list' with the same filters"),
    compress: bool = _COMPRESS_OPT,
    decompress: bool = _DECOMPRESS_OPT,
    version: str = _VERSION_OPT,
    name: str = _NAME_OPT,
    page: int = _PAGE_OPT,
    per_page: Optional[int] = _PER_PAGE_OPT,
) -> None:
    history = get_history(ctx)
    try:
        removed = history.delete_at(
            index,
            _filter(compress, decompress, version, name),
            page=page,
            per_page=_per_page(ctx, per_page),
        )
    except IndexError as e:
        fail(str(e))
    typer.secho(
        f"Deleted {removed.mode.value} entry {removed.file_name or '-'} ({removed.codec_version})",
        fg=typer.colors.GREEN,
    )


@history_app.command("clear", help="Delete every history entry.")
def clear_command(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    if not yes and not typer.confirm("Clear the entire history?"):
        raise typer.Exit(code=1)
    get_history(ctx).clear()
    typer.secho("History cleared.", fg=typer.colors.GREEN)


@history_app.command("rename", help="Correct the file name recorded for an entry.")
def rename_command(
    ctx: typer.Context,
    new_name: str = typer.Argument(..., help="New file name"),
    timestamp: Optional[int] = typer.Option(None, "--timestamp", "-t", help="Timestamp (epoch ms) of the entry"),
    old_name: Optional[str] = typer.Option(None, "--old-name", help="Current file name, used when no timestamp is given"),
) -> None:
    if timestamp is None and old_name is None:
        fail("Specify --timestamp or --old-name.")
    if get_history(ctx).rename_by_timestamp(timestamp, old_name, new_name):
        typer.secho(f"Renamed entry to {new_name}", fg=typer.colors.GREEN)
    else:
        typer.echo("No matching entry was changed.")


@history_app.command("stats", help="Average ratio and throughput per codec version.")
def stats_command(ctx: typer.Context) -> None:
    summary = get_history(ctx).summarize_by_version()
    if not summary:
        typer.echo("No history entries found.")
        return
    table = Table("Version", "Operations", "Avg ratio", "Avg MB/s", title="Version Comparison")
    for row in summary:
        table.add_row(
            row["version"],
            str(row["count"]),
            f"{row['avg_ratio']:.3f}",
            f"{row['avg_throughput_mbps']:.2f}",
        )
    console.print(table)
