import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lz4_playground.binary_utils import encode_base64, is_binary_data, is_likely_base64
from lz4_playground.models import Mode, PerformanceMetrics, ProcessResult

from .session import fail, get_orchestrator, resolve_codec_version

console = Console()

process_app = typer.Typer(help="Compress or decompress text, files or built-in samples.")


def metrics_table(metrics: PerformanceMetrics, mode: Mode) -> Table:
    table = Table("Metric", "Value", title="Performance Metrics")
    table.add_row("Codec version", metrics.codec_version)
    table.add_row("Original size", f"{metrics.original_size} B")
    table.add_row("Result size", f"{metrics.result_size} B")
    ratio_label = "Space saved" if mode is Mode.COMPRESS else "Expansion"
    ratio_value = f"{metrics.ratio:.1%}" if mode is Mode.COMPRESS else f"{metrics.ratio:.3f}x"
    table.add_row(ratio_label, ratio_value)
    table.add_row("Duration", f"{metrics.duration_ms:.3f} ms")
    table.add_row("Throughput", f"{metrics.throughput_mbps:.2f} MB/s")
    return table


def result_payload(result: ProcessResult) -> dict:
    return {
        "mode": result.mode.value,
        "version": result.version,
        "file_name": result.file_name,
        "timestamp": result.timestamp,
        "output": result.output_text,
        "output_is_base64": result.output_is_base64,
        "metrics": result.metrics.to_dict() if result.metrics else None,
    }


def _read_input(
    ctx: typer.Context,
    mode: Mode,
    version: str,
    text: Optional[str],
    file: Optional[Path],
    sample: Optional[str],
    base64_flag: Optional[bool],
):
    """Return ``(data, file_name, is_base64)`` for exactly one input source."""
    if sum(x is not None for x in (text, file, sample)) != 1:
        fail("Specify exactly ONE of --text, --file, or --sample.")

    if file is not None:
        return file.read_bytes(), file.name, False

    if sample is not None:
        try:
            prepared = get_orchestrator(ctx).prepare_sample(sample, mode, version)
        except ValueError as e:
            fail(str(e))
        return prepared.text, prepared.file_name, prepared.is_base64

    if text == "-":
        text = sys.stdin.read()
    if base64_flag is None:
        base64_flag = mode is Mode.DECOMPRESS and is_likely_base64(text.strip())
    return text, None, base64_flag


def run_process(
    ctx: typer.Context,
    mode: Mode,
    *,
    text: Optional[str],
    file: Optional[Path],
    sample: Optional[str],
    base64_flag: Optional[bool],
    name: Optional[str],
    codec_version: Optional[str],
    output: Optional[Path],
    json_output: bool,
) -> None:
    version = resolve_codec_version(ctx, codec_version)
    data, source_name, is_base64 = _read_input(
        ctx, mode, version, text, file, sample, base64_flag
    )
    orchestrator = get_orchestrator(ctx)
    result = orchestrator.process(
        data, mode, version, name or source_name, is_base64=is_base64
    )
    if not result.ok:
        fail(result.error)

    if output is not None:
        target = output / result.file_name if output.is_dir() else output
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(result.result_bytes)

    if json_output:
        typer.echo(json.dumps(result_payload(result)))
        return

    if output is None:
        if not result.output_is_base64 and is_binary_data(result.result_bytes):
            typer.secho("Output looks binary; showing it as base64.", fg=typer.colors.YELLOW, err=True)
            typer.echo(encode_base64(result.result_bytes))
        else:
            typer.echo(result.output_text)
    else:
        typer.secho(f"Saved output to {target}", fg=typer.colors.GREEN)
    if result.version != version:
        typer.secho(
            f"Warning: codec {version} could not be loaded; used {result.version} instead.",
            fg=typer.colors.YELLOW,
            err=True,
        )
    console.print(metrics_table(result.metrics, mode))
    typer.echo(f"Recorded as {result.file_name}")


_TEXT_HELP = "Text to process or '-' to read from stdin"


@process_app.command("compress", help="Compress input and print the result as base64.")
def compress_command(
    ctx: typer.Context,
    text: Optional[str] = typer.Option(None, "--text", help=_TEXT_HELP),
    file: Optional[Path] = typer.Option(
        None, "--file", exists=True, dir_okay=False, resolve_path=True, help="Path to an input file"
    ),
    sample: Optional[str] = typer.Option(None, "--sample", help="ID of a built-in sample"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="File name recorded in history"),
    codec_version: Optional[str] = typer.Option(None, "--codec-version", "-c", help="Codec version to use"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", resolve_path=True, help="Write the result bytes to this file or directory"),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    run_process(
        ctx,
        Mode.COMPRESS,
        text=text,
        file=file,
        sample=sample,
        base64_flag=False,
        name=name,
        codec_version=codec_version,
        output=output,
        json_output=json_output,
    )


@process_app.command("decompress", help="Decompress input and print it as text, or base64 for binary output.")
def decompress_command(
    ctx: typer.Context,
    text: Optional[str] = typer.Option(None, "--text", help=_TEXT_HELP),
    file: Optional[Path] = typer.Option(
        None, "--file", exists=True, dir_okay=False, resolve_path=True, help="Path to a compressed file"
    ),
    sample: Optional[str] = typer.Option(None, "--sample", help="ID of a built-in sample, compressed on the fly"),
    base64_flag: Optional[bool] = typer.Option(
        None,
        "--base64/--no-base64",
        help="Treat --text as base64. Detected automatically when omitted.",
        show_default=False,
    ),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="File name recorded in history"),
    codec_version: Optional[str] = typer.Option(None, "--codec-version", "-c", help="Codec version to use"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", resolve_path=True, help="Write the result bytes to this file or directory"),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    run_process(
        ctx,
        Mode.DECOMPRESS,
        text=text,
        file=file,
        sample=sample,
        base64_flag=base64_flag,
        name=name,
        codec_version=codec_version,
        output=output,
        json_output=json_output,
    )


@process_app.command("samples", help="List the built-in samples.")
def samples_command() -> None:
    from lz4_playground.samples import list_samples

    table = Table("ID", "Name", "File", "Size", title="Samples")
    for s in list_samples():
        table.add_row(s.id, s.name, s.file_name, f"{len(s.data.encode('utf-8'))} B")
    console.print(table)
