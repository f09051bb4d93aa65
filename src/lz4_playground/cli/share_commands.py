import json
from pathlib import Path
from typing import Optional

import typer

from lz4_playground.binary_utils import decode_text_or_base64
from lz4_playground.models import Mode, SessionFields
from lz4_playground.share import build_share_url, encode_share_token, extract_share_token

from .process_commands import result_payload
from .session import fail, get_orchestrator, resolve_codec_version

share_app = typer.Typer(help="Create and open shareable session links.")

DEFAULT_BASE_URL = "https://lz4.nick.dev/"


@share_app.command("create", help="Create a shareable link for an input and its settings.")
def create_command(
    ctx: typer.Context,
    text: Optional[str] = typer.Option(None, "--text", help="Input text"),
    file: Optional[Path] = typer.Option(
        None, "--file", exists=True, dir_okay=False, resolve_path=True, help="Input file"
    ),
    mode: Mode = typer.Option(Mode.COMPRESS, "--mode", "-m", case_sensitive=False, help="Operation mode"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="File name to include"),
    codec_version: Optional[str] = typer.Option(None, "--codec-version", "-c", help="Codec version"),
    include_output: bool = typer.Option(
        False, "--include-output", help="Process the input now and include the result"
    ),
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="Application URL the link points at"),
) -> None:
    if (text is None) == (file is None):
        fail("Specify exactly ONE of --text or --file.")
    data = file.read_bytes() if file is not None else text.encode("utf-8")
    version = resolve_codec_version(ctx, codec_version)
    session = SessionFields(
        input_bytes=data,
        mode=mode,
        codec_version=version,
        file_name=name or (file.name if file is not None else None),
    )
    if include_output:
        result = get_orchestrator(ctx).process(data, mode, version, session.file_name)
        if not result.ok:
            fail(result.error)
        session.output_bytes = result.result_bytes
        session.timestamp = result.timestamp
        session.file_name = result.file_name

    link = encode_share_token(session)
    typer.echo(build_share_url(base_url, link.token))
    if link.truncated:
        typer.secho(
            "Warning: the input is too large to embed; the link only carries the configuration.",
            fg=typer.colors.YELLOW,
            err=True,
        )


@share_app.command("open", help="Open a shared link or token, processing its input if needed.")
def open_command(
    ctx: typer.Context,
    link: str = typer.Argument(..., help="Shared URL or bare token"),
    json_output: bool = typer.Option(False, "--json", help="Print the outcome as JSON"),
) -> None:
    token = extract_share_token(link) if "://" in link or "?" in link else link
    if token is None:
        fail("The link has no shared state.")
    opened = get_orchestrator(ctx).open_shared(token)
    session = opened.decoded.session

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "mode": session.mode.value,
                    "version": session.codec_version,
                    "file_name": session.file_name,
                    "timestamp": session.timestamp,
                    "payload_omitted": opened.decoded.payload_omitted,
                    "warning": opened.warning,
                    "result": result_payload(opened.result) if opened.result else None,
                }
            )
        )
        if opened.result is not None and not opened.result.ok:
            raise typer.Exit(code=1)
        return

    if opened.warning:
        typer.secho(f"Shared Link Warning: {opened.warning}", fg=typer.colors.YELLOW, err=True)
    if opened.decoded.error is not None:
        raise typer.Exit(code=1)
    typer.echo(f"Mode: {session.mode.value}")
    typer.echo(f"Codec version: {session.codec_version}")
    if session.file_name:
        typer.echo(f"File name: {session.file_name}")
    if opened.result is not None:
        if not opened.result.ok:
            fail(opened.result.error)
        typer.echo(opened.result.output_text)
    elif session.output_bytes is not None:
        typer.echo(decode_text_or_base64(session.output_bytes)[0])
