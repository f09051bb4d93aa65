"""Builds the engine objects shared by CLI commands."""

from pathlib import Path

import typer

from lz4_playground.codec.loader import CodecLoader
from lz4_playground.codec.resolvers import default_resolver
from lz4_playground.config import Config
from lz4_playground.exceptions import ConfigurationError
from lz4_playground.history import HistoryStore
from lz4_playground.orchestrator import ProcessingOrchestrator
from lz4_playground.persistence import FileKeyValueStore


def get_orchestrator(ctx: typer.Context) -> ProcessingOrchestrator:
    """Return the orchestrator for this invocation, creating it on first use."""
    obj = ctx.ensure_object(dict)
    if obj.get("orchestrator") is None:
        config: Config = obj.get("config") or Config()
        data_path = Path(obj.get("data_path") or config.get("data_path")).expanduser()
        storage = FileKeyValueStore(data_path)
        try:
            resolver = default_resolver(config.get("codec_url_template") or None)
        except ConfigurationError as e:
            fail(e.message)
        loader = CodecLoader(resolver, fallback_version=config.get("fallback_codec_version"))
        obj["orchestrator"] = ProcessingOrchestrator(
            loader=loader, history=HistoryStore(storage), storage=storage
        )
    return obj["orchestrator"]


def get_history(ctx: typer.Context) -> HistoryStore:
    return get_orchestrator(ctx).history


def resolve_codec_version(ctx: typer.Context, override: str | None = None) -> str:
    if override:
        return override
    obj = ctx.ensure_object(dict)
    config: Config = obj.get("config") or Config()
    return obj.get("codec_version") or config.get("default_codec_version")


def fail(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)
