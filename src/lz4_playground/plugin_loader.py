from __future__ import annotations

"""Discovery and registration of codec plugins.

Plugins come from two places: the ``lz4_playground.codecs`` entry-point
group, where the entry-point name is the codec version it implements, and
codec package directories found under the paths in
``LZ4_PLAYGROUND_PLUGINS_PATH`` and the user plugin directory.
"""

import importlib.metadata as metadata
import logging
import os
from pathlib import Path
from typing import Iterator, Tuple, Type

from platformdirs import user_data_dir

from lz4_playground.codec.base import BaseCodec
from lz4_playground.codec.registry import get_codec_metadata, register_codec
from .package_utils import load_codec_class_from_module, parse_manifest, validate_package_dir

PLUGIN_ENV_VAR = "LZ4_PLAYGROUND_PLUGINS_PATH"
ENTRYPOINT_GROUP = "lz4_playground.codecs"
DEFAULT_PLUGIN_DIR = Path(user_data_dir("lz4_playground", "LZ4Playground")) / "plugins"

_loaded = False


def load_plugins() -> None:
    """Register every discoverable codec plugin once per process."""
    global _loaded
    if _loaded:
        return
    _loaded = True

    _load_entrypoint_plugins()
    _load_local_plugins()


def _register_plugin(version: str, cls: Type[BaseCodec], display_name: str, source: str) -> None:
    previous = get_codec_metadata(version)
    if previous:
        logging.info(
            "Codec %s from %s replaces the one from %s",
            version,
            source,
            previous.get("source"),
        )
    register_codec(version, cls, display_name=display_name, source=source)


def _entry_points():
    return metadata.entry_points(group=ENTRYPOINT_GROUP)


def _load_entrypoint_plugins() -> None:
    for ep in _entry_points():
        try:
            cls = ep.load()
            if not isinstance(cls, type) or not issubclass(cls, BaseCodec):
                raise TypeError(f"{ep.value} is not a BaseCodec subclass")
            dist = getattr(ep, "dist", None)
            dist_name = dist.metadata.get("Name") if dist is not None else None
            _register_plugin(
                ep.name,
                cls,
                getattr(cls, "display_name", ep.name),
                f"plugin ({dist_name or 'unknown'})",
            )
        except Exception as exc:
            logging.warning("Failed to load codec entry point %s: %s", ep.value, exc)


def _plugin_roots() -> Iterator[Tuple[Path, str]]:
    for raw in filter(None, os.getenv(PLUGIN_ENV_VAR, "").split(os.pathsep)):
        root = Path(raw).expanduser()
        yield root, f"local ({root.name})"
    yield DEFAULT_PLUGIN_DIR, f"local ({DEFAULT_PLUGIN_DIR.name})"


def _load_local_plugins() -> None:
    for root, source in _plugin_roots():
        if not root.is_dir():
            continue
        for pkg_dir in sorted(p for p in root.iterdir() if p.is_dir()):
            errors, warnings = validate_package_dir(pkg_dir)
            if errors:
                logging.warning("Skipping codec package %s: %s", pkg_dir, "; ".join(errors))
                continue
            for warning in warnings:
                logging.debug("Codec package %s: %s", pkg_dir, warning)
            try:
                manifest = parse_manifest(pkg_dir)
                cls = load_codec_class_from_module(
                    manifest.module_path(pkg_dir), manifest.codec_class_name
                )
            except Exception as exc:
                logging.warning("Failed loading codec package %s: %s", pkg_dir, exc)
                continue
            _register_plugin(manifest.codec_version, cls, manifest.display_name, source)


__all__ = [
    "load_plugins",
    "PLUGIN_ENV_VAR",
    "ENTRYPOINT_GROUP",
    "DEFAULT_PLUGIN_DIR",
]
