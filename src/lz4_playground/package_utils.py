from __future__ import annotations

"""Codec packages on disk: manifests, module imports and package checks."""

import importlib.util
import re
import sys
import uuid
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, List, Tuple, Type, TYPE_CHECKING

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import CodecLoadError

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from lz4_playground.codec.base import BaseCodec

# ``lz4_playground.codec`` is imported lazily below; the plugin loader pulls
# in this module while the codec package is still initialising.

MANIFEST_FILENAME = "codec_package.yaml"
REQUIREMENTS_FILENAME = "requirements.txt"

_REQUIREMENT_NAME_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


class CodecManifest(BaseModel):
    """Contents of ``codec_package.yaml``."""

    model_config = ConfigDict(extra="allow")

    package_format_version: str
    codec_version: str
    codec_class_name: str
    codec_module: str
    display_name: str
    authors: List[str] = Field(min_length=1)
    description: str

    def module_path(self, package_dir: Path) -> Path:
        return package_dir / f"{self.codec_module}.py"


def load_manifest(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(Path(path).read_text())
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"{Path(path).name} must contain a mapping")
    return dict(data or {})


def validate_manifest(manifest: Dict[str, Any]) -> list[str]:
    """Return one message per manifest problem; empty when it is valid."""
    try:
        CodecManifest.model_validate(manifest)
    except ValidationError as exc:
        return [
            f"{'.'.join(str(p) for p in err['loc']) or 'manifest'}: {err['msg']}"
            for err in exc.errors()
        ]
    return []


def parse_manifest(package_dir: Path) -> CodecManifest:
    """Load and validate the manifest of ``package_dir``."""
    return CodecManifest.model_validate(load_manifest(package_dir / MANIFEST_FILENAME))


def import_module_from_path(name: str, path: Path) -> ModuleType:
    """Import ``path`` as module ``name`` with its directory on ``sys.path``."""
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import module {name} from {path}")
    module = importlib.util.module_from_spec(spec)

    saved_path = list(sys.path)
    sys.path.insert(0, str(Path(path).parent))
    try:
        spec.loader.exec_module(module)
    finally:
        sys.path = saved_path
    return module


def load_codec_class_from_module(
    module_file_path: str | Path, class_name: str
) -> Type["BaseCodec"]:
    """Import ``module_file_path`` and return its ``BaseCodec`` subclass ``class_name``."""
    from lz4_playground.codec.base import BaseCodec

    module_path = Path(module_file_path)
    if not module_path.exists():
        raise FileNotFoundError(f"Codec module not found: {module_path}")

    module = import_module_from_path(
        f"lz4_playground.packages.{module_path.stem}_{uuid.uuid4().hex}", module_path
    )
    cls = getattr(module, class_name, None)
    if cls is None:
        raise ImportError(f"Class {class_name} not found in {module_path.name}")
    if not isinstance(cls, type) or not issubclass(cls, BaseCodec):
        raise TypeError(f"{class_name} is not a BaseCodec subclass")
    return cls


def load_module_codec(version: str, module_file_path: Path) -> "BaseCodec":
    """
    Import a plain codec module and wrap its ``compress``/``decompress``
    functions. A module missing either function is a failed load.
    """
    from lz4_playground.codec.base import ModuleCodec

    try:
        module = import_module_from_path(
            f"lz4_playground.remote.codec_{uuid.uuid4().hex}", Path(module_file_path)
        )
    except Exception as exc:
        raise CodecLoadError(
            f"Failed to import codec module for version {version}",
            details={"path": str(module_file_path), "error": str(exc)},
        ) from exc

    missing = [
        name for name in ("compress", "decompress")
        if not callable(getattr(module, name, None))
    ]
    if missing:
        raise CodecLoadError(
            f"Codec module for version {version} does not export {', '.join(missing)}",
            details={"path": str(module_file_path)},
        )
    return ModuleCodec(version, module)


def missing_requirements(req_file: Path) -> list[str]:
    """Names listed in ``req_file`` that cannot be imported here."""
    if not req_file.exists():
        return []
    missing = []
    for line in req_file.read_text().splitlines():
        line = line.split("#", 1)[0]
        match = _REQUIREMENT_NAME_RE.match(line)
        if not match:
            continue
        name = match.group(1)
        if importlib.util.find_spec(name.replace("-", "_").lower()) is None:
            missing.append(name)
    return missing


def validate_package_dir(package_dir: Path) -> Tuple[list[str], list[str]]:
    """
    Check a codec package directory.

    Returns ``(errors, warnings)``. Errors make the package unusable; a
    missing or unsatisfied ``requirements.txt`` only warns.
    """
    manifest_path = package_dir / MANIFEST_FILENAME
    if not manifest_path.exists():
        return [f"{MANIFEST_FILENAME} not found"], []

    try:
        raw = load_manifest(manifest_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        return [f"Invalid {MANIFEST_FILENAME}: {exc}"], []

    errors = validate_manifest(raw)
    if not errors:
        manifest = CodecManifest.model_validate(raw)
        module_path = manifest.module_path(package_dir)
        if not module_path.exists():
            errors.append(f"{module_path.name} not found")
        else:
            try:
                load_codec_class_from_module(module_path, manifest.codec_class_name)
            except Exception as exc:
                errors.append(str(exc))

    req_file = package_dir / REQUIREMENTS_FILENAME
    if req_file.exists():
        warnings = [f"Requirement not installed: {n}" for n in missing_requirements(req_file)]
    else:
        warnings = [f"{REQUIREMENTS_FILENAME} not found"]
    return errors, warnings


__all__ = [
    "MANIFEST_FILENAME",
    "CodecManifest",
    "load_manifest",
    "validate_manifest",
    "parse_manifest",
    "import_module_from_path",
    "load_codec_class_from_module",
    "load_module_codec",
    "missing_requirements",
    "validate_package_dir",
]
