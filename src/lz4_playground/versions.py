from __future__ import annotations

"""Lookup of published codec versions from the package registry."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .constants import DEFAULT_CODEC_VERSION, DEFAULT_REGISTRY_URL


@dataclass
class VersionInfo:
    version: str
    latest: bool = False
    yanked: bool = False


def parse_semver(version: str) -> Tuple[int, int, int, int, str]:
    """
    Parse a semver string into a sortable key.

    ``"1.2.3-beta.1"`` gives ``(1, 2, 3, 0, "beta.1")``; a release sorts
    above its pre-releases. Build metadata is ignored.

    Raises:
        ValueError: If version is not X.Y.Z with an optional pre-release
    """
    core, _, _build = version.partition("+")
    core, dash, prerelease = core.partition("-")
    parts = core.split(".")
    if len(parts) != 3 or (dash and not prerelease):
        raise ValueError(f"Invalid semver (expected X.Y.Z): {version}")
    try:
        major, minor, patch = (int(p) for p in parts)
    except ValueError as e:
        raise ValueError(f"Invalid semver (non-integer part): {version}") from e
    return major, minor, patch, 0 if prerelease else 1, prerelease


def fallback_versions() -> List[VersionInfo]:
    return [VersionInfo(version=DEFAULT_CODEC_VERSION, latest=True)]


def parse_registry_document(data: Dict[str, Any]) -> List[VersionInfo]:
    """
    Turn a registry ``meta.json`` document into sorted :class:`VersionInfo` items.

    Yanked versions are dropped, the rest are sorted newest first by semantic
    version precedence and the highest one is flagged ``latest``.
    """
    raw_versions = data.get("versions")
    if not isinstance(raw_versions, dict):
        raise ValueError("registry document has no 'versions' mapping")

    parsed = []
    for version, info in raw_versions.items():
        yanked = bool(info.get("yanked", False)) if isinstance(info, dict) else False
        if yanked:
            continue
        try:
            parsed.append((parse_semver(version), version))
        except (ValueError, AttributeError):
            logging.debug("Skipping non-semver registry version %r", version)

    parsed.sort(key=lambda item: item[0], reverse=True)
    versions = [VersionInfo(version=version) for _, version in parsed]
    if versions:
        versions[0].latest = True
    return versions


class VersionRegistry:
    """Fetches and caches the list of available codec versions."""

    def __init__(
        self,
        url: str = DEFAULT_REGISTRY_URL,
        *,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url
        self.client = client
        self.timeout = timeout
        self._cached: Optional[List[VersionInfo]] = None

    def _get_document(self) -> Dict[str, Any]:
        if self.client is not None:
            response = self.client.get(self.url, timeout=self.timeout)
        else:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(self.url)
        response.raise_for_status()
        return response.json()

    def fetch_versions(self, force_refresh: bool = False) -> List[VersionInfo]:
        """
        Return the available versions, newest first.

        Any failure to fetch or parse the registry yields a single fallback
        entry instead of raising; failures are not cached.
        """
        if self._cached is not None and not force_refresh:
            return self._cached
        try:
            versions = parse_registry_document(self._get_document())
            if not versions:
                raise ValueError("registry lists no usable versions")
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            logging.warning("Error fetching versions from %s: %s", self.url, exc)
            return fallback_versions()
        self._cached = versions
        return versions

    def default_version(self) -> str:
        return self.fetch_versions()[0].version


__all__ = [
    "VersionInfo",
    "VersionRegistry",
    "parse_registry_document",
    "fallback_versions",
    "parse_semver",
]
