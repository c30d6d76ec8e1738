"""
Version of the Convex Python SDK.

``__version__`` is the release this source tree declares. When the SDK runs
from an installed distribution, :func:`version_info` also reports the version
recorded in the package metadata, so an editable checkout that drifted from
its install is visible in ``convex-sdk version``.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from typing import Optional

# Bump this when publishing
__version__ = "0.3.0"

DISTRIBUTION = "convex-sdk"
USER_AGENT_PRODUCT = "convex-sdk-py"


@dataclass(frozen=True)
class VersionInfo:
    source: str
    installed: Optional[str] = None

    def __str__(self) -> str:
        if self.installed is None or self.installed == self.source:
            return self.source
        return f"{self.source} (installed {self.installed})"


def _installed_version() -> Optional[str]:
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return None


def version_info() -> VersionInfo:
    return VersionInfo(source=__version__, installed=_installed_version())


def version() -> str:
    """Human-friendly string, e.g. '0.3.0' or '0.3.0 (installed 0.2.1)'."""
    return str(version_info())


def user_agent() -> str:
    """Default ``User-Agent`` sent to nodes."""
    return f"{USER_AGENT_PRODUCT}/{__version__}"


__all__ = ["__version__", "VersionInfo", "version_info", "version", "user_agent"]
