"""
convex_sdk.cli
==============

Command-line interface for the Convex Python SDK.

The Typer application lives in :mod:`convex_sdk.cli.main` and is loaded lazily
so that importing the library does not import Typer.

Quick usage
-----------
- From Python:
    >>> from convex_sdk.cli import main
    >>> main(["balance", "#9"])

- From shell (installed as a console script):
    $ convex-sdk --help
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, List, Optional

from ..version import __version__

__all__: List[str] = [
    "__version__",
    "main",
    "run",
    "app",  # Typer app (lazy)
]

_SUBMODULE = "convex_sdk.cli.main"


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name == "app":
        return getattr(import_module(_SUBMODULE), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def main(argv: Optional[list[str]] = None) -> int:
    """Execute the CLI and return the process exit code."""
    return int(import_module(_SUBMODULE).main(argv))


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)
