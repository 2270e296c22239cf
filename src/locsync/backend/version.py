"""Report the locsync version for ``/health`` and the command line tools."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "locsync"

_PROJECT_TABLE = re.compile(r"^\[project\]\s*$(?P<body>.*?)(?=^\[|\Z)", re.MULTILINE | re.DOTALL)
_VERSION_KEY = re.compile(r"^version\s*=\s*[\"'](?P<version>[^\"']+)[\"']", re.MULTILINE)


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed distribution version or the checkout's declared one."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return version_from_pyproject(_find_pyproject())


def _find_pyproject() -> Path:
    for directory in Path(__file__).resolve().parents:
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise RuntimeError(f"No pyproject.toml found above {Path(__file__).parent}")


def version_from_pyproject(path: Path) -> str:
    """Read ``[project].version`` from ``path``."""

    table = _PROJECT_TABLE.search(path.read_text(encoding="utf-8"))
    match = _VERSION_KEY.search(table.group("body")) if table else None
    if match is None:
        raise RuntimeError(f"{path} does not declare a project version")
    return match.group("version")


__all__ = ["get_project_version", "version_from_pyproject"]
