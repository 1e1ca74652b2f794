"""Project-level configuration from pyproject.toml.

Reads the [tool.meshsync] section and merges it onto the default viewer
settings, e.g.::

    [tool.meshsync]
    url = "http://192.168.0.1:8080/netjson"
    edge_suffix = "bit/s"
    poll_interval_ms = 2000

    [tool.meshsync.node_prefix]
    ipv4 = "192.168.0."
"""

from __future__ import annotations

import sys
from pathlib import Path

from meshsync.settings import ViewerSettings


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> ViewerSettings:
    """Load [tool.meshsync] from the nearest pyproject.toml.

    Returns default settings if no pyproject.toml or no [tool.meshsync] section.
    """
    path = find_pyproject(start)
    if path is None:
        return ViewerSettings()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return ViewerSettings()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("meshsync", {})
    if not section:
        return ViewerSettings()

    return ViewerSettings.from_mapping(section)
