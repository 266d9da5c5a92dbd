"""Plantswap API version string."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "plantswap-api"

# src/api/infrastructure/version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"


def get_version() -> str:
    """Return the installed distribution's version.

    A source checkout that was never installed reads ``[project].version``
    from the repository's ``pyproject.toml``.
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        with _PYPROJECT.open("rb") as f:
            return tomllib.load(f)["project"]["version"]


__version__ = get_version()
