"""
Version of the tyronzil distribution.
"""
import importlib.metadata
from pathlib import Path

import tomli

DEFAULT_VERSION = "0.2.0"
PYPROJECT_PATH = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _pyproject_version(path: Path = PYPROJECT_PATH) -> str:
    """Version declared by a source checkout's pyproject.toml."""
    try:
        return tomli.loads(path.read_text(encoding="utf-8"))["project"]["version"]
    except (OSError, KeyError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION


def get_version() -> str:
    try:
        return importlib.metadata.version("tyronzil")
    except importlib.metadata.PackageNotFoundError:
        # Running from a checkout that was never installed
        return _pyproject_version()


__version__ = get_version()
