"""Version lookup for chatstyle."""

import tomllib
from importlib import metadata
from pathlib import Path

_DISTRIBUTION = "chatstyle"
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """
    Version of the source checkout when running from one, else the installed one.

    A pyproject.toml found next to an installed copy belongs to some other
    project, so its [project] name has to match.
    """
    if _PYPROJECT.is_file():
        with open(_PYPROJECT, "rb") as f:
            project = tomllib.load(f).get("project", {})
        if project.get("name") == _DISTRIBUTION and "version" in project:
            return str(project["version"])
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"
