"""Manages the discovery of the optional RegexSolve project directory."""
# src/regexsolve/paths.py

from pathlib import Path
from typing import Final

CONFIG_FILE_NAMES: Final[list[str]] = ["config.yaml", "config.yml"]
PROJECT_SUBDIR: Final[Path] = Path(".regexsolve")


def find_project_root(start_path: Path | None = None) -> Path:
    """
    Find the project root by searching upwards from the start_path (or CWD) for the '.regexsolve' anchor.

    The directory containing a '.regexsolve' directory with a config file is considered the project root.

    Args:
        start_path: The path to start searching from. Defaults to CWD.

    Raises:
        FileNotFoundError: If no anchor config file is found in any parent directory.

    """
    current_dir = (start_path or Path.cwd()).resolve()
    for parent in [current_dir, *current_dir.parents]:
        project_dir = parent / PROJECT_SUBDIR
        if project_dir.is_dir():
            for config_file in CONFIG_FILE_NAMES:
                if (project_dir / config_file).is_file():
                    return parent

    msg = f"Could not find a configuration file ({' or '.join(CONFIG_FILE_NAMES)}) in a '{PROJECT_SUBDIR}' directory from {current_dir} upwards."
    raise FileNotFoundError(msg)


def get_config_file_path(root_path: Path | None = None) -> Path:
    """Find and return the full path to the config.yaml or config.yml file."""
    project_dir = find_project_root(root_path) / PROJECT_SUBDIR
    for config_file in CONFIG_FILE_NAMES:
        path = project_dir / config_file
        if path.is_file():
            return path
    # Unreachable if find_project_root() succeeded.
    msg = "Configuration file disappeared after being found."
    raise FileNotFoundError(msg)


def get_log_dir(root_path: Path | None = None) -> Path:
    """Return the path to the log directory."""
    return find_project_root(root_path) / PROJECT_SUBDIR / "logs"


def ensure_dir_exists(path: Path) -> None:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
