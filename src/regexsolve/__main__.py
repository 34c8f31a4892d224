"""Main entry point for the RegexSolve command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from . import __version__, paths
from .config import SolverConfig, load_config
from .logging_utils import setup_logging
from .solver import BatchTooLargeError, solve_payload
from .templates import DEFAULT_CONFIG_YAML

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the RegexSolve CLI.

    Returns:
        argparse.Namespace: An object containing the parsed command-line arguments.

    """
    parser = argparse.ArgumentParser(description="RegexSolve: run regular expressions and report character-indexed matches")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"RegexSolve {__version__}",
        help="Show the version number and exit.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'init' command
    init_parser = subparsers.add_parser("init", help="Create a default configuration file.")
    init_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="The directory to initialize (default: current directory).",
    )
    init_parser.add_argument("--debug", action="store_true", help="Enable debug level logging.")

    # 'solve' command
    solve_parser = subparsers.add_parser("solve", help="Solve a JSON request and print the JSON response.")
    solve_parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="A file holding the JSON request, or '-' for stdin (default).",
    )
    solve_parser.add_argument("--data", help="The JSON request passed inline. Takes precedence over FILE.")
    solve_parser.add_argument("--config", help="Path to a configuration file. Defaults to the project configuration, if any.")
    solve_parser.add_argument("--indent", type=int, default=None, help="Pretty-print the response with this indent.")
    solve_parser.add_argument("--debug", action="store_true", help="Enable debug level logging.")

    args_list = sys.argv[1:] if argv is None else argv
    if not args_list:
        parser.print_help(sys.stderr)
        sys.exit(1)

    return parser.parse_args(args_list)


def _init_project(target_path: str) -> None:
    """Write a default configuration file into the target directory."""
    path = Path(target_path).resolve()
    logger.info("Initializing RegexSolve project in: %s", path)

    config_dir = path / paths.PROJECT_SUBDIR
    config_file = config_dir / paths.CONFIG_FILE_NAMES[0]

    if config_file.exists():
        logger.warning("Configuration file already exists at: %s", config_file)
        return

    try:
        paths.ensure_dir_exists(config_dir)
        config_file.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
        logger.info("Created default configuration at: %s", config_file)
    except OSError:
        logger.exception("Failed to initialize project")
        sys.exit(1)


def _load_config(config_path: str | None) -> SolverConfig:
    """
    Load the configuration from an explicit path or the discovered project.

    Falls back to the defaults when no path is given and no project is found.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ValueError: If the configuration is invalid.

    """
    if config_path is not None:
        logger.debug("Loading configuration from: %s", config_path)
        return load_config(config_path)

    try:
        discovered = paths.get_config_file_path()
    except FileNotFoundError:
        logger.debug("No project configuration found; using defaults.")
        return SolverConfig()

    logger.debug("Loading configuration from: %s", discovered)
    return load_config(str(discovered))


def _read_request(args: argparse.Namespace) -> dict[str, Any]:
    """
    Read and decode the JSON request named by the arguments.

    Raises:
        ValueError: If the input is not a JSON object.

    """
    if args.data is not None:
        raw = args.data
    elif args.file == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(args.file).read_text(encoding="utf-8")

    payload = json.loads(raw)
    if not isinstance(payload, dict):
        msg = "The request must be a JSON object."
        raise ValueError(msg)  # noqa: TRY004
    return payload


def _solve(args: argparse.Namespace) -> None:
    """Run the 'solve' command, exiting with status 1 on any request or configuration error."""
    try:
        config = _load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError):
        logger.exception("Could not load the configuration.")
        sys.exit(1)

    try:
        payload = _read_request(args)
    except (OSError, ValueError):
        # json.JSONDecodeError is a ValueError
        logger.exception("Could not read the request.")
        sys.exit(1)

    try:
        response = solve_payload(payload, config)
    except ValidationError as e:
        logger.error("Invalid request: %s", e)  # noqa: TRY400
        sys.exit(1)
    except BatchTooLargeError as e:
        logger.error("Rejected request: %s", e)  # noqa: TRY400
        sys.exit(1)

    sys.stdout.write(json.dumps(response, ensure_ascii=False, indent=args.indent) + "\n")


def main(argv: list[str] | None = None) -> None:
    """
    Run the main entry point for the RegexSolve command-line interface.

    1. Parses command-line arguments.
    2. Configures logging.
    3. Runs the selected command.
    """
    args = _parse_args(argv)
    setup_logging(version=__version__, debug=getattr(args, "debug", False))

    try:
        if args.command == "init":
            init_path = Path(args.path).resolve()
            if not init_path.is_dir():
                logger.error("Path is not a directory: %s", init_path)
                sys.exit(1)
            _init_project(str(init_path))
            return

        _solve(args)
    except Exception:
        logger.exception("An unexpected error occurred")
        logger.critical("An unrecoverable error occurred. Please check the logs for details.")
        sys.exit(1)


if __name__ == "__main__":
    main()
