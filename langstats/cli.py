"""CLI entrypoints for langstats commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .classifier import DefaultClassifier
from .config import load_config
from .errors import LangStatsError
from .git.repository import GitRepository
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator

_COMMANDS = {
    "stats": "Print bytes per language as JSON.",
    "breakdown": "Print the language of every counted file as JSON.",
    "dump-cache": "Print the raw cache record as JSON (null when absent).",
    "clear": "Delete the statistics cache.",
    "disable": "Freeze the cache so statistics are never recomputed.",
}

_NO_OUTPUT = object()


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default(False),
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--git-dir",
        default=default(None),
        help="Repository location: a work tree, .git directory or bare repository (defaults to the current directory).",
    )
    parser.add_argument(
        "--commit",
        default=default(None),
        help="Revision to report on (defaults to HEAD).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=default(False),
        help="Ignore the cache and rescan every file.",
    )
    parser.add_argument(
        "--config",
        default=default(None),
        help="Path to a .langstats.yml file (defaults to the work tree root).",
    )
    parser.add_argument(
        "--log-file",
        default=default(None),
        help="Also write debug logs to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="langstats",
        description="Report the language composition of a git repository.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="command")
    for name, help_text in _COMMANDS.items():
        subparser = subparsers.add_parser(name, help=help_text, description=help_text)
        _add_common_options(subparser, suppress_default=True)
    return parser


def open_repository(location: str | None) -> GitRepository:
    """Open the repository named by ``--git-dir``, or the one around the working directory."""
    return GitRepository.discover(Path(location) if location else Path.cwd())


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for langstats commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)
    logger = get_logger("cli")

    try:
        repository = open_repository(args.git_dir)
        if args.config:
            config_path = Path(args.config)
        else:
            config_path = repository.work_tree or repository.git_dir
        config = load_config(config_path)
        classifier = DefaultClassifier(config)
        orchestrator = Orchestrator(repository, classifier, cache_filename=config.cache_file)
        result = _dispatch(orchestrator, args)
    except LangStatsError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        parser.exit(1, f"langstats: {exc}\n")

    if result is not _NO_OUTPUT:
        print(json.dumps(result, separators=(",", ":")))


def _dispatch(orchestrator: Orchestrator, args: argparse.Namespace) -> Any:
    if args.command == "stats":
        return orchestrator.run(args.commit, force=bool(args.force)).languages()
    if args.command == "breakdown":
        return orchestrator.run(args.commit, force=bool(args.force)).breakdown()
    if args.command == "dump-cache":
        raw = orchestrator.dump_raw_cache()
        return list(raw) if raw is not None else None
    if args.command == "clear":
        orchestrator.clear_cache()
        return _NO_OUTPUT
    if args.command == "disable":
        orchestrator.freeze()
        return _NO_OUTPUT
    raise LangStatsError(f"Unknown command {args.command}")  # pragma: no cover - argparse enforces choices


if __name__ == "__main__":
    main(sys.argv[1:])
