"""Command-line entry point for ``cloze``."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from importlib import metadata
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.text import Text

from .core.config import CONFIG_FILENAME, ClozeError, load_config
from .core.files import discover_files
from .core.logging import configure_logger, release_logger
from .core.workspace import WorkspaceError, ensure_workspace
from .extractor import count_by_file, extract
from .runner import InputProvider, NoResourcesError, display_path, run_round
from .store import STATE_FILENAME, load_state, save_state

LOGGER_NAME = "code_cloze.cli"
ROUNDS = 1


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloze",
        description=(
            "Quiz yourself on code blocks from Markdown notes: one line is "
            "blanked out and you type it back."
        ),
        epilog=(
            f"Reads {CONFIG_FILENAME} (JSON, e.g. {{\"files\": \"docs/*.md\"}}) "
            f"and keeps state in {STATE_FILENAME}, both in the working "
            "directory by default."
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Path to the config file (defaults to ./{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--state",
        type=Path,
        help=f"Path to the state file (defaults to ./{STATE_FILENAME}).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the data directory that holds log files.",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for the run (overrides log_level in the config).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log output to stderr.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Print the installed version and exit.",
    )
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    err_console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
    rng: Optional[random.Random] = None,
    cwd: Optional[Path] = None,
) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    args = build_arg_parser().parse_args(args_list)

    console = console or Console()
    err_console = err_console or Console(stderr=True)

    if args.version:
        console.print(_package_version(), markup=False, highlight=False)
        return 0

    workdir = (cwd or Path.cwd()).resolve()

    try:
        layout = ensure_workspace(path=args.workspace)
    except WorkspaceError as exc:
        _report(err_console, exc)
        return 1

    logger, _ = configure_logger(
        LOGGER_NAME,
        log_dir=layout.path_for("logs"),
        level=args.log_level or "INFO",
        verbose=args.verbose,
        filename="cloze.log",
    )
    logger.debug("cloze CLI invoked", extra={"cwd": workdir})

    try:
        return _run(
            args,
            workdir=workdir,
            layout_logs=layout.path_for("logs"),
            logger=logger,
            console=console,
            err_console=err_console,
            input_provider=input_provider,
            rng=rng,
        )
    except ClozeError as exc:
        logger.error(str(exc), extra={"error": type(exc).__name__})
        _report(err_console, exc)
        return 1
    except Exception as exc:
        logger.exception("cloze run failed")
        _report(err_console, exc)
        return 1
    finally:
        release_logger(logger)


def _run(
    args: argparse.Namespace,
    *,
    workdir: Path,
    layout_logs: Path,
    logger: logging.Logger,
    console: Console,
    err_console: Console,
    input_provider: Optional[InputProvider],
    rng: Optional[random.Random],
) -> int:
    config = load_config(args.config, cwd=workdir)
    if args.log_level is None:
        configure_logger(
            LOGGER_NAME,
            log_dir=layout_logs,
            level=config.log_level,
            verbose=args.verbose,
            filename="cloze.log",
        )
    logger.info("config loaded", extra={"config": config.path})
    if config.ignored_keys:
        logger.warning(
            "ignoring unknown config keys",
            extra={"keys": list(config.ignored_keys)},
        )

    files = discover_files(config.patterns, root=workdir)
    logger.info(
        "files discovered",
        extra={"pattern": config.pattern, "count": len(files)},
    )

    state_path = _resolve(args.state, workdir, STATE_FILENAME)
    state = load_state(state_path)

    resources = extract(files)
    logger.info(
        "code blocks extracted",
        extra={
            "count": len(resources),
            "per_file": {
                display_path(path, workdir): count
                for path, count in count_by_file(resources).items()
            },
        },
    )
    if not resources:
        raise NoResourcesError(
            f'no code blocks found in files matching "{config.pattern}"'
        )

    for _ in range(ROUNDS):
        result = run_round(
            resources,
            console,
            input_provider,
            err_console=err_console,
            rng=rng,
            cwd=workdir,
        )
        resource = result.round.resource
        logger.info(
            "round finished",
            extra={
                "source": display_path(resource.source_path, workdir),
                "block": resource.sequence_index,
                "line": result.round.line_index,
                "outcome": result.outcome,
            },
        )

    save_state(state_path, state)
    logger.debug("state saved", extra={"path": state_path})
    return 0


def _resolve(path: Optional[Path], workdir: Path, default_name: str) -> Path:
    if path is None:
        return workdir / default_name
    path = path.expanduser()
    return path if path.is_absolute() else workdir / path


def _report(err_console: Console, exc: BaseException) -> None:
    err_console.print(Text.assemble(("Error: ", "bold red"), str(exc)))


def _package_version() -> str:
    try:
        return metadata.version("code-cloze")
    except metadata.PackageNotFoundError:
        return "unknown"


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
