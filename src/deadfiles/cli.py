from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Iterable
from contextlib import nullcontext
from dataclasses import asdict
from functools import partial
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.status import Status

from deadfiles import __version__
from deadfiles.errors import DeadFilesError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, console: Console | None = None) -> None:
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(name)s] %(message)s",
        handlers=[handler],
        force=True,
    )


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="deadfiles",
        description=(
            "List files that are never imported, directly or transitively, "
            "from the given entry points. Nothing is modified."
        ),
    )
    parser.add_argument("entry", nargs="*", help="Entry file, directory or module name")
    parser.add_argument("--path", default=".", help="Project root (default: current directory)")
    parser.add_argument(
        "--include",
        action="append",
        default=[],
        help="Glob of candidate files (repeatable, relative to --path)",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        help="Glob of files never traversed or reported (repeatable)",
    )
    parser.add_argument(
        "--search-path",
        action="append",
        default=[],
        help="Extra import root for absolute imports (repeatable)",
    )
    parser.add_argument("--config", help="Config file (default: auto-detect in --path)")
    parser.add_argument("--json", action="store_true", help="Print the full report as JSON")
    parser.add_argument("--output", help="Also write the JSON report to this file")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 when dead files are found",
    )
    parser.add_argument("--progress", action="store_true", help="Show traversal progress")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    console = Console(stderr=True)
    setup_logging(args.verbose, console)

    root = Path(args.path).resolve()
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Path does not exist or is not a directory: {root}")

    from deadfiles.analyzer import default_ignore, find_dead_files, render_text, write_report
    from deadfiles.config import load_config

    try:
        config = load_config(Path(args.config) if args.config else None, root)
        entry = args.entry or config.entry
        include = args.include or config.include
        ignore = config.ignore if config.ignore is not None else default_ignore()
        ignore = ignore + args.ignore

        status = console.status("Traversing...") if args.progress else None
        with status or nullcontext():
            report = find_dead_files(
                entry=entry,
                include=include,
                ignore=ignore,
                on_traverse_file=partial(_report_progress, status),
                root=root,
                search_paths=[*config.search_paths, *args.search_path],
            )
    except DeadFilesError as exc:
        raise SystemExit(str(exc)) from exc

    if args.output:
        write_report(args.output, report)
    if args.json:
        print(json.dumps(asdict(report), indent=2, sort_keys=True))
    else:
        print(render_text(report, root), end="")

    if args.check and report.dead_files:
        return 1
    return 0


def _report_progress(status: Status | None, filename: str) -> None:
    logger.debug("Traversing %s", filename)
    if status is not None:
        status.update(f"Traversing {filename}")


if __name__ == "__main__":
    raise SystemExit(main())
