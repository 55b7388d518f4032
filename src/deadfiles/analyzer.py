from __future__ import annotations

import glob
import json
import logging
import os
import sysconfig
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, Sequence

from deadfiles.matching import matches
from deadfiles.models import Report
from deadfiles.resolver import ModuleResolver
from deadfiles.traverse import FileCallback, get_dependencies, noop

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".py", ".pyw")
VENDOR_DIRS = [
    "**/site-packages/**",
    "**/dist-packages/**",
    "**/.venv/**",
    "**/venv/**",
    "**/.tox/**",
    "**/.nox/**",
    "**/__pycache__/**",
    "**/node_modules/**",
]


def default_include(root: str | Path) -> list[str]:
    base = glob.escape(Path(root).resolve().as_posix())
    return [f"{base}/**/*{ext}" for ext in SOURCE_EXTENSIONS]


def default_ignore() -> list[str]:
    patterns = list(VENDOR_DIRS)
    for key in ("stdlib", "platstdlib"):
        location = sysconfig.get_paths().get(key)
        if location:
            pattern = glob.escape(Path(os.path.realpath(location)).as_posix()) + "/**"
            if pattern not in patterns:
                patterns.append(pattern)
    return patterns


def find_dead_files(
    entry: str | Path | Sequence[str | Path] = (),
    include: str | Sequence[str] | None = None,
    ignore: str | Sequence[str] | None = None,
    on_traverse_file: FileCallback = noop,
    root: str | Path | None = None,
    search_paths: Iterable[str | Path] = (),
) -> Report:
    root = Path(root or os.getcwd()).resolve()
    entries = _as_list(entry)
    include_patterns = _as_list(include) if include is not None else default_include(root)
    ignore_patterns = _as_list(ignore) if ignore is not None else default_ignore()
    resolver = ModuleResolver.for_project(root, extra=[root / path for path in search_paths])

    with ThreadPoolExecutor(max_workers=2) as executor:
        traversal = executor.submit(
            get_dependencies,
            entries,
            ignore_patterns,
            on_traverse_file,
            root,
            resolver,
        )
        included = executor.submit(get_included_files, include_patterns, ignore_patterns, root)
        dependencies = traversal.result()
        included_files = included.result()

    dead_files = get_dead_files(included_files, dependencies.dependencies)
    logger.info("%d of %d included files are dead", len(dead_files), len(included_files))
    return Report(
        dead_files=dead_files,
        dependencies=dependencies.dependencies,
        dynamic_dependencies=dependencies.dynamic_dependencies,
        unparsed_dependencies=dependencies.unparsed_dependencies,
        unresolved_dependencies=dependencies.unresolved_dependencies,
        ignored_dependencies=dependencies.ignored_dependencies,
    )


def get_included_files(
    include: list[str],
    ignore: list[str],
    root: str | Path | None = None,
) -> list[str]:
    root = Path(root or os.getcwd()).resolve()
    patterns = [
        pattern if os.path.isabs(pattern) else glob.escape(root.as_posix()) + "/" + pattern
        for pattern in include
    ]
    files: list[str] = []
    seen: set[str] = set()
    if not patterns:
        return files
    with ThreadPoolExecutor(max_workers=min(len(patterns), 8)) as executor:
        results = list(executor.map(lambda pattern: _expand(pattern, ignore, root), patterns))
    for result in results:
        for filename in result:
            if filename not in seen:
                seen.add(filename)
                files.append(filename)
    return files


def get_dead_files(included_files: list[str], dependencies: list[str]) -> list[str]:
    reached = set(dependencies)
    return [filename for filename in included_files if filename not in reached]


def write_report(path: str | Path, report: Report) -> None:
    Path(path).write_text(json.dumps(asdict(report), indent=2, sort_keys=True))


def render_text(report: Report, root: str | Path | None = None) -> str:
    root = Path(root).resolve() if root is not None else None
    lines = [
        "# Dead Files",
        "",
    ]
    for name, count in report.summary().items():
        lines.append(f"- {name}: {count}")
    sections = [
        ("Dead files", report.dead_files),
        ("Unresolved imports", report.unresolved_dependencies),
        ("Unparsed files", report.unparsed_dependencies),
        ("Dynamic imports", report.dynamic_dependencies),
    ]
    for title, items in sections:
        if not items:
            continue
        lines.append("")
        lines.append(f"## {title}")
        for item in items:
            lines.append(f"- {_display(item, root)}")
    lines.append("")
    return "\n".join(lines)


def _expand(pattern: str, ignore: list[str], root: Path) -> list[str]:
    found: list[str] = []
    for match in sorted(glob.glob(pattern, recursive=True)):
        if not os.path.isfile(match):
            continue
        filename = os.path.realpath(match)
        if matches(filename, ignore, root):
            continue
        found.append(filename)
    return found


def _display(item: str, root: Path | None) -> str:
    if root is None or not os.path.isabs(item):
        return item
    try:
        return Path(item).relative_to(root).as_posix()
    except ValueError:
        return item


def _as_list(value: object) -> list:
    if value is None:
        return []
    if isinstance(value, (str, os.PathLike)):
        return [value]
    return list(value)  # type: ignore[call-overload]
