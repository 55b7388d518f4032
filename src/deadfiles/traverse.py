"""Breadth-first walk of the import graph from a set of entry points.

Files are processed strictly one at a time. A file is enqueued at most once:
targets that are already pending or already visited are never queued again,
which also keeps cyclic imports from looping.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable

from deadfiles.errors import ParseError, UnresolvedSpecifierError
from deadfiles.matching import matches
from deadfiles.models import Dependencies
from deadfiles.resolver import ModuleResolver
from deadfiles.source import analyze, parse_source

logger = logging.getLogger(__name__)

FileCallback = Callable[[str], object]


def noop(filename: str) -> None:
    return None


class _Traversal:
    def __init__(self, entries: list[str]) -> None:
        self.queue: deque[str] = deque(entries)
        self.pending: set[str] = set(entries)
        self.visited: set[str] = set()
        self.dependencies: list[str] = []
        self.dynamic_dependencies: list[str] = []
        self.unparsed_dependencies: list[str] = []
        self.unresolved_dependencies: list[str] = []
        self.ignored_dependencies: list[str] = []
        self._unresolved: set[str] = set()

    def next(self) -> str:
        filename = self.queue.popleft()
        self.pending.discard(filename)
        return filename

    def visit(self, filename: str) -> None:
        self.visited.add(filename)
        self.dependencies.append(filename)

    def enqueue(self, filename: str) -> None:
        if filename in self.pending or filename in self.visited:
            return
        self.pending.add(filename)
        self.queue.append(filename)

    def unresolved(self, specifier: str) -> None:
        if specifier not in self._unresolved:
            self._unresolved.add(specifier)
            self.unresolved_dependencies.append(specifier)

    def result(self) -> Dependencies:
        return Dependencies(
            dependencies=self.dependencies,
            dynamic_dependencies=self.dynamic_dependencies,
            unparsed_dependencies=self.unparsed_dependencies,
            unresolved_dependencies=self.unresolved_dependencies,
            ignored_dependencies=self.ignored_dependencies,
        )


def get_dependencies(
    entry: Iterable[str | Path],
    ignore: list[str],
    on_traverse_file: FileCallback = noop,
    root: str | Path | None = None,
    resolver: ModuleResolver | None = None,
) -> Dependencies:
    root = Path(root or os.getcwd()).resolve()
    if resolver is None:
        resolver = ModuleResolver.for_project(root)
    entries = resolve_entries(entry, root, resolver)
    resolver.extend([os.path.dirname(filename) for filename in entries], first=True)

    state = _Traversal(list(dict.fromkeys(entries)))
    while state.queue:
        filename = state.next()

        if matches(filename, ignore, root):
            logger.debug("Ignoring %s", filename)
            state.visit(filename)
            state.ignored_dependencies.append(filename)
            continue

        state.visit(filename)
        on_traverse_file(filename)
        _traverse_file(state, filename, resolver)

    logger.info(
        "Traversed %d files (%d unparsed, %d unresolved, %d ignored)",
        len(state.dependencies),
        len(state.unparsed_dependencies),
        len(state.unresolved_dependencies),
        len(state.ignored_dependencies),
    )
    return state.result()


def resolve_entries(
    entry: Iterable[str | Path],
    root: Path,
    resolver: ModuleResolver,
) -> list[str]:
    entry = list(entry)
    if not entry:
        return []
    with ThreadPoolExecutor(max_workers=min(len(entry), 8)) as executor:
        return list(executor.map(lambda item: resolver.resolve_entry(item, root), entry))


def _traverse_file(state: _Traversal, filename: str, resolver: ModuleResolver) -> None:
    source = _read(filename)
    try:
        analysis = analyze(parse_source(source, filename))
    except ParseError as exc:
        logger.debug("%s", exc)
        state.unparsed_dependencies.append(filename)
        return
    except RecursionError:
        logger.debug("Cannot analyze %s: too deeply nested", filename)
        state.unparsed_dependencies.append(filename)
        return

    dirname = os.path.dirname(filename)
    for specifier, required in analysis.specifiers:
        try:
            target = resolver.resolve(specifier, dirname)
        except UnresolvedSpecifierError:
            if required:
                logger.debug("Unresolved import %r in %s", specifier, filename)
                state.unresolved(specifier)
            continue
        if target is not None:
            state.enqueue(target)

    if analysis.dynamic:
        state.dynamic_dependencies.append(filename)


def _read(filename: str) -> bytes | None:
    try:
        with open(filename, "rb") as handle:
            return handle.read()
    except OSError as exc:
        logger.debug("Cannot read %s: %s", filename, exc)
        return None
