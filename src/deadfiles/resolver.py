"""Map import specifiers to the files Python would load for them.

Bare specifiers (``pkg.mod``) are searched along a search path, the way the
import system walks ``sys.path``. Relative specifiers (``.mod``, ``..pkg``)
are resolved against the directory of the importing file. Namespace packages
and built-in modules resolve to ``None``: they are importable but have no
file behind them.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from importlib.machinery import EXTENSION_SUFFIXES
from pathlib import Path
from typing import Iterable

from deadfiles.errors import EntryNotFoundError, UnresolvedSpecifierError

logger = logging.getLogger(__name__)

MODULE_SUFFIXES = [*EXTENSION_SUFFIXES, ".py"]
_MODULE_NAME = re.compile(r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*")
_MISSING = object()


class ModuleResolver:
    def __init__(self, search_paths: Iterable[str | Path]) -> None:
        self.search_paths: list[str] = []
        self._cache: dict[tuple[str, str | None], object] = {}
        self.extend(search_paths)

    @classmethod
    def for_project(
        cls,
        root: str | Path,
        extra: Iterable[str | Path] = (),
    ) -> ModuleResolver:
        root = Path(root).resolve()
        paths: list[str | Path] = [*extra, root]
        if (root / "src").is_dir():
            paths.append(root / "src")
        paths.extend(path or os.getcwd() for path in sys.path)
        return cls(paths)

    def extend(self, paths: Iterable[str | Path], first: bool = False) -> None:
        added = [os.path.realpath(path) for path in paths]
        if first:
            merged = added + self.search_paths
        else:
            merged = self.search_paths + added
        self.search_paths = list(dict.fromkeys(merged))
        self._cache.clear()

    def resolve_entry(self, entry: str | Path, root: str | Path) -> str:
        path = os.path.join(root, entry)
        if os.path.isfile(path):
            return os.path.realpath(path)
        if os.path.isdir(path):
            for name in ("__main__.py", "__init__.py"):
                candidate = os.path.join(path, name)
                if os.path.isfile(candidate):
                    return os.path.realpath(candidate)
        elif not os.path.splitext(path)[1] and os.path.isfile(path + ".py"):
            return os.path.realpath(path + ".py")

        if _MODULE_NAME.fullmatch(str(entry)):
            try:
                found = self.resolve(str(entry))
            except UnresolvedSpecifierError:
                found = None
            if found is not None:
                logger.debug("Entry %s resolved as module %s", entry, found)
                return found
        raise EntryNotFoundError(str(entry))

    def resolve(self, specifier: str, basedir: str | None = None) -> str | None:
        relative = specifier.startswith(".")
        key = (specifier, basedir if relative else None)
        cached = self._cache.get(key, _MISSING)
        if cached is _MISSING:
            try:
                cached = self._resolve(specifier, basedir, relative)
            except UnresolvedSpecifierError as exc:
                cached = exc
            self._cache[key] = cached
        if isinstance(cached, UnresolvedSpecifierError):
            raise cached
        return cached  # type: ignore[return-value]

    def _resolve(self, specifier: str, basedir: str | None, relative: bool) -> str | None:
        if relative:
            if basedir is None:
                raise UnresolvedSpecifierError(specifier)
            name = specifier.lstrip(".")
            base = basedir
            for _ in range(len(specifier) - len(name) - 1):
                base = os.path.dirname(base)
            roots = [base]
        else:
            name = specifier
            roots = self.search_paths
            if name in sys.builtin_module_names:
                return None

        parts = name.split(".") if name else []
        if any(not part for part in parts):
            raise UnresolvedSpecifierError(specifier)
        found = _resolve_parts(roots, parts)
        if found is _MISSING:
            raise UnresolvedSpecifierError(specifier)
        return found  # type: ignore[return-value]


def _resolve_parts(roots: list[str], parts: list[str]) -> object:
    found = _find_module(roots, parts)
    if found is not _MISSING or len(parts) < 2:
        return found
    # os.path style: a plain module that installs an attribute as a submodule
    parent = _resolve_parts(roots, parts[:-1])
    if isinstance(parent, str) and os.path.basename(parent) != "__init__.py":
        return parent
    return _MISSING


def _find_module(roots: list[str], parts: list[str]) -> object:
    namespace = False
    for root in roots:
        target = os.path.join(root, *parts)
        init = os.path.join(target, "__init__.py")
        if os.path.isfile(init):
            return os.path.realpath(init)
        if parts:
            for suffix in MODULE_SUFFIXES:
                if os.path.isfile(target + suffix):
                    return os.path.realpath(target + suffix)
        if os.path.isdir(target):
            namespace = True
    if namespace:
        return None
    return _MISSING
