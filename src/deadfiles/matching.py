from __future__ import annotations

import fnmatch
from pathlib import Path, PurePath
from typing import Iterable


def matches(path: str | PurePath, patterns: Iterable[str], root: str | Path | None = None) -> bool:
    """Match ``path`` against glob patterns, both absolute and root-relative.

    ``**/venv/**`` style patterns hit the absolute path, while ``vendored/**``
    style patterns are anchored at ``root``.
    """
    path = PurePath(path)
    candidates = [path.as_posix()]
    if root is not None:
        try:
            candidates.append(path.relative_to(root).as_posix())
        except ValueError:
            pass
    return any(
        fnmatch.fnmatch(candidate, pattern)
        for pattern in patterns
        for candidate in candidates
    )
