"""Find files that are never reached from a project's entry points."""

__version__ = "0.1.0"

from deadfiles.analyzer import find_dead_files, get_dead_files, get_included_files
from deadfiles.errors import DeadFilesError, EntryNotFoundError
from deadfiles.models import Report
from deadfiles.traverse import get_dependencies

__all__ = [
    "DeadFilesError",
    "EntryNotFoundError",
    "Report",
    "find_dead_files",
    "get_dead_files",
    "get_dependencies",
    "get_included_files",
]
