from __future__ import annotations


class DeadFilesError(Exception):
    pass


class EntryNotFoundError(DeadFilesError):
    def __init__(self, entry: str) -> None:
        super().__init__(f"Cannot resolve entry point: {entry}")
        self.entry = entry


class UnresolvedSpecifierError(DeadFilesError):
    def __init__(self, specifier: str) -> None:
        super().__init__(f"Cannot resolve module: {specifier}")
        self.specifier = specifier


class ParseError(DeadFilesError):
    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Cannot parse {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class ConfigError(DeadFilesError):
    pass
