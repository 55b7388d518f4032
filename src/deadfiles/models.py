from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Analysis:
    # (specifier, required) in source order; unresolved optional specifiers are dropped
    specifiers: list[tuple[str, bool]] = field(default_factory=list)
    dynamic: bool = False


@dataclass(frozen=True)
class Dependencies:
    dependencies: list[str]
    dynamic_dependencies: list[str]
    unparsed_dependencies: list[str]
    unresolved_dependencies: list[str]  # specifier text, not paths
    ignored_dependencies: list[str]


@dataclass(frozen=True)
class Report:
    dead_files: list[str]
    dependencies: list[str]
    dynamic_dependencies: list[str]
    unparsed_dependencies: list[str]
    unresolved_dependencies: list[str]
    ignored_dependencies: list[str]

    def summary(self) -> dict[str, int]:
        return {
            "dead_files": len(self.dead_files),
            "dependencies": len(self.dependencies),
            "dynamic_dependencies": len(self.dynamic_dependencies),
            "unparsed_dependencies": len(self.unparsed_dependencies),
            "unresolved_dependencies": len(self.unresolved_dependencies),
            "ignored_dependencies": len(self.ignored_dependencies),
        }
