from __future__ import annotations

import ast

from deadfiles.errors import ParseError
from deadfiles.models import Analysis

IMPORT_FUNCTIONS = {"import_module", "__import__"}


def parse_source(source: bytes | str | None, filename: str) -> ast.Module:
    if source is None:
        raise ParseError(filename, "source could not be read")
    try:
        return ast.parse(source, filename=filename)
    except (SyntaxError, ValueError) as exc:
        raise ParseError(filename, str(exc)) from exc
    except (RecursionError, MemoryError) as exc:
        raise ParseError(filename, f"too deeply nested ({type(exc).__name__})") from exc


def analyze(tree: ast.AST) -> Analysis:
    """Collect the import specifiers of a parsed module in source order.

    Specifiers written in the source are required. Parent packages of a
    dotted name and ``from X import name`` candidates are optional: they are
    followed when they resolve and silently dropped when they don't.
    """
    collector = _ImportCollector()
    collector.visit(tree)
    return Analysis(specifiers=list(collector.specifiers.items()), dynamic=collector.dynamic)


class _ImportCollector(ast.NodeVisitor):
    def __init__(self) -> None:
        # dicts keep first-seen order
        self.specifiers: dict[str, bool] = {}
        self.dynamic = False

    def visit_Import(self, node: ast.Import) -> None:  # noqa: N802
        for alias in node.names:
            self._add_module(alias.name)
        self.generic_visit(node)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:  # noqa: N802
        module = "." * (node.level or 0) + (node.module or "")
        self._add_module(module)
        for alias in node.names:
            if alias.name == "*":
                continue
            self._add(_join(module, alias.name), required=False)
        self.generic_visit(node)

    def visit_Call(self, node: ast.Call) -> None:  # noqa: N802
        if _is_import_call(node.func):
            target = node.args[0] if node.args else None
            if isinstance(target, ast.Constant) and isinstance(target.value, str) and target.value:
                self._add_module(target.value)
            else:
                self.dynamic = True
        self.generic_visit(node)

    def _add_module(self, module: str) -> None:
        dots = len(module) - len(module.lstrip("."))
        prefix, name = module[:dots], module[dots:]
        parts = name.split(".") if name else []
        for index in range(1, len(parts)):
            self._add(prefix + ".".join(parts[:index]), required=False)
        self._add(module, required=True)

    def _add(self, specifier: str, required: bool) -> None:
        self.specifiers[specifier] = self.specifiers.get(specifier, False) or required


def _is_import_call(func: ast.expr) -> bool:
    if isinstance(func, ast.Name):
        return func.id in IMPORT_FUNCTIONS
    if isinstance(func, ast.Attribute):
        return (
            func.attr == "import_module"
            and isinstance(func.value, ast.Name)
            and func.value.id == "importlib"
        )
    return False


def _join(module: str, name: str) -> str:
    if not module or module.endswith("."):
        return module + name
    return f"{module}.{name}"
