from __future__ import annotations

import textwrap

import pytest

from deadfiles.errors import ParseError
from deadfiles.source import analyze, parse_source


def _analyze(code: str):
    return analyze(parse_source(textwrap.dedent(code), "module.py"))


def _required(analysis) -> list[str]:
    return [specifier for specifier, required in analysis.specifiers if required]


def test_dotted_import_includes_parent_packages() -> None:
    analysis = _analyze("import a.b.c\n")

    assert analysis.specifiers == [("a", False), ("a.b", False), ("a.b.c", True)]
    assert analysis.dynamic is False


def test_from_import_names_are_optional() -> None:
    analysis = _analyze("from pkg.mod import first, second as alias\n")

    assert analysis.specifiers == [
        ("pkg", False),
        ("pkg.mod", True),
        ("pkg.mod.first", False),
        ("pkg.mod.second", False),
    ]


def test_relative_imports_keep_their_dots() -> None:
    analysis = _analyze(
        """
        from . import sibling
        from ..parent import thing
        """
    )

    assert analysis.specifiers == [
        (".", True),
        (".sibling", False),
        ("..parent", True),
        ("..parent.thing", False),
    ]


def test_star_import_has_no_submodules() -> None:
    analysis = _analyze("from pkg import *\n")

    assert analysis.specifiers == [("pkg", True)]


def test_specifiers_keep_first_position_and_become_required() -> None:
    analysis = _analyze("import a.b\nfrom a import b\n")

    assert analysis.specifiers == [("a", True), ("a.b", True)]


def test_specifiers_follow_source_order() -> None:
    analysis = _analyze("from pkg import a\nimport b\n")

    assert [specifier for specifier, _ in analysis.specifiers] == ["pkg", "pkg.a", "b"]


def test_nested_imports_are_collected() -> None:
    analysis = _analyze(
        """
        def load():
            import lazy
            return lazy
        """
    )

    assert _required(analysis) == ["lazy"]


def test_literal_import_module_is_static() -> None:
    analysis = _analyze(
        """
        import importlib
        from importlib import import_module

        importlib.import_module("plugins.csv")
        import_module(".local", __package__)
        __import__("legacy")
        """
    )

    assert _required(analysis) == ["importlib", "plugins.csv", ".local", "legacy"]
    assert analysis.dynamic is False


@pytest.mark.parametrize(
    "call",
    [
        "importlib.import_module(name)",
        'importlib.import_module(f"plugins.{name}")',
        '__import__("plugins." + name)',
        "import_module()",
    ],
)
def test_computed_import_is_dynamic(call: str) -> None:
    analysis = _analyze(f"import importlib\nname = 'x'\n{call}\n")

    assert analysis.dynamic is True


def test_unrelated_calls_are_not_dynamic() -> None:
    analysis = _analyze("loader.load_module(name)\nimport_data(name)\n")

    assert analysis.dynamic is False
    assert analysis.specifiers == []


def test_unreadable_source_fails_to_parse() -> None:
    with pytest.raises(ParseError, match="could not be read"):
        parse_source(None, "missing.py")


def test_syntax_error_fails_to_parse() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source("def (:\n", "broken.py")
    assert excinfo.value.filename == "broken.py"


def test_null_bytes_fail_to_parse() -> None:
    with pytest.raises(ParseError):
        parse_source(b"\x7fELF\x00\x00binary", "module.so")


def test_encoding_declaration_is_honored() -> None:
    source = "# -*- coding: latin-1 -*-\nNAME = 'caf\xe9'\nimport util\n".encode("latin-1")

    analysis = analyze(parse_source(source, "latin.py"))

    assert _required(analysis) == ["util"]


def test_deeply_nested_source_fails_to_parse() -> None:
    with pytest.raises(ParseError, match="deep.py"):
        parse_source("x = 1" + " + 1" * 5000 + "\n", "deep.py")
