from __future__ import annotations

import json
from pathlib import Path

import pytest

from deadfiles import cli


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def _project(root: Path) -> None:
    _write(root / "main.py", "import util\n")
    _write(root / "util.py")
    _write(root / "orphan.py")


def test_help_exits_zero() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--help"])
    assert excinfo.value.code == 0


def test_text_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _project(tmp_path)

    result = cli.main(["--path", str(tmp_path), "main.py"])

    assert result == 0
    out = capsys.readouterr().out
    assert "## Dead files" in out
    assert "- orphan.py" in out
    assert "- util.py" not in out


def test_json_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _project(tmp_path)

    cli.main(["--path", str(tmp_path), "--json", "main.py"])

    report = json.loads(capsys.readouterr().out)
    assert [Path(p).name for p in report["dead_files"]] == ["orphan.py"]
    assert [Path(p).name for p in report["dependencies"]] == ["main.py", "util.py"]


def test_check_fails_when_dead_files_exist(tmp_path: Path) -> None:
    _project(tmp_path)

    assert cli.main(["--path", str(tmp_path), "--check", "main.py"]) == 1
    assert cli.main(["--path", str(tmp_path), "--check", "main.py", "orphan.py"]) == 0


def test_output_writes_json(tmp_path: Path) -> None:
    _project(tmp_path)
    output = tmp_path / "out" / "report.json"
    output.parent.mkdir()

    cli.main(["--path", str(tmp_path), "--output", str(output), "main.py"])

    data = json.loads(output.read_text())
    assert [Path(p).name for p in data["dead_files"]] == ["orphan.py"]


def test_ignore_extends_defaults(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _project(tmp_path)
    _write(tmp_path / "venv" / "site.py")

    cli.main(["--path", str(tmp_path), "--ignore", "orphan.py", "main.py"])

    out = capsys.readouterr().out
    assert "orphan.py" not in out
    assert "site.py" not in out


def test_config_supplies_entries(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _project(tmp_path)
    _write(tmp_path / "deadfiles.yaml", "entry: [main.py]\ninclude: ['*.py']\n")

    cli.main(["--path", str(tmp_path), "--json"])

    report = json.loads(capsys.readouterr().out)
    assert [Path(p).name for p in report["dead_files"]] == ["orphan.py"]


def test_missing_entry_exits_with_message(tmp_path: Path) -> None:
    _project(tmp_path)

    with pytest.raises(SystemExit, match="missing_entry.py"):
        cli.main(["--path", str(tmp_path), "missing_entry.py"])


def test_invalid_path_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="not a directory"):
        cli.main(["--path", str(tmp_path / "nope")])


def test_progress_flag(tmp_path: Path) -> None:
    _project(tmp_path)

    assert cli.main(["--path", str(tmp_path), "--progress", "main.py"]) == 0
