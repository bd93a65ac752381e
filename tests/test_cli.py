"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from docindex import codec
from docindex.cli import _build_parser, main


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()
    before = parser.parse_args(["--verbose", "show", "sidebar-items.js"])
    after = parser.parse_args(["show", "sidebar-items.js", "--verbose"])
    assert before.verbose is True
    assert after.verbose is True
    assert after.command == "show"


def test_cli_convert_requires_output() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["convert", "sidebar-items.js"])


def test_show_prints_entries(sidebar_script: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["--config", str(sidebar_script.parent), "show", str(sidebar_script), "--category", "trait"])
    out = capsys.readouterr().out
    assert out.splitlines() == ["trait (1)", "  WritableBuffer: Trait for writable buffer."]


def test_show_unknown_category_is_empty(sidebar_script: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["--config", str(sidebar_script.parent), "show", str(sidebar_script), "--category", "interface"])
    assert capsys.readouterr().out.splitlines() == ["interface (0)"]


def test_categories_command(sidebar_script: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["--config", str(sidebar_script.parent), "categories", str(sidebar_script)])
    assert capsys.readouterr().out.split() == ["enum", "mod", "struct", "trait", "type"]


def test_path_falls_back_to_config(sidebar_script: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (sidebar_script.parent / ".docindex.yml").write_text(
        "index:\n  path: sidebar-items.js\n", encoding="utf-8"
    )
    main(["--config", str(sidebar_script.parent), "categories"])
    assert "struct" in capsys.readouterr().out.split()


def test_missing_path_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "categories"])
    assert excinfo.value.code == 1


def test_validate_clean_file(sidebar_script: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["--config", str(sidebar_script.parent), "validate", str(sidebar_script)])
    assert capsys.readouterr().out.strip().endswith(": ok")


def test_validate_reports_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "sidebar.json"
    path.write_text(json.dumps({"struct": [["A", "a"], ["A", "b"]]}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "validate", str(path)])

    assert excinfo.value.code == 1
    assert "[duplicate-name] struct/A" in capsys.readouterr().out


def test_validate_warnings_do_not_fail(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "sidebar.json"
    path.write_text(json.dumps({"widget": [["Knob", "Turns."]]}), encoding="utf-8")

    main(["--config", str(tmp_path), "validate", str(path)])
    assert "[unknown-category]" in capsys.readouterr().out

    main(["--config", str(tmp_path), "validate", str(path), "--allow-unknown-categories"])
    assert capsys.readouterr().out.strip().endswith(": ok")


def test_convert_script_to_json(sidebar_script: Path, tmp_path: Path) -> None:
    output = tmp_path / "converted" / "sidebar.json"
    main(["--config", str(tmp_path), "convert", str(sidebar_script), "-o", str(output), "--indent", "2"])

    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["trait"] == [["WritableBuffer", "Trait for writable buffer."]]
    assert codec.load(output) == codec.load(sidebar_script)


def test_convert_uses_configured_format_for_unknown_suffix(
    sidebar_script: Path, tmp_path: Path
) -> None:
    (tmp_path / ".docindex.yml").write_text("output:\n  format: js\n", encoding="utf-8")
    output = tmp_path / "sidebar.txt"
    main(["--config", str(tmp_path), "convert", str(sidebar_script), "-o", str(output)])
    assert output.read_text(encoding="utf-8").startswith("initSidebarItems(")


def test_malformed_index_exits_with_message(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "sidebar-items.js"
    path.write_text("var items = {};", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "show", str(path)])

    assert excinfo.value.code == 1
    assert "docindex show failed" in capsys.readouterr().err


def test_validate_reports_repeated_categories(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "sidebar-items.js"
    path.write_text(
        'initSidebarItems({"struct":[["A","a"]],"struct":[["B","b"]]});', encoding="utf-8"
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "validate", str(path)])

    assert excinfo.value.code == 1
    assert "error: [duplicate-category] struct" in capsys.readouterr().out


def test_invalid_utf8_exits_with_message(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "sidebar-items.js"
    path.write_bytes(b'initSidebarItems({"struct":[["A","\xff"]]});')

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "show", str(path)])
    assert excinfo.value.code == 1
    assert "not valid UTF-8" in capsys.readouterr().err

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "validate", str(path)])
    assert excinfo.value.code == 1
    assert "not valid UTF-8" in capsys.readouterr().out


def test_convert_help_describes_format_precedence() -> None:
    parser = _build_parser()
    subparsers = next(
        action for action in parser._actions if action.dest == "command"
    )
    convert = subparsers.choices["convert"]
    to_action = next(action for action in convert._actions if action.dest == "output_format")
    assert to_action.help.index("suffix") < to_action.help.index("output.format")


def test_log_file_option_writes_records(sidebar_script: Path, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "docindex.log"
    main(
        [
            "--config",
            str(tmp_path),
            "--log-file",
            str(log_file),
            "validate",
            str(sidebar_script),
        ]
    )
    assert "0 error(s), 0 warning(s)" in log_file.read_text(encoding="utf-8")
