"""Unit tests for the command line router: exit codes, output modes and config wiring."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from jsonv8n.cli import EXIT_ERROR, EXIT_OK, EXIT_VIOLATIONS, build_parser, run_cli

ORDER_SCHEMA = """\
root: Order
records:
  Order:
    fields:
      id: {type: string, v8n: "mandatory, notNull, &StringNotEmpty{}"}
      qty: {type: integer, v8n: "mandatory, &Positive{}"}
  Note:
    fields:
      text: {type: string, v8n: mandatory}
"""


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NO_COLOR", "1")
    for name in ("JSONV8N_VALIDATION_STOP_ON_FIRST", "JSONV8N_LOGGING_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    (tmp_path / "schema.yaml").write_text(ORDER_SCHEMA, encoding="utf-8")
    return tmp_path


def _write_json(path: Path, payload: object) -> str:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def _violations(stdout: str) -> list[tuple[str, str, str]]:
    payload = json.loads(stdout)
    return [(item["path"], item["property"], item["message"]) for item in payload["violations"]]


def test_validate_valid_document_prints_ok(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write_json(workspace / "order.json", {"id": "A1", "qty": 2})

    assert run_cli(["validate", "--schema", "schema.yaml", source]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "OK  valid"


def test_validate_reports_sorted_violations_as_json(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write_json(workspace / "order.json", {"qty": 0, "id": "", "x": 1})

    code = run_cli(["validate", "--schema", "schema.yaml", "--json", source])

    assert code == EXIT_VIOLATIONS
    output = capsys.readouterr().out
    assert json.loads(output)["ok"] is False
    assert _violations(output) == [
        ("", "id", "String value must not be an empty string"),
        ("", "qty", "Value must be positive"),
        ("", "x", "Unknown property"),
    ]


def test_validate_text_output_is_a_table(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write_json(workspace / "order.json", {"id": "A1"})

    assert run_cli(["--no-color", "validate", "--schema", "schema.yaml", source]) == EXIT_VIOLATIONS

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["PATH", "PROPERTY", "MESSAGE"]
    assert lines[2].split() == ["/", "qty", "Missing", "property"]
    assert lines[-1].strip() == "FAIL  1 violation"


def test_stop_on_first_flag_and_record_selection(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write_json(workspace / "order.json", {"x": 1, "y": 2})

    run_cli(["validate", "--schema", "schema.yaml", "--json", "--stop-on-first", source])
    assert len(_violations(capsys.readouterr().out)) == 1

    code = run_cli(["validate", "--schema", "schema.yaml", "--record", "Note", "--json", source])
    assert code == EXIT_VIOLATIONS
    assert ("", "text", "Missing property") in _violations(capsys.readouterr().out)


def test_config_file_in_working_directory_is_applied(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (workspace / "jsonv8n.toml").write_text(
        '[validation]\nignore_unknown_properties = true\n'
        '[messages]\n"Value must be positive" = "qty must be above zero"\n',
        encoding="utf-8",
    )
    source = _write_json(workspace / "order.json", {"id": "A1", "qty": -1, "x": 1})

    assert run_cli(["validate", "--schema", "schema.yaml", "--json", source]) == EXIT_VIOLATIONS
    assert _violations(capsys.readouterr().out) == [("", "qty", "qty must be above zero")]


def test_stdin_input(
    workspace: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    class _Stdin:
        buffer = io.BytesIO(b'{"id": "A1", "qty": 1}')

    monkeypatch.setattr("sys.stdin", _Stdin())

    assert run_cli(["validate", "--schema", "schema.yaml", "-"]) == EXIT_OK
    assert "valid" in capsys.readouterr().out


@pytest.mark.parametrize(
    ("argv", "message"),
    [
        (["validate", "--schema", "schema.yaml", "--record", "Nope", "in.json"], "record 'Nope'"),
        (["validate", "--schema", "schema.yaml", "absent.json"], "unable to read input"),
        (["validate", "--schema", "missing.yaml", "in.json"], "unable to read descriptor file"),
        (["--config", "absent.toml", "constraints"], "config file not found"),
        (["check-tag", "&NoSuchConstraint{}"], "NoSuchConstraint"),
    ],
)
def test_errors_exit_with_code_two(
    workspace: Path, capsys: pytest.CaptureFixture[str], argv: list[str], message: str
) -> None:
    assert run_cli(argv) == EXIT_ERROR

    stderr = capsys.readouterr().err
    assert stderr.startswith("error: ")
    assert message in stderr


def test_check_tag_prints_property_summary(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_cli(["check-tag", "mandatory, notNull, &StringLength{1, 255}"]) == EXIT_OK

    assert json.loads(capsys.readouterr().out) == {
        "type": "any",
        "mandatory": True,
        "not_null": True,
        "constraints": ["StringLength{minimum:1,maximum:255}"],
    }


def test_constraints_lists_registered_names(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_cli(["constraints", "--json"]) == EXIT_OK
    names = json.loads(capsys.readouterr().out)
    assert "StringNotEmpty" in names
    assert names == sorted(names)

    assert run_cli(["constraints"]) == EXIT_OK
    assert "  Positive" in capsys.readouterr().out.splitlines()


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
