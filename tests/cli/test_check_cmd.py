"""
Integration tests for the `check` command.
"""

import json
from pathlib import Path

import pytest
from rich.console import Console

from foreach_fixer.cli.__main__ import main
from foreach_fixer.utils.console import reset_console, set_console


@pytest.fixture
def captured():
  """Routes console output into a recording console."""
  recorder = Console(record=True, width=200)
  set_console(recorder)
  yield recorder
  reset_console()


@pytest.fixture
def project(tmp_path, monkeypatch):
  monkeypatch.chdir(tmp_path)
  (tmp_path / "clean.js").write_text("for (const x of list) use(x);\n")
  (tmp_path / "dirty.js").write_text("list.forEach(x => use(x));\nobj.forEach(function (y) { this.add(y); });\n")
  return tmp_path


def test_clean_file_exits_zero(project, captured):
  assert main(["check", "clean.js"]) == 0
  assert "No `forEach` statements found" in captured.export_text()


def test_problems_render_table(project, captured):
  assert main(["check", "."]) == 1

  output = captured.export_text()
  assert "forEach Report" in output
  assert "dirty.js" in output
  assert "1:6" in output
  assert "2 problem(s), 1 fixable" in output


def test_json_output(project, capsys):
  assert main(["check", "dirty.js", "--json"]) == 1

  payload = json.loads(capsys.readouterr().out)
  assert len(payload) == 1
  report = payload[0]
  assert report["file"] == str(Path("dirty.js"))
  assert report["success"] is True
  assert [d["fixable"] for d in report["diagnostics"]] == [True, False]
  assert report["diagnostics"][0]["rule_id"] == "no-array-for-each"
  assert "fix" not in report["diagnostics"][0]


def test_syntax_error_fails(project, captured):
  (project / "broken.js").write_text("list.forEach(")

  assert main(["check", "broken.js"]) == 1
  assert "Parse Error" in captured.export_text()


def test_no_files(project, captured):
  empty = project / "empty"
  empty.mkdir()

  assert main(["check", "empty"]) == 0
  assert "No JavaScript files found" in captured.export_text()
