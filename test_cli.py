# test_cli.py

import io

import pytest

import cli
from cli import REPL, evaluate_lines, main
from settings import Settings


class FakeSession:
    """Stands in for prompt_toolkit's PromptSession, replaying scripted input."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []

    def prompt(self, message):
        self.prompts.append(message)
        if not self.lines:
            raise EOFError
        line = self.lines.pop(0)
        if isinstance(line, BaseException):
            raise line
        return line


class TTYInput(io.StringIO):
    def isatty(self):
        return True


def make_repl(lines, **settings):
    out = io.StringIO()
    repl = REPL(Settings(**settings), session=FakeSession(lines), out=out)
    return repl, out

# ---------------------------
# Single expression
# ---------------------------

def test_main_expression_argument(capsys):
    assert main(["2 + 3 * 4"]) == 0
    assert capsys.readouterr().out == "14\n"

def test_main_expression_error(capsys):
    assert main(["2 $ 3"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "lexing error at position 2" in captured.err

@pytest.mark.parametrize("expr,stage", [
    ("2 + ", "parsing"),
    ("1 / 0", "evaluation"),
])
def test_main_expression_error_stage(capsys, expr, stage):
    assert main([expr]) == 1
    assert f"{stage} error" in capsys.readouterr().err

def test_main_precision_flag(capsys):
    assert main(["--precision", "2", "2 / 3"]) == 0
    assert capsys.readouterr().out == "0.67\n"

def test_main_precision_from_environment(capsys, monkeypatch):
    monkeypatch.setenv("EXPRESSER_PRECISION", "1")
    assert main(["10 / 4"]) == 0
    assert capsys.readouterr().out == "2.5\n"

def test_main_invalid_configuration(capsys, monkeypatch):
    monkeypatch.setenv("EXPRESSER_LOG_LEVEL", "LOUD")
    assert main(["1 + 1"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err

def test_main_invalid_precision_flag(capsys):
    assert main(["--precision", "-1", "1"]) == 2

def test_main_output_file(tmp_path, capsys):
    target = tmp_path / "out.txt"
    assert main(["-o", str(target), "(1 + 2) * 3"]) == 0
    assert target.read_text() == "9\n"
    assert capsys.readouterr().out == ""

# ---------------------------
# Batch input
# ---------------------------

def test_evaluate_lines_skips_blank_lines():
    results, ok = evaluate_lines(["1>0", "", "  ", "1<0", "1+2*3"])
    assert results == ["1", "0", "7"]
    assert ok

def test_evaluate_lines_reports_failures_in_place():
    results, ok = evaluate_lines(["1 + 1", "1 / 0", "3"])
    assert results[0] == "2"
    assert results[1].startswith("error: evaluation error")
    assert results[2] == "3"
    assert not ok

def test_main_file_to_output_file(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("1=1\n1=0\n(1+2)*3\n")
    target = tmp_path / "out.txt"
    assert main(["-f", str(source), "-o", str(target)]) == 0
    assert target.read_text() == "1\n0\n9\n"

def test_main_file_with_failure(tmp_path, capsys):
    source = tmp_path / "in.txt"
    source.write_text("2 + 2\n2 +\n")
    assert main(["--file", str(source)]) == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "4"
    assert lines[1].startswith("error: parsing error at position 3")

def test_main_missing_file(tmp_path, capsys):
    assert main(["-f", str(tmp_path / "nope.txt")]) == 2
    assert "Cannot read" in capsys.readouterr().err

def test_main_reads_piped_stdin(capsys):
    assert main([], stdin=io.StringIO("8 - 3 - 2\n--5\n")) == 0
    assert capsys.readouterr().out == "3\n5\n"

def test_main_unwritable_output(tmp_path, capsys):
    assert main(["-o", str(tmp_path / "missing" / "out.txt"), "1"]) == 2
    assert "Cannot write" in capsys.readouterr().err

# ---------------------------
# REPL
# ---------------------------

def test_repl_evaluates_lines():
    repl, out = make_repl(["2 + 2", "", "1 / 0"])
    assert repl.loop() == 0
    lines = out.getvalue().splitlines()
    assert lines[1] == "4"
    assert lines[2] == "error: evaluation error at position 2: division by zero"
    assert len(lines) == 3

def test_repl_quit_command():
    repl, out = make_repl([":quit", "1 + 1"])
    assert repl.loop() == 0
    assert "2" not in out.getvalue().splitlines()

def test_repl_help_and_unknown_command():
    repl, out = make_repl([":help", ":bogus", ":exit"])
    repl.loop()
    text = out.getvalue()
    assert "Expression evaluator" in text
    assert "Unknown command: :bogus" in text

def test_repl_keyboard_interrupt_discards_line():
    repl, out = make_repl([KeyboardInterrupt(), "3 * 3"])
    repl.loop()
    assert out.getvalue().splitlines()[-1] == "9"

def test_repl_uses_precision():
    repl, out = make_repl(["1 / 3"], precision=2)
    repl.loop()
    assert out.getvalue().splitlines()[-1] == "0.33"

def test_repl_prompt():
    session = FakeSession(["1"])
    REPL(Settings(), session=session, out=io.StringIO()).loop()
    assert session.prompts == ["> ", "> "]

def test_main_starts_repl_on_tty(monkeypatch):
    created = []

    def fake_repl(settings):
        repl = REPL(settings, session=FakeSession(["1 + 1"]), out=io.StringIO())
        created.append(repl)
        return repl

    monkeypatch.setattr(cli, "REPL", fake_repl)
    assert main([], stdin=TTYInput("")) == 0
    assert len(created) == 1
    assert created[0].out.getvalue().splitlines()[-1] == "2"

def test_main_interactive_flag(monkeypatch):
    monkeypatch.setattr(cli, "REPL", lambda settings: REPL(settings, session=FakeSession([]), out=io.StringIO()))
    assert main(["-i"], stdin=io.StringIO("1 + 1\n")) == 0

def test_main_deeply_nested_expression_reports_stage_error(capsys):
    assert main(["(" * 150 + "1" + ")" * 150]) == 1
    captured = capsys.readouterr()
    assert "parsing error at position 100" in captured.err
    assert "Traceback" not in captured.err
