"""
Tests for the command-line interface.
"""

import io

import pytest

from bitlang.__main__ import main, strict_default


HELLO = """\
LINE NUMBER ZERO CODE PRINT ONE GOTO ONE
LINE NUMBER ONE CODE PRINT ZERO
"""

ECHO = """\
LINE NUMBER ZERO CODE READ
    GOTO ONE IF THE JUMP REGISTER IS ZERO
    GOTO ONE ZERO IF THE JUMP REGISTER IS ONE
LINE NUMBER ONE CODE PRINT ZERO
LINE NUMBER ONE ZERO CODE PRINT ONE
"""

JUMP_RHS = "LINE NUMBER ZERO CODE VARIABLE ZERO EQUALS THE JUMP REGISTER\n"


@pytest.fixture
def write_program(tmp_path):
    """Write program text to a file and return its path as a string."""
    def _write(text, name="prog.bit"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def clear_strict_env(monkeypatch):
    monkeypatch.delenv("BITLANG_STRICT", raising=False)


class TestRun:
    """Test the run command."""

    def test_run_prints_output(self, write_program, capsys):
        assert main(["run", write_program(HELLO)]) == 0
        assert capsys.readouterr().out == "ONE\nZERO\n"

    def test_run_reads_stdin(self, write_program, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("ONE"))
        assert main(["run", write_program(ECHO)]) == 0
        assert capsys.readouterr().out == "ONE\n"

    def test_run_runtime_error(self, write_program, capsys):
        path = write_program("LINE NUMBER ZERO CODE PRINT ONE GOTO ONE ONE\n")
        assert main(["run", path]) == 1
        captured = capsys.readouterr()
        assert captured.out == "ONE\n"
        assert "E302" in captured.err

    def test_run_end_of_input(self, write_program, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        assert main(["run", write_program(ECHO)]) == 1
        assert "E303" in capsys.readouterr().err

    def test_run_load_error(self, write_program, capsys):
        assert main(["run", write_program("LINE NUMBER ZERO CODE print ONE")]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "E001" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["run", str(tmp_path / "missing.bit")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "binary.bit"
        path.write_bytes(b"\xff\xfe\x00LINE")
        assert main(["run", str(path)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: Cannot read")
        assert "Traceback" not in err

    def test_directory_instead_of_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path)]) == 1
        assert capsys.readouterr().err.startswith("Error: Cannot read")


class TestCheck:
    """Test the check command."""

    def test_check_ok(self, write_program, capsys):
        assert main(["check", write_program(HELLO)]) == 0
        assert "OK: prog.bit - 2 line(s), no errors" in capsys.readouterr().out

    def test_check_reports_warning(self, write_program, capsys):
        assert main(["check", write_program(JUMP_RHS)]) == 0
        captured = capsys.readouterr()
        assert "1 warning(s)" in captured.out
        assert "W001" in captured.err

    def test_check_strict_flag(self, write_program, capsys):
        assert main(["check", "--strict", write_program(JUMP_RHS)]) == 1
        assert "E201" in capsys.readouterr().err

    def test_check_strict_from_environment(self, write_program, capsys, monkeypatch):
        monkeypatch.setenv("BITLANG_STRICT", "1")
        assert main(["check", write_program(JUMP_RHS)]) == 1
        assert "E201" in capsys.readouterr().err

    def test_check_syntax_error(self, write_program, capsys):
        assert main(["check", write_program("LINE NUMBER ZERO CODE")]) == 1
        assert "E102" in capsys.readouterr().err


class TestList:
    """Test the list command."""

    def test_list_normalizes(self, write_program, capsys):
        path = write_program("LINENUMBERONECODEPRINTZERO\nLINE NUMBER ZERO CODE READ GOTO ONE")
        assert main(["list", path]) == 0
        assert capsys.readouterr().out == (
            "LINE NUMBER ZERO CODE READ GOTO ONE\n"
            "LINE NUMBER ONE CODE PRINT ZERO\n"
        )

    def test_list_empty_program(self, write_program, capsys):
        assert main(["list", write_program("")]) == 0
        assert capsys.readouterr().out == ""


class TestStrictDefault:
    """Test reading strict mode from the environment."""

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_truthy(self, monkeypatch, value):
        monkeypatch.setenv("BITLANG_STRICT", value)
        assert strict_default() is True

    @pytest.mark.parametrize("value", ["", "0", "false", "off"])
    def test_falsy(self, monkeypatch, value):
        monkeypatch.setenv("BITLANG_STRICT", value)
        assert strict_default() is False

    def test_unset(self):
        assert strict_default() is False
