import io
import sys

import pytest

import bfi


@pytest.fixture
def program(tmp_path):
    def write(source):
        path = tmp_path / "program.bf"
        path.write_text(source, encoding="utf-8")
        return str(path)
    return write


@pytest.fixture
def stdin_bytes(monkeypatch):
    def feed(data):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data), encoding="utf-8"))
    return feed


def test_runs_program_and_writes_raw_output(program, capsysbinary):
    assert bfi.main([program("+" * 72 + ".")]) == 0
    assert capsysbinary.readouterr().out == b"H"


def test_reads_input_from_stdin(program, stdin_bytes, capsysbinary):
    stdin_bytes(b"A")
    assert bfi.main([program(",.")]) == 0
    assert capsysbinary.readouterr().out == b"A"


def test_strict_flag_turns_underflow_into_fatal_error(program, capsys):
    path = program("-")
    assert bfi.main([path]) == 0
    assert bfi.main(["--strict", path]) == 1
    err = capsys.readouterr().err
    assert "fatal:" in err
    assert "underflow" in err


def test_unmatched_bracket_is_fatal(program, capsys):
    assert bfi.main([program("+\n]")]) == 1
    assert "line 2" in capsys.readouterr().err


def test_input_exhaustion_is_fatal(program, stdin_bytes, capsys):
    stdin_bytes(b"")
    assert bfi.main([program(",")]) == 1
    assert "Failure to read input byte" in capsys.readouterr().err


def test_missing_file_is_fatal(tmp_path, capsys):
    assert bfi.main([str(tmp_path / "missing.bf")]) == 1
    assert "cannot read" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [[], ["a.bf", "b.bf"], ["--strict", "a.bf", "b.bf"], ["--fast", "a.bf"], ["--s", "a.bf"]])
def test_bad_arguments_print_usage_and_exit_nonzero(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        bfi.main(argv)
    assert excinfo.value.code != 0
    assert "usage:" in capsys.readouterr().err
