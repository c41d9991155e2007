import logging

import pytest

from roughcut import config
from roughcut.__main__ import main


@pytest.fixture
def script(tmp_path):
    def write(text):
        path = tmp_path / "script.lisp"
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write


def test_run_file(script, capsys):
    assert main([script('(puts (+ 1 2))\n(puts "done")\n')]) == 0
    assert capsys.readouterr().out == "3\ndone\n"


def test_run_file_without_prelude(script, capsys):
    assert main(["--no-prelude", script("(puts (+ 1 2))")]) == 1
    captured = capsys.readouterr()
    assert "RoughcutNameError: + is undefined" in captured.err


def test_run_file_reports_errors(script, capsys):
    assert main([script("(puts 1)\n(send 1 :/ 0)\n(puts 2)\n")]) == 1
    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert captured.err.startswith("RoughcutHostEscapeError:")
    assert "\tin 'send'" in captured.err


def test_exit_status(script):
    assert main(["--no-prelude", script("(exit 3)")]) == 3


def test_missing_file(capsys, tmp_path):
    assert main(["--no-prelude", str(tmp_path / "nope.lisp")]) == 1
    assert "cannot load" in capsys.readouterr().err


def test_repl_from_stdin(monkeypatch, capsys):
    import io

    monkeypatch.setattr("sys.stdin", io.StringIO("(list 1 2)\n"))
    assert main(["--no-prompt", "--no-prelude"]) == 0
    assert capsys.readouterr().out == "(1 2)\n"


def test_repl_exit_status(monkeypatch):
    import io

    monkeypatch.setattr("sys.stdin", io.StringIO("(exit 3)\n"))
    assert main(["--no-prompt", "--no-prelude"]) == 3


# -----------------------------------------------------
# configuration
# -----------------------------------------------------

def test_prelude_path_defaults_to_the_packaged_library(monkeypatch):
    monkeypatch.delenv("ROUGHCUT_PRELUDE_PATH", raising=False)
    path = config.get_prelude_path()
    assert path.name == "stdlib.lisp"
    assert path.is_file()


def test_prelude_path_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("ROUGHCUT_PRELUDE_PATH", str(tmp_path))
    assert config.get_prelude_path() == tmp_path / "stdlib.lisp"
    custom = tmp_path / "boot.lisp"
    monkeypatch.setenv("ROUGHCUT_PRELUDE_PATH", str(custom))
    assert config.get_prelude_path() == custom


@pytest.mark.parametrize(
    "value, level",
    [(None, logging.WARNING), ("debug", logging.DEBUG), ("INFO", logging.INFO), ("bogus", logging.WARNING)],
)
def test_log_level_from_env(monkeypatch, value, level):
    if value is None:
        monkeypatch.delenv("ROUGHCUT_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("ROUGHCUT_LOG_LEVEL", value)
    assert config.get_log_level() == level
