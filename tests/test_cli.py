import io
import sys

from plazza.cli import main


def test_not_enough_arguments(capsys):
    assert main([]) == 84
    assert "Error: Not enough arguments" in capsys.readouterr().err


def test_non_positive_argument(capsys):
    assert main(["0", "2", "2000"]) == 84
    assert "Arguments must be positive integers" in capsys.readouterr().err


def test_invalid_logger_type(capsys):
    assert main(["1", "2", "2000", "bogus"]) == 84
    assert "Invalid logger type argument" in capsys.readouterr().err


def test_console_logger_run(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("exit\n"))
    assert main(["1", "2", "2000", "console"]) == 0
    assert "Info: Shutting down restaurant..." in capsys.readouterr().out


def test_file_logger_run(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "stdin", io.StringIO("status\nexit\n"))
    assert main(["1", "2", "2000", "FILE"]) == 0
    lines = (tmp_path / "plazza.log").read_text().splitlines()
    assert lines[0] == "=== Log started ==="
    assert "[INFO] === Plazza ===" in lines
    assert "[INFO] No kitchens currently active." in lines


def test_default_logger_writes_both(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "stdin", io.StringIO("exit\n"))
    assert main(["1", "2", "2000"]) == 0
    assert "[INFO] Shutting down restaurant..." in capsys.readouterr().out
    log = (tmp_path / "plazza.log").read_text()
    assert "[INFO] Shutting down restaurant..." in log


def test_unwritable_log_file(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "plazza.log").mkdir()
    assert main(["1", "2", "2000", "file"]) == 84
    assert (
        "Logger error: Failed to open log file: plazza.log"
        in capsys.readouterr().err
    )