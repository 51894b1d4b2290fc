"""Tests for the __main__ entry point."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from mdtabs import __version__
from mdtabs.__main__ import build_parser, main
from mdtabs.constants import PERSISTENCE_KEY


class TestParser:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MDTABS_LOG", raising=False)
        args = build_parser().parse_args([])
        assert args.files == []
        assert args.mode is None
        assert args.reset is False
        assert args.log_file is None

    def test_files_and_mode(self):
        args = build_parser().parse_args(["--mode", "split", "a.md", "b.md"])
        assert args.mode == "split"
        assert args.files == ["a.md", "b.md"]

    def test_unknown_mode_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--mode", "fullscreen"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    def test_reset_clears_saved_tabs(self, tmp_path, monkeypatch, capsys):
        state = tmp_path / "state.json"
        state.write_text(json.dumps({PERSISTENCE_KEY: "{}", "other": "keep"}))
        monkeypatch.setenv("MDTABS_HOME", str(tmp_path / "unused"))

        main(["--state-dir", str(tmp_path), "--reset"])

        data = json.loads(state.read_text())
        assert PERSISTENCE_KEY not in data
        assert data["other"] == "keep"
        assert "Cleared saved tabs" in capsys.readouterr().out

    def test_runs_app_with_arguments(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MDTABS_HOME", str(tmp_path / "unused"))
        with patch("mdtabs.app.run_app") as run_app:
            main(["--state-dir", str(tmp_path), "--mode", "code", "notes.md"])
        run_app.assert_called_once_with(files=["notes.md"], mode="code", home=tmp_path)

    def test_fatal_error_exits_nonzero(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MDTABS_HOME", str(tmp_path / "unused"))
        with patch("mdtabs.app.run_app", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                main(["--state-dir", str(tmp_path)])
        assert exc_info.value.code == 1
