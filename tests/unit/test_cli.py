"""Tests for the netdef-check command line."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from netdef.cli import main
from tests.conftest import SAMPLE_DEFINITION_YAML


class TestCheckCommand:
    def test_valid_file(
        self, write_definition: Callable[..., Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = write_definition(SAMPLE_DEFINITION_YAML)
        assert main([str(path)]) == 0
        assert "Invalid YAML" not in capsys.readouterr().err

    def test_invalid_file(
        self, write_definition: Callable[..., Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = write_definition("network:\n\tversion: 2\n")
        assert main([str(path)]) == 1
        err = capsys.readouterr().err
        assert f"{path}:2:1: Invalid YAML: tabs are not allowed for indent:" in err

    def test_error_code_flag(
        self, write_definition: Callable[..., Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = write_definition("network:\n\tversion: 2\n")
        main(["--error-code", str(path)])
        assert "error code: 0x0000000100000000" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        missing = tmp_path / "missing.yaml"
        assert main([str(missing)]) == 1
        assert str(missing) in capsys.readouterr().err

    def test_mixed_files(
        self, write_definition: Callable[..., Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        good = write_definition(SAMPLE_DEFINITION_YAML, "good.yaml")
        bad = write_definition("a:\n  b: 1\n c: 2\n", "bad.yaml")
        assert main([str(good), str(bad)]) == 1
        err = capsys.readouterr().err
        assert "inconsistent indentation" in err
        assert f"{good}:" not in err
