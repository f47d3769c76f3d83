"""Shared test fixtures for netdef."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from netdef.models.errors import ErrorHandle
from netdef.parser.loader import TrackedLoader


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def error() -> ErrorHandle:
    return ErrorHandle()


@pytest.fixture
def write_definition(tmp_path: Path) -> Callable[..., Path]:
    """Write YAML text to a file under ``tmp_path`` and return its path."""

    def _write(content: str, name: str = "net.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


SAMPLE_DEFINITION_YAML = """\
network:
  version: 2
  renderer: networkd
  ethernets:
    eth0:
      dhcp4: true
    eth1:
      addresses:
        - 10.0.0.5/24
        - 10.0.0.6/24
      routes:
        - to: default
          via: 10.0.0.1
"""
