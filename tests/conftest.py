"""Shared test fixtures."""

import os
from datetime import datetime
from pathlib import Path

import pytest

from drdisk.models import SizeReport


@pytest.fixture
def make_report():
    """Build a SizeReport with just a name and a size."""

    def _make(name: str, size: int, is_directory: bool = False, **kwargs) -> SizeReport:
        return SizeReport(
            path=Path("/scan") / name,
            is_directory=is_directory,
            total_bytes_on_disk=size,
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_tree(tmp_path):
    """A directory with a file, a nested directory and an empty directory."""
    (tmp_path / "big.bin").write_bytes(b"x" * 20000)
    nested = tmp_path / "project" / "src"
    nested.mkdir(parents=True)
    (nested / "main.py").write_text("print('hello')\n" * 200)
    (tmp_path / "project" / "README").write_text("readme")
    (tmp_path / "empty").mkdir()
    return tmp_path


@pytest.fixture
def on_disk():
    """Allocated bytes of a path as reported by stat."""

    def _on_disk(path: Path) -> int:
        st = os.stat(path)
        return st.st_blocks * 512 if hasattr(st, "st_blocks") else st.st_size

    return _on_disk


@pytest.fixture
def mtime():
    """Modification time of a path as a datetime."""

    def _mtime(path: Path) -> datetime:
        return datetime.fromtimestamp(os.stat(path).st_mtime)

    return _mtime
