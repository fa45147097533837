"""Shared test fixtures for Manifold."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def write_file(root: Path, relative: str, content: str = "// manifest\n") -> Path:
    """Create ``root/relative`` with parents and return its path."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def editing_dir(tmp_path: Path) -> Path:
    """An empty directory to populate with manifests."""
    d = tmp_path / "workspace"
    d.mkdir()
    return d


@pytest.fixture()
def make_files(editing_dir: Path) -> Callable[..., Path]:
    """Populate the editing directory: ``make_files("Project.swift", ...)``."""

    def _make(*relatives: str) -> Path:
        for rel in relatives:
            write_file(editing_dir, rel)
        return editing_dir

    return _make


@pytest.fixture()
def editor_path(tmp_path: Path) -> Path:
    """A fake editor program with the description framework beside it."""
    bin_dir = tmp_path / "toolchain" / "bin"
    bin_dir.mkdir(parents=True)
    program = bin_dir / "manifold"
    program.write_text("#!/bin/sh\n", encoding="utf-8")
    (bin_dir / "ProjectDescription.framework").mkdir()
    return program


@pytest.fixture()
def framework_path(editor_path: Path) -> Path:
    return (editor_path.parent / "ProjectDescription.framework").resolve()


@pytest.fixture()
def destination(tmp_path: Path) -> Path:
    return tmp_path / "out"
