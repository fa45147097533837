"""Deferred file-system mutations and their executor."""

from __future__ import annotations

import enum
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Union

from manifold.errors import IOFailure

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class DescriptorState(enum.Enum):
    """Desired end state of a path."""

    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class FileDescriptor:
    """Create or update a file with *contents*, or delete it."""

    path: Path
    contents: bytes | None = None
    state: DescriptorState = DescriptorState.PRESENT


@dataclass(frozen=True)
class DirectoryDescriptor:
    """Create a directory, or delete it with everything inside."""

    path: Path
    state: DescriptorState = DescriptorState.PRESENT


SideEffectDescriptor = Union[FileDescriptor, DirectoryDescriptor]


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Replace *path* with *data* via a temporary file in the same directory.

    Readers see either the old file or the new one, never a partial write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.tmp.", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


@dataclass
class ExecutionResult:
    """Paths touched by one batch, for reporting."""

    written: list[Path]
    removed: list[Path]
    unchanged: list[Path]


class SideEffectExecutor:
    """Applies descriptors in order.

    Every descriptor is idempotent: a file whose bytes already match is
    left alone, and deleting a missing path is a no-op.  The first
    ``OSError`` aborts the batch as :class:`IOFailure`; earlier
    descriptors are not rolled back.
    """

    def execute(self, side_effects: Iterable[SideEffectDescriptor]) -> ExecutionResult:
        result = ExecutionResult(written=[], removed=[], unchanged=[])
        for descriptor in side_effects:
            try:
                if isinstance(descriptor, FileDescriptor):
                    self._apply_file(descriptor, result)
                else:
                    self._apply_directory(descriptor, result)
            except OSError as exc:
                raise IOFailure(descriptor.path, exc) from exc
        logger.info(
            "Side effects: %d written, %d removed, %d unchanged",
            len(result.written),
            len(result.removed),
            len(result.unchanged),
        )
        return result

    def _apply_file(self, descriptor: FileDescriptor, result: ExecutionResult) -> None:
        path = descriptor.path
        if descriptor.state is DescriptorState.ABSENT:
            if path.is_file() or path.is_symlink():
                path.unlink()
                logger.debug("Removed file: %s", path)
                result.removed.append(path)
            return

        contents = descriptor.contents or b""
        if path.is_file() and path.read_bytes() == contents:
            logger.debug("Unchanged: %s", path)
            result.unchanged.append(path)
            return
        atomic_write_bytes(path, contents)
        logger.debug("Wrote: %s", path)
        result.written.append(path)

    def _apply_directory(self, descriptor: DirectoryDescriptor, result: ExecutionResult) -> None:
        path = descriptor.path
        if descriptor.state is DescriptorState.ABSENT:
            if path.is_dir():
                shutil.rmtree(path)
                logger.debug("Removed directory: %s", path)
                result.removed.append(path)
            return
        if path.is_dir():
            result.unchanged.append(path)
            return
        path.mkdir(parents=True, exist_ok=True)
        logger.debug("Created directory: %s", path)
        result.written.append(path)
