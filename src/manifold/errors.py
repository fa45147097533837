"""Error taxonomy for the edit pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class EditorError(Exception):
    """Base class for errors reported to the user."""


class NoEditableFilesError(EditorError):
    """Raised when the editing directory contains nothing to edit."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"There are no editable files at {path}")


class ResourceNotFoundError(EditorError):
    """Raised when a bundled resource cannot be found on this host."""

    def __init__(self, name: str, searched: Sequence[Path] = ()) -> None:
        self.name = name
        self.searched = tuple(searched)
        msg = f"Couldn't find resource '{name}'"
        if self.searched:
            msg += " (searched: " + ", ".join(str(p) for p in self.searched) + ")"
        super().__init__(msg)


class IOFailure(EditorError):
    """Raised when a file-system operation fails; the cause is chained."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"I/O error at {path}: {reason}")


class DescriptorGenerationError(EditorError):
    """Raised when a project cannot be lowered into a descriptor."""


class GraphInvariantViolation(Exception):  # noqa: N818
    """A synthesized graph is cyclic or has a dangling edge.

    Not an :class:`EditorError`: this signals a defect in graph
    construction, never a problem with the user's files.
    """

    def __init__(self, message: str, *, cycle: Sequence[str] = ()) -> None:
        self.cycle = tuple(cycle)
        super().__init__(message)
