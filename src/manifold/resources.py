"""Locate resources shipped alongside the editor program."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from manifold.errors import ResourceNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

    from manifold.settings import EditorSettings

logger = logging.getLogger(__name__)

DESCRIPTION_FRAMEWORK_NAME = "ProjectDescription.framework"


class ResourceLocating(Protocol):
    def project_description(self) -> Path: ...


class ResourceLocator:
    """Finds the description framework for the running editor program.

    Search order: an explicitly configured path, then the program's own
    directory, then ``../lib`` and ``../Frameworks`` next to it.
    """

    def __init__(self, editor_path: Path, *, explicit_path: Path | None = None) -> None:
        self.editor_path = editor_path
        self.explicit_path = explicit_path

    def candidates(self) -> list[Path]:
        found: list[Path] = []
        if self.explicit_path is not None:
            found.append(self.explicit_path)
        program_dir = self.editor_path.resolve().parent
        found.extend(
            [
                program_dir / DESCRIPTION_FRAMEWORK_NAME,
                program_dir.parent / "lib" / DESCRIPTION_FRAMEWORK_NAME,
                program_dir.parent / "Frameworks" / DESCRIPTION_FRAMEWORK_NAME,
            ]
        )
        return found

    def project_description(self) -> Path:
        """Return the framework path or raise :class:`ResourceNotFoundError`."""
        searched = self.candidates()
        for candidate in searched:
            if candidate.exists():
                logger.debug("Found %s at %s", DESCRIPTION_FRAMEWORK_NAME, candidate)
                return candidate.resolve()
        raise ResourceNotFoundError(DESCRIPTION_FRAMEWORK_NAME, searched)


def resource_locator_for(
    editor_path: Path,
    editing_path: Path,
    settings: EditorSettings,
) -> ResourceLocator:
    """Build the locator for *editing_path*, honouring a configured framework path."""
    explicit = None
    if settings.description_framework:
        explicit = editing_path / settings.description_framework
    return ResourceLocator(editor_path, explicit_path=explicit)
