"""Locate the editable files of a manifest directory.

Nothing here raises: a missing file or directory is reported as ``None``
or an empty list, and unreadable directories are skipped.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from manifold.settings import EditorSettings

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class EditableRole(enum.Enum):
    """Role of an editable file in the synthesized project."""

    MANIFEST = "manifest"
    CONFIG = "config"
    DEPENDENCIES = "dependencies"
    SETUP = "setup"
    HELPER = "helper"
    TEMPLATE = "template"


class ManifestKind(enum.Enum):
    """Kind of a located manifest, derived from its file name."""

    PROJECT = "project"
    WORKSPACE = "workspace"


@dataclass(frozen=True, order=True)
class EditablePath:
    """An absolute path known to exist, tagged with its role."""

    path: Path
    role: EditableRole = field(compare=False)


@dataclass(frozen=True)
class EditableFileSet:
    """All editable files discovered for one ``edit`` invocation."""

    manifests: tuple[Path, ...] = ()
    config: Path | None = None
    dependencies: Path | None = None
    setup: Path | None = None
    helpers: tuple[Path, ...] = ()
    templates: tuple[Path, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when there are no manifests, helpers, or templates.

        Config, dependencies, and setup files alone are not enough to
        synthesize a project.
        """
        return not (self.manifests or self.helpers or self.templates)

    def paths(self) -> list[EditablePath]:
        """Return every located file tagged with its role."""
        tagged = [EditablePath(p, EditableRole.MANIFEST) for p in self.manifests]
        for path, role in (
            (self.config, EditableRole.CONFIG),
            (self.dependencies, EditableRole.DEPENDENCIES),
            (self.setup, EditableRole.SETUP),
        ):
            if path is not None:
                tagged.append(EditablePath(path, role))
        tagged.extend(EditablePath(p, EditableRole.HELPER) for p in self.helpers)
        tagged.extend(EditablePath(p, EditableRole.TEMPLATE) for p in self.templates)
        return tagged


# ---------------------------------------------------------------------------
# Globbing
# ---------------------------------------------------------------------------


def glob_files(directory: Path, extensions: Iterable[str]) -> list[Path]:
    """Return all files under *directory* whose suffix is in *extensions*.

    Equivalent to unioning ``**/*<ext>`` for each extension.  Hidden
    directories are skipped; the result is resolved and sorted.
    """
    wanted = frozenset(extensions)
    found: set[Path] = set()
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for name in filenames:
            if os.path.splitext(name)[1] in wanted:
                found.add(Path(dirpath, name).resolve())
    return sorted(found)


# ---------------------------------------------------------------------------
# Locators
# ---------------------------------------------------------------------------


def _existing_file(path: Path) -> Path | None:
    return path.resolve() if path.is_file() else None


def _existing_dir(path: Path) -> Path | None:
    return path.resolve() if path.is_dir() else None


class ManifestFilesLocator:
    """Finds manifests plus the config, dependencies, and setup files."""

    def __init__(self, settings: EditorSettings | None = None) -> None:
        self.settings = settings or EditorSettings()

    def _kind_for(self, name: str) -> ManifestKind:
        stem = os.path.splitext(name)[0].lower()
        if stem == ManifestKind.WORKSPACE.value:
            return ManifestKind.WORKSPACE
        return ManifestKind.PROJECT

    def locate_all_project_manifests(self, root: Path) -> list[tuple[ManifestKind, Path]]:
        """Walk *root* recursively and return every manifest with its kind.

        Returns an empty list when *root* is not a readable directory.
        """
        names = frozenset(self.settings.manifest_names)
        # Helpers and templates are never manifests, whatever their file name.
        excluded = {
            os.path.normpath(root / self.settings.helpers_directory),
            os.path.normpath(root / self.settings.templates_directory),
        }
        found: list[tuple[ManifestKind, Path]] = []

        def _skip(err: OSError) -> None:
            logger.debug("Skipping unreadable directory: %s", err.filename)

        for dirpath, dirnames, filenames in os.walk(root, onerror=_skip):
            dirnames[:] = [
                d
                for d in dirnames
                if not d.startswith(".")
                and os.path.normpath(os.path.join(dirpath, d)) not in excluded
            ]
            for name in filenames:
                if name in names:
                    found.append((self._kind_for(name), Path(dirpath, name).resolve()))
        found.sort(key=lambda item: item[1])
        return found

    def locate_config(self, root: Path) -> Path | None:
        return _existing_file(root / self.settings.config_path)

    def locate_dependencies(self, root: Path) -> Path | None:
        return _existing_file(root / self.settings.dependencies_path)

    def locate_setup(self, root: Path) -> Path | None:
        return _existing_file(root / self.settings.setup_path)


class HelpersDirectoryLocator:
    """Finds the shared helpers directory, if any."""

    def __init__(self, settings: EditorSettings | None = None) -> None:
        self.settings = settings or EditorSettings()

    def locate(self, root: Path) -> Path | None:
        return _existing_dir(root / self.settings.helpers_directory)


class TemplatesDirectoryLocator:
    """Finds the user templates directory, if any."""

    def __init__(self, settings: EditorSettings | None = None) -> None:
        self.settings = settings or EditorSettings()

    def locate_user_templates(self, root: Path) -> Path | None:
        return _existing_dir(root / self.settings.templates_directory)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def locate_editable_files(
    root: Path,
    *,
    settings: EditorSettings | None = None,
    manifest_locator: ManifestFilesLocator | None = None,
    helpers_locator: HelpersDirectoryLocator | None = None,
    templates_locator: TemplatesDirectoryLocator | None = None,
) -> EditableFileSet:
    """Locate every editable file under *root*.

    The returned set may be empty; callers decide whether that is an error.
    """
    settings = settings or EditorSettings()
    manifest_locator = manifest_locator or ManifestFilesLocator(settings)
    helpers_locator = helpers_locator or HelpersDirectoryLocator(settings)
    templates_locator = templates_locator or TemplatesDirectoryLocator(settings)

    manifests = manifest_locator.locate_all_project_manifests(root)

    helpers: list[Path] = []
    helpers_dir = helpers_locator.locate(root)
    if helpers_dir is not None:
        helpers = glob_files(helpers_dir, (settings.source_extension,))

    templates: list[Path] = []
    templates_dir = templates_locator.locate_user_templates(root)
    if templates_dir is not None:
        templates = glob_files(
            templates_dir, (settings.source_extension, *settings.template_extensions)
        )

    file_set = EditableFileSet(
        manifests=tuple(path for _, path in manifests),
        config=manifest_locator.locate_config(root),
        dependencies=manifest_locator.locate_dependencies(root),
        setup=manifest_locator.locate_setup(root),
        helpers=tuple(helpers),
        templates=tuple(templates),
    )
    logger.info(
        "Located %d manifests, %d helpers, %d templates in %s",
        len(file_set.manifests),
        len(file_set.helpers),
        len(file_set.templates),
        root,
    )
    return file_set
