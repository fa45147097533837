"""Editing domain: discovery of manifests, helpers, and templates."""

from manifold.editing.locator import (
    EditableFileSet,
    EditablePath,
    EditableRole,
    HelpersDirectoryLocator,
    ManifestFilesLocator,
    ManifestKind,
    TemplatesDirectoryLocator,
    glob_files,
    locate_editable_files,
)

__all__ = [
    "EditableFileSet",
    "EditablePath",
    "EditableRole",
    "HelpersDirectoryLocator",
    "ManifestFilesLocator",
    "ManifestKind",
    "TemplatesDirectoryLocator",
    "glob_files",
    "locate_editable_files",
]
