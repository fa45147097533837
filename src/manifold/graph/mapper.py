"""Map located editable files onto a synthetic project and dependency graph.

Wiring rules:

* every manifest, config, dependencies, setup, and template target depends
  on the description framework target;
* the same targets depend on every helper target, so helpers are visible
  to all of them;
* helpers depend on nothing in the graph, which keeps it acyclic.
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePath
from typing import TYPE_CHECKING

from manifold.editing.locator import EditableRole
from manifold.errors import NoEditableFilesError
from manifold.graph.models import (
    DESCRIPTION_FRAMEWORK_TARGET,
    Project,
    ProjectGraph,
    SyntheticTarget,
)
from manifold.settings import EditorSettings

if TYPE_CHECKING:
    from pathlib import Path

    from manifold.editing.locator import EditableFileSet

logger = logging.getLogger(__name__)

_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_]")

# Fixed names for single-file roles.
_ROLE_NAMES = {
    EditableRole.CONFIG: "Config",
    EditableRole.DEPENDENCIES: "Dependencies",
    EditableRole.SETUP: "Setup",
}


def _relative(path: Path, base: Path | None) -> PurePath:
    if base is not None:
        try:
            return path.relative_to(base)
        except ValueError:
            pass
    return PurePath(path.name)


def _sanitize(parts: tuple[str, ...]) -> str:
    return "_".join(_NON_IDENTIFIER_RE.sub("_", part) for part in parts if part)


def target_base_name(
    path: Path,
    role: EditableRole,
    *,
    source_root: Path,
    helpers_dir: Path | None = None,
    templates_dir: Path | None = None,
) -> str:
    """Derive a target name from a file's role and location.

    ``App/Project.swift`` → ``App_Project``; helper ``Shared/Ext.swift``
    → ``Helpers_Shared_Ext``; template ``lib/a.stencil`` →
    ``Templates_lib_a_stencil``.
    """
    if role in _ROLE_NAMES:
        return _ROLE_NAMES[role]
    if role is EditableRole.HELPER:
        rel = _relative(path, helpers_dir)
        return _sanitize(("Helpers", *rel.with_suffix("").parts))
    if role is EditableRole.TEMPLATE:
        rel = _relative(path, templates_dir)
        # Keep the extension: a.swift and a.stencil may sit side by side.
        return _sanitize(("Templates", *rel.parts))
    rel = _relative(path, source_root)
    return _sanitize(rel.with_suffix("").parts)


def _common_parent(paths: tuple[Path, ...], settings_dir: str, root: Path) -> Path | None:
    if not paths:
        return None
    candidate = (root / settings_dir).resolve()
    if all(candidate in p.parents for p in paths):
        return candidate
    return None


def map_editable_files(
    files: EditableFileSet,
    *,
    editor_path: Path,
    source_root: Path,
    project_path: Path,
    description_framework: Path,
    settings: EditorSettings | None = None,
) -> tuple[Project, ProjectGraph]:
    """Build the synthetic project and its validated dependency graph.

    Names are assigned in sorted path order, and name collisions get
    ``_2``, ``_3``, ... suffixes, so the same input always produces the
    same project.  The framework name and the project name (used by the
    aggregate scheme) are never given to a file target.

    Raises :class:`NoEditableFilesError` when *files* is empty.
    """
    settings = settings or EditorSettings()
    root = source_root.resolve()
    if files.is_empty:
        raise NoEditableFilesError(root)
    helpers_dir = _common_parent(files.helpers, settings.helpers_directory, root)
    templates_dir = _common_parent(files.templates, settings.templates_directory, root)

    taken: set[str] = {DESCRIPTION_FRAMEWORK_TARGET, settings.project_name}

    def _unique(base: str) -> str:
        base = base or "Manifest"
        name = base
        counter = 2
        while name in taken:
            name = f"{base}_{counter}"
            counter += 1
        taken.add(name)
        return name

    # Helpers first so that their names are known before wiring.
    helper_targets = [
        SyntheticTarget(
            name=_unique(
                target_base_name(
                    path, EditableRole.HELPER, source_root=root, helpers_dir=helpers_dir
                )
            ),
            path=path,
            role=EditableRole.HELPER,
        )
        for path in sorted(files.helpers)
    ]
    helper_names = frozenset(t.name for t in helper_targets)
    consumer_deps = frozenset({DESCRIPTION_FRAMEWORK_TARGET}) | helper_names

    consumers: list[SyntheticTarget] = []
    for editable in sorted(files.paths()):
        if editable.role is EditableRole.HELPER:
            continue
        base = target_base_name(
            editable.path,
            editable.role,
            source_root=root,
            helpers_dir=helpers_dir,
            templates_dir=templates_dir,
        )
        consumers.append(
            SyntheticTarget(
                name=_unique(base),
                path=editable.path,
                role=editable.role,
                dependencies=consumer_deps,
            )
        )

    framework = SyntheticTarget(
        name=DESCRIPTION_FRAMEWORK_TARGET,
        path=description_framework,
        role=None,
    )

    editable_targets = tuple(sorted([*consumers, *helper_targets], key=lambda t: t.name))
    graph = ProjectGraph.from_targets([framework, *editable_targets])
    graph.validate()

    project = Project(
        name=settings.project_name,
        source_root=root,
        project_path=project_path,
        editor_path=editor_path,
        description_framework=description_framework,
        targets=editable_targets,
    )
    logger.info(
        "Mapped %d targets with %d edges for %s",
        len(graph.targets),
        len(graph.edges),
        root,
    )
    return project, graph
