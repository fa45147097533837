"""Lower a mapped project and its graph into a serializable descriptor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from manifold.editing.locator import EditableRole
from manifold.errors import DescriptorGenerationError
from manifold.settings import EditorSettings

if TYPE_CHECKING:
    from pathlib import Path

    from manifold.graph.models import Project, ProjectGraph, SyntheticTarget

logger = logging.getLogger(__name__)

PROJECT_FILE_NAME = "project.yml"
DESCRIPTOR_FORMAT_VERSION = 1

# Group name per role, in display order.
_GROUPS: tuple[tuple[EditableRole, str], ...] = (
    (EditableRole.MANIFEST, "Manifests"),
    (EditableRole.HELPER, "Helpers"),
    (EditableRole.TEMPLATE, "Templates"),
    (EditableRole.CONFIG, "Config"),
    (EditableRole.DEPENDENCIES, "Dependencies"),
    (EditableRole.SETUP, "Setup"),
)


@dataclass(frozen=True)
class ProjectDescriptor:
    """A project ready to be written: its bundle path and document."""

    project_path: Path
    document: dict[str, Any] = field(default_factory=dict)
    schemes: tuple[str, ...] = ()

    @property
    def project_file(self) -> Path:
        return self.project_path / PROJECT_FILE_NAME


class DescriptorGenerating(Protocol):
    def generate(self, project: Project, graph: ProjectGraph) -> ProjectDescriptor: ...


def _display_path(path: Path, root: Path) -> str:
    """Path relative to *root* when inside it, absolute otherwise."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


class DescriptorGenerator:
    """Default :class:`DescriptorGenerating` implementation."""

    def __init__(self, settings: EditorSettings | None = None) -> None:
        self.settings = settings or EditorSettings()

    def _build_settings(self, project: Project) -> dict[str, str]:
        search_path = str(project.description_framework.parent)
        settings: dict[str, str] = {
            "FRAMEWORK_SEARCH_PATHS": search_path,
            "LIBRARY_SEARCH_PATHS": search_path,
            "SWIFT_INCLUDE_PATHS": search_path,
            "SWIFT_VERSION": self.settings.swift_version,
        }
        settings.update(self.settings.build_settings)
        return dict(sorted(settings.items()))

    def _target_entry(
        self,
        target: SyntheticTarget,
        graph: ProjectGraph,
        project: Project,
        build_settings: dict[str, str],
    ) -> dict[str, Any]:
        if target.name not in graph.targets:
            msg = f"Target '{target.name}' is not part of the project graph"
            raise DescriptorGenerationError(msg)
        dependencies: list[dict[str, str]] = []
        for dep in graph.dependencies(target.name):
            dep_target = graph.targets.get(dep)
            if dep_target is None:
                msg = f"Target '{target.name}' depends on unknown target '{dep}'"
                raise DescriptorGenerationError(msg)
            kind = "framework" if dep_target.is_framework else "target"
            dependencies.append({kind: dep})
        assert target.role is not None
        return {
            "name": target.name,
            "role": target.role.value,
            "sources": [_display_path(target.path, project.source_root)],
            "dependencies": dependencies,
            "settings": build_settings,
        }

    def generate(self, project: Project, graph: ProjectGraph) -> ProjectDescriptor:
        """Produce the descriptor; targets sorted by name, paths root-relative."""
        root = project.source_root
        build_settings = self._build_settings(project)

        groups: dict[str, list[str]] = {}
        for role, group in _GROUPS:
            members = sorted(
                _display_path(t.path, root) for t in project.targets if t.role is role
            )
            if members:
                groups[group] = members

        frameworks = [
            {"name": t.name, "path": str(t.path)}
            for t in graph.targets.values()
            if t.is_framework
        ]
        targets = [
            self._target_entry(t, graph, project, build_settings)
            for t in sorted(project.targets, key=lambda t: t.name)
        ]
        scheme_names = tuple(sorted(s.name for s in project.schemes))

        document: dict[str, Any] = {
            "format_version": DESCRIPTOR_FORMAT_VERSION,
            "name": project.name,
            "source_root": str(root),
            "groups": groups,
            "files": sorted(_display_path(t.path, root) for t in project.targets),
            "frameworks": frameworks,
            "targets": targets,
            "schemes": list(scheme_names),
        }
        logger.info("Generated descriptor for %s (%d targets)", project.name, len(targets))
        return ProjectDescriptor(
            project_path=project.project_path,
            document=document,
            schemes=scheme_names,
        )
