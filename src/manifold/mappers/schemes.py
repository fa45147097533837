"""Autogenerated build/run schemes for the synthesized project."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import yaml

from manifold.editing.locator import EditableRole
from manifold.graph.models import RunAction, Scheme, scheme_path
from manifold.side_effects import FileDescriptor

if TYPE_CHECKING:
    from pathlib import Path

    from manifold.graph.models import Project, SyntheticTarget
    from manifold.mappers.chain import ProjectMapper
    from manifold.side_effects import SideEffectDescriptor

logger = logging.getLogger(__name__)

# Targets whose scheme re-runs generation for the manifest's directory.
_RUNNABLE_ROLES = frozenset(
    {
        EditableRole.MANIFEST,
        EditableRole.CONFIG,
        EditableRole.DEPENDENCIES,
        EditableRole.SETUP,
    }
)


def _generate_action(project: Project, path: Path) -> RunAction:
    return RunAction(
        executable=project.editor_path,
        arguments=("generate", "--path", str(path)),
        working_directory=project.source_root,
    )


def _target_scheme(project: Project, target: SyntheticTarget, *, coverage: bool) -> Scheme:
    run_action = None
    if target.role in _RUNNABLE_ROLES:
        # Config and friends live under Tuist/; generation runs from the root.
        directory = target.path.parent if target.role is EditableRole.MANIFEST else None
        run_action = _generate_action(project, directory or project.source_root)
    return Scheme(
        name=target.name,
        build_targets=(target.name,),
        code_coverage=coverage,
        run_action=run_action,
    )


def scheme_to_dict(scheme: Scheme) -> dict[str, Any]:
    """Plain-data form of *scheme* as stored in scheme files."""
    data: dict[str, Any] = {
        "name": scheme.name,
        "shared": scheme.shared,
        "build": {"targets": list(scheme.build_targets)},
        "test": {
            "targets": list(scheme.test_targets),
            "code_coverage": scheme.code_coverage,
        },
    }
    if scheme.run_action is not None:
        action = scheme.run_action
        data["run"] = {
            "executable": str(action.executable),
            "arguments": list(action.arguments),
            "working_directory": (
                str(action.working_directory) if action.working_directory else None
            ),
        }
    return data


def render_scheme(scheme: Scheme) -> bytes:
    """Serialize *scheme* deterministically (sorted keys)."""
    text = yaml.safe_dump(scheme_to_dict(scheme), sort_keys=True, default_flow_style=False)
    return text.encode("utf-8")


def autogenerated_schemes(
    project: Project,
    *,
    enable_code_coverage: bool,
) -> tuple[Project, list[SideEffectDescriptor]]:
    """Attach one scheme per target plus an aggregate project scheme.

    Schemes already defined on the project are kept as they are.  A
    project without targets is returned unchanged.
    """
    if not project.targets:
        return project, []

    existing = {scheme.name for scheme in project.schemes}
    generated: list[Scheme] = [
        _target_scheme(project, target, coverage=enable_code_coverage)
        for target in project.targets
    ]
    generated.append(
        Scheme(
            name=project.name,
            build_targets=tuple(t.name for t in project.targets),
            code_coverage=enable_code_coverage,
            run_action=_generate_action(project, project.source_root),
        )
    )
    added: list[Scheme] = []
    for scheme in generated:
        # First scheme wins a name; one file per scheme name.
        if scheme.name not in existing:
            existing.add(scheme.name)
            added.append(scheme)
    if not added:
        return project, []

    mapped = project.with_schemes([*project.schemes, *added])
    side_effects: list[SideEffectDescriptor] = [
        FileDescriptor(
            path=scheme_path(project.project_path, scheme.name),
            contents=render_scheme(scheme),
        )
        for scheme in added
    ]
    logger.info("Generated %d schemes", len(added))
    return mapped, side_effects


def autogenerated_schemes_mapper(*, enable_code_coverage: bool) -> ProjectMapper:
    """Bind the coverage policy explicitly, returning a chain member."""

    def _mapper(project: Project) -> tuple[Project, list[SideEffectDescriptor]]:
        return autogenerated_schemes(project, enable_code_coverage=enable_code_coverage)

    _mapper.__name__ = autogenerated_schemes.__name__
    return _mapper
