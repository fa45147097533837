"""Synthetic targets, the synthesized project, and its dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from manifold.editing.locator import EditableRole
from manifold.errors import GraphInvariantViolation

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

DESCRIPTION_FRAMEWORK_TARGET = "ProjectDescription"


@dataclass(frozen=True)
class SyntheticTarget:
    """One compilable unit of the synthesized project.

    ``role`` is ``None`` only for the description framework target.
    """

    name: str
    path: Path
    role: EditableRole | None
    dependencies: frozenset[str] = frozenset()

    @property
    def is_framework(self) -> bool:
        return self.role is None


@dataclass(frozen=True)
class RunAction:
    """Executable launched when a scheme is run."""

    executable: Path
    arguments: tuple[str, ...] = ()
    working_directory: Path | None = None


@dataclass(frozen=True)
class Scheme:
    """A build/run configuration attached to the project."""

    name: str
    build_targets: tuple[str, ...]
    test_targets: tuple[str, ...] = ()
    code_coverage: bool = False
    run_action: RunAction | None = None
    shared: bool = True


@dataclass(frozen=True)
class Project:
    """The editable project synthesized from one manifest directory."""

    name: str
    source_root: Path
    project_path: Path
    editor_path: Path
    description_framework: Path
    targets: tuple[SyntheticTarget, ...] = ()
    schemes: tuple[Scheme, ...] = ()

    def target(self, name: str) -> SyntheticTarget | None:
        for target in self.targets:
            if target.name == name:
                return target
        return None

    def with_schemes(self, schemes: Iterable[Scheme]) -> Project:
        return replace(self, schemes=tuple(schemes))


def schemes_directory(project_path: Path) -> Path:
    """Directory holding shared scheme files inside a project bundle."""
    return project_path / "xcshareddata" / "xcschemes"


def scheme_path(project_path: Path, scheme_name: str) -> Path:
    return schemes_directory(project_path) / f"{scheme_name}.yml"


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectGraph:
    """Targets keyed by name; edges are each target's ``dependencies``."""

    targets: Mapping[str, SyntheticTarget] = field(default_factory=dict)

    @classmethod
    def from_targets(cls, targets: Iterable[SyntheticTarget]) -> ProjectGraph:
        by_name: dict[str, SyntheticTarget] = {}
        for target in sorted(targets, key=lambda t: t.name):
            if target.name in by_name:
                msg = f"Duplicate target name '{target.name}'"
                raise GraphInvariantViolation(msg)
            by_name[target.name] = target
        return cls(targets=by_name)

    @property
    def edges(self) -> list[tuple[str, str]]:
        """All ``(src, dst)`` edges, sorted."""
        return sorted(
            (name, dep) for name, target in self.targets.items() for dep in target.dependencies
        )

    def dependencies(self, name: str) -> list[str]:
        return sorted(self.targets[name].dependencies)

    def dependents(self, name: str) -> list[str]:
        return sorted(src for src, dst in self.edges if dst == name)

    def validate(self) -> None:
        """Raise :class:`GraphInvariantViolation` on a dangling edge or a cycle."""
        for src, dst in self.edges:
            if dst not in self.targets:
                msg = f"Edge {src} → {dst} points to a target missing from the graph"
                raise GraphInvariantViolation(msg)

        cycle = self._find_cycle()
        if cycle:
            display = " → ".join(cycle)
            raise GraphInvariantViolation(f"Dependency cycle detected: {display}", cycle=cycle)

    def _find_cycle(self) -> list[str]:
        """Iterative three-colour DFS; returns the first cycle found or ``[]``."""
        white, grey, black = 0, 1, 2
        colour = dict.fromkeys(self.targets, white)

        for start in self.targets:
            if colour[start] != white:
                continue
            # Stack entries: (node, iterator index into its sorted dependencies)
            stack: list[tuple[str, int]] = [(start, 0)]
            path: list[str] = [start]
            colour[start] = grey
            while stack:
                node, idx = stack[-1]
                deps = self.dependencies(node)
                if idx >= len(deps):
                    colour[node] = black
                    stack.pop()
                    path.pop()
                    continue
                stack[-1] = (node, idx + 1)
                nxt = deps[idx]
                if colour[nxt] == grey:
                    return [*path[path.index(nxt) :], nxt]
                if colour[nxt] == white:
                    colour[nxt] = grey
                    stack.append((nxt, 0))
                    path.append(nxt)
        return []

    def topological_order(self) -> list[str]:
        """Target names with every dependency before its dependents.

        Ties are broken by name, so the order is stable across runs.
        """
        self.validate()
        remaining = {name: set(t.dependencies) for name, t in self.targets.items()}
        order: list[str] = []
        while remaining:
            ready = sorted(name for name, deps in remaining.items() if not deps)
            for name in ready:
                del remaining[name]
            for deps in remaining.values():
                deps.difference_update(ready)
            order.extend(ready)
        return order
