"""Ordered chain of project transformations.

A mapper is a plain function ``Project -> (Project, [SideEffectDescriptor])``.
The chain folds left: each mapper sees the previous mapper's project, never
its side effects, and the side effects are concatenated in chain order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from manifold.graph.models import Project
    from manifold.side_effects import SideEffectDescriptor

logger = logging.getLogger(__name__)

ProjectMapper = Callable[["Project"], "tuple[Project, list[SideEffectDescriptor]]"]


def map_project(
    project: Project,
    mappers: Sequence[ProjectMapper],
) -> tuple[Project, list[SideEffectDescriptor]]:
    """Apply *mappers* in order and collect their side effects."""
    side_effects: list[SideEffectDescriptor] = []
    for mapper in mappers:
        project, produced = mapper(project)
        logger.debug(
            "%s produced %d side effects",
            getattr(mapper, "__name__", type(mapper).__name__),
            len(produced),
        )
        side_effects.extend(produced)
    return project, side_effects


def sequential(mappers: Sequence[ProjectMapper]) -> ProjectMapper:
    """Compose *mappers* into a single mapper."""
    frozen = tuple(mappers)

    def _mapper(project: Project) -> tuple[Project, list[SideEffectDescriptor]]:
        return map_project(project, frozen)

    _mapper.__name__ = "sequential"
    return _mapper
