"""Project mappers: ordered transformations of the synthesized project."""

from __future__ import annotations

from typing import TYPE_CHECKING

from manifold.mappers.chain import ProjectMapper, map_project, sequential
from manifold.mappers.schemes import (
    autogenerated_schemes,
    autogenerated_schemes_mapper,
    render_scheme,
    scheme_to_dict,
)

if TYPE_CHECKING:
    from collections.abc import Sequence


def default_mappers(*, enable_code_coverage: bool = False) -> Sequence[ProjectMapper]:
    """The chain used by ``edit``: autogenerated schemes, coverage off."""
    return (autogenerated_schemes_mapper(enable_code_coverage=enable_code_coverage),)


__all__ = [
    "ProjectMapper",
    "autogenerated_schemes",
    "autogenerated_schemes_mapper",
    "default_mappers",
    "map_project",
    "render_scheme",
    "scheme_to_dict",
    "sequential",
]
