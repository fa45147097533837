"""Persist a project descriptor, merging with any existing project bundle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import yaml

from manifold.errors import IOFailure
from manifold.graph.models import scheme_path, schemes_directory
from manifold.side_effects import atomic_write_bytes

if TYPE_CHECKING:
    from pathlib import Path

    from manifold.generator.descriptor import ProjectDescriptor

logger = logging.getLogger(__name__)


class ProjectWriting(Protocol):
    def write(self, descriptor: ProjectDescriptor) -> None: ...


def render_descriptor(descriptor: ProjectDescriptor) -> str:
    """Serialize the descriptor document, preserving its key order."""
    return yaml.safe_dump(
        descriptor.document,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


class ProjectWriter:
    """Writes ``project.yml`` into the bundle at ``descriptor.project_path``.

    Anything else already in the bundle (user state, other tools' files)
    is kept.  Scheme files the descriptor no longer lists are removed.
    The project file is only rewritten when its contents change, so an
    editor watching it does not reload needlessly.
    """

    def write(self, descriptor: ProjectDescriptor) -> None:
        target = descriptor.project_file
        text = render_descriptor(descriptor)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if target.is_file() and target.read_text(encoding="utf-8") == text:
                logger.info("Project unchanged: %s", descriptor.project_path)
            else:
                atomic_write_bytes(target, text.encode("utf-8"))
                logger.info("Wrote project: %s", descriptor.project_path)
            self._prune_schemes(descriptor)
        except OSError as exc:
            raise IOFailure(target, exc) from exc

    def _prune_schemes(self, descriptor: ProjectDescriptor) -> None:
        schemes_dir = schemes_directory(descriptor.project_path)
        if not schemes_dir.is_dir():
            return
        keep = {scheme_path(descriptor.project_path, name) for name in descriptor.schemes}
        stale: list[Path] = [
            p for p in sorted(schemes_dir.glob("*.yml")) if p not in keep and p.is_file()
        ]
        for path in stale:
            path.unlink()
            logger.debug("Removed stale scheme: %s", path)
