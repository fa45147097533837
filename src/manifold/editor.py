"""Edit orchestrator: locate, map, apply mappers and side effects, generate, write."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from manifold.editing.locator import (
    HelpersDirectoryLocator,
    ManifestFilesLocator,
    TemplatesDirectoryLocator,
    locate_editable_files,
)
from manifold.errors import NoEditableFilesError
from manifold.generator.descriptor import DescriptorGenerator
from manifold.generator.writer import ProjectWriter
from manifold.graph.mapper import map_editable_files
from manifold.mappers import default_mappers, map_project
from manifold.resources import resource_locator_for
from manifold.settings import EditorSettings
from manifold.side_effects import SideEffectExecutor

if TYPE_CHECKING:
    from collections.abc import Sequence

    from manifold.generator.descriptor import DescriptorGenerating
    from manifold.generator.writer import ProjectWriting
    from manifold.mappers import ProjectMapper
    from manifold.resources import ResourceLocating

logger = logging.getLogger(__name__)


class ProjectEditor:
    """Generates an IDE project for editing the manifests of a directory.

    Every collaborator can be injected; defaults are built from
    *settings*.  ``editor_path`` is the program that manifests are
    compiled and run against, passed in rather than discovered so the
    generated schemes always invoke the same binary.  Code coverage in
    the autogenerated schemes is off unless *enable_code_coverage* is set;
    it is ignored when an explicit *mappers* chain is given.
    """

    def __init__(
        self,
        editor_path: Path,
        *,
        settings: EditorSettings | None = None,
        generator: DescriptorGenerating | None = None,
        writer: ProjectWriting | None = None,
        resource_locator: ResourceLocating | None = None,
        manifest_locator: ManifestFilesLocator | None = None,
        helpers_locator: HelpersDirectoryLocator | None = None,
        templates_locator: TemplatesDirectoryLocator | None = None,
        mappers: Sequence[ProjectMapper] | None = None,
        side_effect_executor: SideEffectExecutor | None = None,
        enable_code_coverage: bool = False,
    ) -> None:
        self.editor_path = editor_path
        self.settings = settings or EditorSettings()
        self.generator = generator or DescriptorGenerator(self.settings)
        self.writer = writer or ProjectWriter()
        self.resource_locator = resource_locator
        self.manifest_locator = manifest_locator or ManifestFilesLocator(self.settings)
        self.helpers_locator = helpers_locator or HelpersDirectoryLocator(self.settings)
        self.templates_locator = templates_locator or TemplatesDirectoryLocator(self.settings)
        self.mappers = (
            tuple(mappers)
            if mappers is not None
            else tuple(default_mappers(enable_code_coverage=enable_code_coverage))
        )
        self.side_effect_executor = side_effect_executor or SideEffectExecutor()

    def _resources_for(self, editing_path: Path) -> ResourceLocating:
        if self.resource_locator is not None:
            return self.resource_locator
        return resource_locator_for(self.editor_path, editing_path, self.settings)

    def edit(self, editing_path: Path, destination_directory: Path) -> Path:
        """Generate or update the project for *editing_path*.

        Returns the path of the project inside *destination_directory*.

        Raises
        ------
        NoEditableFilesError
            When *editing_path* has no manifests, helpers, or templates.
            Nothing is written in that case.
        ResourceNotFoundError
            When the description framework cannot be found.
        IOFailure
            When side effects or the project cannot be written.
        """
        editing_path = editing_path.resolve()
        project_path = destination_directory.resolve() / self.settings.project_file_name

        files = locate_editable_files(
            editing_path,
            settings=self.settings,
            manifest_locator=self.manifest_locator,
            helpers_locator=self.helpers_locator,
            templates_locator=self.templates_locator,
        )
        if files.is_empty:
            raise NoEditableFilesError(editing_path)

        framework_path = self._resources_for(editing_path).project_description()

        project, graph = map_editable_files(
            files,
            editor_path=self.editor_path,
            source_root=editing_path,
            project_path=project_path,
            description_framework=framework_path,
            settings=self.settings,
        )

        mapped_project, side_effects = map_project(project, self.mappers)
        self.side_effect_executor.execute(side_effects)

        descriptor = self.generator.generate(mapped_project, graph)
        self.writer.write(descriptor)
        logger.info("Project ready: %s", descriptor.project_path)
        return Path(descriptor.project_path)
