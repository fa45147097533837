"""Tests for manifold.editor: the end-to-end edit pipeline."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
import yaml

from manifold.editor import ProjectEditor
from manifold.errors import IOFailure, NoEditableFilesError, ResourceNotFoundError
from manifold.generator import PROJECT_FILE_NAME, ProjectDescriptor
from manifold.graph.models import DESCRIPTION_FRAMEWORK_TARGET, scheme_path, schemes_directory
from manifold.settings import EditorSettings

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from manifold.graph.models import Project, ProjectGraph


def _document(project_path: Path) -> dict:
    return yaml.safe_load((project_path / PROJECT_FILE_NAME).read_text(encoding="utf-8"))


def _target_names(project_path: Path) -> list[str]:
    return [t["name"] for t in _document(project_path)["targets"]]


class RecordingGenerator:
    def __init__(self) -> None:
        self.calls: list[tuple[Project, ProjectGraph]] = []

    def generate(self, project: Project, graph: ProjectGraph) -> ProjectDescriptor:
        self.calls.append((project, graph))
        return ProjectDescriptor(project.project_path, {"name": project.name})


class RecordingWriter:
    def __init__(self) -> None:
        self.written: list[ProjectDescriptor] = []

    def write(self, descriptor: ProjectDescriptor) -> None:
        self.written.append(descriptor)


# --- Scenarios ---


class TestScenarios:
    def test_single_manifest(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift")
        project_path = ProjectEditor(editor_path).edit(root, destination)
        assert project_path == destination.resolve() / "Manifests.xcodeproj"
        assert _target_names(project_path) == ["Project"]
        doc = _document(project_path)
        assert doc["frameworks"][0]["name"] == DESCRIPTION_FRAMEWORK_TARGET

    def test_manifest_with_helpers(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files(
            "Project.swift",
            "Tuist/ProjectDescriptionHelpers/A.swift",
            "Tuist/ProjectDescriptionHelpers/B.swift",
        )
        project_path = ProjectEditor(editor_path).edit(root, destination)
        targets = {t["name"]: t for t in _document(project_path)["targets"]}
        assert sorted(targets) == ["Helpers_A", "Helpers_B", "Project"]
        assert targets["Project"]["dependencies"] == [
            {"target": "Helpers_A"},
            {"target": "Helpers_B"},
            {"framework": DESCRIPTION_FRAMEWORK_TARGET},
        ]

    def test_templates_only(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Tuist/Templates/feature.stencil")
        project_path = ProjectEditor(editor_path).edit(root, destination)
        assert _target_names(project_path) == ["Templates_feature_stencil"]

    def test_empty_directory_writes_nothing(
        self, editing_dir: Path, editor_path: Path, destination: Path
    ) -> None:
        with pytest.raises(NoEditableFilesError) as excinfo:
            ProjectEditor(editor_path).edit(editing_dir, destination)
        assert excinfo.value.path == editing_dir.resolve()
        assert not destination.exists()


# --- Pipeline behaviour ---


class TestEditPipeline:
    def test_schemes_written_as_side_effects(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift", "Tuist/Config.swift")
        project_path = ProjectEditor(editor_path).edit(root, destination)
        names = sorted(p.stem for p in schemes_directory(project_path).glob("*.yml"))
        assert names == ["Config", "Manifests", "Project"]
        assert _document(project_path)["schemes"] == names
        scheme = yaml.safe_load(scheme_path(project_path, "Project").read_text())
        assert scheme["run"]["executable"] == str(editor_path)
        assert scheme["test"]["code_coverage"] is False

    def test_coverage_enabled_at_construction(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift")
        project_path = ProjectEditor(editor_path, enable_code_coverage=True).edit(
            root, destination
        )
        scheme = yaml.safe_load(scheme_path(project_path, "Project").read_text())
        assert scheme["test"]["code_coverage"] is True

    def test_second_run_leaves_files_untouched(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift", "Tuist/ProjectDescriptionHelpers/A.swift")
        editor = ProjectEditor(editor_path)
        project_path = editor.edit(root, destination)
        files = sorted(p for p in project_path.rglob("*") if p.is_file())
        for path in files:
            os.utime(path, (1_000_000, 1_000_000))
        snapshot = {p: p.read_bytes() for p in files}

        assert editor.edit(root, destination) == project_path
        after = sorted(p for p in project_path.rglob("*") if p.is_file())
        assert after == files
        assert {p: p.read_bytes() for p in after} == snapshot
        assert all(p.stat().st_mtime == 1_000_000 for p in after)

    def test_removed_manifest_prunes_its_scheme(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift", "App/Project.swift")
        editor = ProjectEditor(editor_path)
        project_path = editor.edit(root, destination)
        assert scheme_path(project_path, "App_Project").exists()

        (root / "App" / "Project.swift").unlink()
        editor.edit(root, destination)
        assert not scheme_path(project_path, "App_Project").exists()
        assert _target_names(project_path) == ["Project"]

    def test_custom_project_name(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift")
        settings = EditorSettings(project_name="Editing")
        project_path = ProjectEditor(editor_path, settings=settings).edit(root, destination)
        assert project_path.name == "Editing.xcodeproj"
        assert scheme_path(project_path, "Editing").exists()

    def test_project_named_like_manifest(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift")
        settings = EditorSettings(project_name="Project")
        project_path = ProjectEditor(editor_path, settings=settings).edit(root, destination)
        doc = _document(project_path)
        assert doc["schemes"] == ["Project", "Project_2"]
        assert _target_names(project_path) == ["Project_2"]
        aggregate = yaml.safe_load(scheme_path(project_path, "Project").read_text())
        assert aggregate["build"]["targets"] == ["Project_2"]
        assert scheme_path(project_path, "Project_2").exists()

    def test_missing_framework(
        self, make_files: Callable[..., Path], tmp_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift")
        program = tmp_path / "bare" / "manifold"
        program.parent.mkdir()
        program.write_text("#!/bin/sh\n")
        with pytest.raises(ResourceNotFoundError):
            ProjectEditor(program).edit(root, destination)
        assert not destination.exists()

    def test_side_effect_failure_stops_before_writer(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift")
        destination.mkdir()
        # A plain file where the project bundle should go.
        (destination / "Manifests.xcodeproj").write_text("not a bundle")
        writer = RecordingWriter()
        with pytest.raises(IOFailure):
            ProjectEditor(editor_path, writer=writer).edit(root, destination)
        assert writer.written == []


# --- Injection ---


class TestCollaborators:
    def test_injected_generator_and_writer(
        self,
        make_files: Callable[..., Path],
        editor_path: Path,
        framework_path: Path,
        destination: Path,
    ) -> None:
        root = make_files("Project.swift")
        generator = RecordingGenerator()
        writer = RecordingWriter()
        editor = ProjectEditor(editor_path, generator=generator, writer=writer)

        project_path = editor.edit(root, destination)

        assert project_path == destination.resolve() / "Manifests.xcodeproj"
        [(project, graph)] = generator.calls
        assert project.description_framework == framework_path
        assert [s.name for s in project.schemes] == ["Project", "Manifests"]
        assert graph.edges == [("Project", DESCRIPTION_FRAMEWORK_TARGET)]
        assert [d.document for d in writer.written] == [{"name": "Manifests"}]
        assert not (project_path / PROJECT_FILE_NAME).exists()

    def test_explicit_mapper_chain(
        self, make_files: Callable[..., Path], editor_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift")
        generator = RecordingGenerator()
        editor = ProjectEditor(
            editor_path, generator=generator, writer=RecordingWriter(), mappers=()
        )
        project_path = editor.edit(root, destination)
        [(project, _)] = generator.calls
        assert project.schemes == ()
        assert not schemes_directory(project_path).exists()

    def test_injected_resource_locator(
        self, make_files: Callable[..., Path], tmp_path: Path, destination: Path
    ) -> None:
        root = make_files("Project.swift")
        framework = tmp_path / "elsewhere" / "PD.framework"

        class FixedLocator:
            def project_description(self) -> Path:
                return framework

        generator = RecordingGenerator()
        editor = ProjectEditor(
            tmp_path / "no-such-program",
            generator=generator,
            writer=RecordingWriter(),
            resource_locator=FixedLocator(),
        )
        editor.edit(root, destination)
        [(project, graph)] = generator.calls
        assert project.description_framework == framework
        assert graph.targets[DESCRIPTION_FRAMEWORK_TARGET].path == framework
