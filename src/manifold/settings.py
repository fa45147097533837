"""Editor settings: file conventions and project naming, optionally from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = ".manifold.yml"


@dataclass(frozen=True)
class EditorSettings:
    """Where editable files live and how the synthesized project is named.

    All paths are relative to the editing directory.
    """

    project_name: str = "Manifests"
    project_extension: str = "xcodeproj"
    manifest_names: tuple[str, ...] = ("Project.swift", "Workspace.swift")
    config_path: str = "Tuist/Config.swift"
    dependencies_path: str = "Tuist/Dependencies.swift"
    setup_path: str = "Setup.swift"
    helpers_directory: str = "Tuist/ProjectDescriptionHelpers"
    templates_directory: str = "Tuist/Templates"
    source_extension: str = ".swift"
    template_extensions: tuple[str, ...] = (".stencil",)
    description_framework: str | None = None
    swift_version: str = "5.0"
    build_settings: dict[str, str] = field(default_factory=dict)

    @property
    def project_file_name(self) -> str:
        """File name of the generated project, e.g. ``Manifests.xcodeproj``."""
        return f"{self.project_name}.{self.project_extension}"


_TUPLE_FIELDS = frozenset({"manifest_names", "template_extensions"})


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw YAML value to the type of settings field *key*.

    Raises ``ValueError`` when the value has the wrong shape.
    """
    if key in _TUPLE_FIELDS:
        if isinstance(value, str):
            return (value,)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            msg = f"'{key}' must be a string or a list of strings"
            raise ValueError(msg)
        return tuple(value)
    if key == "build_settings":
        if not isinstance(value, dict):
            msg = "'build_settings' must be a mapping"
            raise ValueError(msg)
        if any(isinstance(v, float) for v in value.values()):
            msg = "'build_settings' values must not be bare decimals; quote them"
            raise ValueError(msg)
        return {str(k): str(v) for k, v in value.items()}
    if key == "description_framework" and value is None:
        return None
    # YAML reads 5.10 as the float 5.1; version-like values must be quoted.
    if not isinstance(value, str):
        msg = f"'{key}' must be a string (quote values such as \"5.10\")"
        raise ValueError(msg)
    return value


def load_settings(editing_path: Path, config_path: Path | None = None) -> EditorSettings:
    """Load settings from *config_path* or ``<editing_path>/.manifold.yml``.

    Falls back to defaults for missing keys or a missing file.  An
    unreadable or malformed file is logged and ignored, as is a value of
    the wrong type.  String settings must be YAML strings: write
    ``swift_version: "5.10"``, not ``swift_version: 5.10``.
    """
    path = config_path if config_path is not None else editing_path / SETTINGS_FILE_NAME
    if not path.is_file():
        return EditorSettings()

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        logger.warning("Failed to read %s, using default settings", path)
        return EditorSettings()

    if data is None:
        return EditorSettings()
    if not isinstance(data, dict):
        logger.warning("%s is not a mapping, using default settings", path)
        return EditorSettings()

    known = {f.name for f in fields(EditorSettings)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown setting '%s' in %s", key, path)
            continue
        try:
            kwargs[key] = _coerce(key, value)
        except ValueError as exc:
            logger.warning("Invalid setting in %s: %s", path, exc)

    return EditorSettings(**kwargs)
