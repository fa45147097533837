"""Graph domain: synthetic targets, project graph, and file-to-graph mapping."""

from manifold.graph.mapper import map_editable_files, target_base_name
from manifold.graph.models import (
    DESCRIPTION_FRAMEWORK_TARGET,
    Project,
    ProjectGraph,
    RunAction,
    Scheme,
    SyntheticTarget,
    scheme_path,
    schemes_directory,
)
from manifold.graph.render import graph_to_dict, render_mermaid

__all__ = [
    "DESCRIPTION_FRAMEWORK_TARGET",
    "Project",
    "ProjectGraph",
    "RunAction",
    "Scheme",
    "SyntheticTarget",
    "graph_to_dict",
    "map_editable_files",
    "render_mermaid",
    "scheme_path",
    "schemes_directory",
    "target_base_name",
]
