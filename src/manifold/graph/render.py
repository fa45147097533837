"""Text renderings of a project graph: Mermaid and plain data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from manifold.graph.models import ProjectGraph


def graph_to_dict(graph: ProjectGraph) -> dict[str, Any]:
    """Return a JSON-serializable view of *graph* with sorted nodes and edges."""
    return {
        "targets": [
            {
                "name": target.name,
                "role": target.role.value if target.role is not None else "framework",
                "path": str(target.path),
            }
            for target in graph.targets.values()
        ],
        "edges": [{"src": src, "dst": dst} for src, dst in graph.edges],
    }


def render_mermaid(graph: ProjectGraph) -> str:
    """Render *graph* as a Mermaid ``graph LR`` block.

    Helper edges render dotted (``-.->``), framework edges solid.
    """
    lines = ["graph LR"]
    for src, dst in graph.edges:
        dst_target = graph.targets[dst]
        arrow = "-->" if dst_target.is_framework else "-.->"
        lines.append(f"  {src} {arrow} {dst}")
    return "\n".join(lines)
