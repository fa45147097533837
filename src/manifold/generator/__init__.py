"""Generator domain: descriptor lowering and project writing."""

from manifold.generator.descriptor import (
    PROJECT_FILE_NAME,
    DescriptorGenerating,
    DescriptorGenerator,
    ProjectDescriptor,
)
from manifold.generator.writer import ProjectWriter, ProjectWriting, render_descriptor

__all__ = [
    "PROJECT_FILE_NAME",
    "DescriptorGenerating",
    "DescriptorGenerator",
    "ProjectDescriptor",
    "ProjectWriter",
    "ProjectWriting",
    "render_descriptor",
]
