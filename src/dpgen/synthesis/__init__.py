"""C# declaration synthesis and rendering."""

from dpgen.synthesis.casts import CastPlan
from dpgen.synthesis.ir import CompilationUnit, render_expression, render_unit
from dpgen.synthesis.metadata import MetadataShape, build_metadata_expression, metadata_shape

__all__ = [
    "CastPlan",
    "CompilationUnit",
    "MetadataShape",
    "build_metadata_expression",
    "metadata_shape",
    "render_expression",
    "render_unit",
]
