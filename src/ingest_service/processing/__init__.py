from .faststart import faststart_output_path, remux_for_faststart
from .probe import GeometryClass, classify_aspect_ratio, probe_geometry
from .runner import SubprocessToolRunner, ToolResult, ToolRunner

__all__ = [
    "faststart_output_path",
    "remux_for_faststart",
    "GeometryClass",
    "classify_aspect_ratio",
    "probe_geometry",
    "SubprocessToolRunner",
    "ToolResult",
    "ToolRunner",
]
