"""Output generation: filtered gene/annotation files and segment summaries."""

from ifad_pipeline.output.writers import (
    render_lines,
    write_filtered_outputs,
    write_segment_summary,
)

__all__ = [
    "render_lines",
    "write_filtered_outputs",
    "write_segment_summary",
]
