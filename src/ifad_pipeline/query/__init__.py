"""Segment indexing, query evaluation and projection."""

from ifad_pipeline.query.engine import (
    QueryEngine,
    QueryMode,
    QueryResult,
    combine_gene_sets,
    evaluate,
)
from ifad_pipeline.query.projector import Projection, project
from ifad_pipeline.query.segments import Segment, SegmentIndex
from ifad_pipeline.query.summary import summarize_result, summarize_segments

__all__ = [
    "QueryEngine",
    "QueryMode",
    "QueryResult",
    "combine_gene_sets",
    "evaluate",
    "Projection",
    "project",
    "Segment",
    "SegmentIndex",
    "summarize_result",
    "summarize_segments",
]
