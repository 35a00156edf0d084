"""Per-segment and per-query count summaries."""

import polars as pl
import structlog

from ifad_pipeline.query.engine import QueryResult
from ifad_pipeline.query.segments import SegmentIndex

logger = structlog.get_logger()

SUMMARY_SCHEMA = {
    "aspect": pl.Utf8,
    "status": pl.Utf8,
    "gene_count": pl.Int64,
    "annotation_count": pl.Int64,
}


def summarize_segments(index: SegmentIndex) -> pl.DataFrame:
    """Gene and annotation counts for every populated segment.

    Returns:
        DataFrame with columns aspect, status, gene_count, annotation_count,
        one row per segment, ordered by aspect (F, P, C) then status
    """
    rows = [
        {
            "aspect": segment.aspect.value,
            "status": segment.status.value,
            "gene_count": len(index.gene_ids(segment)),
            "annotation_count": len(index.records(segment)),
        }
        for segment in index.segments()
    ]
    df = pl.DataFrame(rows, schema=SUMMARY_SCHEMA)

    logger.info("segment_summary_complete", segment_count=df.height)

    return df


def summarize_result(result: QueryResult) -> dict:
    """Counts describing a query result, suitable for JSON output."""
    return {
        "mode": result.mode.value,
        "segments": [str(segment) for segment in result.segments],
        "gene_count": result.gene_count,
        "annotation_count": result.annotation_count,
    }
