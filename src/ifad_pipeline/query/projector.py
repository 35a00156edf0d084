"""Project the input tables down to a query result."""

from typing import NamedTuple

import structlog

from ifad_pipeline.ingest.annotations import AnnotationTable
from ifad_pipeline.ingest.genes import GeneTable
from ifad_pipeline.ingest.models import AnnotationRecord, GeneRecord
from ifad_pipeline.query.engine import QueryResult

logger = structlog.get_logger()


class Projection(NamedTuple):
    genes: tuple[GeneRecord, ...]
    annotations: tuple[AnnotationRecord, ...]


def project(
    gene_table: GeneTable,
    annotation_table: AnnotationTable,
    query_result: QueryResult,
) -> Projection:
    """Select the gene and annotation records consistent with a query result.

    Genes are kept in gene-table order. Result genes missing from the gene
    table are dropped silently; the two files are sourced independently.

    Args:
        gene_table: Parsed gene list
        annotation_table: Parsed annotation file the result was computed from
        query_result: Result of QueryEngine.evaluate

    Returns:
        Projection(genes, annotations), unpackable as a 2-tuple
    """
    genes = tuple(record for record in gene_table if record.gene_id in query_result.gene_ids)

    logger.debug(
        "projection_complete",
        genes_in=len(gene_table),
        genes_out=len(genes),
        annotations_in=len(annotation_table),
        annotations_out=query_result.annotation_count,
        missing_from_gene_table=query_result.gene_count - len(genes),
    )

    return Projection(genes=genes, annotations=query_result.annotation_records)
