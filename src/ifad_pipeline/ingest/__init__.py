"""Parsing of gene list and GAF annotation inputs into typed tables."""

from ifad_pipeline.ingest.annotations import (
    AnnotationTable,
    EvidenceClassifier,
    read_annotation_table,
)
from ifad_pipeline.ingest.genes import GeneTable, read_gene_table
from ifad_pipeline.ingest.models import (
    GAF_COLUMN_COUNT,
    AnnotationRecord,
    AnnotationStatus,
    Aspect,
    GeneRecord,
)

__all__ = [
    "AnnotationTable",
    "EvidenceClassifier",
    "read_annotation_table",
    "GeneTable",
    "read_gene_table",
    "GAF_COLUMN_COUNT",
    "AnnotationRecord",
    "AnnotationStatus",
    "Aspect",
    "GeneRecord",
]
