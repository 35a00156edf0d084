"""Data models for gene list and GAF annotation records."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

# GAF 2.x column layout (1-based column numbers in the format docs)
GAF_COLUMN_COUNT = 17
GAF_GO_TERM_FIELD = 4
GAF_EVIDENCE_FIELD = 6
GAF_ASPECT_FIELD = 8
GAF_GENE_ID_FIELD = 9

# Lines starting with this prefix carry file metadata or comments
COMMENT_PREFIX = "!"


class Aspect(str, Enum):
    """GO aspect of an annotation."""

    MOLECULAR_FUNCTION = "F"
    BIOLOGICAL_PROCESS = "P"
    CELLULAR_COMPONENT = "C"


class AnnotationStatus(str, Enum):
    """How well a gene is annotated within one aspect."""

    KNOWN_EXPERIMENTAL = "EXP"
    KNOWN_OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"
    UNANNOTATED = "UNANNOTATED"


class GeneRecord(BaseModel):
    """One line of the gene list.

    Attributes:
        gene_id: First whitespace-delimited field of the line (e.g. AT1G01010)
        gene_product_type: Second field if present (e.g. protein_coding), else ""
        line_number: 1-based line number in the source file
        raw_line: Original line without its terminator, written back unchanged
    """

    model_config = ConfigDict(frozen=True)

    gene_id: str
    gene_product_type: str = ""
    line_number: int
    raw_line: str


class AnnotationRecord(BaseModel):
    """One GAF annotation line.

    Attributes:
        position: 0-based ordinal of the record within its table
        line_number: 1-based line number in the source file
        gene_id: DB Object Name column (column 10), the locus identifier
        aspect: GO aspect (column 9)
        status: Annotation status derived from the evidence code
        evidence_code: Raw evidence code (column 7)
        go_term: GO ID (column 5)
        raw_line: Original line without its terminator
    """

    model_config = ConfigDict(frozen=True)

    position: int
    line_number: int
    gene_id: str
    aspect: Aspect
    status: AnnotationStatus
    evidence_code: str
    go_term: str = ""
    raw_line: str
