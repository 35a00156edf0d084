"""GAF annotation file parsing and evidence classification."""

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator

import polars as pl
import structlog

from ifad_pipeline.errors import MalformedRecordError, UnknownAspectError
from ifad_pipeline.ingest.metadata import decode_lines, open_input, split_lines
from ifad_pipeline.ingest.models import (
    GAF_ASPECT_FIELD,
    GAF_COLUMN_COUNT,
    GAF_EVIDENCE_FIELD,
    GAF_GENE_ID_FIELD,
    GAF_GO_TERM_FIELD,
    AnnotationRecord,
    AnnotationStatus,
    Aspect,
)

if TYPE_CHECKING:
    from ifad_pipeline.config.schema import PipelineConfig

logger = structlog.get_logger()

DEFAULT_EXPERIMENTAL_CODES = (
    "EXP", "IDA", "IPI", "IMP", "IGI", "IEP", "HTP", "HDA", "HMP", "HGI", "HEP",
)
DEFAULT_UNKNOWN_CODES = ("ND",)


class EvidenceClassifier:
    """Maps GAF evidence codes to an AnnotationStatus.

    Experimental codes map to EXP, unknown codes (ND) to UNKNOWN and every
    other code to OTHER. Matching is exact and case-sensitive.
    """

    def __init__(
        self,
        experimental_codes: Iterable[str] = DEFAULT_EXPERIMENTAL_CODES,
        unknown_codes: Iterable[str] = DEFAULT_UNKNOWN_CODES,
    ):
        self.experimental_codes = frozenset(experimental_codes)
        self.unknown_codes = frozenset(unknown_codes)

    @classmethod
    def from_config(cls, config: "PipelineConfig") -> "EvidenceClassifier":
        return cls(config.evidence.experimental_codes, config.evidence.unknown_codes)

    def classify(self, evidence_code: str) -> AnnotationStatus:
        if evidence_code in self.experimental_codes:
            return AnnotationStatus.KNOWN_EXPERIMENTAL
        if evidence_code in self.unknown_codes:
            return AnnotationStatus.UNKNOWN
        return AnnotationStatus.KNOWN_OTHER


class AnnotationTable:
    """Ordered, read-only sequence of GAF annotation records."""

    def __init__(
        self,
        records: Iterable[AnnotationRecord],
        preamble: tuple[str, ...] = (),
        header: str | None = None,
    ):
        self.records: tuple[AnnotationRecord, ...] = tuple(records)
        self.preamble = preamble
        self.header = header

    @classmethod
    def parse(
        cls,
        lines: Iterable[str],
        classifier: EvidenceClassifier | None = None,
        has_header: bool = False,
        source: str = "",
    ) -> "AnnotationTable":
        """Parse GAF lines into an AnnotationTable.

        Each data line must have at least 17 tab-delimited columns. The gene
        ID is taken from column 10 (DB Object Name), the aspect from column 9
        and the evidence code from column 7.

        Args:
            lines: Raw lines of the GAF file
            classifier: Evidence code classifier (defaults to the standard code lists)
            has_header: First data line is a column header
            source: File name used in error messages

        Returns:
            AnnotationTable preserving input order

        Raises:
            MalformedRecordError: Too few columns or empty gene ID
            UnknownAspectError: Aspect column is not F, P or C
        """
        classifier = classifier or EvidenceClassifier()
        logger.info("annotation_table_parse_start", source=source or None)

        split = split_lines(lines, has_header=has_header)
        records: list[AnnotationRecord] = []

        for line_number, line in split.rows:
            fields = line.split("\t")

            if len(fields) < GAF_COLUMN_COUNT:
                raise MalformedRecordError(
                    f"expected {GAF_COLUMN_COUNT} tab-delimited columns, found {len(fields)}",
                    line_number=line_number,
                    line=line,
                    source=source,
                )

            aspect_code = fields[GAF_ASPECT_FIELD].strip()
            try:
                aspect = Aspect(aspect_code)
            except ValueError:
                raise UnknownAspectError(
                    f"unknown aspect code {aspect_code!r} (expected one of F, P, C)",
                    line_number=line_number,
                    line=line,
                    source=source,
                ) from None

            gene_id = fields[GAF_GENE_ID_FIELD].strip()
            if not gene_id:
                raise MalformedRecordError(
                    "empty gene ID column",
                    line_number=line_number,
                    line=line,
                    source=source,
                )

            evidence_code = fields[GAF_EVIDENCE_FIELD].strip()
            records.append(AnnotationRecord(
                position=len(records),
                line_number=line_number,
                gene_id=gene_id,
                aspect=aspect,
                status=classifier.classify(evidence_code),
                evidence_code=evidence_code,
                go_term=fields[GAF_GO_TERM_FIELD].strip(),
                raw_line=line,
            ))

        logger.info(
            "annotation_table_parse_complete",
            source=source or None,
            annotation_count=len(records),
            preamble_lines=len(split.preamble),
        )

        return cls(records, preamble=split.preamble, header=split.header)

    def to_frame(self) -> pl.DataFrame:
        """Parsed records as a DataFrame (raw lines excluded)."""
        return pl.DataFrame(
            {
                "position": [r.position for r in self.records],
                "line_number": [r.line_number for r in self.records],
                "gene_id": [r.gene_id for r in self.records],
                "aspect": [r.aspect.value for r in self.records],
                "status": [r.status.value for r in self.records],
                "evidence_code": [r.evidence_code for r in self.records],
                "go_term": [r.go_term for r in self.records],
            },
            schema={
                "position": pl.Int64,
                "line_number": pl.Int64,
                "gene_id": pl.Utf8,
                "aspect": pl.Utf8,
                "status": pl.Utf8,
                "evidence_code": pl.Utf8,
                "go_term": pl.Utf8,
            },
        )

    def __iter__(self) -> Iterator[AnnotationRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


def read_annotation_table(
    path: Path | str,
    classifier: EvidenceClassifier | None = None,
    has_header: bool = False,
) -> AnnotationTable:
    """Read and parse a GAF file (plain or .gz)."""
    path = Path(path)
    with open_input(path) as f:
        return AnnotationTable.parse(
            decode_lines(f, source=path.name),
            classifier=classifier,
            has_header=has_header,
            source=path.name,
        )
