"""Segments and the segment index.

A segment is one (aspect, status) pair, e.g. ``F,EXP`` for genes with
experimental molecular-function annotations. The index groups every
annotation record under the single segment it belongs to.
"""

from typing import Iterable

import structlog
from pydantic import BaseModel, ConfigDict

from ifad_pipeline.errors import InvalidSegmentError
from ifad_pipeline.ingest.models import AnnotationRecord, AnnotationStatus, Aspect

logger = structlog.get_logger()

ASPECT_ORDER = [Aspect.MOLECULAR_FUNCTION, Aspect.BIOLOGICAL_PROCESS, Aspect.CELLULAR_COMPONENT]
STATUS_ORDER = [
    AnnotationStatus.KNOWN_EXPERIMENTAL,
    AnnotationStatus.KNOWN_OTHER,
    AnnotationStatus.UNKNOWN,
    AnnotationStatus.UNANNOTATED,
]


class Segment(BaseModel):
    """Query unit: a single (aspect, status) pair."""

    model_config = ConfigDict(frozen=True)

    aspect: Aspect
    status: AnnotationStatus

    @classmethod
    def parse(cls, text: str) -> "Segment":
        """Parse ``ASPECT,STATUS`` text such as ``F,EXP`` or ``C,OTHER``.

        Raises:
            InvalidSegmentError: If the text is not a known aspect/status pair
        """
        parts = [part.strip() for part in text.split(",")]
        if len(parts) != 2:
            raise InvalidSegmentError(
                f"segments must be written as ASPECT,STATUS, got {text!r}"
            )
        aspect_code, status_code = parts
        try:
            aspect = Aspect(aspect_code.upper())
        except ValueError:
            raise InvalidSegmentError(
                f"aspect must be one of F, P, or C, got {aspect_code!r}"
            ) from None
        try:
            status = AnnotationStatus(status_code.upper())
        except ValueError:
            raise InvalidSegmentError(
                "status must be one of EXP, OTHER, UNKNOWN, or UNANNOTATED, "
                f"got {status_code!r}"
            ) from None
        return cls(aspect=aspect, status=status)

    def sort_key(self) -> tuple[int, int]:
        return ASPECT_ORDER.index(self.aspect), STATUS_ORDER.index(self.status)

    def __str__(self) -> str:
        return f"{self.aspect.value},{self.status.value}"


class SegmentIndex:
    """Annotation records and gene IDs grouped by segment.

    Built once from an annotation table and read-only afterwards. Segments
    with no records are legal lookups and yield empty results.
    """

    def __init__(
        self,
        records: dict[Segment, tuple[AnnotationRecord, ...]],
        gene_sets: dict[Segment, frozenset[str]],
    ):
        self._records = records
        self._gene_sets = gene_sets

    @classmethod
    def build(
        cls,
        annotations: Iterable[AnnotationRecord],
        exclusive_other: bool = False,
        universe: Iterable[str] | None = None,
    ) -> "SegmentIndex":
        """Group annotation records by (aspect, status).

        Args:
            annotations: Annotation records in table order
            exclusive_other: Drop a gene from (A, OTHER) when it is also in (A, EXP)
            universe: Gene IDs used to derive (A, UNANNOTATED) segments; None disables them

        Returns:
            SegmentIndex over the given records
        """
        buckets: dict[Segment, list[AnnotationRecord]] = {}
        for record in annotations:
            segment = Segment(aspect=record.aspect, status=record.status)
            buckets.setdefault(segment, []).append(record)

        gene_sets = {
            segment: frozenset(record.gene_id for record in records)
            for segment, records in buckets.items()
        }

        if exclusive_other:
            for aspect in ASPECT_ORDER:
                other = Segment(aspect=aspect, status=AnnotationStatus.KNOWN_OTHER)
                experimental = Segment(aspect=aspect, status=AnnotationStatus.KNOWN_EXPERIMENTAL)
                if other not in buckets or experimental not in gene_sets:
                    continue
                kept = gene_sets[other] - gene_sets[experimental]
                gene_sets[other] = kept
                buckets[other] = [r for r in buckets[other] if r.gene_id in kept]

        if universe is not None:
            universe = list(universe)
            for aspect in ASPECT_ORDER:
                annotated = set()
                for segment, genes in gene_sets.items():
                    if segment.aspect == aspect:
                        annotated |= genes
                unannotated = Segment(aspect=aspect, status=AnnotationStatus.UNANNOTATED)
                gene_sets[unannotated] = frozenset(g for g in universe if g not in annotated)
                buckets[unannotated] = []

        index = cls(
            {segment: tuple(records) for segment, records in buckets.items()},
            gene_sets,
        )

        logger.info(
            "segment_index_built",
            segment_count=len(gene_sets),
            exclusive_other=exclusive_other,
            unannotated=universe is not None,
        )

        return index

    def gene_ids(self, segment: Segment) -> frozenset[str]:
        """Gene IDs in the segment; empty if the segment has no records."""
        return self._gene_sets.get(segment, frozenset())

    def records(self, segment: Segment) -> tuple[AnnotationRecord, ...]:
        """Annotation records of the segment in table order."""
        return self._records.get(segment, ())

    def segments(self) -> list[Segment]:
        """Populated segments, ordered by aspect then status."""
        return sorted(self._gene_sets, key=Segment.sort_key)

    def __contains__(self, segment: object) -> bool:
        return segment in self._gene_sets
