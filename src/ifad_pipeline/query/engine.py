"""Query evaluation over a segment index.

A query is an ordered list of segments combined by one global mode. The
gene set is the union or intersection of the segments' gene sets. The
annotation records kept are those belonging to a requested segment whose
gene also made it into the final gene set, in original file order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import structlog

from ifad_pipeline.errors import EmptyQueryError
from ifad_pipeline.ingest.models import AnnotationRecord
from ifad_pipeline.query.segments import Segment, SegmentIndex

logger = structlog.get_logger()


class QueryMode(str, Enum):
    UNION = "union"
    INTERSECTION = "intersection"


@dataclass(frozen=True)
class QueryResult:
    """Outcome of a single query.

    Attributes:
        mode: How segment gene sets were combined
        segments: Requested segments after deduplication, in request order
        gene_ids: Gene IDs satisfying the query
        annotation_records: Retained annotation records in table order
    """

    mode: QueryMode
    segments: tuple[Segment, ...]
    gene_ids: frozenset[str]
    annotation_records: tuple[AnnotationRecord, ...]

    @property
    def gene_count(self) -> int:
        return len(self.gene_ids)

    @property
    def annotation_count(self) -> int:
        return len(self.annotation_records)


def combine_gene_sets(gene_sets: list[frozenset[str]], mode: QueryMode) -> frozenset[str]:
    """Union or intersection of the given gene sets.

    Intersection stops early once the running set is empty.
    """
    if not gene_sets:
        return frozenset()

    combined = set(gene_sets[0])
    for genes in gene_sets[1:]:
        if mode is QueryMode.UNION:
            combined |= genes
        else:
            if not combined:
                break
            combined &= genes
    return frozenset(combined)


class QueryEngine:
    """Evaluates segment queries against one SegmentIndex."""

    def __init__(self, index: SegmentIndex):
        self.index = index

    def evaluate(
        self,
        segments: Iterable[Segment],
        mode: QueryMode | str = QueryMode.UNION,
    ) -> QueryResult:
        """Evaluate a query.

        Args:
            segments: Requested segments; duplicates are ignored
            mode: QueryMode or its string value ("union" / "intersection")

        Returns:
            QueryResult with gene IDs and retained annotation records

        Raises:
            EmptyQueryError: If no segments were given
            ValueError: If mode is not a known query mode
        """
        mode = QueryMode(mode)
        requested = tuple(dict.fromkeys(segments))
        if not requested:
            raise EmptyQueryError("query requires at least one segment")

        logger.info(
            "query_start",
            mode=mode.value,
            segments=[str(segment) for segment in requested],
        )

        gene_sets = []
        for segment in requested:
            genes = self.index.gene_ids(segment)
            if not genes:
                logger.warning("segment_empty", segment=str(segment))
            gene_sets.append(genes)

        gene_ids = combine_gene_sets(gene_sets, mode)

        retained: dict[int, AnnotationRecord] = {}
        if gene_ids:
            for segment in requested:
                for record in self.index.records(segment):
                    if record.gene_id in gene_ids:
                        retained[record.position] = record

        annotation_records = tuple(retained[position] for position in sorted(retained))

        logger.info(
            "query_complete",
            mode=mode.value,
            gene_count=len(gene_ids),
            annotation_count=len(annotation_records),
        )

        return QueryResult(
            mode=mode,
            segments=requested,
            gene_ids=gene_ids,
            annotation_records=annotation_records,
        )


def evaluate(
    index: SegmentIndex,
    segments: Iterable[Segment],
    mode: QueryMode | str = QueryMode.UNION,
) -> QueryResult:
    """Evaluate a query against ``index``; see QueryEngine.evaluate."""
    return QueryEngine(index).evaluate(segments, mode)
