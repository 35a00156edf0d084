"""Gene list parsing.

The gene list is a tab-delimited text file with one gene per line, e.g.::

    AT1G01010	protein_coding
    AT1G01020	protein_coding

The gene ID is the first whitespace-delimited field of each line, trimmed.
"""

from pathlib import Path
from typing import Iterable, Iterator

import structlog

from ifad_pipeline.errors import DuplicateGeneError
from ifad_pipeline.ingest.metadata import decode_lines, open_input, split_lines
from ifad_pipeline.ingest.models import GeneRecord

logger = structlog.get_logger()


class GeneTable:
    """Ordered, read-only collection of gene records keyed by gene ID."""

    def __init__(
        self,
        records: Iterable[GeneRecord],
        preamble: tuple[str, ...] = (),
        header: str | None = None,
    ):
        self.records: tuple[GeneRecord, ...] = tuple(records)
        self.preamble = preamble
        self.header = header
        self._by_id = {record.gene_id: record for record in self.records}

    @classmethod
    def parse(
        cls,
        lines: Iterable[str],
        has_header: bool = False,
        source: str = "",
    ) -> "GeneTable":
        """Parse gene list lines into a GeneTable.

        Args:
            lines: Raw lines of the gene list
            has_header: First data line is a column header, not a gene
            source: File name used in error messages

        Returns:
            GeneTable preserving input order

        Raises:
            DuplicateGeneError: If a gene ID occurs on more than one line
        """
        logger.info("gene_table_parse_start", source=source or None)

        split = split_lines(lines, has_header=has_header)
        records: list[GeneRecord] = []
        first_seen: dict[str, int] = {}

        for line_number, line in split.rows:
            fields = line.split(None, 1)
            gene_id = fields[0]

            if gene_id in first_seen:
                raise DuplicateGeneError(
                    gene_id,
                    line_number=line_number,
                    first_line_number=first_seen[gene_id],
                    line=line,
                    source=source,
                )
            first_seen[gene_id] = line_number

            product_type = fields[1].split("\t")[0].strip() if len(fields) > 1 else ""
            records.append(GeneRecord(
                gene_id=gene_id,
                gene_product_type=product_type,
                line_number=line_number,
                raw_line=line,
            ))

        logger.info(
            "gene_table_parse_complete",
            source=source or None,
            gene_count=len(records),
            preamble_lines=len(split.preamble),
        )

        return cls(records, preamble=split.preamble, header=split.header)

    def get(self, gene_id: str) -> GeneRecord | None:
        return self._by_id.get(gene_id)

    def gene_ids(self) -> list[str]:
        """Gene IDs in file order."""
        return [record.gene_id for record in self.records]

    def __contains__(self, gene_id: object) -> bool:
        return gene_id in self._by_id

    def __iter__(self) -> Iterator[GeneRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


def read_gene_table(path: Path | str, has_header: bool = False) -> GeneTable:
    """Read and parse a gene list file (plain or .gz)."""
    path = Path(path)
    with open_input(path) as f:
        return GeneTable.parse(
            decode_lines(f, source=path.name), has_header=has_header, source=path.name
        )
