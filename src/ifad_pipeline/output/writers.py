"""Writers for filtered gene/annotation files and segment summaries."""

import os
import tempfile
from pathlib import Path
from typing import Iterable

import polars as pl
import structlog

from ifad_pipeline.ingest.annotations import AnnotationTable
from ifad_pipeline.ingest.genes import GeneTable
from ifad_pipeline.query.projector import Projection

logger = structlog.get_logger()


def render_lines(
    preamble: Iterable[str],
    header: str | None,
    lines: Iterable[str],
) -> str:
    """Join preamble, optional header and data lines, one per line."""
    parts = list(preamble)
    if header is not None:
        parts.append(header)
    parts.extend(lines)
    return "".join(f"{part}\n" for part in parts)


def _stage(content: str, target: Path) -> Path:
    """Write content to a temporary file next to target and return its path."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    with os.fdopen(fd, "w", newline="") as f:
        f.write(content)
    return Path(tmp_name)


def _set_aside(target: Path) -> Path:
    """Move an existing target to a backup name in its directory."""
    fd, backup_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".bak"
    )
    os.close(fd)
    os.replace(target, backup_name)
    return Path(backup_name)


def write_filtered_outputs(
    projection: Projection,
    gene_table: GeneTable,
    annotation_table: AnnotationTable,
    genes_out: Path,
    annotations_out: Path,
) -> dict:
    """
    Write filtered gene and annotation files.

    Each file gets its source's metadata preamble and header row followed by
    the selected original lines. Both files are staged as temporaries first.
    Files already at the destinations are set aside while the temporaries are
    moved in, and put back if any move fails, so a failure leaves both
    destinations as they were.

    Args:
        projection: Records selected by the projector
        gene_table: Source gene table (for preamble/header)
        annotation_table: Source annotation table (for preamble/header)
        genes_out: Destination of the filtered gene list
        annotations_out: Destination of the filtered annotation file

    Returns:
        Dictionary with output file paths:
        {"genes": Path, "annotations": Path}

    Raises:
        ValueError: If both destinations resolve to the same file
    """
    genes_out = Path(genes_out)
    annotations_out = Path(annotations_out)
    if genes_out.resolve() == annotations_out.resolve():
        raise ValueError(f"Gene and annotation outputs are the same file: {genes_out}")

    genes_content = render_lines(
        gene_table.preamble,
        gene_table.header,
        (record.raw_line for record in projection.genes),
    )
    annotations_content = render_lines(
        annotation_table.preamble,
        annotation_table.header,
        (record.raw_line for record in projection.annotations),
    )

    staged: list[tuple[Path, Path]] = []
    backups: dict[Path, Path] = {}
    moved: list[Path] = []
    try:
        staged.append((_stage(genes_content, genes_out), genes_out))
        staged.append((_stage(annotations_content, annotations_out), annotations_out))
        for tmp_path, target in staged:
            if target.exists():
                backups[target] = _set_aside(target)
            os.replace(tmp_path, target)
            moved.append(target)
    except BaseException:
        for target in moved:
            if target not in backups:
                target.unlink()
        for target, backup in backups.items():
            os.replace(backup, target)
        backups.clear()
        raise
    finally:
        for tmp_path, _ in staged:
            if tmp_path.exists():
                tmp_path.unlink()
        for backup in backups.values():
            backup.unlink()

    logger.info(
        "filtered_outputs_written",
        genes_out=str(genes_out),
        gene_count=len(projection.genes),
        annotations_out=str(annotations_out),
        annotation_count=len(projection.annotations),
    )

    return {"genes": genes_out, "annotations": annotations_out}


def write_segment_summary(df: pl.DataFrame, output_path: Path) -> Path:
    """Write a segment summary DataFrame as TSV with header."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.write_csv(output_path, separator="\t", include_header=True)
    logger.info("segment_summary_written", path=str(output_path), rows=df.height)
    return output_path
