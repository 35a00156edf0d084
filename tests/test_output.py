"""Unit tests for output writers and segment summaries."""

from pathlib import Path

import polars as pl
import pytest

from ifad_pipeline.ingest import AnnotationTable, GeneTable
from ifad_pipeline.output import render_lines, write_filtered_outputs, write_segment_summary, writers
from ifad_pipeline.query import (
    QueryMode,
    Segment,
    SegmentIndex,
    evaluate,
    project,
    summarize_result,
    summarize_segments,
)


def gaf_line(gene_id: str, aspect: str, evidence: str) -> str:
    """Build a 17-column GAF line with the given key fields."""
    fields = [
        "TAIR", f"locus:{gene_id}", gene_id, "", "GO:0000001", "TAIR:Publication:1",
        evidence, "", aspect, gene_id, gene_id, "protein", "taxon:3702",
        "20190907", "TAIR", "", f"TAIR:locus:{gene_id}",
    ]
    return "\t".join(fields)


@pytest.fixture
def tables():
    """Gene and annotation tables with metadata preambles."""
    genes = GeneTable.parse([
        "!Gene list based on the Araport11 genome release",
        "name\tgene_model_type",
        "AT1G01010\tprotein_coding",
        "AT1G01020\tprotein_coding",
        "AT1G01030\tprotein_coding",
    ], has_header=True)
    annotations = AnnotationTable.parse([
        "!gaf-version: 2.1",
        "!Generated by GO Central",
        gaf_line("AT1G01030", "F", "EXP"),
        gaf_line("AT1G01010", "P", "IEA"),
        gaf_line("AT1G01010", "F", "IDA"),
    ])
    return genes, annotations


def run_query(tables, segments, mode=QueryMode.UNION):
    genes, annotations = tables
    result = evaluate(SegmentIndex.build(annotations), [Segment.parse(s) for s in segments], mode)
    return project(genes, annotations, result)


# ============================================================================
# render_lines / write_filtered_outputs
# ============================================================================

def test_render_lines():
    """Test preamble, header and data lines are newline-terminated in order."""
    assert render_lines(["!meta"], "h", ["a", "b"]) == "!meta\nh\na\nb\n"
    assert render_lines([], None, []) == ""


def test_write_filtered_outputs(tables, tmp_path):
    """Test outputs carry preamble, header and the selected original lines."""
    genes, annotations = tables
    projection = run_query(tables, ["F,EXP"])

    paths = write_filtered_outputs(
        projection, genes, annotations,
        genes_out=tmp_path / "genes_F-EXP.txt",
        annotations_out=tmp_path / "tair_F-EXP.gaf",
    )

    assert paths["genes"].read_text() == (
        "!Gene list based on the Araport11 genome release\n"
        "name\tgene_model_type\n"
        "AT1G01010\tprotein_coding\n"
        "AT1G01030\tprotein_coding\n"
    )
    assert paths["annotations"].read_text() == (
        "!gaf-version: 2.1\n"
        "!Generated by GO Central\n"
        + gaf_line("AT1G01030", "F", "EXP") + "\n"
        + gaf_line("AT1G01010", "F", "IDA") + "\n"
    )


def test_write_empty_result(tables, tmp_path):
    """Test an empty result still writes both files."""
    genes, annotations = tables
    projection = run_query(tables, ["F,EXP", "C,EXP"], QueryMode.INTERSECTION)

    paths = write_filtered_outputs(
        projection, genes, annotations,
        genes_out=tmp_path / "genes.txt",
        annotations_out=tmp_path / "annotations.gaf",
    )

    assert paths["genes"].exists()
    assert paths["annotations"].exists()
    assert paths["annotations"].read_text() == "!gaf-version: 2.1\n!Generated by GO Central\n"


def test_write_is_deterministic(tables, tmp_path):
    """Test the same query writes byte-identical files."""
    genes, annotations = tables
    outputs = []
    for run in ("a", "b"):
        projection = run_query(tables, ["P,OTHER", "F,EXP"])
        paths = write_filtered_outputs(
            projection, genes, annotations,
            genes_out=tmp_path / run / "genes.txt",
            annotations_out=tmp_path / run / "annotations.gaf",
        )
        outputs.append((paths["genes"].read_bytes(), paths["annotations"].read_bytes()))

    assert outputs[0] == outputs[1]


def test_write_leaves_no_temporary_files(tables, tmp_path):
    """Test staged temporaries are moved into place."""
    genes, annotations = tables
    projection = run_query(tables, ["F,EXP"])

    write_filtered_outputs(
        projection, genes, annotations,
        genes_out=tmp_path / "genes.txt",
        annotations_out=tmp_path / "annotations.gaf",
    )

    assert sorted(p.name for p in tmp_path.iterdir()) == ["annotations.gaf", "genes.txt"]


def test_write_rejects_same_destination(tables, tmp_path):
    """Test both outputs pointing at one file is refused before writing."""
    genes, annotations = tables
    projection = run_query(tables, ["F,EXP"])

    with pytest.raises(ValueError, match="same file"):
        write_filtered_outputs(
            projection, genes, annotations,
            genes_out=tmp_path / "same.txt",
            annotations_out=tmp_path / "." / "same.txt",
        )

    assert list(tmp_path.iterdir()) == []


def test_failed_move_restores_previous_outputs(tables, tmp_path, monkeypatch):
    """Test a failure on the second move puts both old files back."""
    genes, annotations = tables
    projection = run_query(tables, ["F,EXP"])
    genes_out = tmp_path / "genes.txt"
    annotations_out = tmp_path / "annotations.gaf"
    genes_out.write_text("old genes\n")
    annotations_out.write_text("old annotations\n")

    real_replace = writers.os.replace

    def replace(src, dst):
        if Path(dst) == annotations_out and str(src).endswith(".tmp"):
            raise OSError("disk full")
        return real_replace(src, dst)

    monkeypatch.setattr(writers.os, "replace", replace)

    with pytest.raises(OSError, match="disk full"):
        write_filtered_outputs(
            projection, genes, annotations,
            genes_out=genes_out,
            annotations_out=annotations_out,
        )

    assert genes_out.read_text() == "old genes\n"
    assert annotations_out.read_text() == "old annotations\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["annotations.gaf", "genes.txt"]


def test_failed_move_removes_new_outputs(tables, tmp_path, monkeypatch):
    """Test a failure on the second move leaves no half-written result."""
    genes, annotations = tables
    projection = run_query(tables, ["F,EXP"])
    annotations_out = tmp_path / "annotations.gaf"

    real_replace = writers.os.replace

    def replace(src, dst):
        if Path(dst) == annotations_out:
            raise OSError("disk full")
        return real_replace(src, dst)

    monkeypatch.setattr(writers.os, "replace", replace)

    with pytest.raises(OSError):
        write_filtered_outputs(
            projection, genes, annotations,
            genes_out=tmp_path / "genes.txt",
            annotations_out=annotations_out,
        )

    assert list(tmp_path.iterdir()) == []


# ============================================================================
# Summaries
# ============================================================================

def test_summarize_segments(tables):
    """Test per-segment counts."""
    _, annotations = tables
    df = summarize_segments(SegmentIndex.build(annotations))

    assert df.columns == ["aspect", "status", "gene_count", "annotation_count"]
    assert df.rows() == [
        ("F", "EXP", 2, 2),
        ("P", "OTHER", 1, 1),
    ]


def test_summarize_segments_with_unannotated(tables):
    """Test UNANNOTATED segments report genes but no annotations."""
    genes, annotations = tables
    index = SegmentIndex.build(annotations, universe=genes.gene_ids())

    df = summarize_segments(index)
    row = df.filter((pl.col("aspect") == "C") & (pl.col("status") == "UNANNOTATED")).row(0, named=True)

    assert row["gene_count"] == 3
    assert row["annotation_count"] == 0


def test_summarize_empty_index():
    """Test an empty index gives an empty, typed summary."""
    df = summarize_segments(SegmentIndex.build([]))

    assert df.height == 0
    assert df.schema["gene_count"] == pl.Int64


def test_summarize_result(tables):
    """Test query result counts."""
    _, annotations = tables
    result = evaluate(SegmentIndex.build(annotations), [Segment.parse("F,EXP")], "union")

    assert summarize_result(result) == {
        "mode": "union",
        "segments": ["F,EXP"],
        "gene_count": 2,
        "annotation_count": 2,
    }


def test_write_segment_summary(tables, tmp_path):
    """Test summary TSV round-trips through polars."""
    _, annotations = tables
    df = summarize_segments(SegmentIndex.build(annotations))

    path = write_segment_summary(df, tmp_path / "out" / "segments.tsv")

    loaded = pl.read_csv(path, separator="\t")
    assert loaded.columns == df.columns
    assert loaded["gene_count"].to_list() == [2, 1]
    assert Path(path).read_text().splitlines()[0] == "aspect\tstatus\tgene_count\tannotation_count"
