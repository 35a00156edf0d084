"""Segments command: show gene and annotation counts per segment."""

import logging
import sys
from pathlib import Path

import click

from ifad_pipeline.cli.filter_cmd import build_index
from ifad_pipeline.config.loader import load_config
from ifad_pipeline.errors import IfadError
from ifad_pipeline.ingest import EvidenceClassifier, read_annotation_table, read_gene_table
from ifad_pipeline.output import write_segment_summary
from ifad_pipeline.query import summarize_segments

logger = logging.getLogger(__name__)


@click.command('segments')
@click.option(
    '--annotations',
    'annotations_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help='The file to read annotations from (e.g. tair.gaf)'
)
@click.option(
    '--genes',
    'genes_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Gene list; needed for UNANNOTATED segments when index.include_unannotated is set'
)
@click.option(
    '--output',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write the summary table as TSV to this path'
)
@click.pass_context
def segments(ctx, annotations_path, genes_path, output):
    """Summarize how many genes and annotations fall into each segment."""
    config_path = ctx.obj.get('config_path') if ctx.obj else None

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        sys.exit(1)

    try:
        gene_table = None
        if genes_path is not None:
            gene_table = read_gene_table(genes_path, has_header=config.input.genes_header)
        annotation_table = read_annotation_table(
            annotations_path,
            classifier=EvidenceClassifier.from_config(config),
            has_header=config.input.annotations_header,
        )
    except IfadError as e:
        click.echo(click.style(f"Error: {e}", fg='red'), err=True)
        logger.debug("Segments command failed", exc_info=True)
        sys.exit(1)

    index = build_index(config, annotation_table, gene_table)
    summary = summarize_segments(index)

    click.echo(click.style("Segment    Genes   Annotations", bold=True))
    for row in summary.iter_rows(named=True):
        segment = f"{row['aspect']},{row['status']}"
        click.echo(f"{segment:<10} {row['gene_count']:>6}   {row['annotation_count']:>11}")

    if output is not None:
        path = write_segment_summary(summary, output)
        click.echo(click.style(f"Summary written: {path}", fg='green'))
