"""Filter command: extract gene and annotation rows matching a segment query.

Orchestrates the full filtering pipeline:
- Parses the gene list and GAF annotation file
- Indexes annotations by (aspect, status) segment
- Evaluates the union/intersection query
- Writes both filtered files (all-or-nothing)
"""

import logging
import sys
from pathlib import Path

import click

from ifad_pipeline.config.loader import load_config_with_overrides
from ifad_pipeline.config.schema import PipelineConfig
from ifad_pipeline.errors import IfadError, InvalidSegmentError
from ifad_pipeline.ingest import (
    AnnotationTable,
    EvidenceClassifier,
    GeneTable,
    read_annotation_table,
    read_gene_table,
)
from ifad_pipeline.output import write_filtered_outputs
from ifad_pipeline.persistence import ProvenanceTracker
from ifad_pipeline.query import QueryEngine, QueryMode, Segment, SegmentIndex, project

logger = logging.getLogger(__name__)


def parse_segment_option(ctx, param, values):
    """Click callback turning ASPECT,STATUS strings into Segments."""
    segments = []
    for value in values:
        try:
            segments.append(Segment.parse(value))
        except InvalidSegmentError as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param)
    return segments


def build_index(
    config: PipelineConfig,
    annotation_table: AnnotationTable,
    gene_table: GeneTable | None = None,
) -> SegmentIndex:
    """Build the segment index with the derivations enabled in config."""
    universe = None
    if config.index.include_unannotated and gene_table is not None:
        universe = gene_table.gene_ids()
    return SegmentIndex.build(
        annotation_table,
        exclusive_other=config.index.exclusive_other,
        universe=universe,
    )


@click.command('filter')
@click.option(
    '--genes',
    'genes_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help='The file to read genes from (e.g. gene-types.txt)'
)
@click.option(
    '--annotations',
    'annotations_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help='The file to read annotations from (e.g. tair.gaf)'
)
@click.option(
    '--genes-out',
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help='The file to write queried genes to (e.g. gene-types_F-EXP.txt)'
)
@click.option(
    '--annotations-out',
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help='The file to write queried annotations to (e.g. tair_F-EXP.gaf)'
)
@click.option(
    '--query',
    'mode',
    type=click.Choice([mode.value for mode in QueryMode]),
    default=QueryMode.UNION.value,
    show_default=True,
    help='How to combine segments'
)
@click.option(
    '--segment',
    'segment_list',
    multiple=True,
    required=True,
    callback=parse_segment_option,
    help='A segment to use in the query, given as ASPECT,STATUS (e.g. F,EXP or C,OTHER); repeatable'
)
@click.option(
    '--provenance',
    is_flag=True,
    help='Also write <annotations-out>.provenance.json'
)
@click.option(
    '--exclusive-other',
    is_flag=True,
    help='Count a gene under OTHER only if it has no EXP annotation in that aspect'
)
@click.option(
    '--include-unannotated',
    is_flag=True,
    help='Derive UNANNOTATED segments from genes with no annotation in an aspect'
)
@click.pass_context
def filter_cmd(ctx, genes_path, annotations_path, genes_out, annotations_out,
               mode, segment_list, provenance, exclusive_other, include_unannotated):
    """Filter a gene list and GAF file down to genes matching a segment query.

    Segments are ASPECT,STATUS pairs. ASPECT is F (molecular function),
    P (biological process) or C (cellular component). STATUS is EXP,
    OTHER, UNKNOWN or UNANNOTATED.

    Nothing is written if either input fails to parse. On success both
    output files are written, even when the result is empty.

    Examples:

        # Genes with experimental molecular-function evidence
        ifad-pipeline filter --genes genes.txt --annotations tair.gaf \\
            --genes-out genes_F-EXP.txt --annotations-out tair_F-EXP.gaf \\
            --segment F,EXP

        # Genes with experimental evidence in both F and P
        ifad-pipeline filter ... --query intersection --segment F,EXP --segment P,EXP
    """
    if genes_out.resolve() == annotations_out.resolve():
        raise click.BadParameter(
            'must differ from --genes-out', ctx=ctx, param_hint="'--annotations-out'"
        )

    config_path = ctx.obj.get('config_path') if ctx.obj else None
    overrides = {}
    if exclusive_other:
        overrides['index.exclusive_other'] = True
    if include_unannotated:
        overrides['index.include_unannotated'] = True

    try:
        config = load_config_with_overrides(config_path, overrides)
    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        sys.exit(1)

    tracker = ProvenanceTracker.from_config(config)
    tracker.record_input('genes', genes_path)
    tracker.record_input('annotations', annotations_path)

    try:
        # Step 1: Parse inputs
        click.echo(click.style("Step 1: Parsing inputs...", bold=True))
        gene_table = read_gene_table(genes_path, has_header=config.input.genes_header)
        click.echo(f"  Genes:       {len(gene_table)} records from {genes_path}")
        annotation_table = read_annotation_table(
            annotations_path,
            classifier=EvidenceClassifier.from_config(config),
            has_header=config.input.annotations_header,
        )
        click.echo(f"  Annotations: {len(annotation_table)} records from {annotations_path}")
        tracker.record_step('parse_inputs', {
            'gene_count': len(gene_table),
            'annotation_count': len(annotation_table),
        })

        # Step 2: Evaluate query
        click.echo(click.style("Step 2: Evaluating query...", bold=True))
        index = build_index(config, annotation_table, gene_table)
        result = QueryEngine(index).evaluate(segment_list, mode)
        click.echo(f"  Query: {mode} of {', '.join(str(s) for s in result.segments)}")
        click.echo(f"  Matched {result.gene_count} genes, {result.annotation_count} annotations")
        tracker.record_step('evaluate_query', {
            'mode': result.mode.value,
            'segments': [str(s) for s in result.segments],
            'gene_count': result.gene_count,
            'annotation_count': result.annotation_count,
        })

        # Step 3: Project and write
        click.echo(click.style("Step 3: Writing outputs...", bold=True))
        projection = project(gene_table, annotation_table, result)
        paths = write_filtered_outputs(
            projection,
            gene_table,
            annotation_table,
            genes_out=genes_out,
            annotations_out=annotations_out,
        )
        click.echo(click.style(
            f"  Genes:       {len(projection.genes)} -> {paths['genes']}", fg='green'
        ))
        click.echo(click.style(
            f"  Annotations: {len(projection.annotations)} -> {paths['annotations']}", fg='green'
        ))
        tracker.record_step('write_outputs', {
            'genes_out': str(paths['genes']),
            'annotations_out': str(paths['annotations']),
            'gene_count': len(projection.genes),
            'annotation_count': len(projection.annotations),
        })

        if provenance:
            sidecar = tracker.save_sidecar(paths['annotations'])
            click.echo(click.style(f"  Provenance:  {sidecar}", fg='green'))

    except IfadError as e:
        click.echo(click.style(f"Error: {e}", fg='red'), err=True)
        click.echo("No output files were written.", err=True)
        logger.debug("Filter command failed", exc_info=True)
        sys.exit(1)

    click.echo(click.style("Filtering complete!", fg='green', bold=True))
