"""Main CLI entry point for ifad-pipeline.

Provides command group with global options and subcommands for filtering
gene lists and GAF annotation files by segment.
"""

import logging
from pathlib import Path

import click

from ifad_pipeline import __version__
from ifad_pipeline.config.loader import load_config
from ifad_pipeline.cli.filter_cmd import filter_cmd
from ifad_pipeline.cli.segments_cmd import segments


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Path to pipeline configuration YAML file (default: built-in settings)'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """ifad-pipeline: filter gene lists and GAF annotations by aspect/status segments.

    A segment is an ASPECT,STATUS pair such as F,EXP (experimental molecular
    function) or C,OTHER. Segments are combined by union or intersection.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display pipeline information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"ifad-pipeline v{__version__}")
    click.echo(f"Config: {config_path or '(defaults)'}")
    click.echo()

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)

    click.echo(f"Config Hash: {config.config_hash()[:16]}...")
    click.echo()

    click.echo(click.style("Evidence Codes:", bold=True))
    click.echo(f"  Experimental (EXP): {' '.join(config.evidence.experimental_codes)}")
    click.echo(f"  Unknown (UNKNOWN):  {' '.join(config.evidence.unknown_codes) or '-'}")
    click.echo("  Everything else:    OTHER")
    click.echo()

    click.echo(click.style("Inputs:", bold=True))
    click.echo(f"  Gene list header:       {config.input.genes_header}")
    click.echo(f"  Annotation file header: {config.input.annotations_header}")
    click.echo()

    click.echo(click.style("Index:", bold=True))
    click.echo(f"  Exclusive OTHER:     {config.index.exclusive_other}")
    click.echo(f"  Include UNANNOTATED: {config.index.include_unannotated}")


# Register commands
cli.add_command(filter_cmd)
cli.add_command(segments)


if __name__ == '__main__':
    cli()
