"""ifad-pipeline: segment-based filtering of gene lists and GAF annotation files."""

__version__ = "0.1.0"
