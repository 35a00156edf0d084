"""Command-line interface for ifad-pipeline."""
