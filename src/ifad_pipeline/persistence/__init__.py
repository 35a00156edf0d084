"""Provenance tracking for filter runs."""

from ifad_pipeline.persistence.provenance import ProvenanceTracker

__all__ = ["ProvenanceTracker"]
