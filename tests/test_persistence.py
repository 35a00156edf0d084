"""Tests for provenance tracking."""

from ifad_pipeline import __version__
from ifad_pipeline.config.schema import PipelineConfig
from ifad_pipeline.persistence import ProvenanceTracker


def test_provenance_records_steps():
    """Test that processing steps are recorded in order with details."""
    tracker = ProvenanceTracker("0.1.0", PipelineConfig())

    tracker.record_step("parse_inputs", {"gene_count": 2})
    tracker.record_step("evaluate_query")

    steps = tracker.get_steps()
    assert [s["step_name"] for s in steps] == ["parse_inputs", "evaluate_query"]
    assert steps[0]["details"] == {"gene_count": 2}
    assert "details" not in steps[1]
    assert "timestamp" in steps[0]


def test_provenance_metadata():
    """Test metadata carries version, config hash and inputs."""
    config = PipelineConfig()
    tracker = ProvenanceTracker.from_config(config)
    tracker.record_input("genes", "genes.txt")

    metadata = tracker.create_metadata()

    assert metadata["pipeline_version"] == __version__
    assert metadata["config_hash"] == config.config_hash()
    assert metadata["inputs"] == {"genes": "genes.txt"}
    assert metadata["processing_steps"] == []


def test_provenance_sidecar_roundtrip(tmp_path):
    """Test sidecar is written next to the output and can be loaded back."""
    tracker = ProvenanceTracker("0.1.0", PipelineConfig())
    tracker.record_step("write_outputs", {"annotation_count": 3})

    sidecar = tracker.save_sidecar(tmp_path / "tair_F-EXP.gaf")

    assert sidecar == tmp_path / "tair_F-EXP.gaf.provenance.json"
    loaded = ProvenanceTracker.load_sidecar(sidecar)
    assert loaded["pipeline_version"] == "0.1.0"
    assert loaded["processing_steps"][0]["details"] == {"annotation_count": 3}
