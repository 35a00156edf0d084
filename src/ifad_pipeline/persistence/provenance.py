"""Provenance tracking for filter runs."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ifad_pipeline.config.schema import PipelineConfig


class ProvenanceTracker:
    """
    Tracks provenance metadata for a filter run.

    Records pipeline version, config hash, input files and processing
    steps so a filtered output can be traced back to what produced it.
    """

    def __init__(self, pipeline_version: str, config: "PipelineConfig"):
        """
        Initialize provenance tracker.

        Args:
            pipeline_version: Pipeline version string (e.g., "0.1.0")
            config: PipelineConfig instance
        """
        self.pipeline_version = pipeline_version
        self.config_hash = config.config_hash()
        self.inputs: dict[str, str] = {}
        self.processing_steps = []
        self.created_at = datetime.now(timezone.utc)

    def record_input(self, name: str, path: Path | str) -> None:
        """Register an input file under a short name (e.g. "genes")."""
        self.inputs[name] = str(path)

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """
        Record a processing step.

        Args:
            step_name: Name of the processing step
            details: Optional dictionary of additional details
        """
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def get_steps(self) -> list[dict]:
        return self.processing_steps

    def create_metadata(self) -> dict:
        """
        Create full provenance metadata dictionary.

        Returns:
            Dictionary with all provenance information
        """
        return {
            "pipeline_version": self.pipeline_version,
            "config_hash": self.config_hash,
            "inputs": self.inputs,
            "created_at": self.created_at.isoformat(),
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Save provenance metadata as a JSON sidecar file.

        Args:
            output_path: Path to the main output file.
                         Sidecar is saved as {path}.provenance.json

        Returns:
            Path of the written sidecar
        """
        output_path = Path(output_path)
        sidecar_path = output_path.with_name(output_path.name + ".provenance.json")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)

        with open(sidecar_path, "w") as f:
            json.dump(self.create_metadata(), f, indent=2, default=str)

        return sidecar_path

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        """Load provenance metadata from a sidecar file."""
        with open(sidecar_path) as f:
            return json.load(f)

    @classmethod
    def from_config(
        cls,
        config: "PipelineConfig",
        version: Optional[str] = None
    ) -> "ProvenanceTracker":
        """
        Create ProvenanceTracker from a PipelineConfig.

        Args:
            config: PipelineConfig instance
            version: Pipeline version string. If None, uses ifad_pipeline.__version__
        """
        if version is None:
            from ifad_pipeline import __version__
            version = __version__

        return cls(version, config)
