"""Pydantic models for pipeline configuration."""

import hashlib
import json

from pydantic import BaseModel, Field, model_validator

from ifad_pipeline.ingest.annotations import DEFAULT_EXPERIMENTAL_CODES, DEFAULT_UNKNOWN_CODES


class EvidenceConfig(BaseModel):
    """Evidence code lists used to derive annotation status."""

    experimental_codes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPERIMENTAL_CODES),
        min_length=1,
        description="Evidence codes classified as known experimental (EXP)",
    )
    unknown_codes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_UNKNOWN_CODES),
        description="Evidence codes classified as unknown (UNKNOWN)",
    )

    @model_validator(mode="after")
    def check_disjoint(self) -> "EvidenceConfig":
        """Reject codes listed as both experimental and unknown."""
        overlap = set(self.experimental_codes) & set(self.unknown_codes)
        if overlap:
            raise ValueError(
                f"Evidence codes cannot be both experimental and unknown: {sorted(overlap)}"
            )
        return self


class InputConfig(BaseModel):
    """Layout options for the input files."""

    genes_header: bool = Field(
        default=False,
        description="Gene list has a column header row after its metadata block",
    )
    annotations_header: bool = Field(
        default=False,
        description="Annotation file has a column header row after its metadata block",
    )


class IndexConfig(BaseModel):
    """Optional segment derivations."""

    exclusive_other: bool = Field(
        default=False,
        description="Remove genes with experimental evidence from the OTHER segment of the same aspect",
    )
    include_unannotated: bool = Field(
        default=False,
        description="Derive UNANNOTATED segments from genes with no annotation in an aspect",
    )


class PipelineConfig(BaseModel):
    """Main pipeline configuration."""

    evidence: EvidenceConfig = Field(
        default_factory=EvidenceConfig,
        description="Evidence code classification",
    )
    input: InputConfig = Field(
        default_factory=InputConfig,
        description="Input file layout",
    )
    index: IndexConfig = Field(
        default_factory=IndexConfig,
        description="Segment index options",
    )

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        useful for tracking which settings produced an output.
        """
        config_json = json.dumps(
            self.model_dump(mode="python"),
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
