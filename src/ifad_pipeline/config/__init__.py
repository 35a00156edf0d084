from .loader import load_config, load_config_with_overrides
from .schema import PipelineConfig, EvidenceConfig, InputConfig, IndexConfig

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "PipelineConfig",
    "EvidenceConfig",
    "InputConfig",
    "IndexConfig",
]
