"""Configuration loading with YAML parsing and validation."""

from pathlib import Path
from typing import Any

import pydantic_yaml

from .schema import PipelineConfig


def load_config(config_path: Path | str | None = None) -> PipelineConfig:
    """
    Load and validate pipeline configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file, or None for defaults

    Returns:
        Validated PipelineConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    if config_path is None:
        return PipelineConfig()

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        yaml_content = f.read()

    # An empty file means "all defaults"
    if not yaml_content.strip():
        return PipelineConfig()

    return pydantic_yaml.parse_yaml_raw_as(PipelineConfig, yaml_content)


def _apply_override(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """Set ``section.field`` in a dumped config dict, rejecting unknown keys."""
    *sections, field_name = dotted_key.split(".")
    node = data
    for section in sections:
        child = node.get(section)
        if not isinstance(child, dict):
            raise KeyError(f"Unknown config section in override: {dotted_key}")
        node = child
    if field_name not in node:
        raise KeyError(f"Unknown config field in override: {dotted_key}")
    node[field_name] = value


def load_config_with_overrides(
    config_path: Path | str | None,
    overrides: dict[str, Any],
) -> PipelineConfig:
    """Load config, then apply dotted-key overrides such as ``index.exclusive_other``.

    The merged result is validated again, so an override cannot produce a
    config that the YAML file itself could not.

    Raises:
        KeyError: If an override names a section or field the config lacks
        pydantic.ValidationError: If the merged config is invalid
    """
    config = load_config(config_path)
    if not overrides:
        return config

    data = config.model_dump()
    for dotted_key, value in overrides.items():
        _apply_override(data, dotted_key, value)
    return PipelineConfig.model_validate(data)
