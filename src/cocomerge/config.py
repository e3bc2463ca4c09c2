"""
Configuration models for cocomerge.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from omegaconf import OmegaConf
from pydantic import BaseModel, Field, field_validator

from .logging_config import get_logger

logger = get_logger(__name__)


class MergeConfig(BaseModel):
    """Configuration for merging COCO files."""

    coco_files: List[str] = Field(
        ..., description="COCO JSON files to merge, in priority order"
    )
    output_path: str = Field(default="merged.json", description="JSON output path")
    reassign_clashing_ids: bool = Field(
        default=False,
        description="Give clashing images a fresh id instead of dropping them",
    )
    version_string: str = Field(
        default="1.0.0", description="Version string for the COCO info section"
    )
    absolute_paths: bool = Field(
        default=False,
        description="Force absolute paths for image file names in the output",
    )

    @field_validator("coco_files", mode="before")
    @classmethod
    def validate_coco_files(cls, v: Any) -> List[str]:
        if isinstance(v, (str, Path)):
            v = [v]
        paths = [str(p) for p in v or []]
        if not paths:
            raise ValueError("At least one COCO file is required")
        for path in paths:
            if not path.endswith(".json"):
                raise ValueError(f"COCO file must be a .json file: {path}")
            if not Path(path).is_file():
                raise ValueError(f"COCO file does not exist: {path}")
        return paths

    @field_validator("output_path", mode="before")
    @classmethod
    def validate_output_path(cls, v: Any) -> str:
        return str(v)

    @field_validator("version_string", mode="before")
    @classmethod
    def validate_version_string(cls, v: Any) -> str:
        v = str(v).strip()
        if not v:
            raise ValueError("version_string must not be empty")
        return v

    @classmethod
    def from_yaml(cls, path: str) -> "MergeConfig":
        """Load configuration from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    def to_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, indent=2)


def load_merge_config(
    config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None
) -> MergeConfig:
    """
    Build a MergeConfig from an optional YAML file and command-line overrides.

    Overrides whose value is None are ignored so that unset CLI options never
    shadow values coming from the file.
    """
    base = OmegaConf.create({})
    if config_path is not None:
        logger.info(f"Loading merge config: {config_path}")
        base = OmegaConf.load(config_path)

    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    if overrides:
        base = OmegaConf.merge(base, OmegaConf.create(overrides))

    data = OmegaConf.to_container(base, resolve=True)
    return MergeConfig.model_validate(data)
