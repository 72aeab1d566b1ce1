"""Configuration models for retrying assertions and snapshots."""

from __future__ import annotations

import json
import math
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImageMatchConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash_bits: int = 64
    threshold: int = Field(default=5, ge=1)  # match when distance < threshold

    @field_validator("hash_bits")
    @classmethod
    def check_square(cls, v: int) -> int:
        side = math.isqrt(v) if v > 0 else 0
        if side < 2 or side * side != v:
            raise ValueError(f"hash_bits must be a perfect square >= 4, got {v}")
        return v

    @property
    def hash_size(self) -> int:
        """Side length of the square perceptual hash."""
        return math.isqrt(self.hash_bits)


class AssertConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Retry
    timeout_seconds: float = Field(default=10.0, ge=0)
    poll_interval_seconds: float = Field(default=0.1, gt=0)

    # Snapshots
    snapshot_dir: str = "tests/__snapshots__"
    image_match: ImageMatchConfig = Field(default_factory=ImageMatchConfig)

    @property
    def snapshot_path(self) -> Path:
        return Path(self.snapshot_dir)

    @classmethod
    def load(cls, path: str | Path) -> "AssertConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
