"""Run and batch configuration using msgspec."""

from __future__ import annotations

import base64
import hashlib
import json
from pathlib import Path

import msgspec


class GameConfig(msgspec.Struct, frozen=True):
    """
    Immutable description of one game run.
    Serves as both the execution config and the deduplication key.
    """

    seed: int
    speed: float = 1.0

    def compute_hash(self) -> str:
        """Compute stable SHA-256 hash of this configuration."""
        # Speed only changes pacing, never the outcome, so it is not hashed.
        canonical = json.dumps({"seed": self.seed}, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    @property
    def encoded(self) -> str:
        """Shareable config string (Base64)."""
        data = {"seed": self.seed, "speed": self.speed}
        canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
        return base64.urlsafe_b64encode(canonical.encode("utf-8")).decode("ascii")

    @classmethod
    def from_encoded(cls, encoded: str) -> GameConfig:
        """Decode from shareable string."""
        json_str = base64.urlsafe_b64decode(encoded).decode("utf-8")
        data = json.loads(json_str)
        return cls(seed=data["seed"], speed=data.get("speed", 1.0))

    @property
    def repr(self) -> str:
        """String representation for logging."""
        return f"Seed: {self.seed} (x{self.speed:g}) - {self.encoded}"


class PartialGameConfig(msgspec.Struct):
    """Partial configuration for loading from TOML files."""

    seed: int | None = None
    speed: float | None = None


class BatchConfig(msgspec.Struct):
    """TOML-backed configuration for batch runs."""

    runs: int = 100
    seed_offset: int = 0

    @classmethod
    def from_toml(cls, path: str | Path) -> BatchConfig:
        """Load configuration from a TOML file path."""
        with Path(path).open("rb") as f:
            return msgspec.toml.decode(f.read(), type=cls)

    def game_configs(self) -> list[GameConfig]:
        return [
            GameConfig(seed=seed)
            for seed in range(self.seed_offset, self.seed_offset + self.runs)
        ]
