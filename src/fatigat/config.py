"""Configuration for FatiGat."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    data_dir: Path = field(default_factory=lambda: Path.home() / ".local" / "share" / "fatigat")
    break_interval_seconds: int = 2700
    break_duration_ms: int = 300_000
    tick_interval: float = 1.0

    @property
    def db_path(self) -> Path:
        return self.data_dir / "fatigat.db"
