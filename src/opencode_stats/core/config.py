"""Configuration management helpers."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict


def default_data_dir() -> Path:
    return Path.home() / ".local" / "share" / "opencode" / "storage"


def _str_to_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value: {value}") from exc


@dataclass(frozen=True)
class StatsConfig:
    """Immutable configuration object loaded from env or files."""

    data_dir: Path = field(default_factory=default_data_dir)
    batch_size: int = 50
    max_workers: int = 8

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_dir", Path(self.data_dir).expanduser())
        self.validate()

    @property
    def message_dir(self) -> Path:
        return self.data_dir / "message"

    @classmethod
    def from_env(cls) -> "StatsConfig":
        defaults = cls()
        data_dir = os.getenv("OPENCODE_STATS_DATA_DIR")
        return cls(
            data_dir=Path(data_dir) if data_dir else defaults.data_dir,
            batch_size=_str_to_int(
                os.getenv("OPENCODE_STATS_BATCH_SIZE"), defaults.batch_size
            ),
            max_workers=_str_to_int(
                os.getenv("OPENCODE_STATS_MAX_WORKERS"), defaults.max_workers
            ),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "StatsConfig":
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        raw = file_path.read_text()
        data: Dict[str, Any]
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = json.loads(raw)
        elif suffix in {".yaml", ".yml"}:
            data = cls._load_yaml(raw)
        else:
            raise ValueError("Unsupported config format. Use JSON or YAML.")
        return cls(**cls._merge_with_defaults(data))

    def with_overrides(self, *, data_dir: str | Path | None = None) -> "StatsConfig":
        if data_dir is None:
            return self
        return StatsConfig(
            data_dir=Path(data_dir),
            batch_size=self.batch_size,
            max_workers=self.max_workers,
        )

    def validate(self) -> None:
        if not isinstance(self.batch_size, int) or self.batch_size <= 0:
            raise ValueError("batch_size must be a positive integer")
        if not isinstance(self.max_workers, int) or self.max_workers <= 0:
            raise ValueError("max_workers must be a positive integer")

    @classmethod
    def _merge_with_defaults(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        defaults = cls()
        return {
            "data_dir": Path(data.get("data_dir", defaults.data_dir)),
            "batch_size": data.get("batch_size", defaults.batch_size),
            "max_workers": data.get("max_workers", defaults.max_workers),
        }

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        import yaml

        return yaml.safe_load(raw) or {}
