"""
Configuration classes for chapter extraction.

``BaseConfig`` provides the dictionary/JSON round-trip used by every
configuration in this project, including the exporter's.
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, TypeVar

T = TypeVar("T", bound="BaseConfig")


@dataclass
class BaseConfig:
    """Dataclass settings that load from and save to plain JSON objects."""

    @classmethod
    def from_dict(cls: type[T], config_dict: dict[str, Any]) -> T:
        """Build a config from a dict, rejecting keys that are not fields.

        Raises:
            ValueError: If ``config_dict`` names an unknown setting
        """
        unknown = sorted(set(config_dict) - {f.name for f in fields(cls)})
        if unknown:
            raise ValueError(f"Unknown {cls.__name__} setting(s): {', '.join(unknown)}")
        return cls(**config_dict)

    @classmethod
    def from_json(cls: type[T], json_path: str | Path) -> T:
        """Load a config saved by ``to_json``; a missing file raises FileNotFoundError."""
        return cls.from_dict(json.loads(Path(json_path).read_text(encoding="utf-8")))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self, json_path: str | Path, indent: int = 2) -> None:
        path = Path(json_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=indent), encoding="utf-8")


@dataclass
class ExtractorConfig(BaseConfig):
    """Configuration for chapter extraction.

    Args:
        min_chars: Chapters with fewer characters are treated as noise (default: 20)
        max_workers: Threads used to read and decode content files (default: 4)
        verbose: Print progress information (default: False)
    """

    min_chars: int = 20
    max_workers: int = 4
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.min_chars < 0:
            raise ValueError("min_chars must be >= 0")

        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
