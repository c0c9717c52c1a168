"""Base classes for output emitters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from chapter_extractor.config import BaseConfig

from .planner import OutputUnit


@dataclass
class EmitterConfig(BaseConfig):
    """Base configuration for emitters.

    This class provides JSON serialization capabilities for all emitter configs.
    """


@dataclass(frozen=True)
class EmittedFile:
    filename: str
    data: bytes


class Emitter(ABC):
    """Base class for emitters.

    An emitter turns one planned output unit into the bytes of one file.
    """

    extension: str = ""
    archive_suffix: str = "_chapters.zip"

    def __init__(self, config: EmitterConfig):
        """Initialize emitter with configuration.

        Args:
            config: Emitter configuration
        """
        self.config = config

    @abstractmethod
    def emit(self, unit: OutputUnit) -> bytes:
        """Render one output unit.

        Args:
            unit: Planned output unit

        Returns:
            File contents
        """
        pass

    def emit_file(self, unit: OutputUnit) -> EmittedFile:
        return EmittedFile(filename=f"{unit.filename}{self.extension}", data=self.emit(unit))

    def emit_all(self, units: list[OutputUnit]) -> list[EmittedFile]:
        """Render every unit, in order."""
        return [self.emit_file(unit) for unit in units]

    @abstractmethod
    def __repr__(self) -> str:
        """String representation of emitter."""
        pass
