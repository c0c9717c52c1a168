"""Plain-text emitter."""

from dataclasses import dataclass

from .emitter import Emitter, EmitterConfig
from .planner import OutputUnit

BOM = "\ufeff"


@dataclass
class TextEmitterConfig(EmitterConfig):
    """Configuration for the plain-text emitter.

    Args:
        encoding: Output encoding (default: "utf-8")
        byte_order_mark: Prefix every file with U+FEFF (default: True)
    """

    encoding: str = "utf-8"
    byte_order_mark: bool = True


class TextEmitter(Emitter):
    """Writes each unit as UTF-8 text with a byte-order mark."""

    extension = ".txt"
    archive_suffix = "_chapters.zip"

    def __init__(self, config: TextEmitterConfig | None = None):
        super().__init__(config or TextEmitterConfig())
        self.config: TextEmitterConfig

    def emit(self, unit: OutputUnit) -> bytes:
        prefix = BOM if self.config.byte_order_mark else ""
        return (prefix + unit.content).encode(self.config.encoding)

    def __repr__(self) -> str:
        return f"TextEmitter(encoding={self.config.encoding!r})"
