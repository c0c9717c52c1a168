"""Archive packaging: every emitted file of a job goes into one ZIP."""

import io
import zipfile
from dataclasses import dataclass
from pathlib import Path

from .emitter import EmittedFile


@dataclass(frozen=True)
class Archive:
    filename: str
    data: bytes

    def names(self) -> list[str]:
        with zipfile.ZipFile(io.BytesIO(self.data)) as zf:
            return zf.namelist()

    def write(self, output_dir: str | Path) -> Path:
        """Write the archive into ``output_dir`` and return its path."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / self.filename
        path.write_bytes(self.data)
        return path


def archive_name(pattern: str, suffix: str) -> str:
    return f"{pattern.strip() or 'Chapter'}{suffix}"


def build_archive(files: list[EmittedFile], filename: str) -> Archive:
    """Compress ``files`` (in order) into a single deflated ZIP."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for emitted in files:
            zf.writestr(emitted.filename, emitted.data)
    return Archive(filename=filename, data=buffer.getvalue())
