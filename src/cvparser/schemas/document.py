from __future__ import annotations

import hashlib
from pathlib import Path, PurePath

from pydantic import BaseModel, ConfigDict


class UploadedDocument(BaseModel):
    """Uploaded résumé file as handed over by the request boundary."""

    content: bytes = b""
    media_type: str | None = None
    filename: str | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        if not self.filename:
            return ""
        return PurePath(self.filename).suffix.lower()

    @property
    def document_id(self) -> str:
        """Stable identifier derived from the content hash."""
        return hashlib.sha256(self.content).hexdigest()[:16]

    @classmethod
    def from_path(cls, path: str | Path, *, media_type: str | None = None) -> "UploadedDocument":
        path = Path(path)
        return cls(content=path.read_bytes(), media_type=media_type, filename=path.name)
