"""Data models shared by the parsing pipeline."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

LOGGER = logging.getLogger(__name__)


class ClassifiedInput(BaseModel):
    """Raw input after trimming, base64 wrapping, and classification."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["data_uri", "file_path"]
    data: str
    header: Optional[str] = None
    payload: Optional[str] = None

    @property
    def is_data_uri(self) -> bool:
        return self.kind == "data_uri"


class DecodedPayload(BaseModel):
    """Bytes recovered from an inline data URI."""

    model_config = ConfigDict(frozen=True)

    content: bytes
    is_text_heuristic: bool = False


class SmartFile(BaseModel):
    """Immutable descriptor of a materialized file.

    Attributes:
        path: Location of the file on disk, extension included.
        fingerprint: Hex digest of the decoded bytes.
        media_type: MIME type sniffed from the file contents.
        byte_count: Size of the file in bytes.
        client_name: Display name supplied by the caller or derived from the
            source path.
        exists: Whether ``path`` still references the written file.
        self_destruct: Whether the caller is responsible for deleting
            ``path`` once finished. Honored by ``with`` blocks; the parser
            itself never deletes a returned file.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    fingerprint: str
    media_type: str
    byte_count: int = Field(ge=0)
    client_name: Optional[str] = None
    exists: bool = True
    self_destruct: bool = True

    @property
    def extension(self) -> str:
        """Return the file extension without the leading dot."""
        return self.path.suffix.lstrip(".")

    @property
    def name(self) -> str:
        """Return the client name when known, otherwise the file name on disk."""
        return self.client_name or self.path.name

    def read_bytes(self) -> bytes:
        """Return the file contents."""
        return self.path.read_bytes()

    def to_data_uri(self) -> str:
        """Encode the file contents as an RFC2397 base64 data URI."""
        encoded = base64.b64encode(self.read_bytes()).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"

    def delete(self) -> "SmartFile":
        """Remove the backing file and return a descriptor with ``exists=False``.

        Missing files are ignored so the call is safe to repeat.
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        return self.model_copy(update={"exists": False})

    def __enter__(self) -> "SmartFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.self_destruct:
            LOGGER.debug("Self-destructing %s", self.path)
            self.delete()


__all__ = ["ClassifiedInput", "DecodedPayload", "SmartFile"]
