"""Media type and extension resolution for materialized files."""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Optional

from datadrop.errors import GeneratingExtensionFailedError

from .detectors import ContentInspectionError, ExtensionCandidateGuesser, MediaTypeDetector

LOGGER = logging.getLogger(__name__)

TEXT_MEDIA_TYPE = "text/plain"
BINARY_MEDIA_TYPE = "application/octet-stream"
TEXT_EXTENSION = "txt"
BINARY_EXTENSION = "bin"


class MediaTypeResolver:
    """Sniff a file's MIME type, falling back on how it was decoded."""

    def __init__(self, detector: MediaTypeDetector) -> None:
        self.detector = detector

    def resolve(self, path: str, *, is_text_heuristic: bool) -> str:
        media_type = self.detector.detect_media_type(path)
        if not media_type:
            media_type = TEXT_MEDIA_TYPE if is_text_heuristic else BINARY_MEDIA_TYPE
            LOGGER.debug("Sniffing was inconclusive for %s; using %s", path, media_type)
        return media_type

    @staticmethod
    def is_text(media_type: str) -> bool:
        return media_type == TEXT_MEDIA_TYPE


class ExtensionResolver:
    """Pick the extension for a materialized file.

    The first non-empty answer wins: the client name's extension, ``txt`` for
    plain text, libmagic's first candidate, then ``txt`` or ``bin``.
    """

    def __init__(self, guesser: ExtensionCandidateGuesser) -> None:
        self.guesser = guesser

    def resolve(self, path: str, *, client_name: Optional[str], is_text_data: bool) -> str:
        """Return the extension without a leading dot.

        Raises:
            GeneratingExtensionFailedError: If content inspection fails.
        """
        extension = self.from_client_name(client_name)
        if not extension and is_text_data:
            extension = TEXT_EXTENSION

        if not extension:
            try:
                candidates = self.guesser.guess_extension_candidates(path)
            except ContentInspectionError as exc:
                raise GeneratingExtensionFailedError(path) from exc
            if candidates is not None:
                extension = self.first_candidate(candidates)

        return extension or (TEXT_EXTENSION if is_text_data else BINARY_EXTENSION)

    @staticmethod
    def from_client_name(client_name: Optional[str]) -> str:
        if not client_name:
            return ""
        name = PurePath(client_name).name
        if "." not in name:
            return ""
        return name.rpartition(".")[2]

    @staticmethod
    def first_candidate(candidates: str) -> str:
        # libmagic marks low-confidence guesses with "?", and "???" means unknown
        return candidates.split("/")[0].strip("? ")


__all__ = [
    "MediaTypeResolver",
    "ExtensionResolver",
    "TEXT_MEDIA_TYPE",
    "BINARY_MEDIA_TYPE",
    "TEXT_EXTENSION",
    "BINARY_EXTENSION",
]
