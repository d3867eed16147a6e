"""Content sniffing, extension guessing, and hashing collaborators."""

from __future__ import annotations

import hashlib
import logging
from typing import FrozenSet, Optional, Protocol

import magic

from datadrop.errors import DataDropError

LOGGER = logging.getLogger(__name__)


class ContentInspectionError(DataDropError):
    """Raised when libmagic cannot inspect a file."""

    code = "content_inspection_failed"


class MediaTypeDetector(Protocol):
    def detect_media_type(self, path: str) -> Optional[str]: ...


class ExtensionCandidateGuesser(Protocol):
    def guess_extension_candidates(self, path: str) -> Optional[str]: ...


class TypeDetector:
    """Identify the MIME type of a file from its contents using python-magic."""

    def detect_media_type(self, path: str) -> Optional[str]:
        """Return the sniffed MIME type, or None when libmagic has no answer."""
        try:
            detected = magic.from_file(path, mime=True)
        except (magic.MagicException, OSError) as exc:
            LOGGER.debug("MIME sniffing failed for %s: %s", path, exc)
            return None
        return detected or None


class ExtensionGuesser:
    """List plausible extensions for a file using libmagic's extension mode."""

    def guess_extension_candidates(self, path: str) -> Optional[str]:
        """Return a ``/``-delimited candidate list such as ``jpeg/jpg/jpe/jfif``.

        libmagic reports ``???`` when it has no guess. Returns None when the
        installed libmagic predates extension support.

        Raises:
            ContentInspectionError: If libmagic fails while reading the file.
        """
        try:
            inspector = magic.Magic(extension=True)
        except NotImplementedError:
            LOGGER.debug("libmagic does not support extension guessing; skipping.")
            return None
        try:
            return inspector.from_file(path)
        except (magic.MagicException, OSError) as exc:
            raise ContentInspectionError(f"Could not inspect {path}: {exc}") from exc


class HashComputer:
    """Compute hex digests over in-memory content."""

    def supported_algorithms(self) -> FrozenSet[str]:
        """Return the fixed-length algorithms hashlib can construct on this platform.

        Extendable-output functions (``shake_*``) report a zero digest size and
        cannot produce a hex digest without a length, so they are left out.
        """
        supported = set()
        for name in hashlib.algorithms_available:
            try:
                digest_size = hashlib.new(name).digest_size
            except ValueError:
                continue
            if digest_size > 0:
                supported.add(name)
        return frozenset(supported)

    def is_supported(self, algorithm: str) -> bool:
        return algorithm in self.supported_algorithms()

    def compute(self, algorithm: str, content: bytes) -> str:
        """Return the hex digest of ``content``.

        Raises:
            ValueError: If hashlib cannot build the algorithm.
        """
        digest = hashlib.new(algorithm)
        digest.update(content)
        return digest.hexdigest()


__all__ = [
    "ContentInspectionError",
    "MediaTypeDetector",
    "ExtensionCandidateGuesser",
    "TypeDetector",
    "ExtensionGuesser",
    "HashComputer",
]
