"""Temp file creation and the guard that removes it on failure."""

from __future__ import annotations

import logging
import tempfile
from types import TracebackType
from typing import Optional, Type

from datadrop.errors import (
    FilesystemError,
    TempDirectoryNotWritableError,
    TempFileNotWrittenError,
    WritingTempFileFailedError,
)

from .filesystem import Filesystem

LOGGER = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "__datadrop_"


class CleanupGuard:
    """Own a temp artifact until the pipeline succeeds.

    Used as a context manager: if the block raises, whatever file the guard
    currently points at is deleted before the exception propagates. Deletion
    errors are logged and dropped so they never replace the original failure.
    """

    def __init__(self, filesystem: Filesystem, path: str) -> None:
        self.filesystem = filesystem
        self.path = path
        self._released = False

    def __enter__(self) -> "CleanupGuard":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is not None and not self._released:
            self.cleanup()

    def track(self, path: str) -> None:
        """Point the guard at the artifact's new location after a rename."""
        self.path = path

    def release(self) -> str:
        """Disarm the guard and hand the artifact to the caller."""
        self._released = True
        return self.path

    def cleanup(self) -> None:
        try:
            if self.filesystem.exists(self.path):
                self.filesystem.delete(self.path)
        except FilesystemError as exc:
            LOGGER.debug("Failed to remove temp artifact %s: %s", self.path, exc)


class TempMaterializer:
    """Write byte buffers into uniquely named temp files."""

    def __init__(self, filesystem: Filesystem, prefix: str = TEMP_FILE_PREFIX) -> None:
        self.filesystem = filesystem
        self.prefix = prefix

    def create(self, temp_dir: str | None = None) -> str:
        """Create an empty temp file and return its path.

        Raises:
            TempDirectoryNotWritableError: If the directory cannot be written.
            TempFileNotWrittenError: If the file cannot be created.
        """
        directory = temp_dir or tempfile.gettempdir()
        if not self.filesystem.is_writable_dir(directory):
            raise TempDirectoryNotWritableError(directory)
        try:
            return self.filesystem.create_temp_file(directory, self.prefix)
        except FilesystemError as exc:
            raise TempFileNotWrittenError(directory) from exc

    def write(self, path: str, content: bytes) -> None:
        """Write ``content`` to ``path``; callers guard ``path`` for cleanup.

        Raises:
            WritingTempFileFailedError: If the write fails.
        """
        try:
            self.filesystem.write_file(path, content)
        except FilesystemError as exc:
            raise WritingTempFileFailedError(path) from exc


__all__ = ["CleanupGuard", "TempMaterializer", "TEMP_FILE_PREFIX"]
