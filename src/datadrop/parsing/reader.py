"""Read bytes from a local file path."""

from __future__ import annotations

import logging
import os
from pathlib import PurePosixPath
from typing import Callable, Optional
from urllib.parse import unquote, urlsplit

from datadrop.errors import FilePathTooLongError, FilesystemError, InvalidFilePathError

from .filesystem import Filesystem, max_path_length

LOGGER = logging.getLogger(__name__)


class SourceReader:
    """Load the contents of a path input, optionally removing the source."""

    def __init__(
        self,
        filesystem: Filesystem,
        *,
        path_limit: Callable[[], int] = max_path_length,
    ) -> None:
        self.filesystem = filesystem
        self.path_limit = path_limit

    def read(self, path: str, *, delete_original_file: bool = False) -> bytes:
        """Return the bytes stored at ``path``.

        Args:
            path: Local filesystem path.
            delete_original_file: Remove ``path`` afterwards whether or not the
                read succeeded. Removal errors are ignored.

        Raises:
            FilePathTooLongError: If ``path`` exceeds the platform limit.
            InvalidFilePathError: If the file cannot be read.
        """
        try:
            limit = self.path_limit()
            length = len(os.fsencode(path))
            if length > limit:
                raise FilePathTooLongError(length, limit)
            try:
                return self.filesystem.read_file(path)
            except FilesystemError as exc:
                raise InvalidFilePathError(path) from exc
        finally:
            if delete_original_file:
                self._remove_quietly(path)

    @staticmethod
    def client_name_for(path: str) -> Optional[str]:
        """Derive a display name from the last segment of the decoded path."""
        try:
            component = urlsplit(path).path
        except ValueError:
            component = path
        component = unquote(component).replace("\\", "/")
        return PurePosixPath(component).name or None

    def _remove_quietly(self, path: str) -> None:
        try:
            self.filesystem.delete(path)
        except FilesystemError as exc:
            LOGGER.debug("Could not remove original file %s: %s", path, exc)


__all__ = ["SourceReader"]
