"""Filesystem primitives used by the parsing pipeline."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol

from datadrop.errors import FilesystemError

DEFAULT_MAX_PATH_LENGTH = 4096


class Filesystem(Protocol):
    """Operations the pipeline needs from a filesystem.

    Implementations raise :class:`FilesystemError` when an operation fails.
    """

    def read_file(self, path: str) -> bytes: ...

    def create_temp_file(self, directory: str, prefix: str) -> str: ...

    def write_file(self, path: str, content: bytes) -> None: ...

    def rename(self, source: str, destination: str, overwrite: bool = False) -> None: ...

    def is_writable_dir(self, path: str) -> bool: ...

    def exists(self, path: str) -> bool: ...

    def delete(self, path: str) -> None: ...

    def size(self, path: str) -> int: ...


def _describe(exc: Exception) -> str:
    return getattr(exc, "strerror", None) or str(exc)


class LocalFilesystem:
    """Filesystem backed by the local operating system."""

    def read_file(self, path: str) -> bytes:
        target = Path(path)
        try:
            if target.is_dir():
                raise FilesystemError(f'Failed to read "{path}": it is a directory.', path)
            return target.read_bytes()
        except (OSError, ValueError) as exc:
            raise FilesystemError(f'Failed to read "{path}": {_describe(exc)}', path) from exc

    def create_temp_file(self, directory: str, prefix: str) -> str:
        try:
            handle, name = tempfile.mkstemp(prefix=prefix, dir=directory)
        except OSError as exc:
            raise FilesystemError(
                f'Failed to create a temporary file in "{directory}": {_describe(exc)}',
                directory,
            ) from exc
        os.close(handle)
        return name

    def write_file(self, path: str, content: bytes) -> None:
        try:
            with open(path, "wb") as fh:
                fh.write(content)
        except OSError as exc:
            raise FilesystemError(f'Failed to write "{path}": {_describe(exc)}', path) from exc

    def rename(self, source: str, destination: str, overwrite: bool = False) -> None:
        if not overwrite and os.path.exists(destination):
            raise FilesystemError(
                f'Cannot rename "{source}" because "{destination}" already exists.', destination
            )
        try:
            os.replace(source, destination)
        except OSError as exc:
            raise FilesystemError(
                f'Failed to rename "{source}" to "{destination}": {_describe(exc)}', source
            ) from exc

    def is_writable_dir(self, path: str) -> bool:
        return os.path.isdir(path) and os.access(path, os.W_OK)

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def delete(self, path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except (OSError, ValueError) as exc:
            raise FilesystemError(f'Failed to delete "{path}": {_describe(exc)}', path) from exc

    def size(self, path: str) -> int:
        try:
            return os.stat(path).st_size
        except OSError as exc:
            raise FilesystemError(f'Failed to stat "{path}": {_describe(exc)}', path) from exc


def max_path_length() -> int:
    """Return the longest path the platform accepts."""
    try:
        return os.pathconf("/", "PC_PATH_MAX")
    except (AttributeError, OSError, ValueError):  # pragma: no cover - non-POSIX platforms
        return DEFAULT_MAX_PATH_LENGTH


__all__ = ["Filesystem", "LocalFilesystem", "max_path_length", "DEFAULT_MAX_PATH_LENGTH"]
