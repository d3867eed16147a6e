"""Exceptions raised while parsing and materializing data."""

from __future__ import annotations

from pathlib import Path


class DataDropError(Exception):
    """Base exception for every failure surfaced by the parser."""

    code = "datadrop_error"


class FilesystemError(DataDropError):
    """Raised by the filesystem collaborator when an operation fails."""

    code = "filesystem_error"

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else None
        super().__init__(message)


class ParsingFailedError(DataDropError):
    """Raised before any filesystem mutation has happened."""

    code = "parsing_failed"


class EmptyDataError(ParsingFailedError):
    """Raised when the input is empty after trimming whitespace."""

    code = "empty_data"

    def __init__(self) -> None:
        super().__init__("Parsing failed: the data is empty.")


class InvalidHashAlgorithmError(ParsingFailedError):
    """Raised when the requested hash algorithm is not supported."""

    code = "invalid_hash_algorithm"

    def __init__(self, algorithm: str) -> None:
        self.algorithm = algorithm
        super().__init__(f'Parsing failed: the hash algorithm "{algorithm}" is not supported.')


class InvalidRfc2397DataError(ParsingFailedError):
    """Raised when a ``data:`` URI does not split into a header and a payload."""

    code = "invalid_rfc2397_data"

    def __init__(self) -> None:
        super().__init__("Parsing failed: the data is not a valid RFC2397 data URI.")


class InvalidBase64DataError(ParsingFailedError):
    """Raised when a base64 payload cannot be decoded strictly."""

    code = "invalid_base64_data"

    def __init__(self) -> None:
        super().__init__("Parsing failed: the data is not valid base64 encoded data.")


class InvalidFilePathError(ParsingFailedError):
    """Raised when the input is treated as a path but cannot be read."""

    code = "invalid_file_path"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'Parsing failed: the file "{path}" could not be read.')


class FilePathTooLongError(ParsingFailedError):
    """Raised when the input exceeds the platform maximum path length."""

    code = "file_path_too_long"

    def __init__(self, path_length: int, max_length: int) -> None:
        self.path_length = path_length
        self.max_length = max_length
        super().__init__(
            f"Parsing failed: the path is {path_length} bytes long "
            f"but the platform limit is {max_length}."
        )


class ProcessingFailedError(DataDropError):
    """Raised once the parser has started writing to disk."""

    code = "processing_failed"


class TempDirectoryNotWritableError(ProcessingFailedError):
    """Raised when the temp directory does not exist or cannot be written."""

    code = "temp_directory_not_writable"

    def __init__(self, directory: str | Path) -> None:
        self.directory = str(directory)
        super().__init__(
            f'Processing failed: the temporary directory "{directory}" is not writable.'
        )


class TempFileNotWrittenError(ProcessingFailedError):
    """Raised when the unique temp file cannot be created."""

    code = "temp_file_not_written"

    def __init__(self, directory: str | Path) -> None:
        self.directory = str(directory)
        super().__init__(
            f'Processing failed: a temporary file could not be created in "{directory}".'
        )


class WritingTempFileFailedError(ProcessingFailedError):
    """Raised when the decoded bytes cannot be written to the temp file."""

    code = "writing_temp_file_failed"

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f'Processing failed: writing the temporary file "{path}" failed.')


class GeneratingExtensionFailedError(ProcessingFailedError):
    """Raised when content inspection cannot produce extension candidates."""

    code = "generating_extension_failed"

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(
            f'Processing failed: an extension could not be generated for "{path}".'
        )


class RenamingTemporaryFileFailedError(ProcessingFailedError):
    """Raised when the temp file cannot be renamed to carry its extension."""

    code = "renaming_temporary_file_failed"

    def __init__(self, source: str | Path, destination: str | Path) -> None:
        self.source = str(source)
        self.destination = str(destination)
        super().__init__(
            f'Processing failed: renaming "{source}" to "{destination}" failed.'
        )


class GeneratingHashFailedError(ProcessingFailedError):
    """Raised when the fingerprint cannot be computed."""

    code = "generating_hash_failed"

    def __init__(self, path: str | Path, algorithm: str) -> None:
        self.path = str(path)
        self.algorithm = algorithm
        super().__init__(
            f'Processing failed: generating a "{algorithm}" hash for "{path}" failed.'
        )


class CalculatingFileSizeFailedError(ProcessingFailedError):
    """Raised when the size of the finished file cannot be read."""

    code = "calculating_file_size_failed"

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f'Processing failed: the size of "{path}" could not be calculated.')


__all__ = [
    "DataDropError",
    "FilesystemError",
    "ParsingFailedError",
    "EmptyDataError",
    "InvalidHashAlgorithmError",
    "InvalidRfc2397DataError",
    "InvalidBase64DataError",
    "InvalidFilePathError",
    "FilePathTooLongError",
    "ProcessingFailedError",
    "TempDirectoryNotWritableError",
    "TempFileNotWrittenError",
    "WritingTempFileFailedError",
    "GeneratingExtensionFailedError",
    "RenamingTemporaryFileFailedError",
    "GeneratingHashFailedError",
    "CalculatingFileSizeFailedError",
]
