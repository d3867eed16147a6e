"""Orchestrate classification, decoding, materialization, and finalization."""

from __future__ import annotations

import base64
import logging
from typing import Optional

from datadrop.config.models import ParseOptions
from datadrop.errors import (
    CalculatingFileSizeFailedError,
    FilesystemError,
    GeneratingHashFailedError,
    InvalidHashAlgorithmError,
    RenamingTemporaryFileFailedError,
)

from .classifier import InputClassifier
from .decoder import PayloadDecoder
from .detectors import (
    ExtensionCandidateGuesser,
    ExtensionGuesser,
    HashComputer,
    MediaTypeDetector,
    TypeDetector,
)
from .filesystem import Filesystem, LocalFilesystem
from .materializer import CleanupGuard, TempMaterializer
from .models import SmartFile
from .reader import SourceReader
from .resolvers import ExtensionResolver, MediaTypeResolver

LOGGER = logging.getLogger(__name__)


class DataParser:
    """Turn a data URI, base64 blob, or file path into a :class:`SmartFile`.

    Collaborators default to the local filesystem, python-magic, and hashlib.
    Instances hold no per-call state, so one parser can serve concurrent
    callers.
    """

    def __init__(
        self,
        filesystem: Filesystem | None = None,
        detector: MediaTypeDetector | None = None,
        guesser: ExtensionCandidateGuesser | None = None,
        hasher: HashComputer | None = None,
        *,
        reader: SourceReader | None = None,
    ) -> None:
        self.filesystem = filesystem or LocalFilesystem()
        self.hasher = hasher or HashComputer()
        self.classifier = InputClassifier()
        self.decoder = PayloadDecoder()
        self.reader = reader or SourceReader(self.filesystem)
        self.materializer = TempMaterializer(self.filesystem)
        self.media_types = MediaTypeResolver(detector or TypeDetector())
        self.extensions = ExtensionResolver(guesser or ExtensionGuesser())

    def parse(
        self,
        data: str | None,
        options: ParseOptions | None = None,
        *,
        client_name: Optional[str] = None,
    ) -> SmartFile:
        """Materialize ``data`` into a temp file and describe it.

        Args:
            data: Data URI, raw base64 (with ``assume_base64_data``), or path.
            options: Parse options; defaults when omitted.
            client_name: Original file name used for display and as the
                preferred extension source.

        Returns:
            SmartFile: Descriptor of the written file. The caller owns the file.

        Raises:
            ParsingFailedError: If the input is rejected before any file is
                written.
            ProcessingFailedError: If materialization fails; no temp file is
                left behind.
        """
        options = options or ParseOptions()
        algorithm = options.hash_algorithm
        if not self.hasher.is_supported(algorithm):
            raise InvalidHashAlgorithmError(algorithm)

        classified = self.classifier.classify(data, assume_base64_data=options.assume_base64_data)

        if classified.is_data_uri:
            decoded = self.decoder.decode(classified.header or "", classified.payload or "")
            content = decoded.content
            is_text_heuristic = decoded.is_text_heuristic
        else:
            content = self.reader.read(
                classified.data, delete_original_file=options.delete_original_file
            )
            is_text_heuristic = False
            if client_name is None:
                client_name = self.reader.client_name_for(classified.data)

        LOGGER.debug("Decoded %d bytes from %s input", len(content), classified.kind)

        temp_path = self.materializer.create(options.temp_dir)
        with CleanupGuard(self.filesystem, temp_path) as artifact:
            self.materializer.write(temp_path, content)

            media_type = self.media_types.resolve(temp_path, is_text_heuristic=is_text_heuristic)
            extension = self.extensions.resolve(
                temp_path,
                client_name=client_name,
                is_text_data=MediaTypeResolver.is_text(media_type),
            )

            descriptor = self._finalize(
                artifact,
                content=content,
                extension=extension,
                media_type=media_type,
                algorithm=algorithm,
                client_name=client_name,
                self_destruct=options.self_destruct,
            )
            artifact.release()

        LOGGER.debug(
            "Materialized %s (%s, %d bytes)", descriptor.path, media_type, descriptor.byte_count
        )
        return descriptor

    def _finalize(
        self,
        artifact: CleanupGuard,
        *,
        content: bytes,
        extension: str,
        media_type: str,
        algorithm: str,
        client_name: Optional[str],
        self_destruct: bool,
    ) -> SmartFile:
        temp_path = artifact.path
        file_path = f"{temp_path}.{extension}"

        if self.filesystem.exists(file_path):
            LOGGER.debug("Overwriting existing file at %s", file_path)
        try:
            self.filesystem.rename(temp_path, file_path, overwrite=True)
        except FilesystemError as exc:
            raise RenamingTemporaryFileFailedError(temp_path, file_path) from exc
        artifact.track(file_path)

        try:
            fingerprint = self.hasher.compute(algorithm, content)
        except (ValueError, TypeError) as exc:
            raise GeneratingHashFailedError(file_path, algorithm) from exc

        try:
            byte_count = self.filesystem.size(file_path)
        except FilesystemError as exc:
            raise CalculatingFileSizeFailedError(file_path) from exc

        return SmartFile(
            path=file_path,
            fingerprint=fingerprint,
            media_type=media_type,
            byte_count=byte_count,
            client_name=client_name,
            exists=True,
            self_destruct=self_destruct,
        )


def parse_data(
    data: str | None,
    temp_dir: Optional[str] = None,
    hash_algorithm: str = "sha256",
    client_name: Optional[str] = None,
    assume_base64_data: bool = False,
    delete_original_file: bool = False,
    self_destruct: bool = True,
    *,
    parser: DataParser | None = None,
) -> SmartFile:
    """Parse a data URI, base64 payload, or file path into a :class:`SmartFile`.

    See :meth:`DataParser.parse` for the failure modes.
    """
    options = ParseOptions(
        hash_algorithm=hash_algorithm,
        temp_dir=temp_dir,
        assume_base64_data=assume_base64_data,
        delete_original_file=delete_original_file,
        self_destruct=self_destruct,
    )
    return (parser or DataParser()).parse(data, options, client_name=client_name)


def parse_base64_data(
    data: str | None,
    temp_dir: Optional[str] = None,
    hash_algorithm: str = "sha256",
    client_name: Optional[str] = None,
    self_destruct: bool = True,
    *,
    parser: DataParser | None = None,
) -> SmartFile:
    """Parse a raw base64 payload; a ``data:`` URI is also accepted."""
    return parse_data(
        data,
        temp_dir=temp_dir,
        hash_algorithm=hash_algorithm,
        client_name=client_name,
        assume_base64_data=True,
        self_destruct=self_destruct,
        parser=parser,
    )


def parse_text_data(
    text: str | None,
    temp_dir: Optional[str] = None,
    hash_algorithm: str = "sha256",
    client_name: Optional[str] = None,
    self_destruct: bool = True,
    *,
    parser: DataParser | None = None,
) -> SmartFile:
    """Write literal text to a temp file, e.g. for an inline note or CSV body."""
    data = None
    if text:
        data = "data:text/plain;base64," + base64.b64encode(text.encode("utf-8")).decode("ascii")
    return parse_data(
        data,
        temp_dir=temp_dir,
        hash_algorithm=hash_algorithm,
        client_name=client_name,
        self_destruct=self_destruct,
        parser=parser,
    )


__all__ = ["DataParser", "parse_data", "parse_base64_data", "parse_text_data"]
