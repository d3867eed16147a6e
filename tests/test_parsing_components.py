"""Unit tests for the individual parsing stages."""

from pathlib import Path
from typing import Optional

import pytest

from datadrop.errors import (
    EmptyDataError,
    FilesystemError,
    GeneratingExtensionFailedError,
    InvalidBase64DataError,
    InvalidRfc2397DataError,
    TempDirectoryNotWritableError,
    WritingTempFileFailedError,
)
from datadrop.parsing import (
    CleanupGuard,
    ExtensionResolver,
    InputClassifier,
    LocalFilesystem,
    MediaTypeResolver,
    PayloadDecoder,
    SourceReader,
    TempMaterializer,
)
from datadrop.parsing.detectors import ContentInspectionError
from datadrop.parsing.materializer import TEMP_FILE_PREFIX


class StaticGuesser:
    def __init__(self, candidates: Optional[str]) -> None:
        self.candidates = candidates

    def guess_extension_candidates(self, path: str) -> Optional[str]:
        return self.candidates


class StaticDetector:
    def __init__(self, media_type: Optional[str]) -> None:
        self.media_type = media_type

    def detect_media_type(self, path: str) -> Optional[str]:
        return self.media_type


def test_classifier_trims_and_splits_data_uri() -> None:
    classified = InputClassifier().classify("  data:image/png;base64,AAAA \n")

    assert classified.is_data_uri
    assert classified.header == "image/png;base64"
    assert classified.payload == "AAAA"


def test_classifier_treats_other_input_as_path() -> None:
    classifier = InputClassifier()

    assert classifier.classify("/var/tmp/upload.bin").kind == "file_path"
    assert classifier.classify("data:no-comma-here").kind == "file_path"
    assert classifier.classify("report,final.pdf").kind == "file_path"


def test_classifier_wraps_assumed_base64() -> None:
    classified = InputClassifier().classify("SGVsbG8=", assume_base64_data=True)

    assert classified.data == "data:application/octet-stream;base64,SGVsbG8="
    assert classified.header == "application/octet-stream;base64"


def test_classifier_keeps_existing_data_uri_when_assuming_base64() -> None:
    classified = InputClassifier().classify("data:,hi", assume_base64_data=True)

    assert classified.header == ""
    assert classified.payload == "hi"


@pytest.mark.parametrize("data", ["", "  ", "\n\t", None])
def test_classifier_rejects_empty_input(data: Optional[str]) -> None:
    with pytest.raises(EmptyDataError):
        InputClassifier().classify(data)


@pytest.mark.parametrize(
    "data",
    ["data:text/plain,a,b", "data:text/plain;base64,", "data:,", "data:a,b,c,d"],
)
def test_classifier_rejects_malformed_data_uri(data: str) -> None:
    with pytest.raises(InvalidRfc2397DataError):
        InputClassifier().classify(data)


def test_decoder_decodes_base64_strictly() -> None:
    decoded = PayloadDecoder().decode("text/plain;base64", "SGVsbG8=")

    assert decoded.content == b"Hello"
    assert decoded.is_text_heuristic is False


@pytest.mark.parametrize("payload", ["SGVsbG8", "SGV$bG8=", "====", "SGVsbG8=é"])
def test_decoder_rejects_malformed_base64(payload: str) -> None:
    with pytest.raises(InvalidBase64DataError):
        PayloadDecoder().decode(";base64", payload)


def test_decoder_percent_decodes_text() -> None:
    decoded = PayloadDecoder().decode("text/plain;charset=utf-8", "%E2%9C%93+done%20")

    assert decoded.content == "✓+done ".encode("utf-8")
    assert decoded.is_text_heuristic is True


def test_decoder_without_base64_marker_ignores_base64_shape() -> None:
    decoded = PayloadDecoder().decode("text/plain", "SGVsbG8=")

    assert decoded.content == b"SGVsbG8="
    assert decoded.is_text_heuristic is True


def test_source_reader_derives_client_name() -> None:
    assert SourceReader.client_name_for("/srv/uploads/photo.jpeg") == "photo.jpeg"
    assert SourceReader.client_name_for("/srv/uploads/my%20photo.jpeg") == "my photo.jpeg"
    assert SourceReader.client_name_for("/") is None


def test_source_reader_ignores_failed_removal(tmp_path: Path) -> None:
    class UndeletableFilesystem(LocalFilesystem):
        def delete(self, path: str) -> None:
            raise FilesystemError("busy", path)

    source = tmp_path / "keep.txt"
    source.write_bytes(b"hello")

    content = SourceReader(UndeletableFilesystem()).read(str(source), delete_original_file=True)

    assert content == b"hello"
    assert source.exists()


def test_materializer_creates_prefixed_file(tmp_path: Path) -> None:
    materializer = TempMaterializer(LocalFilesystem())

    path = materializer.create(str(tmp_path))
    materializer.write(path, b"bytes")

    assert Path(path).parent == tmp_path
    assert Path(path).name.startswith(TEMP_FILE_PREFIX)
    assert Path(path).read_bytes() == b"bytes"


def test_materializer_defaults_to_platform_temp_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("tempfile.tempdir", str(tmp_path))

    path = TempMaterializer(LocalFilesystem()).create()

    assert Path(path).parent == tmp_path


def test_materializer_rejects_files_as_directories(tmp_path: Path) -> None:
    not_a_dir = tmp_path / "file"
    not_a_dir.write_text("x", encoding="utf-8")

    with pytest.raises(TempDirectoryNotWritableError):
        TempMaterializer(LocalFilesystem()).create(str(not_a_dir))


def test_materializer_wraps_write_errors(tmp_path: Path) -> None:
    with pytest.raises(WritingTempFileFailedError) as excinfo:
        TempMaterializer(LocalFilesystem()).write(str(tmp_path / "missing" / "x"), b"data")

    assert isinstance(excinfo.value.__cause__, FilesystemError)


def test_cleanup_guard_deletes_tracked_path_on_error(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.write_bytes(b"1")
    second.write_bytes(b"2")

    with pytest.raises(RuntimeError):
        with CleanupGuard(LocalFilesystem(), str(first)) as guard:
            guard.track(str(second))
            raise RuntimeError("boom")

    assert first.exists()
    assert not second.exists()


def test_cleanup_guard_keeps_released_artifact(tmp_path: Path) -> None:
    artifact = tmp_path / "artifact"
    artifact.write_bytes(b"1")

    with pytest.raises(RuntimeError):
        with CleanupGuard(LocalFilesystem(), str(artifact)) as guard:
            assert guard.release() == str(artifact)
            raise RuntimeError("after release")

    assert artifact.exists()


def test_cleanup_guard_leaves_file_on_success(tmp_path: Path) -> None:
    artifact = tmp_path / "artifact"
    artifact.write_bytes(b"1")

    with CleanupGuard(LocalFilesystem(), str(artifact)):
        pass

    assert artifact.exists()


def test_media_type_resolver_fallbacks() -> None:
    inconclusive = MediaTypeResolver(StaticDetector(None))

    assert inconclusive.resolve("x", is_text_heuristic=True) == "text/plain"
    assert inconclusive.resolve("x", is_text_heuristic=False) == "application/octet-stream"
    assert MediaTypeResolver(StaticDetector("image/gif")).resolve("x", is_text_heuristic=True) == (
        "image/gif"
    )


def test_extension_resolver_order() -> None:
    resolver = ExtensionResolver(StaticGuesser("? png ?/apng"))

    assert resolver.resolve("x", client_name="archive.tar.gz", is_text_data=True) == "gz"
    assert resolver.resolve("x", client_name="README", is_text_data=True) == "txt"
    assert resolver.resolve("x", client_name=None, is_text_data=False) == "png"


def test_extension_resolver_unknown_candidates() -> None:
    resolver = ExtensionResolver(StaticGuesser("???"))

    assert resolver.resolve("x", client_name=None, is_text_data=False) == "bin"


def test_extension_resolver_wraps_inspection_errors() -> None:
    class FailingGuesser:
        def guess_extension_candidates(self, path: str) -> Optional[str]:
            raise ContentInspectionError("cannot open")

    with pytest.raises(GeneratingExtensionFailedError) as excinfo:
        ExtensionResolver(FailingGuesser()).resolve("/tmp/x", client_name=None, is_text_data=False)

    assert excinfo.value.path == "/tmp/x"


@pytest.mark.parametrize(
    ("client_name", "extension"),
    [
        (".bashrc", "bashrc"),
        ("archive.tar.gz", "gz"),
        ("/uploads/v1.2/README", ""),
        ("notes.", ""),
        (None, ""),
    ],
)
def test_extension_from_client_name(client_name: Optional[str], extension: str) -> None:
    assert ExtensionResolver.from_client_name(client_name) == extension
