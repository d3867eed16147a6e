"""Classify raw input as an inline data URI or a file path."""

from __future__ import annotations

from datadrop.errors import EmptyDataError, InvalidRfc2397DataError

from .models import ClassifiedInput

DATA_URI_SCHEME = "data:"
BASE64_WRAPPER = "data:application/octet-stream;base64,{}"


class InputClassifier:
    """Decide how a raw string should be interpreted.

    RFC2397 defines ``data:[<mediatype>][;base64],<data>``. Anything that does
    not look like one is handed to the file reader as a path.
    """

    def classify(self, data: str | None, *, assume_base64_data: bool = False) -> ClassifiedInput:
        """Return the classified input.

        Args:
            data: Raw input string. ``None`` is treated as empty.
            assume_base64_data: Wrap input lacking the ``data:`` prefix as an
                ``application/octet-stream`` base64 data URI.

        Raises:
            EmptyDataError: If nothing but whitespace was supplied.
            InvalidRfc2397DataError: If a data URI does not split into exactly
                one header and one non-empty payload.
        """
        text = (data or "").strip()
        if not text:
            raise EmptyDataError()

        if assume_base64_data and not text.startswith(DATA_URI_SCHEME):
            text = BASE64_WRAPPER.format(text)

        if text.startswith(DATA_URI_SCHEME) and "," in text:
            parts = text[len(DATA_URI_SCHEME) :].split(",")
            if len(parts) != 2 or not parts[1]:
                raise InvalidRfc2397DataError()
            return ClassifiedInput(kind="data_uri", data=text, header=parts[0], payload=parts[1])

        return ClassifiedInput(kind="file_path", data=text)


__all__ = ["InputClassifier", "DATA_URI_SCHEME"]
