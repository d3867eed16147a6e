"""Decode the payload portion of a data URI."""

from __future__ import annotations

import base64
import binascii
from urllib.parse import unquote_to_bytes

from datadrop.errors import InvalidBase64DataError

from .models import DecodedPayload

BASE64_MARKER = ";base64"


class PayloadDecoder:
    """Turn a data URI header and payload into bytes."""

    def decode(self, header: str, payload: str) -> DecodedPayload:
        """Decode ``payload`` according to ``header``.

        Base64 payloads are decoded strictly. Anything else is percent-decoded
        and flagged as probable text, which is the RFC2397 default.

        Raises:
            InvalidBase64DataError: If a base64 payload is malformed or empty.
        """
        if header.endswith(BASE64_MARKER):
            try:
                content = base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise InvalidBase64DataError() from exc
            if not content:
                raise InvalidBase64DataError()
            return DecodedPayload(content=content, is_text_heuristic=False)

        return DecodedPayload(content=unquote_to_bytes(payload), is_text_heuristic=True)


__all__ = ["PayloadDecoder", "BASE64_MARKER"]
