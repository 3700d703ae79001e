"""
Content-Transfer-Encoding decoding for body streams.

Supports base64, quoted-printable and the identity encodings (7bit, 8bit,
binary). The caller owns the stream: it is read here but never closed.
"""

import base64
import binascii
from enum import Enum
from typing import BinaryIO, Optional

import structlog

from ..config import settings
from ..errors import DecodingError

logger = structlog.get_logger(__name__)

ENCODING_BASE64 = "base64"
ENCODING_QUOTED_PRINTABLE = "quoted-printable"
IDENTITY_ENCODINGS = frozenset({"", "7bit", "8bit", "binary"})

_BASE64_WHITESPACE = b" \t\r\n\x0b\x0c"
_HEX_DIGITS = b"0123456789abcdefABCDEF"
_EQUALS = ord("=")
_CR = ord("\r")
_LF = ord("\n")


def decode_base64(data: bytes) -> bytes:
    """
    Decode a base64 body, ignoring embedded line breaks and whitespace.

    Args:
        data: Raw base64 payload

    Returns:
        Decoded bytes

    Raises:
        DecodingError: If the stripped payload is not valid base64
    """
    compact = data.translate(None, _BASE64_WHITESPACE)
    if len(compact) % 4:
        raise DecodingError(
            f"base64 payload length {len(compact)} is not a multiple of 4", ENCODING_BASE64
        )
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as e:
        raise DecodingError(f"invalid base64 payload: {e}", ENCODING_BASE64) from e


class QPState(Enum):
    NORMAL = "normal"
    SAW_EQUALS = "saw_equals"
    SAW_EQUALS_HEXDIGIT1 = "saw_equals_hexdigit1"


class QuotedPrintableDecoder:
    """
    Incremental quoted-printable decoder.

    ``=`` CRLF (or a bare LF) is a soft line break and produces nothing.
    ``=XX`` produces the byte XX. Any other escape produces a literal ``=``
    and decoding resumes with the byte that followed it. Data may be fed in
    arbitrary chunks.
    """

    def __init__(self) -> None:
        self._state = QPState.NORMAL
        self._pending = 0
        self._output = bytearray()
        self.malformed_escapes = 0

    def _normal(self, byte: int) -> None:
        if byte == _EQUALS:
            self._state = QPState.SAW_EQUALS
        else:
            self._output.append(byte)

    def _malformed(self, *consumed: int) -> None:
        self.malformed_escapes += 1
        self._state = QPState.NORMAL
        self._output.append(_EQUALS)
        for byte in consumed:
            self._normal(byte)

    def feed(self, data: bytes) -> None:
        for byte in data:
            if self._state is QPState.NORMAL:
                self._normal(byte)

            elif self._state is QPState.SAW_EQUALS:
                if byte == _CR or byte in _HEX_DIGITS:
                    self._pending = byte
                    self._state = QPState.SAW_EQUALS_HEXDIGIT1
                elif byte == _LF:
                    self._state = QPState.NORMAL
                else:
                    self._malformed(byte)

            else:
                first = self._pending
                if first == _CR and byte == _LF:
                    self._state = QPState.NORMAL
                elif first != _CR and byte in _HEX_DIGITS:
                    self._output.append(int(bytes((first, byte)), 16))
                    self._state = QPState.NORMAL
                else:
                    self._malformed(first, byte)

    def finish(self) -> bytes:
        """Flush an escape cut off by end of input and return all decoded bytes."""
        if self._state is QPState.SAW_EQUALS:
            self._malformed()
        elif self._state is QPState.SAW_EQUALS_HEXDIGIT1:
            self._malformed(self._pending)

        if self.malformed_escapes:
            logger.debug("quoted_printable_malformed_escapes", count=self.malformed_escapes)
        return bytes(self._output)


def decode_quoted_printable(data: bytes) -> bytes:
    """Decode a complete quoted-printable payload."""
    decoder = QuotedPrintableDecoder()
    decoder.feed(data)
    return decoder.finish()


def decode_body(
    stream: BinaryIO, transfer_encoding: Optional[str], chunk_size: Optional[int] = None
) -> bytes:
    """
    Decode a body stream according to its Content-Transfer-Encoding.

    Args:
        stream: Readable binary stream (not closed by this function)
        transfer_encoding: Encoding token, case-insensitive; None means identity
        chunk_size: Read size for streaming decoders (defaults to settings)

    Returns:
        Decoded body bytes. Unknown encodings are passed through unchanged.

    Raises:
        DecodingError: If a base64 payload is malformed or reading the stream fails
    """
    encoding = (transfer_encoding or "").strip().lower()
    chunk_size = chunk_size or settings.qp_read_chunk_size

    try:
        if encoding == ENCODING_BASE64:
            return decode_base64(stream.read())

        if encoding == ENCODING_QUOTED_PRINTABLE:
            decoder = QuotedPrintableDecoder()
            for chunk in iter(lambda: stream.read(chunk_size), b""):
                decoder.feed(chunk)
            return decoder.finish()

        if encoding not in IDENTITY_ENCODINGS:
            logger.debug("unknown_transfer_encoding_passthrough", transfer_encoding=encoding)
        return stream.read()

    except OSError as e:
        raise DecodingError(f"failed to read body stream: {e}", encoding or None) from e
