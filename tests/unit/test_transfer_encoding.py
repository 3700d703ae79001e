"""
Unit tests for Content-Transfer-Encoding decoding (parsing/transfer_encoding.py).

Tests cover:
- base64 with embedded line breaks, and malformed payloads
- quoted-printable escapes, soft line breaks, malformed escape fallback
- Chunked streaming across escape boundaries
- Identity and unknown encodings
- Stream ownership and I/O errors
"""

import io

import pytest

from mime_utility.errors import DecodingError
from mime_utility.parsing.transfer_encoding import (
    QuotedPrintableDecoder,
    decode_base64,
    decode_body,
    decode_quoted_printable,
)


class FailingStream(io.RawIOBase):
    """Stream whose reads always fail."""

    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError("device not ready")


class TestBase64:
    """Tests for base64 decoding."""

    @pytest.mark.unit
    def test_line_breaks_ignored(self):
        """Test base64 line breaks are ignored."""
        assert decode_base64(b"SGVs\r\nbG8s\r\nIHdv\r\ncmxk\r\n") == b"Hello, world"

    @pytest.mark.unit
    def test_empty(self):
        """Test an empty base64 body."""
        assert decode_base64(b"") == b""

    @pytest.mark.unit
    @pytest.mark.parametrize("payload", [b"abc", b"ab!d", b"a==="])
    def test_malformed_raises(self, payload):
        """Test malformed base64 raises DecodingError."""
        with pytest.raises(DecodingError) as exc_info:
            decode_base64(payload)
        assert exc_info.value.transfer_encoding == "base64"

    @pytest.mark.unit
    def test_decoding_error_is_value_error(self):
        """Test DecodingError is a ValueError."""
        with pytest.raises(ValueError):
            decode_base64(b"abc")

    @pytest.mark.unit
    def test_decode_body_token_case_insensitive(self):
        """Test the encoding token ignores case."""
        stream = io.BytesIO(b"Q2Fm6Q==")
        assert decode_body(stream, " BASE64 ") == b"Caf\xe9"


class TestQuotedPrintable:
    """Tests for the quoted-printable state machine."""

    @pytest.mark.unit
    def test_hex_escapes(self):
        """Test quoted-printable hex escapes."""
        assert decode_quoted_printable(b"Caf=C3=A9") == "Café".encode("utf-8")

    @pytest.mark.unit
    def test_lowercase_hex(self):
        """Test lowercase hex digits."""
        assert decode_quoted_printable(b"=c3=a9") == "é".encode("utf-8")

    @pytest.mark.unit
    def test_soft_line_break_crlf(self):
        """Test a CRLF soft line break."""
        assert decode_quoted_printable(b"one=\r\ntwo") == b"onetwo"

    @pytest.mark.unit
    def test_soft_line_break_bare_lf(self):
        """Test a bare LF soft line break."""
        assert decode_quoted_printable(b"one=\ntwo") == b"onetwo"

    @pytest.mark.unit
    def test_hard_line_breaks_kept(self):
        """Test hard line breaks are kept."""
        assert decode_quoted_printable(b"a\r\nb") == b"a\r\nb"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "payload,expected",
        [
            (b"a=ZZb", b"a=ZZb"),
            (b"=4G", b"=4G"),
            (b"==41", b"=A"),
            (b"x=\rA", b"x=\rA"),
            (b"end=", b"end="),
            (b"50%=\r", b"50%=\r"),
            (b"tail=4", b"tail=4"),
        ],
    )
    def test_malformed_escape_emits_literal_equals(self, payload, expected):
        """Test a malformed escape emits a literal equals sign."""
        assert decode_quoted_printable(payload) == expected

    @pytest.mark.unit
    def test_malformed_escapes_counted(self):
        """Test malformed escapes are counted."""
        decoder = QuotedPrintableDecoder()
        decoder.feed(b"a=ZZ b=4G c=41")
        assert decoder.finish() == b"a=ZZ b=4G cA"
        assert decoder.malformed_escapes == 2

    @pytest.mark.unit
    def test_chunked_stream(self):
        """Test an escape split across read chunks."""
        stream = io.BytesIO(b"Caf=C3=A9 =\r\nok")
        assert decode_body(stream, "quoted-printable", chunk_size=1) == "Café ok".encode("utf-8")


class TestDecodeBody:
    """Tests for decode_body() dispatch and stream handling."""

    @pytest.mark.unit
    @pytest.mark.parametrize("encoding", ["7bit", "8bit", "binary", None, "x-uuencode"])
    def test_passthrough(self, encoding):
        """Test identity encodings pass bytes through."""
        data = b"raw \xff bytes =41"
        assert decode_body(io.BytesIO(data), encoding) == data

    @pytest.mark.unit
    def test_stream_not_closed(self):
        """Test the input stream is left open."""
        stream = io.BytesIO(b"abc=41")
        decode_body(stream, "quoted-printable")
        assert not stream.closed

    @pytest.mark.unit
    def test_stream_not_closed_on_failure(self):
        """Test the input stream is left open on failure."""
        stream = io.BytesIO(b"abc")
        with pytest.raises(DecodingError):
            decode_body(stream, "base64")
        assert not stream.closed

    @pytest.mark.unit
    def test_io_error_surfaces_as_decoding_error(self):
        """Test read errors surface as DecodingError."""
        with pytest.raises(DecodingError) as exc_info:
            decode_body(FailingStream(), "base64")
        assert isinstance(exc_info.value.__cause__, OSError)
