"""
Exception types raised by mime_utility.

Only body decoding surfaces errors to callers. Header, parameter and MIME type
helpers signal absence with None/False and recover from malformed input locally.
"""

from typing import Optional


class MimeUtilityError(Exception):
    """Base class for all mime_utility errors."""


class DecodingError(MimeUtilityError, ValueError):
    """
    A body byte stream could not be interpreted under its transfer encoding.

    Raised for malformed base64 payloads and for I/O failures of the
    underlying stream. Callers are expected to fall back to the raw content.
    """

    def __init__(self, message: str, transfer_encoding: Optional[str] = None):
        super().__init__(message)
        self.transfer_encoding = transfer_encoding
