# Data models for the MIME part tree

from .mime_part import (
    HEADER_CONTENT_DISPOSITION,
    HEADER_CONTENT_ID,
    HEADER_CONTENT_TRANSFER_ENCODING,
    HEADER_CONTENT_TYPE,
    Body,
    BodyKind,
    MimePart,
    Multipart,
    PartKind,
    StreamBody,
    TextBody,
)

__all__ = [
    "Body",
    "BodyKind",
    "MimePart",
    "Multipart",
    "PartKind",
    "StreamBody",
    "TextBody",
    "HEADER_CONTENT_TYPE",
    "HEADER_CONTENT_TRANSFER_ENCODING",
    "HEADER_CONTENT_DISPOSITION",
    "HEADER_CONTENT_ID",
]
