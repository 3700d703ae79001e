"""
MIME part tree model - the capability surface the navigation helpers need.

A part is a node with ordered, case-insensitive headers and exactly one body.
Bodies are a tagged union discriminated by ``kind``: decoded text, an ordered
multipart container, or raw (still transfer-encoded) bytes.
"""

import io
from enum import Enum
from typing import Annotated, BinaryIO, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_TRANSFER_ENCODING = "Content-Transfer-Encoding"
HEADER_CONTENT_DISPOSITION = "Content-Disposition"
HEADER_CONTENT_ID = "Content-ID"

DEFAULT_MIME_TYPE = "text/plain"


class PartKind(str, Enum):
    """Which kind of node a part is in the message tree."""

    MESSAGE = "message"
    BODY_PART = "body_part"


class BodyKind(str, Enum):
    """Discriminator for the body variants."""

    TEXT = "text"
    MULTIPART = "multipart"
    STREAM = "stream"


class TextBody(BaseModel):
    """Body holding already-decoded text."""

    kind: Literal["text"] = "text"
    text: str = Field(description="Decoded text content")


class StreamBody(BaseModel):
    """Body holding raw bytes as they appeared on the wire (not yet transfer-decoded)."""

    kind: Literal["stream"] = "stream"
    content: bytes = Field(default=b"", description="Raw, still transfer-encoded bytes")

    def get_input_stream(self) -> BinaryIO:
        """Return a fresh readable stream over the raw content."""
        return io.BytesIO(self.content)


class Multipart(BaseModel):
    """Body holding child parts in document order."""

    kind: Literal["multipart"] = "multipart"
    subtype: str = Field(default="mixed", description="Multipart subtype (mixed, related, ...)")
    parts: List["MimePart"] = Field(default_factory=list, description="Child parts in document order")

    def add_part(self, part: "MimePart") -> None:
        self.parts.append(part)


Body = Annotated[Union[TextBody, Multipart, StreamBody], Field(discriminator="kind")]


class MimePart(BaseModel):
    """
    A message or body part.

    Headers are kept as an ordered list of (name, raw value) pairs; values are
    stored exactly as received (possibly folded, possibly RFC 2047 encoded).
    Lookups are case-insensitive on the name.
    """

    kind: PartKind = Field(default=PartKind.BODY_PART, description="Message or body part")
    headers: List[Tuple[str, str]] = Field(
        default_factory=list, description="Ordered (name, raw value) header pairs"
    )
    body: Optional[Body] = Field(default=None, description="Part body")

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def get_header(self, name: str) -> List[str]:
        """Return all raw values for ``name`` (case-insensitive), in order."""
        key = name.lower()
        return [value for header_name, value in self.headers if header_name.lower() == key]

    def get_first_header(self, name: str) -> Optional[str]:
        values = self.get_header(name)
        return values[0] if values else None

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def remove_header(self, name: str) -> None:
        key = name.lower()
        self.headers = [(n, v) for n, v in self.headers if n.lower() != key]

    def set_header(self, name: str, value: str) -> None:
        """Replace every value of ``name`` with a single value, keeping its position."""
        key = name.lower()
        for index, (header_name, _) in enumerate(self.headers):
            if header_name.lower() == key:
                self.headers[index] = (header_name, value)
                self.headers[index + 1:] = [
                    (n, v) for n, v in self.headers[index + 1:] if n.lower() != key
                ]
                return
        self.headers.append((name, value))

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def set_body(self, body: Optional[Body]) -> None:
        self.body = body

    @property
    def is_multipart(self) -> bool:
        return self.body is not None and self.body.kind == BodyKind.MULTIPART

    @property
    def children(self) -> List["MimePart"]:
        if self.is_multipart:
            return self.body.parts
        return []

    # ------------------------------------------------------------------
    # Raw header shortcuts (no decoding, no parameter parsing)
    # ------------------------------------------------------------------

    @property
    def content_type(self) -> Optional[str]:
        return self.get_first_header(HEADER_CONTENT_TYPE)

    @property
    def content_id(self) -> Optional[str]:
        return self.get_first_header(HEADER_CONTENT_ID)

    @property
    def disposition(self) -> Optional[str]:
        return self.get_first_header(HEADER_CONTENT_DISPOSITION)

    @property
    def transfer_encoding(self) -> Optional[str]:
        return self.get_first_header(HEADER_CONTENT_TRANSFER_ENCODING)


Multipart.model_rebuild()
MimePart.model_rebuild()
