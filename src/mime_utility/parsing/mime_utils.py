"""
MIME utility functions for navigating a message's part tree.

This module provides search and classification helpers over MimePart trees:
lookup by Content-ID or MIME type, displayable text extraction, and the
viewable/attachment partition used when rendering a message.
"""

from typing import Iterator, List, Optional, Tuple

import charset_normalizer
import structlog

from ..config import settings
from ..errors import DecodingError
from ..headers.codec import unfold, unfold_and_decode
from ..headers.parameters import get_header_parameter
from ..models.mime_part import DEFAULT_MIME_TYPE, BodyKind, MimePart, TextBody
from .mime_types import mime_type_matches
from .transfer_encoding import decode_body

logger = structlog.get_logger(__name__)

TEXT_MIME_TYPES = ("text/*",)
VIEWABLE_MIME_TYPES = ("text/*", "image/*")
UTF8_COMPATIBLE_CHARSETS = frozenset({"us-ascii", "ascii", "utf-8", "utf8"})


def walk_parts(root: Optional[MimePart], max_depth: Optional[int] = None) -> Iterator[MimePart]:
    """
    Walk a part tree depth-first in pre-order.

    Multipart children are visited in document order. A part reached twice
    (a cycle or a shared subtree) is skipped, and parts nested deeper than
    ``max_depth`` are not descended into.

    Args:
        root: Message or body part (None yields nothing)
        max_depth: Nesting limit (defaults to settings.max_part_depth)

    Yields:
        Individual parts, root first
    """
    if root is None:
        return
    max_depth = settings.max_part_depth if max_depth is None else max_depth

    visited = set()
    stack: List[Tuple[MimePart, int]] = [(root, 0)]

    while stack:
        part, depth = stack.pop()
        if id(part) in visited:
            logger.warning("part_tree_cycle_skipped", depth=depth)
            continue
        visited.add(id(part))
        yield part

        children = part.children
        if not children:
            continue
        if depth >= max_depth:
            logger.warning("part_tree_depth_limit", depth=depth, max_depth=max_depth)
            continue
        for child in reversed(children):
            stack.append((child, depth + 1))


def get_mime_type(part: MimePart) -> str:
    """Lower-cased ``type/subtype`` from Content-Type, ``text/plain`` when absent."""
    content_type = unfold(part.content_type)
    mime_type = get_header_parameter(content_type, None)
    return mime_type.lower() if mime_type else DEFAULT_MIME_TYPE


def get_disposition_type(part: MimePart) -> Optional[str]:
    disposition = get_header_parameter(unfold(part.disposition), None)
    return disposition.lower() if disposition else None


def _normalize_content_id(content_id: str) -> str:
    content_id = content_id.strip()
    if content_id.startswith("<") and content_id.endswith(">"):
        content_id = content_id[1:-1].strip()
    return content_id


def find_part_by_content_id(root: Optional[MimePart], content_id: Optional[str]) -> Optional[MimePart]:
    """
    Find the first part whose Content-ID equals ``content_id``.

    Angle brackets around either value are ignored, so ``cid.1@android.com``
    finds a part stored as ``<cid.1@android.com>``.

    Args:
        root: Message or body part to search
        content_id: Content-ID to look for, with or without brackets

    Returns:
        The matching part, or None
    """
    if content_id is None:
        return None
    wanted = _normalize_content_id(content_id)

    for part in walk_parts(root):
        stored = unfold_and_decode(part.content_id)
        if stored is not None and _normalize_content_id(stored) == wanted:
            return part
    return None


def find_first_part_by_mime_type(root: Optional[MimePart], mime_type: str) -> Optional[MimePart]:
    """
    Find the first part whose MIME type matches ``mime_type`` (wildcards allowed).

    Args:
        root: Message or body part to search
        mime_type: MIME type or pattern, e.g. "text/html" or "image/*"

    Returns:
        The first matching part in document order, or None
    """
    for part in walk_parts(root):
        if mime_type_matches(get_mime_type(part), mime_type):
            return part
    return None


def decode_text(payload: bytes, charset: Optional[str]) -> str:
    """
    Decode body bytes to text handling wrong or unknown charsets.

    Args:
        payload: Transfer-decoded body bytes
        charset: Declared charset (may be None or bogus)

    Returns:
        Decoded string content
    """
    # ASCII is a subset of UTF-8
    if not charset or charset.strip().lower() in UTF8_COMPATIBLE_CHARSETS:
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("utf8_decode_failed", charset=charset)

    # Try declared charset
    else:
        try:
            return payload.decode(charset)
        except (UnicodeDecodeError, LookupError):
            logger.debug("declared_charset_failed", charset=charset)

    # Try charset detection
    detected = charset_normalizer.from_bytes(payload).best()
    if detected:
        return str(detected)

    # Final fallback
    return payload.decode("utf-8", errors="replace")


def get_text_from_part(part: Optional[MimePart]) -> Optional[str]:
    """
    Extract the displayable text of a ``text/*`` part.

    Stream bodies are transfer-decoded per Content-Transfer-Encoding and then
    decoded with the declared charset. Undeclared and us-ascii bodies are
    decoded as UTF-8 first.

    Args:
        part: Part to read

    Returns:
        The text, or None for non-text parts, parts without a leaf body,
        and bodies that cannot be transfer-decoded
    """
    if part is None or part.body is None:
        return None
    if not mime_type_matches(get_mime_type(part), TEXT_MIME_TYPES):
        return None

    body = part.body
    if body.kind == BodyKind.TEXT:
        return body.text
    if body.kind != BodyKind.STREAM:
        return None

    transfer_encoding = get_header_parameter(unfold(part.transfer_encoding), None)
    try:
        payload = decode_body(body.get_input_stream(), transfer_encoding)
    except DecodingError as e:
        logger.warning(
            "text_part_decode_failed",
            transfer_encoding=e.transfer_encoding,
            error=str(e),
        )
        return None

    charset = get_header_parameter(unfold(part.content_type), "charset")
    return decode_text(payload, charset or settings.default_charset)


def materialize_text_body(part: Optional[MimePart]) -> Optional[str]:
    """
    Decode a text part once and replace its body with the resulting TextBody.

    Returns:
        The decoded text, or None if the part has no decodable text
    """
    text = get_text_from_part(part)
    if text is not None and part.body.kind != BodyKind.TEXT:
        part.set_body(TextBody(text=text))
    return text


def is_attachment(part: MimePart) -> bool:
    """
    Determine if a part is explicitly marked as an attachment.

    Args:
        part: Part to check

    Returns:
        True if the Content-Disposition type is ``attachment``
    """
    return get_disposition_type(part) == "attachment"


def is_viewable(part: MimePart) -> bool:
    """Text and image parts that are not marked as attachments."""
    if is_attachment(part):
        return False
    return mime_type_matches(get_mime_type(part), VIEWABLE_MIME_TYPES)


def collect_parts(
    part: Optional[MimePart],
    viewables: Optional[List[MimePart]] = None,
    attachments: Optional[List[MimePart]] = None,
) -> Tuple[List[MimePart], List[MimePart]]:
    """
    Partition the leaf parts of a tree into viewables and attachments.

    Every multipart subtype is descended into the same way; both lists keep
    document order. Results are appended to the given lists, if any.

    Args:
        part: Message or body part to partition
        viewables: List to append viewable parts to
        attachments: List to append attachment parts to

    Returns:
        Tuple of (viewables, attachments)
    """
    viewables = [] if viewables is None else viewables
    attachments = [] if attachments is None else attachments

    for leaf in walk_parts(part):
        if leaf.is_multipart:
            continue
        if is_viewable(leaf):
            viewables.append(leaf)
        else:
            attachments.append(leaf)

    return viewables, attachments
