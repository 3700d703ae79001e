"""
Email parser for .eml files (RFC5322/MIME format).

This module parses raw messages using Python's standard library email module
and converts them into MimePart trees. Header values are kept raw (folded,
encoded) and leaf payloads are kept transfer-encoded, so all decoding goes
through the headers and transfer_encoding modules.
"""

from email import message_from_bytes
from email.message import Message

import structlog

from ..models.mime_part import MimePart, Multipart, PartKind, StreamBody

logger = structlog.get_logger(__name__)


def part_from_message(msg: Message, kind: PartKind = PartKind.MESSAGE) -> MimePart:
    """
    Convert a parsed email.Message (compat32) into a MimePart tree.

    Args:
        msg: Parsed message or sub-part
        kind: Node kind of the resulting part

    Returns:
        MimePart with raw headers and a Multipart or StreamBody body
    """
    headers = [(name, str(value)) for name, value in msg.raw_items()]

    if msg.is_multipart():
        # message/rfc822 payloads are a single nested message
        child_kind = PartKind.MESSAGE if msg.get_content_maintype() == "message" else PartKind.BODY_PART
        children = [part_from_message(child, child_kind) for child in msg.get_payload()]
        body = Multipart(subtype=msg.get_content_subtype(), parts=children)
    else:
        payload = msg.get_payload(decode=False)
        if isinstance(payload, str):
            content = payload.encode("ascii", "surrogateescape")
        else:
            content = payload or b""
        body = StreamBody(content=content)

    return MimePart(kind=kind, headers=headers, body=body)


def parse_eml_bytes(eml_bytes: bytes) -> MimePart:
    """
    Parse .eml bytes into a MimePart tree.

    Args:
        eml_bytes: Raw .eml file bytes

    Returns:
        Root MimePart of kind MESSAGE

    Raises:
        ValueError: If bytes are not valid RFC5322 format
    """
    try:
        msg = message_from_bytes(eml_bytes)
    except Exception as e:
        raise ValueError(f"Failed to parse .eml file: {str(e)}") from e

    if msg.defects:
        logger.debug("eml_parse_defects", defects=[type(d).__name__ for d in msg.defects])
    return part_from_message(msg)


def parse_eml_file(eml_path: str) -> MimePart:
    """
    Parse .eml file into a MimePart tree.

    Args:
        eml_path: Path to .eml file

    Returns:
        Root MimePart of kind MESSAGE

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file is not valid RFC5322 format
    """
    with open(eml_path, "rb") as f:
        eml_bytes = f.read()
    return parse_eml_bytes(eml_bytes)
