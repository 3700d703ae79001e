# MIME parsing module

from .eml_parser import parse_eml_bytes, parse_eml_file, part_from_message
from .mime_types import mime_type_matches
from .mime_utils import (
    collect_parts,
    decode_text,
    find_first_part_by_mime_type,
    find_part_by_content_id,
    get_mime_type,
    get_text_from_part,
    is_attachment,
    is_viewable,
    materialize_text_body,
    walk_parts,
)
from .transfer_encoding import (
    QuotedPrintableDecoder,
    decode_base64,
    decode_body,
    decode_quoted_printable,
)

__all__ = [
    "parse_eml_bytes",
    "parse_eml_file",
    "part_from_message",
    "mime_type_matches",
    "walk_parts",
    "get_mime_type",
    "find_part_by_content_id",
    "find_first_part_by_mime_type",
    "decode_text",
    "get_text_from_part",
    "materialize_text_body",
    "is_attachment",
    "is_viewable",
    "collect_parts",
    "decode_body",
    "decode_base64",
    "decode_quoted_printable",
    "QuotedPrintableDecoder",
]
