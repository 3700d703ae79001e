"""
MIME text utilities for an email client.

Header folding and RFC 2047 encoded words, header parameters, MIME type
matching, transfer-encoding decoding, and part tree navigation.
"""

from .errors import DecodingError, MimeUtilityError
from .headers import (
    decode,
    encode,
    fold,
    fold_and_encode,
    fold_and_encode2,
    get_header_parameter,
    unfold,
    unfold_and_decode,
)
from .parsing import (
    collect_parts,
    decode_body,
    find_first_part_by_mime_type,
    find_part_by_content_id,
    get_text_from_part,
    mime_type_matches,
)

__version__ = "1.0.0"

__all__ = [
    "DecodingError",
    "MimeUtilityError",
    "unfold",
    "decode",
    "unfold_and_decode",
    "fold",
    "encode",
    "fold_and_encode",
    "fold_and_encode2",
    "get_header_parameter",
    "mime_type_matches",
    "decode_body",
    "find_part_by_content_id",
    "find_first_part_by_mime_type",
    "get_text_from_part",
    "collect_parts",
]
