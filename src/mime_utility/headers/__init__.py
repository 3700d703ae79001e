# Header value handling: folding, RFC 2047 encoded words, parameters

from .codec import (
    decode,
    encode,
    fold,
    fold_and_encode,
    fold_and_encode2,
    unfold,
    unfold_and_decode,
)
from .parameters import get_header_parameter, parse_header_parameters

__all__ = [
    "unfold",
    "decode",
    "unfold_and_decode",
    "fold",
    "encode",
    "fold_and_encode",
    "fold_and_encode2",
    "get_header_parameter",
    "parse_header_parameters",
]
