"""
Header value codec: RFC 2822 folding and RFC 2047 encoded words.

Every transform returns its input object unchanged when there is nothing to
do, so callers can compare with ``is`` to skip work on plain ASCII headers.
"""

import base64
import binascii
import codecs
import re
from typing import Optional

import structlog

from ..config import settings

logger = structlog.get_logger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_ENCODED_WORD = re.compile(r"=\?([^?\s]+)\?([bBqQ])\?([^?\s]*)\?=")

LINEAR_WHITESPACE = " \t\r\n"
FOLDING_WHITESPACE = " \t"

ENCODED_WORD_MAX_LENGTH = 75  # RFC 2047 section 2
ENCODE_CHARSET = "UTF-8"
_ENCODED_WORD_PREFIX = f"=?{ENCODE_CHARSET}?B?"
_ENCODED_WORD_SUFFIX = "?="
_CONTINUATION = "\r\n "


# ============================================================================
# UNFOLD / DECODE
# ============================================================================

def unfold(s: Optional[str]) -> Optional[str]:
    """
    Remove header folding so the value becomes a single logical line.

    Line breaks are removed and the whitespace that followed them is kept
    (RFC 2822 section 2.2.3). Stray CR or LF characters are removed as well.

    Args:
        s: Raw header value

    Returns:
        Unfolded value; the same object if it contains no line break
    """
    if s is None:
        return None
    if "\r" not in s and "\n" not in s:
        return s
    return _LINE_BREAK.sub("", s)


def _decode_encoded_word(charset: str, encoding: str, text: str) -> Optional[str]:
    # RFC 2231 section 5: charset may carry a language suffix ("utf-8*en")
    charset = charset.split("*", 1)[0]
    try:
        codec_name = codecs.lookup(charset).name
    except LookupError:
        logger.debug("encoded_word_unsupported_charset", charset=charset)
        return None

    try:
        if encoding.upper() == "B":
            data = base64.b64decode(text + "=" * (-len(text) % 4))
        else:
            data = binascii.a2b_qp(text, header=True)
        return data.decode(codec_name, errors="replace")
    except (binascii.Error, ValueError, LookupError) as e:
        logger.debug("encoded_word_undecodable", charset=charset, encoding=encoding, error=str(e))
        return None


def decode(s: Optional[str]) -> Optional[str]:
    """
    Decode RFC 2047 encoded words in a header value.

    Whitespace between two adjacent encoded words is dropped; any other text
    between words passes through verbatim. A word with an unsupported charset
    or broken encoded text is left as it is.

    Args:
        s: Header value, possibly containing ``=?charset?B|Q?text?=`` words

    Returns:
        Decoded value; the same object if it contains no encoded word

    Examples:
        >>> decode("=?UTF-8?B?4oaR4oaT4oaQ4oaS?=")
        '↑↓←→'
    """
    if s is None:
        return None
    if "=?" not in s:
        return s

    chunks = []
    position = 0
    previous_was_word = False
    found = False

    for match in _ENCODED_WORD.finditer(s):
        found = True
        gap = s[position:match.start()]
        decoded = _decode_encoded_word(*match.groups())

        if decoded is None:
            chunks.append(gap)
            chunks.append(match.group(0))
            previous_was_word = False
        else:
            if not (previous_was_word and gap.strip(LINEAR_WHITESPACE) == ""):
                chunks.append(gap)
            chunks.append(decoded)
            previous_was_word = True
        position = match.end()

    if not found:
        return s

    chunks.append(s[position:])
    return "".join(chunks)


def unfold_and_decode(s: Optional[str]) -> Optional[str]:
    """Unfold then decode; returns ``s`` itself when neither step applies."""
    return decode(unfold(s))


# ============================================================================
# FOLD / ENCODE
# ============================================================================

def _index_of_break(s: str, start: int) -> int:
    # A break point is the last whitespace character before non-whitespace text
    for index in range(start, len(s) - 1):
        if s[index] in FOLDING_WHITESPACE and s[index + 1] not in FOLDING_WHITESPACE:
            return index
    return len(s)


def fold(s: Optional[str], used_characters: int = 0, width: Optional[int] = None) -> Optional[str]:
    """
    Fold a long header value at whitespace boundaries.

    A CRLF is inserted before the last whitespace character of a run that is
    followed by text, so every continuation line starts with whitespace and
    carries text. Lines stay within ``width`` unless a single unbroken run of
    text is longer than that.

    Args:
        s: Unfolded header value
        used_characters: Characters already used on the first line (e.g. "Subject: ")
        width: Maximum line length (defaults to settings.header_fold_width)

    Returns:
        Folded value; the same object if it already fits
    """
    if s is None:
        return None
    if width is None:
        width = settings.header_fold_width
    length = len(s)
    if used_characters + length <= width:
        return s

    result = []
    line_start = -used_characters
    whitespace = _index_of_break(s, 0)

    while True:
        if whitespace == length:
            result.append(s[max(0, line_start):])
            return "".join(result)

        next_whitespace = _index_of_break(s, whitespace + 1)
        if next_whitespace - line_start > width and whitespace > line_start:
            result.append(s[max(0, line_start):whitespace])
            result.append("\r\n")
            line_start = whitespace
        whitespace = next_whitespace


def _needs_encoding(s: str) -> bool:
    if _ENCODED_WORD.search(s):
        return True
    return any((ord(ch) < 32 and ch != "\t") or ord(ch) >= 127 for ch in s)


def _max_word_bytes(line_budget: int) -> int:
    text_length = min(line_budget, ENCODED_WORD_MAX_LENGTH) - len(_ENCODED_WORD_PREFIX) - len(
        _ENCODED_WORD_SUFFIX
    )
    return max(text_length, 0) // 4 * 3


def _encoded_word(data: bytes) -> str:
    return _ENCODED_WORD_PREFIX + base64.b64encode(data).decode("ascii") + _ENCODED_WORD_SUFFIX


def fold_and_encode2(
    s: Optional[str], used_characters: int = 0, width: Optional[int] = None
) -> Optional[str]:
    """
    Encode a header value as folded UTF-8 base64 encoded words, if needed.

    Text is split on character boundaries so that every word is valid on its
    own and every physical line fits ``width``. Words are joined with CRLF
    followed by a single space.

    Args:
        s: Header value
        used_characters: Characters already used on the first line
        width: Maximum line length (defaults to settings.header_fold_width)

    Returns:
        Encoded value; the same object if it is plain printable ASCII
    """
    if s is None:
        return None
    if not _needs_encoding(s):
        return s
    if width is None:
        width = settings.header_fold_width

    words = []
    limit = _max_word_bytes(width - used_characters)
    current = b""

    for ch in s:
        data = ch.encode("utf-8", errors="replace")
        if len(current) + len(data) > limit:
            # Nothing fits on the first line: start on a continuation line
            words.append(_encoded_word(current) if current else "")
            current = b""
            limit = max(_max_word_bytes(width - 1), 4)
        current += data

    words.append(_encoded_word(current))
    return _CONTINUATION.join(words)


def encode(s: Optional[str]) -> Optional[str]:
    """Encode a header value starting at the beginning of a line."""
    return fold_and_encode2(s, 0)


def fold_and_encode(
    s: Optional[str], used_characters: int = 0, width: Optional[int] = None
) -> Optional[str]:
    """Encode ``s`` if it needs encoding, otherwise just fold it."""
    if s is None:
        return None
    if _needs_encoding(s):
        return fold_and_encode2(s, used_characters, width)
    return fold(s, used_characters, width)
