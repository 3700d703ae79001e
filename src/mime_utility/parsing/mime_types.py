"""
MIME type matching with ``*`` wildcards.
"""

from typing import Optional, Sequence, Tuple, Union


def _split_mime_type(value: Optional[str]) -> Optional[Tuple[str, str]]:
    if not value or "/" not in value:
        return None
    major, minor = value.split("/", 1)
    return major.strip().lower(), minor.strip().lower()


def _half_matches(value: str, pattern: str) -> bool:
    return value == "*" or pattern == "*" or value == pattern


def _matches_one(mime_type: Tuple[str, str], pattern: Optional[str]) -> bool:
    split_pattern = _split_mime_type(pattern)
    if split_pattern is None:
        return False
    return _half_matches(mime_type[0], split_pattern[0]) and _half_matches(
        mime_type[1], split_pattern[1]
    )


def mime_type_matches(
    mime_type: Optional[str], patterns: Union[str, Sequence[str], None]
) -> bool:
    """
    Check whether a MIME type matches a pattern or any of a list of patterns.

    Comparison is case-insensitive and ``*`` on either side matches any major
    or minor type. Values without a ``/`` never match.

    Args:
        mime_type: MIME type, e.g. "text/plain"
        patterns: A single pattern ("text/*") or an ordered sequence of patterns

    Returns:
        True if any pattern matches, False otherwise (including an empty sequence)

    Examples:
        >>> mime_type_matches("text/plain", "*/plain")
        True
        >>> mime_type_matches("foo/bar", ["text/plain", "match/this"])
        False
    """
    split_type = _split_mime_type(mime_type)
    if split_type is None or patterns is None:
        return False
    if isinstance(patterns, str):
        return _matches_one(split_type, patterns)
    return any(_matches_one(split_type, pattern) for pattern in patterns)
