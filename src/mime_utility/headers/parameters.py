"""
Header parameter extraction.

Splits structured header values such as
``multipart/mixed; boundary="----E5UGTXUQQJV80DR8SJ88F79BRA4S8K"``
into their primary token and ``;``-delimited ``name=value`` parameters.
"""

from typing import Dict, List, Optional, Tuple


def _split_segments(value: str) -> List[str]:
    """Split on ``;`` outside of double-quoted strings."""
    segments = []
    current = []
    in_quotes = False
    escaped = False

    for ch in value:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\" and in_quotes:
            current.append(ch)
            escaped = True
        elif ch == '"':
            current.append(ch)
            in_quotes = not in_quotes
        elif ch == ";" and not in_quotes:
            segments.append("".join(current))
            current = []
        else:
            current.append(ch)

    segments.append("".join(current))
    return segments


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        inner = value[1:-1]
        if "\\" not in inner:
            return inner
        chars = []
        escaped = False
        for ch in inner:
            if escaped:
                chars.append(ch)
                escaped = False
            elif ch == "\\":
                escaped = True
            else:
                chars.append(ch)
        return "".join(chars)
    return value


def _iter_parameters(header: str):
    for segment in _split_segments(header)[1:]:
        if "=" not in segment:
            continue
        key, value = segment.split("=", 1)
        key = key.strip()
        if key:
            yield key, _unquote(value)


def get_header_parameter(header: Optional[str], name: Optional[str]) -> Optional[str]:
    """
    Get a parameter value from a structured header value.

    Args:
        header: Raw header value, e.g. ``text/plain; charset="utf-8"``
        name: Parameter name (case-insensitive), or None for the primary token

    Returns:
        - None if header is None
        - the primary token (text before the first ``;``, stripped) if name is None
        - the unquoted parameter value if found, otherwise None

    Examples:
        >>> get_header_parameter("header; Param1Name=Param1Value", None)
        'header'
        >>> get_header_parameter('text/plain; CHARSET="utf-8"', "charset")
        'utf-8'
    """
    if header is None:
        return None
    if name is None:
        return header.split(";", 1)[0].strip()

    wanted = name.strip().lower()
    for key, value in _iter_parameters(header):
        if key.lower() == wanted:
            return value
    return None


def parse_header_parameters(header: Optional[str]) -> Tuple[Optional[str], Dict[str, str]]:
    """
    Split a structured header value into its primary token and all parameters.

    Parameter names are lower-cased; the first occurrence of a name wins.

    Args:
        header: Raw header value

    Returns:
        Tuple of (primary token, ordered dict of parameters); (None, {}) for None
    """
    if header is None:
        return None, {}

    params: Dict[str, str] = {}
    for key, value in _iter_parameters(header):
        params.setdefault(key.lower(), value)
    return get_header_parameter(header, None), params
