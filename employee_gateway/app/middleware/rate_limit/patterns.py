"""Glob-style request path patterns.

Supported syntax, per ``/``-separated segment:

- ``**`` matches zero or more whole segments
- ``*`` matches any run of characters inside one segment
- ``?`` matches exactly one character inside one segment
- ``{name}`` matches one non-empty segment
"""

import re
from functools import lru_cache
from typing import Tuple

_WILDCARD_CHARS = ("*", "?", "{")


def _translate_segment(segment: str) -> str:
    parts = []
    i = 0
    while i < len(segment):
        ch = segment[i]
        if ch == "*":
            parts.append("[^/]*")
        elif ch == "?":
            parts.append("[^/]")
        elif ch == "{":
            end = segment.find("}", i)
            if end == -1:
                parts.append(re.escape(segment[i:]))
                break
            parts.append("[^/]+")
            i = end
        else:
            parts.append(re.escape(ch))
        i += 1
    return "".join(parts)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a glob path pattern into an anchored regular expression."""
    segments = [s for s in pattern.split("/") if s]
    if not segments:
        return re.compile("/")

    regex = []
    for segment in segments:
        if segment == "**":
            regex.append("(?:/[^/]*)*")
        else:
            regex.append("/" + _translate_segment(segment))
    # A trailing slash on the request path is tolerated
    return re.compile("".join(regex) + "/?")


def match_path(pattern: str, path: str) -> bool:
    """Return True when ``path`` matches the glob ``pattern`` in full."""
    if not isinstance(path, str) or not path.startswith("/"):
        return False
    return compile_pattern(pattern).fullmatch(path) is not None


def specificity(pattern: str) -> Tuple[int, int]:
    """Sort key ranking more specific patterns first.

    Longer literal prefix before the first wildcard wins, then fewer
    wildcards. Callers use a stable sort so ties keep configuration order.
    """
    positions = [pattern.find(c) for c in _WILDCARD_CHARS if c in pattern]
    literal_prefix = min(positions) if positions else len(pattern)
    wildcards = sum(pattern.count(c) for c in _WILDCARD_CHARS)
    return (-literal_prefix, wildcards)
