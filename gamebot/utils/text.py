"""Display-text cleanup for assistant answers."""

import re

_SOURCE_MARKERS = [
    re.compile(r"\(\s*출처\s*\d*\s*\)"),
    re.compile(r"출처\(\s*\d+\s*\)"),
    re.compile(r"출처\s*\d+"),
    re.compile(r"\[\s*출처\s*\d*\s*\]"),
    re.compile(r"【[^】]*】"),
    re.compile(r"\[\s*\]"),
    re.compile(r"\(\s*\)"),
]
_DOUBLE_SPACE = re.compile(r"[ \t]{2,}")
_ORPHAN_BRACKET_LINE = re.compile(r"^\s*[\[\]()【】]+\s*$")


def unquote_display(text: str) -> str:
    """Strip exactly one layer of matching wrapping quotes."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("\"", "'"):
        return text[1:-1]
    return text


def strip_source_markers(text: str) -> str:
    """Remove citation artifacts like ``(출처 1)`` or ``【3†source】`` from an answer."""
    cleaned = text
    for pattern in _SOURCE_MARKERS:
        cleaned = pattern.sub("", cleaned)
    cleaned = _DOUBLE_SPACE.sub(" ", cleaned)

    lines = [line.rstrip() for line in cleaned.split("\n") if not _ORPHAN_BRACKET_LINE.match(line)]
    return "\n".join(lines).strip()
