from __future__ import annotations

import re

# Soft hyphen, zero-width space / non-joiner / joiner, byte-order mark.
_INVISIBLE = dict.fromkeys(map(ord, "\u00ad\u200b\u200c\u200d\ufeff"), None)
_DASHES = re.compile("[\u2010\u2011\u2012\u2013\u2014\u2015\u2212\u2043]")
_CONTROL_SPACE = re.compile(r"[\t\f\r]+")
_ANY_SPACE = re.compile(r"\s+")


def normalize_for_scan(text: str | None) -> str:
    """
    Clean extracted page text before SKU pattern scanning.

    Line breaks are preserved: quantity estimation works line by line.
    """

    if text is None:
        return ""
    t = text.translate(_INVISIBLE)
    t = t.replace("\u00a0", " ")
    t = _DASHES.sub("-", t)
    t = _CONTROL_SPACE.sub(" ", t)
    return t


def normalize_for_markers(text: str | None) -> str:
    """
    Whitespace-collapsed, lowercased text used only for continuation-marker detection.
    """

    if text is None:
        return ""
    t = text.replace("\u00a0", " ")
    return _ANY_SPACE.sub(" ", t).strip().lower()
