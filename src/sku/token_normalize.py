from __future__ import annotations

import re

from .patterns import CUSTOMIZATIONS_WORD, DEFAULT_SUFFIX, PREFIX_BODY, SKU_WITH_SUFFIX

_WHITESPACE = re.compile(r"\s+")
_MULTI_HYPHEN = re.compile(r"--+")
_HYPHENS_BEFORE_DOT = re.compile(r"-+\.")
_HYPHENS_AFTER_DOT = re.compile(r"\.-+")
_LEADING_PUNCT = re.compile(r"^[-.]+")
_TRAILING_HYPHENS = re.compile(r"-+$")
_LEADING_NON_ALNUM = re.compile(r"^[^A-Z0-9]+")
_TRAILING_BODY_PUNCT = re.compile(r"[-.]+$")


def strip_customization_artifacts(value: str) -> str:
    """
    Remove the debris Amazon's "Customizations:" block leaves glued to a SKU.
    """

    v = CUSTOMIZATIONS_WORD.sub("", value)
    v = _MULTI_HYPHEN.sub("-", v)
    v = _HYPHENS_BEFORE_DOT.sub(".", v)
    v = _HYPHENS_AFTER_DOT.sub(".", v)
    v = _TRAILING_HYPHENS.sub("", v)
    v = _LEADING_PUNCT.sub("", v)
    return v


def _strip_trailing_dots(token: str) -> str:
    t = token
    while t.endswith(".") and t != ".":
        t = t[:-1]
    return t


def normalize_token(raw: str | None) -> str | None:
    """
    Map one raw scanned substring to the canonical `BASE.SUFFIX` form.

    Examples:
    - "OR-1234"     -> "SKU1234.OR"
    - "PF:7890A"    -> "SKU7890A.PF"
    - "sku-ABC123"  -> "SKU-ABC123.OR"

    Input that matches no rule comes back trimmed, uppercased and
    whitespace-free; callers drop blank results.
    """

    if raw is None:
        return None

    s = _WHITESPACE.sub("", raw.strip().upper())
    if s.startswith("SLU"):
        s = "SKU" + s[3:]
    s = strip_customization_artifacts(s)

    if s.startswith("SKU"):
        s = _strip_trailing_dots(s)
        m = SKU_WITH_SUFFIX.match(s)
        if m is None:  # pragma: no cover - the lazy body always matches
            return s + "." + DEFAULT_SUFFIX
        body, suffix = m.group(1), m.group(2)
        return f"{body}.{suffix or DEFAULT_SUFFIX}"

    m = PREFIX_BODY.match(s)
    if m is not None:
        suffix = m.group(1).upper()
        body = _LEADING_NON_ALNUM.sub("", m.group(2))
        body = strip_customization_artifacts(body)
        body = _TRAILING_BODY_PUNCT.sub("", body)
        if not body:
            return s
        return f"SKU{body}.{suffix}"

    return s
