"""
Precompiled pattern policy for SKU scanning, order ids and page markers.

Every rule the scanners apply lives here as a named constant so tests can
target each one in isolation. Bump `PATTERNS_VERSION` when a pattern changes
meaning; it is recorded in run metadata.
"""

from __future__ import annotations

import re

PATTERNS_VERSION = "sku_patterns_v2"

# Known suffixes, best first. ORN must be tried before OR wherever they alternate.
SUFFIXES: tuple[str, ...] = ("PF", "RN", "RM", "ORN", "OR")
DEFAULT_SUFFIX = "OR"

# UniqXmas style (SKU-/SLU- prefixed) and prefix style (OR/RN/RM/PF/ORN + digit-led body).
SKU_ANY = re.compile(
    r"\b(?:SKU|SLU)\s*[-:]?\s*[A-Z]*\d{2,}[A-Z0-9.-]*\b"
    r"|\b(?:ORN|OR|RN|RM|PF)\s*[-:]?\s*\d{2,}[A-Z0-9-]*\b",
    re.IGNORECASE,
)

# Token-level shapes, applied to already uppercased, whitespace-free tokens.
SKU_WITH_SUFFIX = re.compile(r"^(SKU.*?)(?:\.(ORN|OR|PF|RN|RM))?$")
PREFIX_BODY = re.compile(
    r"^(ORN|OR|RN|RM|PF)\s*[-:]?\s*([A-Z0-9][A-Z0-9\-/._]*)$",
    re.IGNORECASE,
)
TOKEN_SHAPE = re.compile(r"^(.*)\.([A-Z]+)$")

CUSTOMIZATIONS_WORD = re.compile(r"CUSTOMIZATIONS", re.IGNORECASE)

# Amazon order numbers: 3-7-7 digit groups. Scanned in raw page text.
ORDER_ID = re.compile(r"\b(\d{3}-\d{7}-\d{7})\b")

# Continuation markers, matched against marker-normalized (lowercased) text.
NOT_CONTINUED = re.compile(r"\bnot\s*continued\s*on\s*next\s*page\b", re.IGNORECASE)
CONTINUED = re.compile(r"(?<!not )(?<!not)\bcontinued\s*on\s*next\s*page\b", re.IGNORECASE)
PACKING_SLIP = re.compile(r"\bpacking\s*slip\b", re.IGNORECASE)

# Where a SKU's block of quantity evidence ends.
END_MARKER = re.compile(
    r"grand\s*total|(?:not\s*)?continued\s*on\s*next\s*page",
    re.IGNORECASE,
)
END_MARKER_LINE = re.compile(r"^(?:grand\s*total|not\s*continued|continued)", re.IGNORECASE)

QTY_INLINE = re.compile(r"\bqty\b\s*[:x-]?\s*(\d{1,3})", re.IGNORECASE)
QTY_BEFORE_PRICE = re.compile(r"\b(\d{1,3})\s*\$\s*\d", re.DOTALL)
STANDALONE_INT = re.compile(r"^\s*(\d{1,3})\s*$")
