from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .canonicalize import DEFAULT_CANONICALIZER, SkuCanonicalizer
from .corrections import DEFAULT_CORRECTIONS, TokenCorrection, apply_corrections
from .patterns import (
    END_MARKER,
    END_MARKER_LINE,
    ORDER_ID,
    QTY_BEFORE_PRICE,
    QTY_INLINE,
    SKU_ANY,
    STANDALONE_INT,
)
from .text_normalize import normalize_for_scan
from .token_normalize import normalize_token

logger = logging.getLogger(__name__)

_MIN_STANDALONE_QTY = 2
_MAX_STANDALONE_QTY = 999


def find_order_id(raw_text: str | None) -> str | None:
    if not raw_text:
        return None
    m = ORDER_ID.search(raw_text)
    return m.group(1) if m else None


def estimate_block_quantity(block: str, matched: str | None = None) -> int:
    """
    Estimate how many units one SKU occurrence stands for.

    `block` starts at the SKU match and ends before the next match or the
    first end marker. Rules, first hit wins:
      1. inline "Qty: N"
      2. "N $12.99" (quantity printed before the unit price)
         (a match on rule 1 or 2 is final; 0 is read as 1)
      3. the matched SKU text repeated N >= 2 times in the block
      4. a standalone integer line between 2 and 999
      5. 1
    """

    m = QTY_INLINE.search(block) or QTY_BEFORE_PRICE.search(block)
    if m is not None:
        return max(1, int(m.group(1)))

    if matched:
        repeats = len(re.findall(re.escape(matched), block, flags=re.IGNORECASE))
        if repeats >= 2:
            return repeats

    for line in block.splitlines():
        stripped = line.strip()
        if END_MARKER_LINE.match(stripped):
            break
        if "/" in stripped or "sku" in stripped.lower():
            continue
        m = STANDALONE_INT.match(stripped)
        if m is None:
            continue
        n = int(m.group(1))
        if _MIN_STANDALONE_QTY <= n <= _MAX_STANDALONE_QTY:
            return n

    return 1


def _block_end(text: str, match_end: int, next_start: int | None) -> int:
    end = len(text) if next_start is None else next_start
    marker = END_MARKER.search(text, match_end)
    if marker is not None and marker.start() < end:
        end = marker.start()
    return end


@dataclass(frozen=True, slots=True)
class SkuExtractor:
    """
    Page-level SKU scanner.

    Both entry points accept raw or already scan-normalized page text
    (`normalize_for_scan` is idempotent). Correction rules run on the raw token map before canonicalization.
    """

    canonicalizer: SkuCanonicalizer = DEFAULT_CANONICALIZER
    corrections: tuple[TokenCorrection, ...] = DEFAULT_CORRECTIONS

    def __post_init__(self) -> None:
        if not isinstance(self.canonicalizer, SkuCanonicalizer):
            raise TypeError("canonicalizer must be a SkuCanonicalizer")
        if not isinstance(self.corrections, tuple):
            raise TypeError("corrections must be a tuple of TokenCorrection")

    def _scan(self, text: str | None) -> tuple[str, list[tuple[re.Match[str], str]]]:
        t = normalize_for_scan(text)
        found: list[tuple[re.Match[str], str]] = []
        for m in SKU_ANY.finditer(t):
            token = normalize_token(m.group(0))
            if not token:
                continue
            logger.debug("sku match %r -> %s", m.group(0), token)
            found.append((m, token))
        return t, found

    def extract_quantities(self, text: str | None) -> dict[str, int]:
        t, found = self._scan(text)
        totals: dict[str, int] = {}
        for i, (m, token) in enumerate(found):
            next_start = found[i + 1][0].start() if i + 1 < len(found) else None
            block = t[m.start() : _block_end(t, m.end(), next_start)]
            qty = estimate_block_quantity(block, m.group(0))
            totals[token] = totals.get(token, 0) + qty

        totals = apply_corrections(t, totals, self.corrections)
        out = self.canonicalizer.canonicalize_totals(totals)
        logger.debug("page quantities: %s", out)
        return out

    def extract_tokens(self, text: str | None) -> list[str]:
        t, found = self._scan(text)
        totals: dict[str, int] = {}
        for _, token in found:
            totals.setdefault(token, 1)

        totals = apply_corrections(t, totals, self.corrections)
        out = self.canonicalizer.canonicalize_tokens(totals)
        logger.debug("page tokens: %s", out)
        return out


DEFAULT_EXTRACTOR = SkuExtractor()
