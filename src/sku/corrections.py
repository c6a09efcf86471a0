from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from .canonicalize import token_base
from .token_normalize import normalize_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TokenCorrection:
    """
    A known mis-scan that generic normalization cannot repair.

    When `trigger` is found in the scan text, the page's quantity map is
    rewritten: every token the rule absorbs is removed and its units are
    folded into the normalized `target_raw` token (at least 1 unit).

    A token is absorbed if its base, with trailing hyphens dropped, is one of
    `absorbed_bases`, or if it contains one of `absorbed_fragments`.
    """

    name: str
    trigger: re.Pattern[str]
    target_raw: str
    absorbed_bases: tuple[str, ...] = ()
    absorbed_fragments: tuple[str, ...] = ()

    @property
    def target(self) -> str:
        return normalize_token(self.target_raw) or self.target_raw

    def triggered_by(self, scan_text: str) -> bool:
        return self.trigger.search(scan_text) is not None

    def absorbs(self, token: str) -> bool:
        upper = token.upper()
        if upper == self.target:
            return False
        base = token_base(upper)
        if base is not None and base.rstrip("-") in self.absorbed_bases:
            return True
        return any(fragment in upper for fragment in self.absorbed_fragments)

    def apply(self, scan_text: str, totals: Mapping[str, int]) -> dict[str, int]:
        out = dict(totals)
        if not self.triggered_by(scan_text):
            return out

        target = self.target
        folded = 0
        for tok in [t for t in out if self.absorbs(t)]:
            folded += max(0, out.pop(tok))

        out[target] = max(1, out.get(target, 0) + folded)
        logger.debug("correction %s applied: %s units -> %s", self.name, out[target], target)
        return out


SKU1847_WRAPPED_P_OR_NEW = TokenCorrection(
    name="sku1847_wrapped_p_or_new",
    # "SKU1847-\nP.OR NEW" as exported; the scanner only sees "SKU1847".
    trigger=re.compile(r"SKU1847-\s*P\.OR[_\s]?NEW", re.IGNORECASE),
    target_raw="SKU1847-P.OR",
    absorbed_bases=("SKU1847",),
    absorbed_fragments=("SKU1847-P.OR_NEW", "SKU1847-P.ORNEW", "SKU1847-.OR"),
)

DEFAULT_CORRECTIONS: tuple[TokenCorrection, ...] = (SKU1847_WRAPPED_P_OR_NEW,)


def apply_corrections(
    scan_text: str, totals: Mapping[str, int], corrections: Iterable[TokenCorrection]
) -> dict[str, int]:
    out = dict(totals)
    for correction in corrections:
        out = correction.apply(scan_text, out)
    return out
