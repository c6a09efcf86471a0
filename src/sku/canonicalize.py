from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from .patterns import DEFAULT_SUFFIX, SUFFIXES, TOKEN_SHAPE


def token_base(token: str) -> str | None:
    """
    The part of a `BASE.SUFFIX` token before its final suffix, or None if the token has no suffix.
    """

    m = TOKEN_SHAPE.match(token)
    return m.group(1) if m else None


@dataclass(frozen=True, slots=True)
class SkuCanonicalizer:
    """
    Collapse tokens that share a base and differ only by suffix.

    `suffix_priority` is ordered best first. A missing suffix ranks as
    `DEFAULT_SUFFIX`; a suffix outside the list ranks below every listed one.
    """

    suffix_priority: tuple[str, ...] = SUFFIXES

    def __post_init__(self) -> None:
        if not self.suffix_priority:
            raise ValueError("suffix_priority must not be empty")
        if DEFAULT_SUFFIX not in self.suffix_priority:
            raise ValueError(f"suffix_priority must contain the default suffix {DEFAULT_SUFFIX!r}")

    def suffix_rank(self, suffix: str | None) -> int:
        s = (suffix or DEFAULT_SUFFIX).upper()
        try:
            return self.suffix_priority.index(s)
        except ValueError:
            return len(self.suffix_priority)

    def canonicalize_tokens(self, tokens: Iterable[str]) -> list[str]:
        best: dict[str, tuple[str, int]] = {}  # base -> (token, rank); insertion = first-seen order
        others: list[str] = []

        for tok in tokens:
            m = TOKEN_SHAPE.match(tok)
            if m is None:
                if tok not in others:
                    others.append(tok)
                continue
            base, suffix = m.group(1), m.group(2)
            rank = self.suffix_rank(suffix)
            current = best.get(base)
            if current is None or rank < current[1]:
                best[base] = (tok, rank)

        return [tok for tok, _ in best.values()] + others

    def canonicalize_totals(self, totals: Mapping[str, int]) -> dict[str, int]:
        """
        Same collapse as `canonicalize_tokens`, carrying quantities.

        When a strictly better variant shows up, everything accumulated for the
        base so far moves onto it.
        """

        best: dict[str, tuple[str, int]] = {}
        summed: dict[str, int] = {}
        others: dict[str, int] = {}

        for tok, qty in totals.items():
            m = TOKEN_SHAPE.match(tok)
            if m is None:
                others[tok] = others.get(tok, 0) + int(qty)
                continue
            base, suffix = m.group(1), m.group(2)
            rank = self.suffix_rank(suffix)
            current = best.get(base)
            if current is None or rank < current[1]:
                best[base] = (tok, rank)
            summed[base] = summed.get(base, 0) + int(qty)

        out: dict[str, int] = {}
        for base, (tok, _) in best.items():
            out[tok] = out.get(tok, 0) + summed[base]
        for tok, qty in others.items():
            out[tok] = out.get(tok, 0) + qty
        return out


DEFAULT_CANONICALIZER = SkuCanonicalizer()


def canonicalize_tokens(tokens: Iterable[str]) -> list[str]:
    return DEFAULT_CANONICALIZER.canonicalize_tokens(tokens)


def canonicalize_totals(totals: Mapping[str, int]) -> dict[str, int]:
    return DEFAULT_CANONICALIZER.canonicalize_totals(totals)


def suffix_rank(suffix: str | None) -> int:
    return DEFAULT_CANONICALIZER.suffix_rank(suffix)
