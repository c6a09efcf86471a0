from __future__ import annotations

import logging
from typing import Iterable, Sequence

from contracts.bundles import Bundle, DedicatedGroup, MixedSectionGroup, RoutingResult
from sku.canonicalize import DEFAULT_CANONICALIZER, SkuCanonicalizer, token_base

from .config import RoutingConfig
from .sections import SectionResolver, SectionTable

logger = logging.getLogger(__name__)


def aggregate_global_totals(
    bundles: Iterable[Bundle],
    *,
    use_occurrence_quantities: bool = False,
    canonicalizer: SkuCanonicalizer = DEFAULT_CANONICALIZER,
) -> dict[str, int]:
    """
    Run-wide units per canonical SKU.

    By default every bundle contributes one unit per distinct SKU; this is
    the total the dedicated threshold is checked against. With
    `use_occurrence_quantities` the bundle's estimated `sku_counts` are
    summed instead (published counts only, see `RoutingEngine`).
    """

    totals: dict[str, int] = {}
    for b in bundles:
        if use_occurrence_quantities:
            for tok, qty in b.sku_counts.items():
                totals[tok] = totals.get(tok, 0) + int(qty)
        else:
            for tok in dict.fromkeys(b.skus):
                totals[tok] = totals.get(tok, 0) + 1
    return canonicalizer.canonicalize_totals(totals)


class RoutingEngine:
    """
    Split bundles into dedicated per-SKU groups and section-grouped mixed output.

    A bundle is dedicated when exactly one of its SKUs is high volume
    (bundle count >= `config.min_units_for_dedicated`). Everything else is
    mixed, bucketed by the section its SKUs resolve to.

    With `use_occurrence_quantities` a dedicated group publishes the summed
    per-bundle quantities as `total_units`; the threshold is unaffected.
    """

    def __init__(
        self,
        *,
        config: RoutingConfig | None = None,
        sections: SectionTable | None = None,
        canonicalizer: SkuCanonicalizer = DEFAULT_CANONICALIZER,
        use_occurrence_quantities: bool = False,
    ) -> None:
        self.config = config or RoutingConfig()
        self.sections = sections if sections is not None else SectionTable.default()
        self.resolver = SectionResolver(self.sections)
        self.canonicalizer = canonicalizer
        self.use_occurrence_quantities = use_occurrence_quantities

    def _high_volume_skus(self, bundle: Bundle, global_totals: dict[str, int], by_base: dict[str, str]) -> list[str]:
        out: list[str] = []
        for sku in bundle.skus:
            base = token_base(sku)
            tok = by_base.get(base, sku) if base is not None else sku
            if global_totals.get(tok, 0) >= self.config.min_units_for_dedicated and tok not in out:
                out.append(tok)
        return out

    def _order_mixed(self, mixed: dict[str, list[Bundle]]) -> list[str]:
        ordered = [s for s in self.sections.primary_sections if s in mixed]
        ordered += [s for s in mixed if s not in ordered]
        return ordered

    def _published_units(self, sku: str, group: Sequence[Bundle], global_totals: dict[str, int]) -> int:
        if not self.use_occurrence_quantities:
            return global_totals[sku]
        base = token_base(sku)
        units = 0
        for b in group:
            qty = sum(
                q for tok, q in b.sku_counts.items() if tok == sku or (base is not None and token_base(tok) == base)
            )
            # at least one unit per bundle
            units += max(1, qty)
        return units

    def route(self, bundles: Sequence[Bundle]) -> RoutingResult:
        global_totals = aggregate_global_totals(bundles, canonicalizer=self.canonicalizer)
        by_base: dict[str, str] = {}
        for tok in global_totals:
            base = token_base(tok)
            if base is not None:
                by_base[base] = tok

        dedicated: dict[str, list[Bundle]] = {}
        mixed: dict[str, list[Bundle]] = {}
        for b in bundles:
            high = self._high_volume_skus(b, global_totals, by_base)
            if len(high) == 1:
                sku = high[0]
                logger.info(
                    "route %s label=%s -> dedicated %s (%s units)",
                    b.document_id,
                    b.label_page_index,
                    sku,
                    global_totals[sku],
                )
                dedicated.setdefault(sku, []).append(b)
                continue

            section = self.resolver.resolve_section(b.skus)
            logger.info(
                "route %s label=%s -> mixed %s (high-volume skus: %s)",
                b.document_id,
                b.label_page_index,
                section,
                len(high),
            )
            mixed.setdefault(section, []).append(b)

        return RoutingResult(
            global_totals=global_totals,
            dedicated=tuple(
                DedicatedGroup(
                    sku=sku,
                    total_units=self._published_units(sku, group, global_totals),
                    bundles=tuple(group),
                )
                for sku, group in dedicated.items()
            ),
            mixed=tuple(
                MixedSectionGroup(section=s, bundles=tuple(mixed[s])) for s in self._order_mixed(mixed)
            ),
        )
