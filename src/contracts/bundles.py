from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Bundle:
    """
    One shipping-label page plus the packing-slip pages that belong to it.

    Only finalized bundles are represented; `skus` and `sku_counts` are
    already canonical.
    """

    document_id: str
    label_page_index: int  # 0-indexed
    slip_page_indices: tuple[int, ...]  # scan order
    skus: tuple[str, ...]  # canonical tokens, first-seen order
    sku_counts: dict[str, int] = field(default_factory=dict)  # canonical token -> units in this bundle
    order_id: str | None = None

    @property
    def page_indices(self) -> tuple[int, ...]:
        return (self.label_page_index, *self.slip_page_indices)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Bundle":
        return Bundle(
            document_id=str(d["document_id"]),
            label_page_index=int(d["label_page_index"]),
            slip_page_indices=tuple(int(i) for i in d.get("slip_page_indices", [])),
            skus=tuple(str(s) for s in d.get("skus", [])),
            sku_counts={str(k): int(v) for k, v in (d.get("sku_counts") or {}).items()},
            order_id=(None if d.get("order_id") is None else str(d["order_id"])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "label_page_index": self.label_page_index,
            "slip_page_indices": list(self.slip_page_indices),
            "skus": list(self.skus),
            "sku_counts": dict(self.sku_counts),
            "order_id": self.order_id,
        }


@dataclass(frozen=True, slots=True)
class DedicatedGroup:
    sku: str
    total_units: int  # published count: bundles, or summed occurrence quantities
    bundles: tuple[Bundle, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "sku": self.sku,
            "total_units": self.total_units,
            "bundles": [b.to_dict() for b in self.bundles],
        }


@dataclass(frozen=True, slots=True)
class MixedSectionGroup:
    section: str
    bundles: tuple[Bundle, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"section": self.section, "bundles": [b.to_dict() for b in self.bundles]}


@dataclass(frozen=True, slots=True)
class RoutingResult:
    global_totals: dict[str, int]
    dedicated: tuple[DedicatedGroup, ...]
    mixed: tuple[MixedSectionGroup, ...]

    @property
    def bundle_count(self) -> int:
        return sum(len(g.bundles) for g in self.dedicated) + sum(len(g.bundles) for g in self.mixed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "global_totals": dict(self.global_totals),
            "dedicated": [g.to_dict() for g in self.dedicated],
            "mixed": [g.to_dict() for g in self.mixed],
        }
