from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sku.text_normalize import normalize_for_scan


@dataclass(frozen=True, slots=True)
class PageText:
    index: int  # 0-indexed position in the source document
    raw_text: str  # markers and order ids are read from this
    normalized_text: str  # normalize_for_scan(raw_text); SKU scanning input

    @staticmethod
    def from_raw(index: int, raw_text: str | None) -> "PageText":
        raw = raw_text or ""
        return PageText(index=int(index), raw_text=raw, normalized_text=normalize_for_scan(raw))

    @property
    def is_blank(self) -> bool:
        return not self.normalized_text.strip()

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "raw_text": self.raw_text, "normalized_text": self.normalized_text}


@dataclass(frozen=True, slots=True)
class PageClassification:
    has_continued: bool
    has_not_continued: bool
    has_packing_slip: bool
    is_blank: bool
    is_label: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_continued": self.has_continued,
            "has_not_continued": self.has_not_continued,
            "has_packing_slip": self.has_packing_slip,
            "is_blank": self.is_blank,
            "is_label": self.is_label,
        }
