from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from sku.token_normalize import normalize_token

logger = logging.getLogger(__name__)

SECTION_UNKNOWN = "Section Unknown"
SECTION_MULTI = "Section Multi"

DEFAULT_SECTIONS_CSV = Path(__file__).with_name("data") / "sections.csv"


def _is_header(row: list[str]) -> bool:
    return len(row) >= 2 and row[0].strip().lower() == "sku" and "section" in row[1].strip().lower()


@dataclass(frozen=True, slots=True)
class SectionTable:
    """
    Immutable SKU -> section mapping.

    Keys are normalized tokens (or the raw SKU when it normalizes to blank).
    `primary_sections` fixes the output order of mixed groups.
    """

    section_by_sku: Mapping[str, str] = field(default_factory=dict)
    primary_sections: tuple[str, ...] = ()
    source: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.section_by_sku, MappingProxyType):
            object.__setattr__(self, "section_by_sku", MappingProxyType(dict(self.section_by_sku)))
        if not isinstance(self.primary_sections, tuple):
            object.__setattr__(self, "primary_sections", tuple(self.primary_sections))

    @staticmethod
    def from_rows(rows: Iterable[tuple[str, str]], *, source: str | None = None) -> "SectionTable":
        mapping: dict[str, str] = {}
        primary: list[str] = []
        for raw_sku, raw_section in rows:
            sku = (raw_sku or "").strip()
            section = (raw_section or "").strip()
            if not sku or not section:
                continue
            key = normalize_token(sku) or sku
            mapping[key] = section
            if section not in primary:
                primary.append(section)
        return SectionTable(section_by_sku=mapping, primary_sections=tuple(primary), source=source)

    @staticmethod
    def from_csv(path: Path) -> "SectionTable":
        rows: list[tuple[str, str]] = []
        with path.open("r", encoding="utf-8", newline="") as f:
            for n, row in enumerate(csv.reader(f)):
                if n == 0 and _is_header(row):
                    continue
                if len(row) < 2:
                    continue
                rows.append((row[0], row[1]))
        table = SectionTable.from_rows(rows, source=str(path))
        logger.debug("loaded %s section rows from %s", len(table.section_by_sku), path)
        return table

    @staticmethod
    def default() -> "SectionTable":
        return SectionTable.from_csv(DEFAULT_SECTIONS_CSV)


class SectionResolver:
    def __init__(self, table: SectionTable) -> None:
        self.table = table

    def find_section(self, sku: str | None) -> str | None:
        if sku is None:
            return None
        trimmed = sku.strip()
        if not trimmed:
            return None
        direct = self.table.section_by_sku.get(trimmed)
        if direct is not None:
            return direct
        normalized = normalize_token(trimmed)
        if normalized:
            return self.table.section_by_sku.get(normalized)
        return None

    def resolve_section(self, skus: Iterable[str]) -> str:
        sections: list[str] = []
        for sku in skus:
            s = self.find_section(sku)
            if s is not None and s not in sections:
                sections.append(s)
        if not sections:
            return SECTION_UNKNOWN
        if len(sections) == 1:
            return sections[0]
        return SECTION_MULTI
