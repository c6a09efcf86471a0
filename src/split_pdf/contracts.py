from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from bundling.config import BundlingPolicy
from contracts.bundles import Bundle, RoutingResult
from routing.config import RoutingConfig


class PdfEngineName(str, Enum):
    """
    PDF backend identifiers.
    """

    PYPDFIUM2 = "pypdfium2"


class OutputKind(str, Enum):
    DEDICATED = "dedicated"
    MIXED = "mixed"


@dataclass(frozen=True, slots=True)
class SplitError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class DocumentReport:
    # Deterministic identifier, stable for identical (source_pdf_relpath + bundling policy + backend identifier)
    doc_id: str
    ok: bool
    source_pdf_relpath: str
    page_count: int
    bundles: list[Bundle]
    dropped_page_indices: list[int]  # 0-indexed orphan slip pages
    errors: list[SplitError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "doc_id": self.doc_id,
            "ok": self.ok,
            "source_pdf_relpath": self.source_pdf_relpath,
            "page_count": self.page_count,
            "bundles": [b.to_dict() for b in self.bundles],
            "dropped_page_indices": list(self.dropped_page_indices),
            "errors": [asdict(e) for e in self.errors],
            "meta": self.meta,
        }


@dataclass(frozen=True, slots=True)
class OutputFile:
    relpath: str  # out_root-relative, posix separators
    kind: OutputKind
    label: str  # SKU for dedicated outputs, section for mixed ones
    units: int | None  # dedicated only: global total for the SKU
    bundle_count: int
    page_count: int  # merged order pages, summary page excluded

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SplitRunResult:
    ok: bool
    engine: PdfEngineName
    documents: list[DocumentReport]
    routing: RoutingResult | None
    outputs: list[OutputFile]
    errors: list[SplitError]
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "engine": self.engine.value,
            "documents": [d.to_dict() for d in self.documents],
            "routing": None if self.routing is None else self.routing.to_dict(),
            "outputs": [o.to_dict() for o in self.outputs],
            "errors": [asdict(e) for e in self.errors],
            "meta": self.meta,
        }


@dataclass(frozen=True, slots=True)
class SplitConfig:
    """
    Order-splitting run configuration.

    Data access rules:
    - `data_root` and `out_root` must be passed explicitly
    - no environment variable reads in this module
    - no implicit output directories
    """

    data_root: Path
    out_root: Path
    engine: PdfEngineName = PdfEngineName.PYPDFIUM2
    policy: BundlingPolicy = BundlingPolicy.MARKERS_ONLY
    routing: RoutingConfig = field(default_factory=RoutingConfig)
    sections_csv: Path | None = None  # None => packaged default table
    write_outputs: bool = True  # False => dry run, nothing but the report is written
    summary_pages: bool = True
    compute_source_sha256: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.data_root, Path) or not isinstance(self.out_root, Path):
            raise TypeError("data_root and out_root must be pathlib.Path")
        if self.sections_csv is not None and not isinstance(self.sections_csv, Path):
            raise TypeError("sections_csv must be pathlib.Path or None")
        if not isinstance(self.policy, BundlingPolicy):
            raise TypeError("policy must be a BundlingPolicy")
        if not isinstance(self.routing, RoutingConfig):
            raise TypeError("routing must be a RoutingConfig")
