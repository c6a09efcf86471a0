from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from contracts.bundles import Bundle
from contracts.pages import PageText
from sku.canonicalize import SkuCanonicalizer
from sku.extract import DEFAULT_EXTRACTOR, SkuExtractor, find_order_id

from .classify import classify_page
from .config import BundlingPolicy

logger = logging.getLogger(__name__)


class AssemblerState(str, Enum):
    AWAITING_LABEL = "awaiting_label"
    OPEN_BUNDLE = "open_bundle"


@dataclass(slots=True)
class _BundleBuilder:
    label_page_index: int
    slip_page_indices: list[int] = field(default_factory=list)
    skus: list[str] = field(default_factory=list)
    sku_counts: dict[str, int] = field(default_factory=dict)
    order_id: str | None = None

    def add_order_id(self, raw_text: str) -> None:
        if self.order_id is None:
            self.order_id = find_order_id(raw_text)

    def add_tokens(self, tokens: Iterable[str]) -> None:
        for tok in tokens:
            if tok not in self.skus:
                self.skus.append(tok)

    def add_page_counts(self, counts: dict[str, int]) -> None:
        self.add_tokens(counts)
        for tok, qty in counts.items():
            self.sku_counts[tok] = self.sku_counts.get(tok, 0) + int(qty)


class BundleAssembler:
    """
    Streaming label/slip state machine for one document.

    Feed pages in index order, then call `finish()`. A bundle needs a label
    page and at least one slip page; label-only bundles are never emitted.
    Slip pages seen before any label are dropped and reported in
    `dropped_page_indices`.
    """

    def __init__(
        self,
        document_id: str,
        *,
        policy: BundlingPolicy = BundlingPolicy.MARKERS_ONLY,
        extractor: SkuExtractor = DEFAULT_EXTRACTOR,
    ) -> None:
        self.document_id = document_id
        self.policy = policy
        self.extractor = extractor

        self._open: _BundleBuilder | None = None
        self._last_label: PageText | None = None
        self._pending_continuation = False
        self._bundles: list[Bundle] = []
        self._dropped: list[int] = []
        self._finished = False

    @property
    def state(self) -> AssemblerState:
        return AssemblerState.OPEN_BUNDLE if self._open is not None else AssemblerState.AWAITING_LABEL

    @property
    def bundles(self) -> list[Bundle]:
        return list(self._bundles)

    @property
    def dropped_page_indices(self) -> list[int]:
        return list(self._dropped)

    @property
    def canonicalizer(self) -> SkuCanonicalizer:
        return self.extractor.canonicalizer

    def _absorb_label(self, builder: _BundleBuilder, page: PageText) -> None:
        # Occurrence quantities come from slip pages only.
        builder.add_order_id(page.raw_text)
        tokens = self.extractor.extract_tokens(page.normalized_text)
        if self.policy.use_occurrence_quantities:
            builder.add_tokens(tokens)
        else:
            builder.add_page_counts({tok: 1 for tok in tokens})

    def _absorb_slip(self, builder: _BundleBuilder, page: PageText) -> None:
        builder.add_order_id(page.raw_text)
        if self.policy.use_occurrence_quantities:
            builder.add_page_counts(self.extractor.extract_quantities(page.normalized_text))
        else:
            builder.add_page_counts({tok: 1 for tok in self.extractor.extract_tokens(page.normalized_text)})

    def _finalize(self) -> None:
        builder = self._open
        self._open = None
        if builder is None:
            return
        if not builder.slip_page_indices:
            logger.debug("discarding label-only bundle at page %s", builder.label_page_index)
            return

        bundle = Bundle(
            document_id=self.document_id,
            label_page_index=builder.label_page_index,
            slip_page_indices=tuple(builder.slip_page_indices),
            skus=tuple(self.canonicalizer.canonicalize_tokens(builder.skus)),
            sku_counts=self.canonicalizer.canonicalize_totals(builder.sku_counts),
            order_id=builder.order_id,
        )
        logger.debug(
            "bundle complete: label=%s slips=%s order=%s skus=%s",
            bundle.label_page_index,
            list(bundle.slip_page_indices),
            bundle.order_id,
            list(bundle.skus),
        )
        self._bundles.append(bundle)

    def feed(self, page: PageText) -> None:
        if self._finished:
            raise RuntimeError("feed() called after finish()")

        cls = classify_page(page.raw_text, self.policy)
        treat_as_slip = self._pending_continuation or not cls.is_label
        logger.debug(
            "page %s: slip=%s continued=%s not_continued=%s packing_slip=%s blank=%s",
            page.index,
            treat_as_slip,
            cls.has_continued,
            cls.has_not_continued,
            cls.has_packing_slip,
            cls.is_blank,
        )

        if not treat_as_slip:
            self._finalize()
            self._last_label = page
            self._pending_continuation = False
            return

        if self._open is None:
            if self._last_label is None:
                logger.debug("dropping orphan slip page %s", page.index)
                self._dropped.append(page.index)
                self._pending_continuation = cls.has_continued
                return
            self._open = _BundleBuilder(label_page_index=self._last_label.index)
            self._absorb_label(self._open, self._last_label)

        self._open.slip_page_indices.append(page.index)
        self._absorb_slip(self._open, page)

        if cls.has_not_continued:
            self._finalize()
            self._pending_continuation = False
        else:
            self._pending_continuation = cls.has_continued

    def finish(self) -> list[Bundle]:
        if not self._finished:
            self._finalize()
            self._finished = True
        return self.bundles


@dataclass(frozen=True, slots=True)
class AssemblyResult:
    bundles: list[Bundle]
    dropped_page_indices: list[int]


def assemble_bundles(
    document_id: str,
    pages: Iterable[PageText],
    *,
    policy: BundlingPolicy = BundlingPolicy.MARKERS_ONLY,
    extractor: SkuExtractor = DEFAULT_EXTRACTOR,
) -> AssemblyResult:
    assembler = BundleAssembler(document_id, policy=policy, extractor=extractor)
    for page in pages:
        assembler.feed(page)
    bundles = assembler.finish()
    return AssemblyResult(bundles=bundles, dropped_page_indices=assembler.dropped_page_indices)
