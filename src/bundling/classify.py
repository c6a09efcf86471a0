from __future__ import annotations

from contracts.pages import PageClassification
from sku.patterns import CONTINUED, NOT_CONTINUED, PACKING_SLIP
from sku.text_normalize import normalize_for_markers

from .config import BundlingPolicy


def classify_page(text: str | None, policy: BundlingPolicy = BundlingPolicy.MARKERS_ONLY) -> PageClassification:
    """
    Marker flags for one page.

    "Not continued on next page" sets only `has_not_continued`; the two
    continuation flags never fire together.
    """

    t = normalize_for_markers(text)
    has_not_continued = NOT_CONTINUED.search(t) is not None
    has_continued = CONTINUED.search(t) is not None
    has_packing_slip = PACKING_SLIP.search(t) is not None

    slip_marker = has_continued or has_not_continued or (policy.use_generic_slip_keyword and has_packing_slip)
    return PageClassification(
        has_continued=has_continued,
        has_not_continued=has_not_continued,
        has_packing_slip=has_packing_slip,
        is_blank=not t,
        is_label=not slip_marker,
    )
