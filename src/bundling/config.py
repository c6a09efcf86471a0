from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class BundlingPolicy:
    """
    Switches between the two slip-detection / quantity variants of the splitter.

    - use_generic_slip_keyword: a page mentioning "packing slip" counts as a
      slip page even without a continuation marker.
    - use_occurrence_quantities: estimate units per SKU occurrence (Qty fields,
      repeats, standalone counts) instead of counting each SKU once per page.

    MARKERS_ONLY is the default.
    """

    use_generic_slip_keyword: bool = False
    use_occurrence_quantities: bool = False

    MARKERS_ONLY: ClassVar["BundlingPolicy"]
    PACKING_SLIP_AWARE: ClassVar["BundlingPolicy"]

    def __post_init__(self) -> None:
        if not isinstance(self.use_generic_slip_keyword, bool):
            raise TypeError("use_generic_slip_keyword must be a bool")
        if not isinstance(self.use_occurrence_quantities, bool):
            raise TypeError("use_occurrence_quantities must be a bool")

    @property
    def name(self) -> str:
        if self == BundlingPolicy.MARKERS_ONLY:
            return "markers_only"
        if self == BundlingPolicy.PACKING_SLIP_AWARE:
            return "packing_slip_aware"
        return "custom"

    def to_dict(self) -> dict[str, bool]:
        return {
            "use_generic_slip_keyword": self.use_generic_slip_keyword,
            "use_occurrence_quantities": self.use_occurrence_quantities,
        }


BundlingPolicy.MARKERS_ONLY = BundlingPolicy()
BundlingPolicy.PACKING_SLIP_AWARE = BundlingPolicy(use_generic_slip_keyword=True, use_occurrence_quantities=True)
