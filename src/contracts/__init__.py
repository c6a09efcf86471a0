"""
Shared data contracts between the SKU scanner, bundling, routing and PDF stages.

Stage code should consume/produce these contract objects (not ad-hoc dicts).
"""

from .pages import PageClassification, PageText
from .bundles import Bundle, DedicatedGroup, MixedSectionGroup, RoutingResult

__all__ = [
    "PageText",
    "PageClassification",
    "Bundle",
    "DedicatedGroup",
    "MixedSectionGroup",
    "RoutingResult",
]
