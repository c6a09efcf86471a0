from .config import RoutingConfig
from .engine import RoutingEngine, aggregate_global_totals
from .sections import (
    DEFAULT_SECTIONS_CSV,
    SECTION_MULTI,
    SECTION_UNKNOWN,
    SectionResolver,
    SectionTable,
)

__all__ = [
    "DEFAULT_SECTIONS_CSV",
    "SECTION_MULTI",
    "SECTION_UNKNOWN",
    "RoutingConfig",
    "RoutingEngine",
    "SectionResolver",
    "SectionTable",
    "aggregate_global_totals",
]
