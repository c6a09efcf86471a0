from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RoutingConfig:
    """
    A SKU whose global total reaches `min_units_for_dedicated` gets its own output group.
    """

    min_units_for_dedicated: int = 3

    def __post_init__(self) -> None:
        if isinstance(self.min_units_for_dedicated, bool) or not isinstance(self.min_units_for_dedicated, int):
            raise TypeError("min_units_for_dedicated must be an int")
        if self.min_units_for_dedicated < 1:
            raise ValueError("min_units_for_dedicated must be >= 1")

    def to_dict(self) -> dict[str, int]:
        return {"min_units_for_dedicated": self.min_units_for_dedicated}
