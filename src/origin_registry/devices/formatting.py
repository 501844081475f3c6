"""
origin_registry.devices.formatting

Power value formatting for user-facing messages.

Capacity is stored in watts; forms and messages use a configurable display unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PowerUnit = Literal["W", "kW", "MW"]

WATTS_PER_UNIT: dict[str, int] = {"W": 1, "kW": 1_000, "MW": 1_000_000}


@dataclass(frozen=True, slots=True)
class PowerFormatter:
    display_unit: PowerUnit = "kW"

    @property
    def divisor(self) -> int:
        return WATTS_PER_UNIT[self.display_unit]

    def to_display(self, watts: float) -> float:
        return watts / self.divisor

    def format(self, watts: float, include_unit: bool = False) -> str:
        # Thousands separators, at most three decimals, no trailing zeros: 5000000 W -> "5,000".
        text = f"{self.to_display(watts):,.3f}".rstrip("0").rstrip(".")
        if include_unit:
            return f"{text} {self.display_unit}"
        return text


def kw_to_w(kilowatts: float) -> float:
    return kilowatts * WATTS_PER_UNIT["kW"]
