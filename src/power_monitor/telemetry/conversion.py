"""Raw feed units to display units.

Power arrives in MW and is shown as the energy produced over one sampling
tick. The tick length is the feed cadence: changing the cadence means
changing ``TICK_SECONDS`` too.
"""

from __future__ import annotations

TICK_SECONDS = 5
KELVIN_OFFSET = 273.15


def power_kwh_per_tick(power_mw: float) -> float:
    """Energy in kWh produced over one tick at a constant ``power_mw``."""
    return power_mw * 1000 * (TICK_SECONDS / 3600)


def temp_celsius(deci_kelvin: float) -> float:
    return deci_kelvin / 10 - KELVIN_OFFSET
