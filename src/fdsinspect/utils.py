"""Unit conversions and small numeric helpers shared by the model and the checks."""
import math
from typing import Iterable, Optional

ABSOLUTE_ZERO_CELSIUS = -273.15
WATTS_PER_KILOWATT = 1000.0


def kelvin_to_celsius(kelvin: float) -> float:
    """Convert Kelvin to Celsius."""
    return kelvin + ABSOLUTE_ZERO_CELSIUS


def watts_to_kilowatts(watts: float) -> float:
    return watts / WATTS_PER_KILOWATT


def kilowatts_to_watts(kilowatts: float) -> float:
    return kilowatts * WATTS_PER_KILOWATT


def match_recognised(value: float, candidates: Iterable[float], rel_tol: float = 1e-9) -> Optional[float]:
    """
    Find the candidate a value corresponds to.

    Values read from input files go through text round trips, so membership is
    tested with a relative tolerance rather than exact equality.

    Returns:
        The matching candidate, or None if the value is not recognised.
    """
    for candidate in candidates:
        if math.isclose(value, candidate, rel_tol=rel_tol):
            return candidate
    return None
