"""
Configuration & Global Constants
================================
This module serves as the central registry for the thresholds and reference
values used by the checks and the derived quantities.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (tolerances, recognised yields,
   molar masses) from being scattered throughout the rule code.
2. Traceability: Every value a verdict depends on can be found and reviewed
   in one place.
"""
from typing import FrozenSet, Dict

# Geometry
INTERSECT_EPSILON: float = 1e-14  # Absorbs edge placement noise from upstream tools

# Growth rates
GROWTH_RATE_MATCH_TOLERANCE: float = 0.001  # Relative deviation in alpha
STEADY_STATE_RAMP: float = 30.0  # s

# Realised HRR comparison
HRR_TOLERANCE: float = 0.1  # Relative deviation from the prescribed curve
HRR_STARTUP_PERIOD: float = 60.0  # s, samples at or before this are ignored
HRR_BREACH_FAILURE_DURATION: float = 10.0  # s

# Combustion
DEFAULT_EPUMO2: float = 13100.0  # kJ/kg of O2 consumed
DEFAULT_SOOT_H_FRACTION: float = 0.1

MOLAR_MASS_C: float = 12.01
MOLAR_MASS_H: float = 1.008
MOLAR_MASS_O: float = 15.999
MOLAR_MASS_N: float = 14.007

# Recognised input values
AMBIENT_TEMPERATURE: float = 293.15  # K, FDS default TMPA
KNOWN_SOOT_YIELDS: FrozenSet[float] = frozenset({0.07, 0.1})
KNOWN_CO_YIELDS: FrozenSet[float] = frozenset({0.05, 0.014})
KNOWN_FUEL_FORMULA: Dict[str, float] = {"c": 1.0, "h": 1.45, "n": 0.04, "o": 0.46}
KNOWN_VISIBILITY_FACTORS: FrozenSet[float] = frozenset({3.0, 8.0})
MIN_VISIBILITY_DISTANCE: float = 100.0  # m

# Simulation defaults (FDS T_BEGIN / T_END)
DEFAULT_T_BEGIN: float = 0.0
DEFAULT_T_END: float = 1.0
