"""
Combustion and Growth Rates
===========================
Closed-form heat release curves and reaction chemistry.

Nothing here integrates a field equation: the curves are the capped
"t-squared" approximation FDS applies to a burner with a negative TAU_Q, and
the standard growth rates are the NFPA 204 / Eurocode 1 design fires.

Units: HRR in W, alpha in kW/s², heat of combustion in J/kg.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

from fdsinspect.config import (
    DEFAULT_EPUMO2,
    DEFAULT_SOOT_H_FRACTION,
    GROWTH_RATE_MATCH_TOLERANCE,
    HRR_BREACH_FAILURE_DURATION,
    HRR_STARTUP_PERIOD,
    HRR_TOLERANCE,
    MOLAR_MASS_C,
    MOLAR_MASS_H,
    MOLAR_MASS_N,
    MOLAR_MASS_O,
)
from fdsinspect.model.data_vector import DataVector
from fdsinspect.model.fds import Reaction
from fdsinspect.utils import kilowatts_to_watts, watts_to_kilowatts

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimpleHrrSpec:
    """
    A single capped-quadratic ramp to ``peak`` over ``|tau_q|`` seconds.

    A ``tau_q`` of None means no ramp was declared and the peak applies
    immediately.
    """
    tau_q: Optional[float]
    peak: float  # W

    @property
    def cap_time(self) -> Optional[float]:
        return None if self.tau_q is None else abs(self.tau_q)

    @property
    def alpha(self) -> Optional[float]:
        """Quadratic growth coefficient in kW/s²."""
        if not self.tau_q:
            return None
        return watts_to_kilowatts(self.peak) / self.tau_q ** 2


@dataclass(frozen=True)
class CompositeHrrSpec:
    """Several burners with differing ramp times. Cannot be expressed as one curve."""
    specs: Tuple[SimpleHrrSpec, ...] = ()


HrrSpec = Union[SimpleHrrSpec, CompositeHrrSpec]


def combine_hrr_specs(specs: Iterable[SimpleHrrSpec]) -> Optional[HrrSpec]:
    """
    Reduce the specs of several burners to one.

    Burners sharing a ramp time sum into a single simple spec. Any difference
    in ramp time leaves a composite spec.

    Returns:
        None if there are no specs.
    """
    specs = list(specs)
    if not specs:
        return None
    tau_q = specs[0].tau_q
    if any(spec.tau_q != tau_q for spec in specs[1:]):
        return CompositeHrrSpec(specs=tuple(specs))
    return SimpleHrrSpec(tau_q=tau_q, peak=sum(spec.peak for spec in specs))


def calc_hrr(spec: SimpleHrrSpec, t: float) -> float:
    """
    HRR (W) of a simple spec at time t.

    Zero up to t = 0, alpha·t² up to the cap time, then constant.
    """
    if t <= 0.0:
        return 0.0
    cap_time = spec.cap_time
    if not cap_time:
        return spec.peak
    a = spec.peak / spec.tau_q ** 2
    if t <= cap_time:
        return a * t ** 2
    return a * cap_time ** 2


def generate_hrr_curve(spec: SimpleHrrSpec, times: Iterable[float]) -> DataVector:
    """Synthesise the reference curve of a spec at the given times (HRR in kW)."""
    times = list(times)
    return DataVector.from_arrays(
        x_name="Time",
        y_name="HRR",
        xs=times,
        ys=[watts_to_kilowatts(calc_hrr(spec, t)) for t in times],
        x_units="s",
        y_units="kW",
    )


class StdGrowthRate(StrEnum):
    NFPA_SLOW = "nfpa-slow"
    NFPA_MEDIUM = "nfpa-medium"
    NFPA_FAST = "nfpa-fast"
    NFPA_ULTRAFAST = "nfpa-ultrafast"
    EUROCODE_SLOW = "slow"
    EUROCODE_MEDIUM = "medium"
    EUROCODE_FAST = "fast"
    EUROCODE_ULTRAFAST = "ultrafast"


# (reference HRR in kW, characteristic time in s)
_GROWTH_RATE_DEFINITIONS: Dict[StdGrowthRate, Tuple[float, float]] = {
    StdGrowthRate.NFPA_SLOW: (1055.0, 600.0),
    StdGrowthRate.NFPA_MEDIUM: (1055.0, 300.0),
    StdGrowthRate.NFPA_FAST: (1055.0, 150.0),
    StdGrowthRate.NFPA_ULTRAFAST: (1055.0, 75.0),
    StdGrowthRate.EUROCODE_SLOW: (1000.0, 600.0),
    StdGrowthRate.EUROCODE_MEDIUM: (1000.0, 300.0),
    StdGrowthRate.EUROCODE_FAST: (1000.0, 150.0),
    StdGrowthRate.EUROCODE_ULTRAFAST: (1000.0, 75.0),
}


def alpha(growth_rate: StdGrowthRate) -> float:
    """Growth coefficient of a standard growth rate in kW/s²."""
    reference_hrr, characteristic_time = _GROWTH_RATE_DEFINITIONS[growth_rate]
    return reference_hrr / characteristic_time ** 2


def std_hrr_spec(growth_rate: StdGrowthRate) -> SimpleHrrSpec:
    """The t-squared spec reaching the reference HRR at the characteristic time."""
    reference_hrr, characteristic_time = _GROWTH_RATE_DEFINITIONS[growth_rate]
    return SimpleHrrSpec(tau_q=-characteristic_time, peak=kilowatts_to_watts(reference_hrr))


def growth_rate_deviations(spec: SimpleHrrSpec) -> Dict[StdGrowthRate, float]:
    """Relative deviation of the spec's alpha from each standard growth rate."""
    spec_alpha = spec.alpha
    if spec_alpha is None:
        return {}
    deviations = {}
    for growth_rate in StdGrowthRate:
        reference = alpha(growth_rate)
        deviations[growth_rate] = abs(spec_alpha - reference) / reference
    return deviations


def find_matching_growth_rate(spec: SimpleHrrSpec) -> Optional[StdGrowthRate]:
    """
    Classify a spec against the standard growth rates.

    Returns:
        The closest standard growth rate if it is within
        GROWTH_RATE_MATCH_TOLERANCE, otherwise None.
    """
    deviations = growth_rate_deviations(spec)
    if not deviations:
        return None
    closest = min(deviations, key=deviations.__getitem__)
    if deviations[closest] < GROWTH_RATE_MATCH_TOLERANCE:
        return closest
    return None


def heat_of_combustion(reaction: Reaction) -> float:
    """
    Heat of combustion (J/kg) from the stoichiometry of a CxHyOzNv fuel.

    The oxygen consumed per unit fuel is balanced against the soot and CO
    yields and scaled by the energy released per unit mass of oxygen consumed.
    """
    y_s = reaction.soot_yield or 0.0
    y_co = reaction.co_yield or 0.0
    soot_h_fraction = DEFAULT_SOOT_H_FRACTION if reaction.soot_h_fraction is None else reaction.soot_h_fraction
    epumo2 = DEFAULT_EPUMO2 if reaction.epumo2 is None else reaction.epumo2
    x = reaction.c or 0.0
    y = reaction.h or 0.0
    z = reaction.o or 0.0
    v = reaction.n or 0.0

    w_o2 = MOLAR_MASS_O * 2.0
    w_co = MOLAR_MASS_C + MOLAR_MASS_O
    v_f = 1.0

    # Molar mass of fuel
    w_f = x * MOLAR_MASS_C + y * MOLAR_MASS_H + z * MOLAR_MASS_O + v * MOLAR_MASS_N
    if w_f == 0.0:
        raise ValueError("Reaction has no fuel composition (C, H, O, N are all zero).")

    # v_* are molar amounts per mole of fuel
    w_s = soot_h_fraction * MOLAR_MASS_H + (1.0 - soot_h_fraction) * MOLAR_MASS_C
    v_s = w_f / w_s * y_s
    v_co = w_f / w_co * y_co
    v_co2 = x - v_co - (1.0 - soot_h_fraction) * v_s
    v_h2o = y / 2.0 - soot_h_fraction / 2.0 * v_s
    v_o2 = v_co2 + v_co / 2.0 + v_h2o / 2.0 - z / 2.0
    return kilowatts_to_watts(v_o2 * w_o2 * epumo2 / (v_f * w_f))


def has_fuel_composition(reaction: Reaction) -> bool:
    return any(value for value in (reaction.c, reaction.h, reaction.o, reaction.n))


def resolved_heat_of_combustion(reaction: Reaction) -> Optional[float]:
    """The declared heat of combustion (J/kg), else the stoichiometric one, else None."""
    if reaction.heat_of_combustion is not None:
        return reaction.heat_of_combustion
    if has_fuel_composition(reaction):
        return heat_of_combustion(reaction)
    return None


def generate_hrr_rel_diff(spec: SimpleHrrSpec, realised: DataVector) -> DataVector:
    """
    Relative difference between realised HRR (kW) and the spec (W) at every
    realised sample. Samples where the prescribed HRR is zero give NaN.
    """
    times = realised.xs
    prescribed = np.array([calc_hrr(spec, t) for t in times], dtype=np.float64)
    actual = np.array([kilowatts_to_watts(y) for y in realised.ys], dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        rel_diff: npt.NDArray[np.float64] = np.where(
            prescribed != 0.0, (actual - prescribed) / prescribed, np.nan
        )
    return DataVector.from_arrays(
        x_name="Time",
        y_name="HRR Relative Difference",
        xs=times,
        ys=rel_diff,
        x_units="s",
        y_units="-",
    )


@dataclass(frozen=True)
class HrrBreachReport:
    """Periods where the realised HRR left the tolerance band."""
    breaches: Tuple[Tuple[float, float], ...]  # (start, end) in s

    @property
    def occurred(self) -> bool:
        return bool(self.breaches)

    @property
    def max_period(self) -> float:
        return max((end - start for start, end in self.breaches), default=0.0)

    @property
    def total_time(self) -> float:
        return sum(end - start for start, end in self.breaches)

    @property
    def is_failure(self) -> bool:
        return self.max_period >= HRR_BREACH_FAILURE_DURATION


def analyse_hrr_breaches(
    rel_diff: DataVector,
    tolerance: float = HRR_TOLERANCE,
    startup_period: float = HRR_STARTUP_PERIOD,
) -> HrrBreachReport:
    """
    Find the contiguous periods where |relative difference| exceeds the
    tolerance, ignoring samples up to the startup period.

    A breach runs from the first exceeding sample to the first sample back
    within tolerance. A breach still open at the last sample ends there.
    """
    breaches: List[Tuple[float, float]] = []
    start: Optional[float] = None
    last_x: Optional[float] = None
    for point in rel_diff.values:
        if point.x <= startup_period:
            continue
        last_x = point.x
        if abs(point.y) > tolerance:
            if start is None:
                start = point.x
        elif start is not None:
            breaches.append((start, point.x))
            start = None
    if start is not None and last_x is not None:
        breaches.append((start, last_x))
    if breaches:
        logger.debug(f"HRR left the {tolerance:.0%} band {len(breaches)} time(s): {breaches}")
    return HrrBreachReport(breaches=tuple(breaches))
