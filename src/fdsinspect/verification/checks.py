"""
Standard Checks
===============
The catalogue of checks run against an FDS model. Each check is independent
and is registered as a Test with a dotted id.

Missing values are reported as failures, never raised.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Iterable, List, Optional

from fdsinspect.config import (
    AMBIENT_TEMPERATURE,
    KNOWN_CO_YIELDS,
    KNOWN_FUEL_FORMULA,
    KNOWN_SOOT_YIELDS,
    KNOWN_VISIBILITY_FACTORS,
    MIN_VISIBILITY_DISTANCE,
    STEADY_STATE_RAMP,
)
from fdsinspect.model.burner import get_burners, hrr_spec
from fdsinspect.model.combustion import (
    CompositeHrrSpec,
    analyse_hrr_breaches,
    find_matching_growth_rate,
    generate_hrr_rel_diff,
)
from fdsinspect.model.fds import FdsData, Reaction, Surface
from fdsinspect.model.geometry import intersect
from fdsinspect.output.smv import OutputSource
from fdsinspect.utils import kelvin_to_celsius, match_recognised, watts_to_kilowatts
from fdsinspect.verification.engine import Stage, Test, VerificationResult, failure, success, warning

logger = logging.getLogger(__name__)


def _format_values(values: Iterable[float]) -> str:
    return ", ".join(f"{v:g}" for v in sorted(values))


def _recognised_value(name: str, value: Optional[float], possible_values: Iterable[float]) -> VerificationResult:
    if value is None:
        return failure(f"{name} was not specified.")
    if match_recognised(value, possible_values) is not None:
        return success(f"{name} was {value:g}, a recognised value.")
    return failure(f"{name} was {value:g}, which is not one of the usual values of {_format_values(possible_values)}.")


def meshes_overlap(fds_data: FdsData) -> List[VerificationResult]:
    """Every pair of meshes is reported at most once."""
    results = []
    meshes = fds_data.meshes
    for a in range(len(meshes)):
        for b in range(a + 1, len(meshes)):
            mesh_a, mesh_b = meshes[a], meshes[b]
            if intersect(mesh_a.dimensions, mesh_b.dimensions):
                logger.debug(f"Mesh '{mesh_a.id}' {mesh_a.dimensions} intersects '{mesh_b.id}' {mesh_b.dimensions}")
                results.append(failure(f"Mesh `{mesh_a.id}` intersects with `{mesh_b.id}`"))
    if not results:
        return [success("No Intersections")]
    return results


def flow_temperature(fds_data: FdsData) -> List[VerificationResult]:
    """Supplies should leave TMP_FRONT at ambient."""
    results = []
    # Ordered set of surfaces referenced by vents
    surface_ids: Dict[str, None] = {}
    for vent in fds_data.vents:
        if vent.surface:
            surface_ids[vent.surface] = None
    for surface_id in surface_ids:
        surface: Optional[Surface] = fds_data.get_surface(surface_id)
        if surface is None or not surface.has_flow:
            continue
        if surface.tmp_front is None or surface.tmp_front == AMBIENT_TEMPERATURE:
            results.append(success(f"Flow Temp for Surface `{surface.id}` leaves TMP_FRONT as default"))
        else:
            results.append(failure(
                f"Flow Temp for Surface `{surface.id}` sets TMP_FRONT to `{surface.tmp_front:g}` K "
                f"({kelvin_to_celsius(surface.tmp_front):.2f} °C), which is not an expected value"
            ))
    return results


def soot_yield(fds_data: FdsData) -> List[VerificationResult]:
    return [_recognised_value("Soot Yield", reac.soot_yield, KNOWN_SOOT_YIELDS) for reac in fds_data.reacs]


def co_yield(fds_data: FdsData) -> List[VerificationResult]:
    return [_recognised_value("CO Yield", reac.co_yield, KNOWN_CO_YIELDS) for reac in fds_data.reacs]


_FORMULA_GETTERS: Dict[str, Callable[[Reaction], Optional[float]]] = {
    "c": lambda reac: reac.c,
    "h": lambda reac: reac.h,
    "n": lambda reac: reac.n,
    "o": lambda reac: reac.o,
}


def fuel_formula(fds_data: FdsData) -> List[VerificationResult]:
    if not fds_data.reacs:
        return [failure("No REAC has been specified")]
    if len(fds_data.reacs) > 1:
        return [failure(f"{len(fds_data.reacs)} REACs have been specified, only one is expected")]
    reac = fds_data.reacs[0]
    return [
        _recognised_value(element, getter(reac), [KNOWN_FUEL_FORMULA[element]])
        for element, getter in _FORMULA_GETTERS.items()
    ]


def visibility_factor(fds_data: FdsData) -> List[VerificationResult]:
    value = fds_data.visibility_factor
    if not value:
        return [failure("Visibility Factor not set")]
    if match_recognised(value, KNOWN_VISIBILITY_FACTORS) is not None:
        return [success(f"Visibility Factor is {value:g}, a known value.")]
    return [failure(
        f"Visibility Factor is {value:g}. Known good visibility factors are "
        f"{_format_values(KNOWN_VISIBILITY_FACTORS)}."
    )]


def maximum_visibility(fds_data: FdsData) -> List[VerificationResult]:
    if not fds_data.ec_ll or not fds_data.visibility_factor:
        return [failure("Maximum Visibility not set")]
    distance = fds_data.visibility_factor / fds_data.ec_ll
    if distance >= MIN_VISIBILITY_DISTANCE:
        return [success(f"Maximum Visibility is {distance:g} m, at least {MIN_VISIBILITY_DISTANCE:g} m.")]
    return [failure(
        f"Maximum Visibility is {distance:g} m. This is a low value and may cause issues "
        f"when trying to visualise results."
    )]


def n_frames(fds_data: FdsData) -> List[VerificationResult]:
    nframes = fds_data.nframes
    if not nframes:
        return [failure("NFRAMES not specified")]
    # Halves round up
    interval = math.floor(fds_data.simulation_length + 0.5)
    if interval % nframes == 0:
        return [success(f"Value {nframes}, results in round number of frames")]
    return [failure(f"Value {nframes} may result in clipped output")]


def flow_coverage(fds_data: FdsData) -> List[VerificationResult]:
    """Every flow vent should have a device measuring its flow."""
    flow_vents = fds_data.supplies + fds_data.extracts
    not_covered = [vent for vent in flow_vents if not fds_data.has_flow_device(vent)]
    if not not_covered:
        return [success("All Flows Vents Measured")]
    return [failure(f"Vent `{vent.id}` has no adequate volume flow measuring device") for vent in not_covered]


def devices_in_solid(fds_data: FdsData) -> List[VerificationResult]:
    # Only devices with a PROP (detectors and the like) are checked.
    stuck = [devc for devc in fds_data.devices if devc.prop_id and devc.stuck_in_solid]
    if not stuck:
        return [success("No stuck devices")]
    return [failure(f"Devc `{devc.id}` Positioned within solid obstruction") for devc in stuck]


def detectors_beneath_ceiling(fds_data: FdsData) -> List[VerificationResult]:
    detectors = [
        devc for devc in fds_data.devices
        if fds_data.is_sprinkler(devc) or fds_data.is_smoke_detector(devc) or fds_data.is_thermal_detector(devc)
    ]
    exposed = [devc for devc in detectors if not devc.beneath_ceiling]
    if not exposed:
        return [success("All sprinklers and detectors are immediately below the ceiling")]
    return [failure(f"Devc `{devc.id}` is not immediately beneath solid obstruction") for devc in exposed]


def growth_rate(fds_data: FdsData) -> List[VerificationResult]:
    """The burners should follow a standard growth rate or a 30 s steady-state ramp."""
    spec = hrr_spec(fds_data)
    if spec is None:
        return []
    if isinstance(spec, CompositeHrrSpec):
        return [failure("Growth rate is composite")]
    if spec.tau_q is None:
        return [warning("No growth rate specified. If steady-state is intended a ramp-up of 30 s should be used.")]
    if abs(spec.tau_q) == STEADY_STATE_RAMP:
        return [success(f"Growth rate is {STEADY_STATE_RAMP:g} s (as used for steady-state)")]
    matching = find_matching_growth_rate(spec)
    info = f"TAU_Q = {spec.tau_q:g} s, ({matching}), MaxHRR = {watts_to_kilowatts(spec.peak):g} kW"
    if matching is not None:
        return [success(f"Alpha matches standard value: {info}")]
    return [failure(f"Alpha value deviates from standard values: {info}")]


def burner_exists(fds_data: FdsData) -> List[VerificationResult]:
    n_burners = len(get_burners(fds_data))
    if n_burners > 0:
        return [success(f"{n_burners} burners were found")]
    return [failure("No burners")]


async def matching_chid(fds_data: FdsData, smv_data: OutputSource) -> List[VerificationResult]:
    if fds_data.chid == smv_data.chid:
        return [success(f"CHIDs match, {fds_data.chid} = {smv_data.chid}")]
    return [failure(f"CHIDs don't match, {fds_data.chid} ≠ {smv_data.chid}")]


async def hrr_realised(fds_data: FdsData, smv_data: OutputSource) -> List[VerificationResult]:
    """
    Ignoring the first 60 s, the realised HRR should stay within 10% of the
    prescribed curve. Brief excursions warn; any lasting 10 s or more fail.
    """
    spec = hrr_spec(fds_data)
    if spec is None or isinstance(spec, CompositeHrrSpec):
        return []
    realised = await smv_data.get_hrr()
    if realised is None:
        return []
    report = analyse_hrr_breaches(generate_hrr_rel_diff(spec, realised))
    if report.is_failure:
        return [failure(
            f"HRR exceeds 10% bounds for greater than 10 s ({report.total_time:.2f} s in total "
            f"for a maximum of {report.max_period:.2f} s)"
        )]
    if report.occurred:
        return [warning("HRR exceeds 10% bounds, albeit only momentarily")]
    return [success("HRR matches specification within 10% bounds")]


meshes_overlap_test = Test(id="input.meshes.overlap", stage=Stage.IN, func=meshes_overlap)
flow_temp_test = Test(id="input.flows.parameters.temperature", stage=Stage.IN, func=flow_temperature)
soot_yield_test = Test(id="input.reac.sootYield", stage=Stage.IN, func=soot_yield)
co_yield_test = Test(id="input.reac.coYield", stage=Stage.IN, func=co_yield)
formula_test = Test(id="input.reac.formula", stage=Stage.IN, func=fuel_formula)
visibility_factor_test = Test(id="input.reac.visibilityFactor", stage=Stage.IN, func=visibility_factor)
maximum_visibility_test = Test(id="input.reac.maximumVisibility", stage=Stage.IN, func=maximum_visibility)
n_frames_test = Test(id="input.dump.nFrames", stage=Stage.IN, func=n_frames)
flow_coverage_test = Test(id="input.measure.flow", stage=Stage.IN, func=flow_coverage)
device_in_solid_test = Test(id="input.measure.device.inSolid", stage=Stage.IN, func=devices_in_solid)
spk_det_ceiling_test = Test(id="input.measure.device.underCeiling", stage=Stage.IN, func=detectors_beneath_ceiling)
growth_rate_test = Test(id="input.burner.growthRate", stage=Stage.IN, func=growth_rate)
burner_existence_test = Test(id="input.burner.exists", stage=Stage.IN, func=burner_exists)
matching_chid_test = Test(id="matching.chid", stage=Stage.IN_OUT, func=matching_chid)
hrr_realised_test = Test(id="matching.hrr", stage=Stage.IN_OUT, func=hrr_realised)

STD_TEST_LIST: List[Test] = [
    meshes_overlap_test,
    flow_temp_test,
    soot_yield_test,
    co_yield_test,
    formula_test,
    visibility_factor_test,
    maximum_visibility_test,
    n_frames_test,
    flow_coverage_test,
    device_in_solid_test,
    spk_det_ceiling_test,
    growth_rate_test,
    burner_existence_test,
    matching_chid_test,
    hrr_realised_test,
]
