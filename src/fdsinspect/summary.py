"""
Input Summary
=============
A flat statistics record of an FDS model: burners and peak HRR, combustion,
sprinklers and detectors, supply and extract flows, meshes and ceiling
heights.
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
import logging
from typing import Dict, Any, List, Optional

from fdsinspect.model.burner import get_burners, total_max_hrr
from fdsinspect.model.ceiling import CeilingHeight, get_ceiling_heights
from fdsinspect.model.combustion import has_fuel_composition, heat_of_combustion
from fdsinspect.model.fds import FdsData
from fdsinspect.model.geometry import Resolution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputSummary:
    chid: str
    simulation_length: float  # s
    n_burners: int
    total_max_hrr: float  # W
    heat_of_combustion_calc: Optional[float]  # J/kg, from the REAC stoichiometry
    heat_of_combustion: Optional[float]  # J/kg, as declared
    total_soot_production: Optional[float]  # kg/s at peak HRR
    n_sprinklers: int
    sprinkler_activation_temperatures: List[float]
    n_smoke_detectors: int
    smoke_detector_obscurations: List[float]
    n_extract_vents: int
    total_extract_rate: float  # m³/s, positive out of the domain
    n_supply_vents: int
    total_supply_rate: float  # m³/s, negative into the domain
    n_meshes: int
    n_cells: int
    mesh_resolutions: List[Resolution] = field(default_factory=list)
    ceiling_heights: List[CeilingHeight] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def count_cells(fds_data: FdsData) -> int:
    """Total number of cells over all meshes."""
    return sum(mesh.ijk.n_cells for mesh in fds_data.meshes)


def soot_production_rate(fds_data: FdsData) -> Optional[float]:
    """Peak soot production rate in kg/s, None if the heat of combustion is unknown."""
    reaction = fds_data.reaction
    if reaction is None:
        return None
    hoc = heat_of_combustion(reaction) if has_fuel_composition(reaction) else reaction.heat_of_combustion
    if not hoc:
        return None
    return (reaction.soot_yield or 0.0) / hoc * total_max_hrr(fds_data)


def summarise_input(fds_data: FdsData) -> InputSummary:
    """Create an InputSummary from an FdsData."""
    reaction = fds_data.reaction
    if reaction is None:
        logger.warning(f"'{fds_data.chid}' has no REAC, combustion values are omitted")

    supplies = fds_data.supplies
    extracts = fds_data.extracts

    sprinkler_activation_temperatures = sorted(
        prop.activation_temperature
        for prop in (fds_data.device_prop(devc) for devc in fds_data.sprinklers)
        if prop is not None and prop.activation_temperature is not None
    )
    smoke_detector_obscurations = sorted(
        prop.activation_obscuration
        for prop in (fds_data.device_prop(devc) for devc in fds_data.smoke_detectors)
        if prop is not None and prop.activation_obscuration is not None
    )

    return InputSummary(
        chid=fds_data.chid,
        simulation_length=fds_data.simulation_length,
        n_burners=len(get_burners(fds_data)),
        total_max_hrr=total_max_hrr(fds_data),
        heat_of_combustion_calc=heat_of_combustion(reaction) if reaction and has_fuel_composition(reaction) else None,
        heat_of_combustion=reaction.heat_of_combustion if reaction else None,
        total_soot_production=soot_production_rate(fds_data),
        n_sprinklers=len(fds_data.sprinklers),
        sprinkler_activation_temperatures=sprinkler_activation_temperatures,
        n_smoke_detectors=len(fds_data.smoke_detectors),
        smoke_detector_obscurations=smoke_detector_obscurations,
        n_extract_vents=len(extracts),
        total_extract_rate=sum(fds_data.vent_flow_rate(vent) or 0.0 for vent in extracts),
        n_supply_vents=len(supplies),
        total_supply_rate=sum(fds_data.vent_flow_rate(vent) or 0.0 for vent in supplies),
        n_meshes=len(fds_data.meshes),
        n_cells=count_cells(fds_data),
        mesh_resolutions=[mesh.cell_sizes for mesh in fds_data.meshes],
        ceiling_heights=get_ceiling_heights(fds_data),
    )
