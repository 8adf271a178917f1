"""
Burners
=======
A burner is any vent or obstruction whose surface releases heat. It is not a
record of its own in the input; it is derived from the model.

Burner is a tagged union of BurnerObst and BurnerVent. Functions taking a
Burner dispatch on the variant and raise TypeError for anything else, which
can only be a construction bug.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Union

from fdsinspect.model.combustion import HrrSpec, SimpleHrrSpec, combine_hrr_specs, resolved_heat_of_combustion
from fdsinspect.model.fds import FdsData, Obstruction, Surface, Vent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BurnerObst:
    object: Obstruction


@dataclass(frozen=True)
class BurnerVent:
    object: Vent


Burner = Union[BurnerObst, BurnerVent]


def get_burners(fds_data: FdsData) -> List[Burner]:
    """All obstructions and vents which release heat, obstructions first."""
    burners: List[Burner] = []
    for obst in fds_data.obsts:
        if fds_data.is_burner_obst(obst):
            burners.append(BurnerObst(obst))
    for vent in fds_data.vents:
        if fds_data.is_burner_vent(vent):
            burners.append(BurnerVent(vent))
    logger.debug(f"Found {len(burners)} burner(s) in '{fds_data.chid}'")
    return burners


def burner_surface_id(burner: Burner) -> Optional[str]:
    # TODO: obstructions burning on faces other than z_max are counted as burners but their fuel is not.
    if isinstance(burner, BurnerObst):
        return burner.object.surfaces.z_max if burner.object.surfaces else None
    if isinstance(burner, BurnerVent):
        return burner.object.surface
    raise TypeError(f"Unknown burner type: {type(burner).__name__}")


def burner_surface(fds_data: FdsData, burner: Burner) -> Optional[Surface]:
    return fds_data.get_surface(burner_surface_id(burner))


def fuel_area(burner: Burner) -> float:
    """Burning area in m². Obstructions burn on their top face."""
    if isinstance(burner, BurnerObst):
        return burner.object.fds_area.z
    if isinstance(burner, BurnerVent):
        return burner.object.fds_area
    raise TypeError(f"Unknown burner type: {type(burner).__name__}")


def hrrpua(fds_data: FdsData, burner: Burner) -> float:
    """
    Heat release rate per unit area in W/m².

    A mass loss rate is converted with the heat of combustion, as declared by
    the reaction or else calculated from its stoichiometry.
    """
    surface = burner_surface(fds_data, burner)
    if surface is None:
        return 0.0
    if surface.hrrpua:
        return surface.hrrpua
    if surface.mlrpua:
        reaction = fds_data.reaction
        if reaction is None:
            logger.warning(f"Surface '{surface.id}' sets MLRPUA but there is no REAC to burn it")
            return 0.0
        hoc = resolved_heat_of_combustion(reaction)
        if hoc is None:
            logger.warning(f"Surface '{surface.id}' sets MLRPUA but the heat of combustion is unknown")
            return 0.0
        return hoc * surface.mlrpua
    return 0.0


def max_hrr(fds_data: FdsData, burner: Burner) -> float:
    """Peak HRR of a burner in W."""
    return fuel_area(burner) * hrrpua(fds_data, burner)


def burner_hrr_spec(fds_data: FdsData, burner: Burner) -> SimpleHrrSpec:
    surface = burner_surface(fds_data, burner)
    tau_q = surface.tau_q if surface is not None else None
    return SimpleHrrSpec(tau_q=tau_q, peak=max_hrr(fds_data, burner))


def hrr_spec(fds_data: FdsData) -> Optional[HrrSpec]:
    """The HRR spec of the whole model, None if there are no burners."""
    return combine_hrr_specs(burner_hrr_spec(fds_data, burner) for burner in get_burners(fds_data))


def total_max_hrr(fds_data: FdsData) -> float:
    """Sum of all burner peaks in W."""
    return sum(max_hrr(fds_data, burner) for burner in get_burners(fds_data))
