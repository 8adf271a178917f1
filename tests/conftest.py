"""
Shared fixtures: builders for the JSON object graph the upstream parser emits.
"""
import copy
from typing import Any, Dict, Optional, Sequence

import pytest

from fdsinspect.model.fds import FdsData


def xb(x1, x2, y1, y2, z1, z2) -> Dict[str, float]:
    return {"x1": x1, "x2": x2, "y1": y1, "y2": y2, "z1": z1, "z2": z2}


def make_mesh(
    id: str = "MESH",
    bounds: Sequence[float] = (0.0, 10.0, 0.0, 10.0, 0.0, 3.0),
    ijk: Sequence[int] = (10, 10, 3),
    vents: Sequence[Dict[str, Any]] = (),
    obsts: Sequence[Dict[str, Any]] = (),
    index: int = 0,
) -> Dict[str, Any]:
    x1, x2, y1, y2, z1, z2 = bounds
    i, j, k = ijk
    return {
        "index": index,
        "id": id,
        "ijk": {"i": i, "j": j, "k": k},
        "dimensions": xb(*bounds),
        "cell_sizes": {"dx": (x2 - x1) / i, "dy": (y2 - y1) / j, "dz": (z2 - z1) / k},
        "vents": list(vents),
        "obsts": list(obsts),
    }


def make_vent(id: Optional[str], bounds: Sequence[float], surface: Optional[str], fds_area: Optional[float] = None):
    vent = {"id": id, "surface": surface, "dimensions": xb(*bounds)}
    if fds_area is not None:
        vent["fds_area"] = fds_area
    return vent


def make_obst(bounds: Sequence[float], ijk_bounds: Sequence[int], surfaces: Optional[Dict[str, str]] = None, id: str = "OBST"):
    i_min, i_max, j_min, j_max, k_min, k_max = ijk_bounds
    obst = {
        "id": id,
        "dimensions": xb(*bounds),
        "bounds": {"i_min": i_min, "i_max": i_max, "j_min": j_min,
                   "j_max": j_max, "k_min": k_min, "k_max": k_max},
    }
    if surfaces:
        obst["surfaces"] = surfaces
    return obst


def make_device(
    id: str,
    bounds: Sequence[float] = (5.0, 5.0, 5.0, 5.0, 2.9, 2.9),
    prop_id: Optional[str] = None,
    quantities: Sequence[str] = ("TEMPERATURE",),
    points: Sequence[Dict[str, Any]] = ({"i": 5, "j": 5, "k": 2, "init_solid": False, "init_solid_zplus": True},),
    spatial_statistic: Optional[str] = None,
):
    return {
        "id": id,
        "dimensions": xb(*bounds),
        "prop_id": prop_id,
        "quantities": list(quantities),
        "points": [dict(p) for p in points],
        "spatial_statistic": spatial_statistic,
    }


BASE_MODEL: Dict[str, Any] = {
    "chid": "room_fire",
    "visibility_factor": 3.0,
    "ec_ll": 0.01,
    "dump": {"nframes": 600},
    "time": {"begin": 0.0, "end": 600.0},
    "surfaces": [
        {"id": "BURNER", "hrrpua": 1055000.0, "tau_q": -150.0},
        {"id": "SUPPLY", "volume_flow": -1.5},
        {"id": "EXHAUST", "vel": 2.0},
    ],
    "meshes": [
        make_mesh(
            id="MESH",
            vents=[
                make_vent("FIRE", (4.0, 5.0, 4.0, 5.0, 0.0, 0.0), "BURNER", fds_area=1.0),
                make_vent("IN", (0.0, 0.0, 2.0, 3.0, 1.0, 2.0), "SUPPLY", fds_area=1.0),
                make_vent("OUT", (10.0, 10.0, 2.0, 3.0, 1.0, 2.0), "EXHAUST", fds_area=1.0),
            ],
        ),
    ],
    "devices": [
        make_device("SPK1", prop_id="SPRINKLER"),
        make_device("SD1", prop_id="SMOKE DETECTOR"),
        make_device("FLOW_IN", bounds=(0.0, 0.0, 2.0, 3.0, 1.0, 2.0), quantities=("VOLUME FLOW",), points=()),
        make_device("FLOW_OUT", bounds=(10.0, 10.0, 2.0, 3.0, 1.0, 2.0), quantities=("VOLUME FLOW",), points=()),
    ],
    "props": [
        {"id": "SPRINKLER", "quantity": "SPRINKLER LINK TEMPERATURE", "activation_temperature": 68.0},
        {"id": "SMOKE DETECTOR", "quantity": "CHAMBER OBSCURATION", "activation_obscuration": 3.24},
    ],
    "reacs": [
        {"c": 1.0, "h": 1.45, "o": 0.46, "n": 0.04, "soot_yield": 0.07, "co_yield": 0.05,
         "heat_of_combustion": 25000000.0},
    ],
}


@pytest.fixture
def model_dict() -> Dict[str, Any]:
    """A well-formed model that passes every input check."""
    return copy.deepcopy(BASE_MODEL)


@pytest.fixture
def fds_data(model_dict) -> FdsData:
    return FdsData.from_dict(model_dict)


@pytest.fixture
def build_model():
    """Build an FdsData from the base model with top-level keys replaced."""
    def _build(**overrides: Any) -> FdsData:
        data = copy.deepcopy(BASE_MODEL)
        data.update(overrides)
        return FdsData.from_dict(data)
    return _build


HRR_CSV_HEADER = "s,kW,kW\nTime,HRR,Q_RADI\n"


@pytest.fixture
def write_hrr_csv(tmp_path):
    """Write an FDS-style hrr csv and return its directory."""
    def _write(rows: Sequence[Sequence[Any]], filename: str = "room_fire_hrr.csv") -> str:
        lines = [",".join(str(value) for value in row) for row in rows]
        (tmp_path / filename).write_text(HRR_CSV_HEADER + "\n".join(lines) + "\n", encoding="utf-8")
        return str(tmp_path)
    return _write
