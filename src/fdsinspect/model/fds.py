"""
FDS Data Model
==============
This module defines the structured representation of an FDS input model.

Why is this file needed?
------------------------
1. Typing: The upstream parser emits a JSON object graph. These classes give
   that graph a fixed shape (meshes, vents, obstructions, surfaces, devices,
   properties, reactions) with explicit optional values.
2. Derived concepts: Questions that need more than one record (does this vent
   carry a flow? is this device a sprinkler?) are answered here, by the root
   FdsData, so the individual records never hold a reference back to it.

All records are frozen once constructed.

Classes:
    Surface, Vent, Obstruction, Mesh, Device, Property, Reaction, ...
    FdsData: The root container.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
import logging
from typing import Dict, Any, List, Optional, Tuple

from fdsinspect.config import DEFAULT_T_BEGIN, DEFAULT_T_END
from fdsinspect.model.geometry import Axis, IjkBounds, Resolution, Xb, Xyz, dimensions_match

logger = logging.getLogger(__name__)

# PROP quantities that classify a device
SPRINKLER_QUANTITY = "SPRINKLER LINK TEMPERATURE"
THERMAL_DETECTOR_QUANTITY = "LINK TEMPERATURE"
SMOKE_DETECTOR_QUANTITY = "CHAMBER OBSCURATION"

# DEVC quantities that measure a flow through a vent
VOLUME_FLOW_QUANTITY = "VOLUME FLOW"
NORMAL_VELOCITY_QUANTITY = "NORMAL VELOCITY"
SURFACE_INTEGRAL_STATISTIC = "SURFACE INTEGRAL"


def _opt_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    return None if value is None else float(value)


def _opt_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if value else None


@dataclass(frozen=True)
class Surface:
    """A named boundary condition (SURF)."""
    id: str
    index: int = 0
    hrrpua: Optional[float] = None  # W/m²
    mlrpua: Optional[float] = None  # kg/m²/s
    tmp_front: Optional[float] = None  # K
    tau_q: Optional[float] = None  # s
    vel: Optional[float] = None  # m/s, negative into the domain
    volume_flow: Optional[float] = None  # m³/s, negative into the domain

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Surface:
        return Surface(
            id=data["id"],
            index=int(data.get("index", 0)),
            hrrpua=_opt_float(data, "hrrpua"),
            mlrpua=_opt_float(data, "mlrpua"),
            tmp_front=_opt_float(data, "tmp_front"),
            tau_q=_opt_float(data, "tau_q"),
            vel=_opt_float(data, "vel"),
            volume_flow=_opt_float(data, "volume_flow"),
        )

    @property
    def is_burner(self) -> bool:
        return (self.hrrpua or 0.0) > 0.0 or (self.mlrpua or 0.0) > 0.0

    @property
    def has_flow(self) -> bool:
        return self.vel is not None or self.volume_flow is not None

    @property
    def flow_value(self) -> Optional[float]:
        """The declared flow quantity, volume flow taking precedence."""
        if self.volume_flow is not None:
            return self.volume_flow
        return self.vel

    @property
    def is_supply(self) -> bool:
        value = self.flow_value
        return value is not None and value < 0.0

    @property
    def is_extract(self) -> bool:
        value = self.flow_value
        return value is not None and value > 0.0


@dataclass(frozen=True)
class Vent:
    id: Optional[str]
    dimensions: Xb
    index: int = 0
    surface: Optional[str] = None
    devc_id: Optional[str] = None
    ctrl_id: Optional[str] = None
    fds_area: float = 0.0  # m², as realised on the grid

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Vent:
        dimensions = Xb.from_dict(data["dimensions"])
        fds_area = data.get("fds_area")
        if fds_area is None:
            # A vent is flat, so the largest face is its own face.
            fds_area = max(dimensions.face_area(axis) for axis in Axis)
        return Vent(
            id=_opt_str(data, "id"),
            dimensions=dimensions,
            index=int(data.get("index", 0)),
            surface=_opt_str(data, "surface"),
            devc_id=_opt_str(data, "devc_id"),
            ctrl_id=_opt_str(data, "ctrl_id"),
            fds_area=float(fds_area),
        )


@dataclass(frozen=True)
class ObstSurfaces:
    """Surface ids for each of the six faces of an obstruction."""
    x_min: Optional[str] = None
    x_max: Optional[str] = None
    y_min: Optional[str] = None
    y_max: Optional[str] = None
    z_min: Optional[str] = None
    z_max: Optional[str] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> ObstSurfaces:
        return ObstSurfaces(**{face: _opt_str(data, face) for face in
                               ("x_min", "x_max", "y_min", "y_max", "z_min", "z_max")})

    def ids(self) -> List[str]:
        faces = [self.x_min, self.x_max, self.y_min, self.y_max, self.z_min, self.z_max]
        return [face for face in faces if face]


@dataclass(frozen=True)
class Obstruction:
    id: Optional[str]
    dimensions: Xb
    bounds: IjkBounds
    fds_area: Xyz  # realised face areas normal to x, y, z
    index: int = 0
    surfaces: Optional[ObstSurfaces] = None
    devc_id: Optional[str] = None
    ctrl_id: Optional[str] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Obstruction:
        dimensions = Xb.from_dict(data["dimensions"])
        if data.get("fds_area") is not None:
            fds_area = Xyz.from_dict(data["fds_area"])
        else:
            fds_area = Xyz(
                x=dimensions.face_area(Axis.X),
                y=dimensions.face_area(Axis.Y),
                z=dimensions.face_area(Axis.Z),
            )
        surfaces = data.get("surfaces")
        return Obstruction(
            id=_opt_str(data, "id"),
            dimensions=dimensions,
            bounds=IjkBounds.from_dict(data["bounds"]),
            fds_area=fds_area,
            index=int(data.get("index", 0)),
            surfaces=ObstSurfaces.from_dict(surfaces) if surfaces else None,
            devc_id=_opt_str(data, "devc_id"),
            ctrl_id=_opt_str(data, "ctrl_id"),
        )

    def area(self, axis: Axis) -> float:
        if axis == Axis.X:
            return self.fds_area.x
        if axis == Axis.Y:
            return self.fds_area.y
        if axis == Axis.Z:
            return self.fds_area.z
        raise ValueError(f"Unknown axis: {axis}")

    def surface_ids(self) -> List[str]:
        return self.surfaces.ids() if self.surfaces else []


@dataclass(frozen=True)
class Ijk:
    """Number of cells in each direction."""
    i: int
    j: int
    k: int

    @property
    def n_cells(self) -> int:
        return self.i * self.j * self.k


@dataclass(frozen=True)
class Mesh:
    id: str
    ijk: Ijk
    dimensions: Xb
    cell_sizes: Resolution
    index: int = 0
    vents: Tuple[Vent, ...] = field(default_factory=tuple)
    obsts: Tuple[Obstruction, ...] = field(default_factory=tuple)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Mesh:
        dimensions = Xb.from_dict(data["dimensions"])
        if not dimensions.is_well_ordered:
            raise ValueError(f"Mesh '{data.get('id')}' has bounds that are not well ordered: {dimensions}")
        ijk = data["ijk"]
        return Mesh(
            id=data.get("id") or f"MESH{data.get('index', 0)}",
            ijk=Ijk(i=int(ijk["i"]), j=int(ijk["j"]), k=int(ijk["k"])),
            dimensions=dimensions,
            cell_sizes=Resolution.from_dict(data["cell_sizes"]),
            index=int(data.get("index", 0)),
            vents=tuple(Vent.from_dict(v) for v in data.get("vents") or []),
            obsts=tuple(Obstruction.from_dict(o) for o in data.get("obsts") or []),
        )

    def area(self, axis: Axis) -> float:
        return self.dimensions.face_area(axis)


@dataclass(frozen=True)
class DevicePoint:
    """
    A sampled grid point of a device, with the solid state of its cell and
    of the cell directly above it.
    """
    i: int
    j: int
    k: int
    init_solid: bool = False
    init_solid_zplus: Optional[bool] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> DevicePoint:
        zplus = data.get("init_solid_zplus")
        return DevicePoint(
            i=int(data["i"]),
            j=int(data["j"]),
            k=int(data["k"]),
            init_solid=bool(data.get("init_solid", False)),
            init_solid_zplus=None if zplus is None else bool(zplus),
        )

    @property
    def beneath_ceiling(self) -> bool:
        # Only an explicit False counts against the point.
        return self.init_solid_zplus is not False


@dataclass(frozen=True)
class Device:
    id: str
    dimensions: Xb
    location: Xyz
    index: int = 0
    label: Optional[str] = None
    spatial_statistic: Optional[str] = None
    spec_id: Optional[str] = None
    prop_id: Optional[str] = None
    mesh: Optional[int] = None
    setpoint: Optional[float] = None
    quantities: Tuple[str, ...] = field(default_factory=tuple)
    points: Tuple[DevicePoint, ...] = field(default_factory=tuple)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Device:
        dimensions = Xb.from_dict(data["dimensions"])
        if data.get("location") is not None:
            location = Xyz.from_dict(data["location"])
        else:
            location = Xyz(
                x=(dimensions.x1 + dimensions.x2) / 2,
                y=(dimensions.y1 + dimensions.y2) / 2,
                z=(dimensions.z1 + dimensions.z2) / 2,
            )
        mesh = data.get("mesh")
        return Device(
            id=data["id"],
            dimensions=dimensions,
            location=location,
            index=int(data.get("index", 0)),
            label=_opt_str(data, "label"),
            spatial_statistic=_opt_str(data, "spatial_statistic"),
            spec_id=_opt_str(data, "spec_id"),
            prop_id=_opt_str(data, "prop_id"),
            mesh=None if mesh is None else int(mesh),
            setpoint=_opt_float(data, "setpoint"),
            quantities=tuple(data.get("quantities") or []),
            points=tuple(DevicePoint.from_dict(p) for p in data.get("points") or []),
        )

    @property
    def is_flow_device(self) -> bool:
        if not self.quantities:
            return False
        quantity = self.quantities[0]
        return quantity == VOLUME_FLOW_QUANTITY or (
            quantity == NORMAL_VELOCITY_QUANTITY
            and self.spatial_statistic == SURFACE_INTEGRAL_STATISTIC
        )

    @property
    def stuck_in_solid(self) -> bool:
        return any(point.init_solid for point in self.points)

    @property
    def beneath_ceiling(self) -> bool:
        return all(point.beneath_ceiling for point in self.points)


@dataclass(frozen=True)
class Property:
    """Names the quantity a class of devices measures (PROP)."""
    id: str
    index: int = 0
    quantity: Optional[str] = None
    part_id: Optional[str] = None
    spec_id: Optional[str] = None
    activation_temperature: Optional[float] = None  # °C
    activation_obscuration: Optional[float] = None  # %/m
    flow_rate: Optional[float] = None
    particle_velocity: Optional[float] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Property:
        return Property(
            id=data["id"],
            index=int(data.get("index", 0)),
            quantity=_opt_str(data, "quantity"),
            part_id=_opt_str(data, "part_id"),
            spec_id=_opt_str(data, "spec_id"),
            activation_temperature=_opt_float(data, "activation_temperature"),
            activation_obscuration=_opt_float(data, "activation_obscuration"),
            flow_rate=_opt_float(data, "flow_rate"),
            particle_velocity=_opt_float(data, "particle_velocity"),
        )

    @property
    def is_sprinkler(self) -> bool:
        return self.quantity == SPRINKLER_QUANTITY

    @property
    def is_thermal_detector(self) -> bool:
        return self.quantity == THERMAL_DETECTOR_QUANTITY

    @property
    def is_smoke_detector(self) -> bool:
        return self.quantity == SMOKE_DETECTOR_QUANTITY


@dataclass(frozen=True)
class Particle:
    id: str
    index: int = 0
    spec_id: Optional[str] = None
    devc_id: Optional[str] = None
    ctrl_id: Optional[str] = None
    surf_id: Optional[str] = None
    prop_id: Optional[str] = None
    diameter: Optional[float] = None
    monodisperse: bool = False
    age: Optional[float] = None
    sampling_factor: Optional[float] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Particle:
        return Particle(
            id=data["id"],
            index=int(data.get("index", 0)),
            spec_id=_opt_str(data, "spec_id"),
            devc_id=_opt_str(data, "devc_id"),
            ctrl_id=_opt_str(data, "ctrl_id"),
            surf_id=_opt_str(data, "surf_id"),
            prop_id=_opt_str(data, "prop_id"),
            diameter=_opt_float(data, "diameter"),
            monodisperse=bool(data.get("monodisperse", False)),
            age=_opt_float(data, "age"),
            sampling_factor=_opt_float(data, "sampling_factor"),
        )


@dataclass(frozen=True)
class HvacLink:
    vent_id: Optional[str] = None
    vent2_id: Optional[str] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> HvacLink:
        return HvacLink(vent_id=_opt_str(data, "vent_id"), vent2_id=_opt_str(data, "vent2_id"))


@dataclass(frozen=True)
class Reaction:
    """Fuel composition and combustion products (REAC)."""
    c: Optional[float] = None
    h: Optional[float] = None
    o: Optional[float] = None
    n: Optional[float] = None
    soot_yield: Optional[float] = None
    co_yield: Optional[float] = None
    soot_h_fraction: Optional[float] = None
    epumo2: Optional[float] = None  # kJ/kg
    heat_of_combustion: Optional[float] = None  # J/kg, as declared or resolved by FDS
    id: Optional[str] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Reaction:
        return Reaction(
            c=_opt_float(data, "c"),
            h=_opt_float(data, "h"),
            o=_opt_float(data, "o"),
            n=_opt_float(data, "n"),
            soot_yield=_opt_float(data, "soot_yield"),
            co_yield=_opt_float(data, "co_yield"),
            soot_h_fraction=_opt_float(data, "soot_h_fraction"),
            epumo2=_opt_float(data, "epumo2"),
            heat_of_combustion=_opt_float(data, "heat_of_combustion"),
            id=_opt_str(data, "id"),
        )


def vent_linked_to_hvac(vent: Vent, hvac: HvacLink) -> bool:
    if not vent.id:
        return False
    return hvac.vent_id == vent.id or hvac.vent2_id == vent.id


@dataclass(frozen=True)
class FdsData:
    """
    The root of the model. Owns every record; derived queries that need
    cross-lookups are methods here.
    """
    chid: str
    surfaces: Tuple[Surface, ...] = field(default_factory=tuple)
    meshes: Tuple[Mesh, ...] = field(default_factory=tuple)
    devices: Tuple[Device, ...] = field(default_factory=tuple)
    hvac: Tuple[HvacLink, ...] = field(default_factory=tuple)
    props: Tuple[Property, ...] = field(default_factory=tuple)
    parts: Tuple[Particle, ...] = field(default_factory=tuple)
    reacs: Tuple[Reaction, ...] = field(default_factory=tuple)
    visibility_factor: Optional[float] = None
    ec_ll: Optional[float] = None  # extinction coefficient lower limit, 1/m
    nframes: Optional[int] = None
    t_begin: float = DEFAULT_T_BEGIN
    t_end: float = DEFAULT_T_END

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> FdsData:
        """Build the model from the object graph emitted by the upstream parser."""
        dump = data.get("dump") or {}
        nframes = dump.get("nframes")
        time = data.get("time")
        if time is None:
            t_begin, t_end = DEFAULT_T_BEGIN, DEFAULT_T_END
        else:
            # A declared TIME without bounds leaves them at zero
            t_begin = float(time.get("begin") or 0.0)
            t_end = float(time.get("end") or 0.0)
        fds_data = FdsData(
            chid=data["chid"],
            surfaces=tuple(Surface.from_dict(s) for s in data.get("surfaces") or []),
            meshes=tuple(Mesh.from_dict(m) for m in data.get("meshes") or []),
            devices=tuple(Device.from_dict(d) for d in data.get("devices") or []),
            hvac=tuple(HvacLink.from_dict(h) for h in data.get("hvac") or []),
            props=tuple(Property.from_dict(p) for p in data.get("props") or []),
            parts=tuple(Particle.from_dict(p) for p in data.get("parts") or []),
            reacs=tuple(Reaction.from_dict(r) for r in data.get("reacs") or []),
            visibility_factor=_opt_float(data, "visibility_factor"),
            ec_ll=_opt_float(data, "ec_ll"),
            nframes=None if nframes is None else int(nframes),
            t_begin=t_begin,
            t_end=t_end,
        )
        logger.debug(
            f"Loaded model '{fds_data.chid}': {len(fds_data.meshes)} meshes, "
            f"{len(fds_data.surfaces)} surfaces, {len(fds_data.devices)} devices"
        )
        return fds_data

    @property
    def simulation_length(self) -> float:
        return self.t_end - self.t_begin

    @property
    def reaction(self) -> Optional[Reaction]:
        """The first REAC, if any. Most checks expect exactly one."""
        return self.reacs[0] if self.reacs else None

    # --- Lookups ---

    def get_surface(self, surface_id: Optional[str]) -> Optional[Surface]:
        if not surface_id:
            return None
        for surface in self.surfaces:
            if surface.id == surface_id:
                return surface
        return None

    def get_prop(self, prop_id: Optional[str]) -> Optional[Property]:
        if not prop_id:
            return None
        for prop in self.props:
            if prop.id == prop_id:
                return prop
        return None

    @cached_property
    def vents(self) -> Tuple[Vent, ...]:
        return tuple(vent for mesh in self.meshes for vent in mesh.vents)

    @cached_property
    def obsts(self) -> Tuple[Obstruction, ...]:
        return tuple(obst for mesh in self.meshes for obst in mesh.obsts)

    # --- Burners ---

    def is_burner_vent(self, vent: Vent) -> bool:
        surface = self.get_surface(vent.surface)
        return surface is not None and surface.is_burner

    def is_burner_obst(self, obst: Obstruction) -> bool:
        for surface_id in obst.surface_ids():
            surface = self.get_surface(surface_id)
            if surface is not None and surface.is_burner:
                return True
        return False

    # --- Flows ---

    def vent_has_flow(self, vent: Vent) -> bool:
        # TODO: flows delivered through HVAC ducts (see vent_linked_to_hvac) are not tracked yet.
        is_hvac = False
        surface = self.get_surface(vent.surface)
        if surface is None:
            return is_hvac
        return is_hvac or surface.has_flow

    def vent_flow_rate(self, vent: Vent) -> Optional[float]:
        """
        Volumetric flow through a vent in m³/s, negative into the domain.
        A velocity boundary is converted using the realised vent area.
        """
        surface = self.get_surface(vent.surface)
        if surface is None:
            return None
        if surface.volume_flow is not None:
            return surface.volume_flow
        if surface.vel is not None:
            return surface.vel * vent.fds_area
        return None

    @cached_property
    def flow_devices(self) -> Tuple[Device, ...]:
        return tuple(devc for devc in self.devices if devc.is_flow_device)

    def has_flow_device(self, vent: Vent) -> bool:
        """Is there a flow measuring device covering exactly the vent?"""
        # TODO: devices measuring DUCT VOLUME FLOW via DUCT_ID are not matched yet.
        return any(dimensions_match(vent.dimensions, devc.dimensions) for devc in self.flow_devices)

    def _unique_flow_vents(self, predicate) -> Tuple[Vent, ...]:
        # A vent split across mesh boundaries appears once per mesh.
        unique: List[Vent] = []
        for vent in self.vents:
            if not self.vent_has_flow(vent):
                continue
            surface = self.get_surface(vent.surface)
            if surface is None or not predicate(surface):
                continue
            if any(v.id == vent.id and dimensions_match(v.dimensions, vent.dimensions) for v in unique):
                continue
            unique.append(vent)
        return tuple(unique)

    @cached_property
    def supplies(self) -> Tuple[Vent, ...]:
        return self._unique_flow_vents(lambda surface: surface.is_supply)

    @cached_property
    def extracts(self) -> Tuple[Vent, ...]:
        return self._unique_flow_vents(lambda surface: surface.is_extract)

    # --- Devices ---

    def device_prop(self, devc: Device) -> Optional[Property]:
        return self.get_prop(devc.prop_id)

    def is_sprinkler(self, devc: Device) -> bool:
        prop = self.device_prop(devc)
        return prop is not None and prop.is_sprinkler

    def is_thermal_detector(self, devc: Device) -> bool:
        prop = self.device_prop(devc)
        return prop is not None and prop.is_thermal_detector

    def is_smoke_detector(self, devc: Device) -> bool:
        prop = self.device_prop(devc)
        return prop is not None and prop.is_smoke_detector

    @cached_property
    def sprinklers(self) -> Tuple[Device, ...]:
        return tuple(devc for devc in self.devices if self.is_sprinkler(devc))

    @cached_property
    def smoke_detectors(self) -> Tuple[Device, ...]:
        return tuple(devc for devc in self.devices if self.is_smoke_detector(devc))

    @cached_property
    def thermal_detectors(self) -> Tuple[Device, ...]:
        return tuple(devc for devc in self.devices if self.is_thermal_detector(devc))
