"""
Geometric Primitives for FDS Objects.

FDS describes meshes, vents and obstructions as axis-aligned boxes ("XB").
This module holds the real and integer box types and the handful of box
predicates the rest of the package relies on.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, Any, Iterable, Optional, Tuple

from fdsinspect.config import INTERSECT_EPSILON


class Axis(StrEnum):
    X = "x"
    Y = "y"
    Z = "z"


@dataclass(frozen=True)
class Xyz:
    """A real location in 3D space."""
    x: float
    y: float
    z: float

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Xyz:
        return Xyz(x=float(data["x"]), y=float(data["y"]), z=float(data["z"]))


@dataclass(frozen=True)
class Xb:
    """Real 3D rectilinear bounds."""
    x1: float
    x2: float
    y1: float
    y2: float
    z1: float
    z2: float

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Xb:
        return Xb(
            x1=float(data["x1"]), x2=float(data["x2"]),
            y1=float(data["y1"]), y2=float(data["y2"]),
            z1=float(data["z1"]), z2=float(data["z2"]),
        )

    def span(self, axis: Axis) -> Tuple[float, float]:
        """(start, end) of the box along an axis."""
        if axis == Axis.X:
            return self.x1, self.x2
        if axis == Axis.Y:
            return self.y1, self.y2
        if axis == Axis.Z:
            return self.z1, self.z2
        raise ValueError(f"Unknown axis: {axis}")

    def face_area(self, axis: Axis) -> float:
        """Area of the face normal to an axis."""
        if axis == Axis.X:
            return (self.y2 - self.y1) * (self.z2 - self.z1)
        if axis == Axis.Y:
            return (self.x2 - self.x1) * (self.z2 - self.z1)
        if axis == Axis.Z:
            return (self.x2 - self.x1) * (self.y2 - self.y1)
        raise ValueError(f"Unknown axis: {axis}")

    @property
    def is_well_ordered(self) -> bool:
        return self.x1 < self.x2 and self.y1 < self.y2 and self.z1 < self.z2


@dataclass(frozen=True)
class IjkBounds:
    """Integer 3D rectilinear bounds (cell indices)."""
    i_min: int
    i_max: int
    j_min: int
    j_max: int
    k_min: int
    k_max: int

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> IjkBounds:
        return IjkBounds(
            i_min=int(data["i_min"]), i_max=int(data["i_max"]),
            j_min=int(data["j_min"]), j_max=int(data["j_max"]),
            k_min=int(data["k_min"]), k_max=int(data["k_max"]),
        )

    def is_flat(self, axis: Axis) -> bool:
        if axis == Axis.X:
            return self.i_min == self.i_max
        if axis == Axis.Y:
            return self.j_min == self.j_max
        if axis == Axis.Z:
            return self.k_min == self.k_max
        raise ValueError(f"Unknown axis: {axis}")


@dataclass(frozen=True)
class Resolution:
    """Mesh cell size in each direction."""
    dx: float
    dy: float
    dz: float

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Resolution:
        return Resolution(dx=float(data["dx"]), dy=float(data["dy"]), dz=float(data["dz"]))


def _overlap(a_start: float, a_end: float, b_start: float, b_end: float) -> bool:
    return min(a_end, b_end) - max(a_start, b_start) > INTERSECT_EPSILON


def intersect(a: Xb, b: Xb) -> bool:
    """
    Test if two boxes intersect.

    All three axis projections must overlap by more than INTERSECT_EPSILON.
    Boxes that only share a face do not intersect.
    """
    return (
        _overlap(a.x1, a.x2, b.x1, b.x2)
        and _overlap(a.y1, a.y2, b.y1, b.y2)
        and _overlap(a.z1, a.z2, b.z1, b.z2)
    )


def dimensions_match(a: Xb, b: Xb) -> bool:
    """Exact equality of all six bounds."""
    return (
        a.x1 == b.x1 and a.x2 == b.x2
        and a.y1 == b.y1 and a.y2 == b.y2
        and a.z1 == b.z1 and a.z2 == b.z2
    )


def dimensions_overlap_xy(a: Xb, b: Xb) -> bool:
    """Do the plan (XY) projections of two boxes overlap?"""
    return (a.x2 > b.x1 and a.x1 < b.x2) and (a.y2 > b.y1 and a.y1 < b.y2)


def contains_xy(box: Xb, x: float, y: float) -> bool:
    """Is the plan coordinate within (or on the edge of) the box?"""
    return box.x1 <= x <= box.x2 and box.y1 <= y <= box.y2


def bounding_extent(boxes: Iterable[Xb]) -> Optional[Xb]:
    """
    The bounding box of a collection of boxes.

    Returns:
        None for an empty collection.
    """
    current: Optional[Xb] = None
    for box in boxes:
        if current is None:
            current = box
            continue
        current = Xb(
            x1=min(current.x1, box.x1), x2=max(current.x2, box.x2),
            y1=min(current.y1, box.y1), y2=max(current.y2, box.y2),
            z1=min(current.z1, box.z1), z2=max(current.z2, box.z2),
        )
    return current
