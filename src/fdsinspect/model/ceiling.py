"""
Extents and Ceiling Heights
===========================
Sweep algorithms over mesh and obstruction extents.

``extents`` sweeps the boundaries of meshes (and obstructions) along one axis
and returns sorted, non-overlapping segments with the net open area of the
cross-section in each. The segment with the greatest area picks the
elevation at which the floor plan is examined.

``get_ceiling_heights`` then maps every obstruction onto the plan cells of
the meshes at that elevation, takes the union of the solid cells in each
column, and builds an area-weighted histogram of the clear heights.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from fdsinspect.model.fds import FdsData, Mesh, Obstruction
from fdsinspect.model.geometry import Axis, IjkBounds, contains_xy

logger = logging.getLogger(__name__)

# Heights closer than this are reported as the same ceiling height.
HEIGHT_DECIMALS = 6


@dataclass(frozen=True)
class Extent:
    start: float
    end: float
    area: float


@dataclass(frozen=True)
class Extents:
    axis: Axis
    areas: Tuple[Extent, ...]


@dataclass(frozen=True)
class CeilingHeight:
    height: float  # m
    area: float  # m²


def obst_flat(axes: Iterable[Axis], obst: Obstruction) -> bool:
    """Is the obstruction zero cells thick along any of the axes?"""
    return any(obst.bounds.is_flat(axis) for axis in axes)


def extents(axis: Axis, meshes: Sequence[Mesh], include_obsts: bool = True) -> Extents:
    """
    Sweep mesh (and obstruction) boundaries along an axis.

    Each mesh adds its cross-sectional area where it starts and removes it
    where it ends. Each obstruction removes its area where it starts and
    gives it back where it ends, so the running sum is the net open area.

    Returns:
        Segments sorted by position, adjacent segments of equal area merged.
    """
    events: List[Tuple[float, float]] = []
    for mesh in meshes:
        start, end = mesh.dimensions.span(axis)
        area = mesh.area(axis)
        if include_obsts:
            for obst in mesh.obsts:
                obst_start, obst_end = obst.dimensions.span(axis)
                obst_area = obst.area(axis)
                events.append((obst_start, -obst_area))
                events.append((obst_end, obst_area))
        events.append((start, area))
        events.append((end, -area))
    events.sort(key=lambda event: event[0])

    # Combine events at the same position
    positions: List[float] = []
    deltas: List[float] = []
    for value, delta in events:
        if positions and positions[-1] == value:
            deltas[-1] += delta
        else:
            positions.append(value)
            deltas.append(delta)

    segments: List[Extent] = []
    current_area = 0.0
    for n in range(len(positions) - 1):
        current_area += deltas[n]
        if segments and segments[-1].area == current_area:
            segments[-1] = Extent(segments[-1].start, positions[n + 1], current_area)
        else:
            segments.append(Extent(positions[n], positions[n + 1], current_area))
    return Extents(axis=axis, areas=tuple(segments))


def greatest_extent(axis: Axis, meshes: Sequence[Mesh]) -> Optional[Extent]:
    """The first segment with the greatest area, None if there are no meshes."""
    greatest: Optional[Extent] = None
    for extent in extents(axis, meshes).areas:
        if greatest is None or extent.area > greatest.area:
            greatest = extent
    return greatest


def dimension_extent(axis: Axis, meshes: Sequence[Mesh], coord: Tuple[float, float]) -> List[Tuple[float, float, bool]]:
    """
    The mesh (gas) and obstruction (solid) spans along an axis through a
    plan coordinate, as (start, end, gas) tuples.
    """
    spans: List[Tuple[float, float, bool]] = []
    x, y = coord
    for mesh in meshes:
        if not contains_xy(mesh.dimensions, x, y):
            continue
        start, end = mesh.dimensions.span(axis)
        spans.append((start, end, True))
        for obst in mesh.obsts:
            if contains_xy(obst.dimensions, x, y):
                obst_start, obst_end = obst.dimensions.span(axis)
                spans.append((obst_start, obst_end, False))
    return spans


@dataclass
class CellMap:
    """Solid k-ranges recorded against each (i, j) column of a mesh."""
    mesh: Mesh
    extents: Dict[Tuple[int, int], List[Tuple[int, int]]] = field(default_factory=dict)

    @property
    def i_max(self) -> int:
        return self.mesh.ijk.i

    @property
    def j_max(self) -> int:
        return self.mesh.ijk.j

    @property
    def k_max(self) -> int:
        return self.mesh.ijk.k

    def add_extent(self, i: int, j: int, k_start: int, k_end: int) -> None:
        self.extents.setdefault((i, j), []).append((k_start, k_end))

    def add_obst(self, bounds: IjkBounds) -> None:
        for i in range(max(bounds.i_min, 0), min(bounds.i_max, self.i_max)):
            for j in range(max(bounds.j_min, 0), min(bounds.j_max, self.j_max)):
                self.add_extent(i, j, bounds.k_min, bounds.k_max)

    def solid_cells(self, i: int, j: int) -> int:
        """Number of cells in the column covered by at least one extent."""
        intervals = sorted(
            (max(start, 0), min(end, self.k_max))
            for start, end in self.extents.get((i, j), [])
        )
        covered = 0
        current_start: Optional[int] = None
        current_end = 0
        for start, end in intervals:
            if end <= start:
                continue
            if current_start is None or start > current_end:
                if current_start is not None:
                    covered += current_end - current_start
                current_start, current_end = start, end
            else:
                current_end = max(current_end, end)
        if current_start is not None:
            covered += current_end - current_start
        return covered


def get_region_extents(meshes: Sequence[Mesh], elevation: float) -> List[CellMap]:
    """Cell maps for every mesh whose vertical span contains the elevation."""
    cell_maps: List[CellMap] = []
    for mesh in meshes:
        if not (mesh.dimensions.z1 <= elevation <= mesh.dimensions.z2):
            continue
        cell_map = CellMap(mesh)
        for obst in mesh.obsts:
            if obst_flat((Axis.X, Axis.Y), obst):
                continue
            cell_map.add_obst(obst.bounds)
        cell_maps.append(cell_map)
    return cell_maps


def clear_heights(cell_map: CellMap) -> List[CeilingHeight]:
    """
    Clear height of every column of a mesh, grouped by height.

    The clear height is the mesh height less the union of the solid extents
    in the column. Each column contributes its cell footprint to its group.
    """
    resolution = cell_map.mesh.cell_sizes
    footprint = resolution.dx * resolution.dy
    counts: Dict[int, int] = {}
    for (i, j) in cell_map.extents:
        if not (0 <= i < cell_map.i_max and 0 <= j < cell_map.j_max):
            continue
        open_cells = cell_map.k_max - cell_map.solid_cells(i, j)
        counts[open_cells] = counts.get(open_cells, 0) + 1
    unobstructed = cell_map.i_max * cell_map.j_max - sum(counts.values())
    if unobstructed > 0:
        counts[cell_map.k_max] = counts.get(cell_map.k_max, 0) + unobstructed
    return [
        CeilingHeight(height=open_cells * resolution.dz, area=n_columns * footprint)
        for open_cells, n_columns in sorted(counts.items(), reverse=True)
    ]


def get_ceiling_heights(fds_data: FdsData) -> List[CeilingHeight]:
    """
    Area-weighted histogram of clear heights, largest area first.

    The floor plan is examined at the middle of the horizontal layer with the
    greatest open area.
    """
    greatest = greatest_extent(Axis.Z, fds_data.meshes)
    if greatest is None:
        return []
    elevation = (greatest.start + greatest.end) / 2
    logger.debug(f"Sampling ceiling heights at z = {elevation}")

    heights: Dict[float, float] = {}
    for cell_map in get_region_extents(fds_data.meshes, elevation):
        for entry in clear_heights(cell_map):
            key = round(entry.height, HEIGHT_DECIMALS)
            heights[key] = heights.get(key, 0.0) + entry.area
    histogram = [CeilingHeight(height=height, area=area) for height, area in heights.items()]
    histogram.sort(key=lambda entry: entry.area, reverse=True)
    return histogram
