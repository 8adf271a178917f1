"""
Tests for the extent sweep and the ceiling height histogram.
"""
import pytest

from fdsinspect.model.ceiling import (
    CeilingHeight,
    Extent,
    dimension_extent,
    extents,
    get_ceiling_heights,
    greatest_extent,
)
from fdsinspect.model.fds import Mesh
from fdsinspect.model.geometry import Axis

from conftest import make_mesh, make_obst


def mesh(**kwargs) -> Mesh:
    return Mesh.from_dict(make_mesh(**kwargs))


# Obstruction covering the top cell of the first three columns in x
SOFFIT = make_obst((0.0, 3.0, 0.0, 10.0, 2.0, 3.0), (0, 3, 0, 10, 2, 3), id="SOFFIT")


class TestExtents:
    """Test the boundary sweep"""

    def test_single_mesh(self):
        result = extents(Axis.Z, [mesh()])
        assert result.axis == Axis.Z
        assert result.areas == (Extent(0.0, 3.0, 100.0),)

    def test_adjacent_meshes_of_equal_section_merge(self):
        meshes = [
            mesh(id="A", bounds=(0.0, 10.0, 0.0, 10.0, 0.0, 3.0)),
            mesh(id="B", bounds=(10.0, 20.0, 0.0, 10.0, 0.0, 3.0)),
        ]
        assert extents(Axis.X, meshes).areas == (Extent(0.0, 20.0, 30.0),)

    def test_differing_sections(self):
        meshes = [
            mesh(id="A", bounds=(0.0, 10.0, 0.0, 10.0, 0.0, 3.0)),
            mesh(id="B", bounds=(10.0, 20.0, 0.0, 5.0, 0.0, 3.0), ijk=(10, 5, 3)),
        ]
        assert extents(Axis.X, meshes).areas == (Extent(0.0, 10.0, 30.0), Extent(10.0, 20.0, 15.0))

    def test_obstructions_remove_area(self):
        result = extents(Axis.Z, [mesh(obsts=[SOFFIT])])
        assert result.areas == (Extent(0.0, 2.0, 100.0), Extent(2.0, 3.0, 70.0))

    def test_obstructions_can_be_excluded(self):
        result = extents(Axis.Z, [mesh(obsts=[SOFFIT])], include_obsts=False)
        assert result.areas == (Extent(0.0, 3.0, 100.0),)

    def test_greatest_extent(self):
        assert greatest_extent(Axis.Z, [mesh(obsts=[SOFFIT])]) == Extent(0.0, 2.0, 100.0)
        assert greatest_extent(Axis.Z, []) is None

    def test_dimension_extent(self):
        spans = dimension_extent(Axis.Z, [mesh(obsts=[SOFFIT])], (1.0, 5.0))
        assert spans == [(0.0, 3.0, True), (2.0, 3.0, False)]
        assert dimension_extent(Axis.Z, [mesh(obsts=[SOFFIT])], (5.0, 5.0)) == [(0.0, 3.0, True)]
        assert dimension_extent(Axis.Z, [mesh()], (50.0, 5.0)) == []


def as_dict(heights):
    return {entry.height: entry.area for entry in heights}


class TestCeilingHeights:
    """Test the area-weighted clear height histogram"""

    def test_open_room(self, fds_data):
        assert get_ceiling_heights(fds_data) == [CeilingHeight(height=3.0, area=100.0)]

    def test_soffit_lowers_part_of_the_ceiling(self, build_model):
        heights = get_ceiling_heights(build_model(meshes=[make_mesh(obsts=[SOFFIT])]))
        assert [entry.height for entry in heights] == pytest.approx([3.0, 2.0])
        assert [entry.area for entry in heights] == pytest.approx([70.0, 30.0])

    def test_overlapping_obstructions_are_not_double_counted(self, build_model):
        upper = make_obst((0.0, 1.0, 0.0, 1.0, 1.0, 3.0), (0, 1, 0, 1, 1, 3), id="UPPER")
        lower = make_obst((0.0, 1.0, 0.0, 1.0, 2.0, 3.0), (0, 1, 0, 1, 2, 3), id="LOWER")
        heights = as_dict(get_ceiling_heights(build_model(meshes=[make_mesh(obsts=[upper, lower])])))
        assert heights[1.0] == pytest.approx(1.0)
        assert heights[3.0] == pytest.approx(99.0)

    def test_flat_obstructions_are_ignored(self, build_model):
        baffle = make_obst((2.0, 2.0, 0.0, 10.0, 0.0, 3.0), (2, 2, 0, 10, 0, 3), id="BAFFLE")
        heights = get_ceiling_heights(build_model(meshes=[make_mesh(obsts=[baffle])]))
        assert heights == [CeilingHeight(height=3.0, area=100.0)]

    def test_area_is_conserved_across_meshes(self, build_model):
        fds_data = build_model(meshes=[
            make_mesh(id="A", bounds=(0.0, 10.0, 0.0, 10.0, 0.0, 3.0), obsts=[SOFFIT], index=0),
            make_mesh(id="B", bounds=(10.0, 20.0, 0.0, 10.0, 0.0, 3.0), ijk=(20, 20, 6), index=1),
        ])
        heights = get_ceiling_heights(fds_data)
        assert sum(entry.area for entry in heights) == pytest.approx(200.0)
        assert as_dict(heights)[3.0] == pytest.approx(170.0)

    def test_largest_area_first(self, build_model):
        heights = get_ceiling_heights(build_model(meshes=[make_mesh(obsts=[SOFFIT])]))
        areas = [entry.area for entry in heights]
        assert areas == sorted(areas, reverse=True)

    def test_no_meshes(self, build_model):
        assert get_ceiling_heights(build_model(meshes=[])) == []
