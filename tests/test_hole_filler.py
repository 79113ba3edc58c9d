# tests/test_hole_filler.py
import logging

import numpy as np
import pytest

from halfedge_mesh import HalfEdgeMesh, Region, find_holes, fill_holes

from conftest import make_grid


@pytest.fixture
def holed():
    # 3x3 cells, the center one missing
    return make_grid(3, hole_cells={(1, 1)})


def hole_vertices(mesh, hole):
    return {mesh.edges[eh].start for eh in hole}


class TestFindHoles:
    def test_finds_inner_hole(self, holed):
        holes = find_holes(holed, 5)
        assert len(holes) == 1
        assert len(holes[0]) == 4
        positions = sorted(tuple(holed.vertices[vh].position[:2]) for vh in hole_vertices(holed, holes[0]))
        assert positions == [(1, 1), (1, 2), (2, 1), (2, 2)]

    def test_outer_boundary_is_a_loop_too(self, holed):
        holes = find_holes(holed, 20)
        assert sorted(len(hole) for hole in holes) == [4, 12]

    def test_loops_are_closed(self, holed):
        edges = holed.edges
        for hole in find_holes(holed, 20):
            for i, eh in enumerate(hole):
                assert edges[eh].face is None
                assert edges[eh].end == edges[hole[(i + 1) % len(hole)]].start

    def test_used_flags_are_reset(self, holed):
        find_holes(holed, 20)
        assert not any(edge.used for eh, edge in holed.edges.items())

    def test_closed_mesh_has_no_holes(self, tetrahedron):
        assert find_holes(tetrahedron, 100) == []


class TestFillHoles:
    def test_square_hole_without_collapse(self, holed):
        assert fill_holes(holed, 5, collapse=False) == 2
        assert holed.face_count == 18
        assert find_holes(holed, 5) == []
        holed.check_invariants()

    def test_square_hole_with_collapse(self, holed):
        assert fill_holes(holed, 5) >= 1
        assert find_holes(holed, 5) == []
        holed.check_invariants()

    def test_ring_gains_n_minus_2_faces(self):
        # 2x2 cell hole: its boundary has 8 edges
        mesh = make_grid(5, hole_cells={(1, 1), (2, 1), (1, 2), (2, 2)})
        holes = find_holes(mesh, 10)
        assert [len(hole) for hole in holes] == [8]
        assert fill_holes(mesh, 10, collapse=False) == 6
        assert mesh.face_count == 48
        assert find_holes(mesh, 10) == []
        mesh.check_invariants()

    def test_new_faces_face_the_same_way(self, holed):
        fill_holes(holed, 5, collapse=False)
        for fh, face in holed.faces.items():
            assert face.normal[2] > 0

    def test_new_faces_join_the_neighbor_region(self, holed):
        region = Region(0)
        for fh in holed.faces:
            region.add_face(fh)
        holed.set_regions([region])
        fill_holes(holed, 5, collapse=False)
        assert len(region) == 18
        assert all(face.region == 0 for fh, face in holed.faces.items())
        holed.check_invariants()

    def test_large_holes_are_left_open(self, holed):
        assert fill_holes(holed, 4) == 0
        assert holed.face_count == 16

    def test_collinear_hole_is_left_open(self, caplog):
        # Four-edge hole with all corners on the x axis: no ear can be
        # clipped and no three of its edges form a cycle
        positions = [(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0), (1.5, 1, 1), (1.5, -1, 1)]
        triangles = [(1, 0, 4), (2, 1, 4), (3, 2, 4), (0, 3, 5), (4, 0, 5), (5, 3, 4)]
        mesh = HalfEdgeMesh.build(positions, triangles)
        assert [len(hole) for hole in find_holes(mesh, 5)] == [4]
        with caplog.at_level(logging.DEBUG, logger="halfedge_mesh"):
            assert fill_holes(mesh, 5, collapse=False) == 0
        assert "4 hole edges left open" in caplog.text
        assert mesh.face_count == 6
        assert [len(hole) for hole in find_holes(mesh, 5)] == [4]
        mesh.check_invariants()
