# tests/test_tesselator.py
import numpy as np
import pytest

from halfedge_mesh import ContourTesselator


UP = (0.0, 0.0, 1.0)


def total_area(points, triangles):
    area = 0.0
    for a, b, c in triangles:
        area += 0.5 * np.linalg.norm(np.cross(points[b] - points[a], points[c] - points[a]))
    return area


def check_winding(points, triangles, normal):
    for a, b, c in triangles:
        assert np.dot(np.cross(points[b] - points[a], points[c] - points[a]), normal) > 0


class TestContourTesselator:
    def test_square(self):
        square = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
        points, triangles = ContourTesselator().tesselate([square], UP)
        assert len(points) == 4
        assert len(triangles) == 2
        assert total_area(points, triangles) == pytest.approx(1.0)
        check_winding(points, triangles, UP)

    def test_clockwise_input_is_reoriented(self):
        square = [(0, 0, 0), (0, 1, 0), (1, 1, 0), (1, 0, 0)]
        points, triangles = ContourTesselator().tesselate([square], UP)
        assert len(triangles) == 2
        check_winding(points, triangles, UP)

    def test_collinear_vertices_are_dropped(self):
        square = [(0, 0, 0), (1, 0, 0), (2, 0, 0), (2, 1, 0), (2, 2, 0), (0, 2, 0), (0, 1, 0)]
        points, triangles = ContourTesselator().tesselate([square], UP)
        assert len(points) == 4
        assert len(triangles) == 2
        assert total_area(points, triangles) == pytest.approx(4.0)

    def test_l_shape(self):
        shape = [(0, 0, 0), (2, 0, 0), (2, 1, 0), (1, 1, 0), (1, 2, 0), (0, 2, 0)]
        points, triangles = ContourTesselator().tesselate([shape], UP)
        assert len(triangles) == 4
        assert total_area(points, triangles) == pytest.approx(3.0)
        check_winding(points, triangles, UP)

    def test_square_with_hole(self):
        outer = [(0, 0, 0), (4, 0, 0), (4, 4, 0), (0, 4, 0)]
        hole = [(1, 1, 0), (1, 3, 0), (3, 3, 0), (3, 1, 0)]
        points, triangles = ContourTesselator().tesselate([hole, outer], UP)
        assert len(points) == 8
        assert len(triangles) == 8
        assert total_area(points, triangles) == pytest.approx(12.0)
        check_winding(points, triangles, UP)

    def test_tilted_plane(self):
        normal = np.array((-1.0, 0.0, 1.0)) / np.sqrt(2)
        quad = [(5, 0, 0), (10, 0, 5), (10, 10, 5), (5, 10, 0)]
        points, triangles = ContourTesselator().tesselate([quad], normal)
        assert len(triangles) == 2
        assert total_area(points, triangles) == pytest.approx(50 * np.sqrt(2))
        check_winding(points, triangles, normal)

    def test_degenerate_input(self):
        line = [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
        assert ContourTesselator().tesselate([line], UP) == (None, None)
        assert ContourTesselator().tesselate([], UP) == (None, None)
