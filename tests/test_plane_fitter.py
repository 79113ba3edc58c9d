# tests/test_plane_fitter.py
import numpy as np
import pytest

from halfedge_mesh import PlaneFitter


POINTS = [(0, 0, 2), (1, 0, 2), (0, 1, 2), (1, 1, 2), (0.5, 0.3, 2)]


class TestFit:
    def test_svd(self):
        center, normal = PlaneFitter.fit(POINTS)
        assert center[2] == pytest.approx(2.0)
        assert abs(normal[2]) == pytest.approx(1.0)

    def test_weighted(self):
        center, normal = PlaneFitter.fit(POINTS, weights=[1, 1, 1, 1, 4])
        assert center[2] == pytest.approx(2.0)
        assert abs(normal[2]) == pytest.approx(1.0)
        assert np.linalg.norm(normal) == pytest.approx(1.0)

    def test_tilted(self):
        points = [(x, y, x + y) for x in range(3) for y in range(3)]
        center, normal = PlaneFitter.fit(points)
        expected = np.array((1, 1, -1)) / np.sqrt(3)
        assert abs(np.dot(normal, expected)) == pytest.approx(1.0)
        assert np.allclose(PlaneFitter.distance(points, center, normal), 0)

    def test_too_few_points(self):
        assert PlaneFitter.fit([(0, 0, 0), (1, 0, 0)]) == (None, None)

    def test_collinear_points(self):
        assert PlaneFitter.fit([(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)]) == (None, None)


class TestPlaneOperations:
    def test_intersect(self):
        point, direction = PlaneFitter.intersect(
            np.zeros(3), np.array((0.0, 0.0, 1.0)),
            np.array((1.0, 5.0, 7.0)), np.array((1.0, 0.0, 0.0)))
        assert np.allclose(np.abs(direction), (0, 1, 0))
        assert point[0] == pytest.approx(1.0)
        assert point[2] == pytest.approx(0.0)

    def test_parallel_planes(self):
        normal = np.array((0.0, 0.0, 1.0))
        assert PlaneFitter.intersect(np.zeros(3), normal, np.ones(3), normal) == (None, None)

    def test_project_onto_line(self):
        point = PlaneFitter.project_onto_line(np.array((3.0, 4.0, 1.0)), np.zeros(3), np.array((0.0, 1.0, 0.0)))
        assert np.allclose(point, (0, 4, 0))
