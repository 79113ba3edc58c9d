# tests/conftest.py
"""
Mesh builders shared by the test modules
"""
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from halfedge_mesh import HalfEdgeMesh


def make_grid(n, m=None, hole_cells=(), height=None, normal=None):
    """
    Grid of n x m unit cells in the XY plane, two triangles per cell
    (counter-clockwise seen from +Z). hole_cells: (i, j) cells to skip.
    height: optional function (x, y) -> z
    normal: optional normal stored on every vertex
    """
    m = n if m is None else m
    positions = []
    for j in range(m + 1):
        for i in range(n + 1):
            z = (height(i, j) if height else 0.0)
            positions.append((float(i), float(j), float(z)))

    triangles = []
    for j in range(m):
        for i in range(n):
            if (i, j) in hole_cells:
                continue
            a = j * (n + 1) + i
            b = a + 1
            c = a + (n + 1) + 1
            d = a + (n + 1)
            triangles.append((a, b, c))
            triangles.append((a, c, d))

    normals = (None if normal is None else [normal] * len(positions))
    return HalfEdgeMesh.build(positions, triangles, normals=normals)


def vertex_at(mesh, x, y):
    for vh, vertex in mesh.vertices.items():
        if abs(vertex.position[0] - x) < 1e-9 and abs(vertex.position[1] - y) < 1e-9:
            return vh
    return None


@pytest.fixture
def square():
    positions = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    mesh = HalfEdgeMesh.build(positions, [])
    mesh.add_triangle(0, 1, 2)
    mesh.add_triangle(0, 2, 3)
    return mesh


@pytest.fixture
def tetrahedron():
    positions = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)]
    triangles = [(0, 2, 1), (0, 1, 3), (1, 2, 3), (0, 3, 2)]
    return HalfEdgeMesh.build(positions, triangles)


@pytest.fixture
def fold():
    # Flat for x <= 5, rising at 45 degrees beyond
    return make_grid(10, height=(lambda x, y: max(x - 5, 0)))
