# tests/test_finalize.py
import numpy as np
import pytest

from halfedge_mesh import (
    HalfEdgeMesh, Region, NO_TEXTURE, DEFAULT_COLOR,
    finalize, finalize_and_retesselate, optimize_planes,
)
from halfedge_mesh.finalize import GrowableBuffer
from halfedge_mesh.utils import region_color

from conftest import make_grid


class TestGrowableBuffer:
    def test_grows_and_trims(self):
        buffer = GrowableBuffer(np.float32, capacity=4)
        buffer.extend([1, 2, 3])
        assert len(buffer.data) == 4
        buffer.extend([4, 5])
        assert len(buffer.data) == 8
        result = buffer.trim()
        assert result.dtype == np.float32
        assert list(result) == [1, 2, 3, 4, 5]

    def test_nested_values_are_flattened(self):
        buffer = GrowableBuffer(np.uint32)
        buffer.extend([(0, 1, 2), (2, 3, 0)])
        assert len(buffer) == 6


class TestFinalize:
    def test_square(self, square):
        buffer = finalize(square)
        assert buffer.vertex_count == 4
        assert buffer.face_count == 2
        assert buffer.vertices.dtype == np.float32
        assert buffer.normals.dtype == np.float32
        assert buffer.indices.dtype == np.uint32
        assert np.allclose(buffer.colors.reshape(-1, 3), DEFAULT_COLOR)

    def test_stored_normals_are_flipped(self):
        mesh = HalfEdgeMesh.build([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [(0, 1, 2)], normals=[(0, 0, -1)] * 3)
        buffer = finalize(mesh)
        assert np.allclose(buffer.normals.reshape(-1, 3), (0, 0, 1))

    def test_missing_normals_use_faces(self, square):
        buffer = finalize(square)
        assert np.allclose(buffer.normals.reshape(-1, 3), (0, 0, -1))

    def test_indices_are_dense(self, square):
        square.delete_face(next(iter(square.faces)))
        buffer = finalize(square)
        assert buffer.vertex_count == 3
        assert buffer.face_count == 1
        assert sorted(buffer.indices) == [0, 1, 2]
        positions = buffer.vertices.reshape(-1, 3)[buffer.indices]
        assert sorted(map(tuple, positions[:, :2])) == [(0, 0), (0, 1), (1, 1)]

    def test_region_colors(self, square):
        region = Region(0)
        for fh in square.faces:
            region.add_face(fh)
        square.set_regions([region])
        buffer = finalize(square, color_regions=True)
        assert np.allclose(buffer.colors.reshape(-1, 3), region_color(0))
        assert np.allclose(region_color(0), (1, 0, 0))


class TestRetesselate:
    def test_flat_grid_becomes_two_triangles(self):
        mesh = make_grid(10)
        optimize_planes(mesh)
        buffer = finalize_and_retesselate(mesh)
        assert buffer.face_count == 2
        assert buffer.vertex_count == 4
        assert list(buffer.texture_indices) == [0, 0]
        assert len(buffer.textures) == 1
        assert list(buffer.texture_ids) == [buffer.textures[0].id]
        assert len(buffer.texture_coords) == 12
        assert np.all((buffer.texture_coords >= 0) & (buffer.texture_coords <= 1))

    def test_fold(self, fold):
        optimize_planes(fold)
        buffer = finalize_and_retesselate(fold, color_regions=True)
        assert buffer.face_count == 4
        assert len(buffer.textures) == 2
        colors = {tuple(np.round(color, 5)) for color in buffer.colors.reshape(-1, 3)}
        assert colors == {tuple(np.round(np.array(region_color(i), dtype=np.float32), 5)) for i in (0, 1)}

    def test_non_planar_faces_are_kept(self):
        mesh = make_grid(3)
        optimize_planes(mesh)
        buffer = finalize_and_retesselate(mesh)
        assert buffer.face_count == 18
        assert buffer.vertex_count == 16
        assert list(buffer.texture_indices) == [NO_TEXTURE] * 18
        assert buffer.textures == []

    def test_failed_tesselation_falls_back(self):
        class FailingTesselator:
            def tesselate(self, contours, normal):
                return None, None

        mesh = make_grid(10)
        optimize_planes(mesh)
        buffer = finalize_and_retesselate(mesh, tesselator=FailingTesselator())
        assert buffer.face_count == 200
        assert all(index == NO_TEXTURE for index in buffer.texture_indices)

    def test_normals_match_plain_finalize(self):
        plain = finalize(make_grid(10, normal=(0.0, 0.0, 1.0)))
        mesh = make_grid(10, normal=(0.0, 0.0, 1.0))
        optimize_planes(mesh)
        buffer = finalize_and_retesselate(mesh)
        assert buffer.face_count == 2
        assert np.allclose(plain.normals.reshape(-1, 3), (0, 0, -1))
        assert np.allclose(buffer.normals.reshape(-1, 3), plain.normals.reshape(-1, 3)[0])

    def test_kept_faces_use_flipped_face_normals(self):
        mesh = make_grid(3)
        optimize_planes(mesh)
        buffer = finalize_and_retesselate(mesh)
        plain = finalize(make_grid(3))
        assert np.allclose(buffer.normals.reshape(-1, 3), (0, 0, -1))
        assert np.allclose(plain.normals.reshape(-1, 3), (0, 0, -1))
