# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import logging

import numpy as np

from .utils import *
from .tesselator import ContourTesselator
from .texturer import PlanarTexturer

logger = logging.getLogger(__name__)

NO_TEXTURE = -1
DEFAULT_COLOR = (0.0, 0.8, 0.0)

class GrowableBuffer:
    """
    Flat numpy array that doubles its capacity once the fill ratio
    is exceeded; trim() returns the filled part
    """

    def __init__(self, dtype, capacity=64, fill_ratio=0.9):
        self.data = np.zeros(max(capacity, 1), dtype=dtype)
        self.count = 0
        self.fill_ratio = fill_ratio

    def __len__(self):
        return self.count

    def extend(self, values):
        values = np.ravel(values)
        required = self.count + len(values)
        capacity = len(self.data)
        if required > capacity * self.fill_ratio:
            while required > capacity * self.fill_ratio:
                capacity *= 2
            data = np.zeros(capacity, dtype=self.data.dtype)
            data[:self.count] = self.data[:self.count]
            self.data = data
        self.data[self.count:required] = values
        self.count = required

    def trim(self):
        return self.data[:self.count].copy()

class MeshBuffer:
    def __init__(self, vertices, normals, colors, indices,
                 texture_coords=None, texture_indices=None, texture_ids=None, textures=None):
        self.vertices = vertices
        self.normals = normals
        self.colors = colors
        self.indices = indices
        self.texture_coords = texture_coords
        self.texture_indices = texture_indices
        self.texture_ids = texture_ids
        self.textures = textures or []

    @property
    def vertex_count(self):
        return len(self.vertices) // 3

    @property
    def face_count(self):
        return len(self.indices) // 3

def output_normal(mesh, vh):
    # Output normals are the flipped stored ones; the average of the
    # face normals stands in for a missing stored normal
    vertex = mesh.vertices[vh]
    normal = vertex.normal
    if norm(normal) < 1e-4:
        normal = np.zeros(3)
        for fh in mesh.vertex_faces(vh):
            normal += mesh.faces[fh].normal
    return -np.asarray(normalize(*normal))

def face_color(mesh, fh, color_regions):
    region_id = mesh.faces[fh].region
    if color_regions and (region_id is not None): return region_color(region_id)
    return DEFAULT_COLOR

def finalize(mesh, color_regions=False):
    """
    Converts the mesh into dense buffers: float32 positions, normals and
    colors (3 per vertex) and uint32 indices (3 per triangle)
    """

    vertices = mesh.vertices
    faces = mesh.faces

    mesh.progress.begin("Finalize", len(vertices) + len(faces))

    dense = {}
    positions = np.zeros((len(vertices), 3), dtype=np.float32)
    normals = np.zeros((len(vertices), 3), dtype=np.float32)
    colors = np.zeros((len(vertices), 3), dtype=np.float32)
    colors[:] = DEFAULT_COLOR

    for vh, vertex in vertices.items():
        mesh.progress.advance()
        index = len(dense)
        dense[vh] = index
        positions[index] = vertex.position
        normals[index] = output_normal(mesh, vh)

    indices = np.zeros((len(faces), 3), dtype=np.uint32)
    for i, fh in enumerate(faces):
        mesh.progress.advance()
        corners = [dense[vh] for vh in mesh.face_vertices(fh)]
        indices[i] = corners
        if color_regions: colors[corners] = face_color(mesh, fh, True)

    logger.info(f"Finalized {len(dense)} vertices, {len(faces)} faces")

    return MeshBuffer(positions.ravel(), normals.ravel(), colors.ravel(), indices.ravel())

def finalize_and_retesselate(mesh, tesselator=None, texturer=None, color_regions=False):
    """
    Like finalize(), but every planar region is replaced by a fresh
    triangulation of its contours, textured by the texturer.
    tesselator: object with tesselate(contours, normal) -> (points, triangles)
    texturer: object with texture_region(region, points) -> Texture or None
    """

    tesselator = tesselator or ContourTesselator()
    texturer = texturer or PlanarTexturer()

    vertices = mesh.vertices
    faces = mesh.faces

    positions = GrowableBuffer(np.float32)
    normals = GrowableBuffer(np.float32)
    colors = GrowableBuffer(np.float32)
    texture_coords = GrowableBuffer(np.float32)
    indices = GrowableBuffer(np.uint32)
    texture_indices = GrowableBuffer(np.int32)
    texture_ids = []
    textures = []

    vertex_count = 0

    mesh.progress.begin("Retesselate", len(mesh.regions) + len(faces))

    retesselated = set()
    for region in mesh.regions:
        mesh.progress.advance()
        if not (region.in_plane and len(region)): continue

        contours = region.contours(mesh)
        if not contours: continue

        loops = [[vertices[vh].position for vh in loop] for loop in contours]
        points, triangles = tesselator.tesselate(loops, region.normal)
        if points is None:
            logger.debug(f"Tesselation of region {region.id} failed, keeping its triangles")
            continue

        texture = texturer.texture_region(region, points)
        if texture is None:
            texture_index = NO_TEXTURE
            coords = np.zeros((len(points), 3))
        else:
            texture_index = len(textures)
            textures.append(texture)
            texture_ids.append(texture.id)
            coords = texture.coords(points)

        color = (region_color(region.id) if color_regions else DEFAULT_COLOR)

        positions.extend(points)
        normals.extend(np.tile(-region.normal, len(points)))
        colors.extend(np.tile(color, len(points)))
        texture_coords.extend(coords)
        indices.extend(np.asarray(triangles, dtype=np.uint32) + vertex_count)
        texture_indices.extend([texture_index] * len(triangles))
        vertex_count += len(points)

        retesselated.add(region.id)

    # Faces outside retesselated regions keep their own vertices
    dense = {}
    for fh, face in faces.items():
        mesh.progress.advance()
        if face.region in retesselated: continue
        color = face_color(mesh, fh, color_regions)
        corners = []
        for vh in mesh.face_vertices(fh):
            index = dense.get(vh)
            if index is None:
                index = vertex_count
                dense[vh] = index
                vertex_count += 1
                positions.extend(vertices[vh].position)
                normals.extend(output_normal(mesh, vh))
                colors.extend(color)
                texture_coords.extend((0.0, 0.0, 0.0))
            corners.append(index)
        indices.extend(corners)
        texture_indices.extend((NO_TEXTURE,))

    logger.info(f"Retesselated {len(retesselated)} planar regions into {len(indices) // 3} faces")

    return MeshBuffer(
        positions.trim(), normals.trim(), colors.trim(), indices.trim(),
        texture_coords=texture_coords.trim(),
        texture_indices=texture_indices.trim(),
        texture_ids=np.array(texture_ids, dtype=np.uint32),
        textures=textures,
    )
