# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import numpy as np

from .utils import *
from .plane_fitter import PlaneFitter

class Region:
    """
    A group of adjacent faces with similar normals. Faces are borrowed
    handles; the mesh evicts them from here whenever they are deleted.
    """

    def __init__(self, region_id):
        self.id = region_id
        self.faces = {} # used as an insertion-ordered set
        self.normal = None
        self.support = None
        self.in_plane = False

    def add_face(self, fh):
        self.faces[fh] = None

    def remove_face(self, fh):
        self.faces.pop(fh, None)

    def __len__(self):
        return len(self.faces)

    def __contains__(self, fh):
        return fh in self.faces

    def detect_flicker(self, normal):
        if not self.in_plane: return False
        return np.dot(normal, self.normal) < 0

    def vertices(self, mesh):
        result = {}
        for fh in self.faces:
            for vh in mesh.face_vertices(fh):
                result[vh] = None
        return list(result)

    def mean_normal(self, mesh):
        # Area-weighted average of the face normals
        normal = np.zeros(3)
        for fh in self.faces:
            positions = mesh.face_positions(fh)
            normal += mesh.faces[fh].normal * triangle_area(*positions)
        return np.asarray(normalize(*normal))

    def vertex_weights(self, mesh, vhs):
        # Each face lends a third of its area to each of its corners
        index = {vh: i for i, vh in enumerate(vhs)}
        weights = np.zeros(len(vhs))
        for fh in self.faces:
            area = triangle_area(*mesh.face_positions(fh))
            for vh in mesh.face_vertices(fh):
                weights[index[vh]] += area / 3
        return weights

    def regression_plane(self, mesh):
        vertices = mesh.vertices
        vhs = self.vertices(mesh)
        if len(vhs) < 3: return False

        points = np.array([vertices[vh].position for vh in vhs])
        center, normal = PlaneFitter.fit(points, self.vertex_weights(mesh, vhs))
        if normal is None: return False

        # The fitted normal has an arbitrary sign; flicker detection
        # relies on it agreeing with the faces
        if np.dot(normal, self.mean_normal(mesh)) < 0: normal = -normal

        self.normal = normal
        self.support = center
        self.in_plane = True
        return True

    def drag_into_plane(self, mesh):
        vertices = mesh.vertices
        vhs = self.vertices(mesh)
        if not vhs: return vhs
        points = np.array([vertices[vh].position for vh in vhs], dtype=float)
        offsets = PlaneFitter.distance(points, self.support, self.normal)
        points -= offsets[:, None] * self.normal
        for vh, point in zip(vhs, points):
            vertices[vh].position = point
        return vhs

    def contours(self, mesh):
        """
        Returns the boundary loops of the region as lists of vertex handles,
        oriented along the region's faces
        """

        edges = mesh.edges

        outgoing = {}
        for fh in self.faces:
            for eh in mesh.face_edges(fh):
                edge = edges[eh]
                neighbor = edges[edge.pair].face
                if (neighbor is not None) and (neighbor in self.faces): continue
                outgoing.setdefault(edge.start, []).append(eh)

        loops = []
        processed = set()
        for starts in list(outgoing.values()):
            for eh in starts:
                if eh in processed: continue
                loop = []
                while (eh is not None) and (eh not in processed):
                    processed.add(eh)
                    edge = edges[eh]
                    loop.append(edge.start)
                    eh = None
                    for candidate in outgoing.get(edge.end, ()):
                        if candidate not in processed:
                            eh = candidate
                            break
                if len(loop) > 2: loops.append(loop)

        return loops
