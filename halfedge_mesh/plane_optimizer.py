# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import logging

import numpy as np

from .plane_fitter import PlaneFitter

logger = logging.getLogger(__name__)

def shared_boundary_vertices(mesh, region, neighbor):
    # Endpoints of the edges where region meets neighbor
    edges = mesh.edges
    result = {}
    for fh in region.faces:
        for eh in mesh.face_edges(fh):
            edge = edges[eh]
            neighbor_h = edges[edge.pair].face
            if (neighbor_h is None) or (neighbor_h not in neighbor.faces): continue
            result[edge.start] = None
            result[edge.end] = None
    return list(result)

def drag_onto_intersection(mesh, region, neighbor, point, direction):
    vertices = mesh.vertices
    vhs = shared_boundary_vertices(mesh, region, neighbor)
    for vh in vhs:
        vertex = vertices[vh]
        vertex.position = PlaneFitter.project_onto_line(vertex.position, point, direction)
    return vhs

def optimize_plane_intersections(mesh, parallel_threshold=0.9):
    """
    Snaps the shared border of every two planar regions onto the line
    where their planes intersect
    """

    planes = [region for region in mesh.regions if region.in_plane and len(region)]

    mesh.progress.begin("Plane Intersections", len(planes))

    moved = set()
    for i, region in enumerate(planes):
        mesh.progress.advance()
        for neighbor in planes[i+1:]:
            # Almost parallel planes won't cross in a reasonable distance
            if abs(np.dot(region.normal, neighbor.normal)) >= parallel_threshold: continue
            point, direction = PlaneFitter.intersect(region.support, region.normal, neighbor.support, neighbor.normal)
            if point is None: continue
            moved.update(drag_onto_intersection(mesh, region, neighbor, point, direction))

    mesh.update_vertex_faces(moved)

    if moved: logger.info(f"Snapped {len(moved)} vertices onto plane intersections")

    return len(moved)

def restore_planes(mesh):
    """
    Projects the vertices of every planar region onto its plane
    """

    planes = [region for region in mesh.regions if region.in_plane and len(region)]

    mesh.progress.begin("Plane Restoration", len(planes))

    moved = set()
    for region in planes:
        mesh.progress.advance()
        moved.update(region.drag_into_plane(mesh))

    mesh.update_vertex_faces(moved)

    return len(moved)
