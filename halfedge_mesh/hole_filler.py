# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import logging

import numpy as np

from .utils import *

logger = logging.getLogger(__name__)

def find_holes(mesh, max_size):
    """
    Traces the boundary loops next to the faces of the mesh; returns those
    with more than 2 and fewer than max_size edges, as lists of edge handles
    """

    edges = mesh.edges
    vertices = mesh.vertices

    mesh.progress.begin("Hole Detection", len(mesh.faces))

    mesh.reset_used()
    holes = []
    for fh in list(mesh.faces):
        mesh.progress.advance()
        for side in mesh.face_edges(fh):
            current = edges[side].pair
            edge = edges[current]
            if edge.used or (edge.face is not None): continue

            contour = []
            while current is not None:
                edge = edges[current]
                edge.used = True
                contour.append(current)
                current = None
                for oh in vertices[edge.end].outgoing:
                    out = edges[oh]
                    if (out.face is None) and not out.used:
                        current = oh
                        break

            if 2 < len(contour) < max_size: holes.append(contour)
    mesh.reset_used()

    return holes

def point_in_triangle(p, a, b, c, normal):
    # Strictly inside; points on the border don't count
    if np.dot(np.cross(b - a, p - a), normal) <= 0: return False
    if np.dot(np.cross(c - b, p - b), normal) <= 0: return False
    return np.dot(np.cross(a - c, p - c), normal) > 0

def collapse_hole(mesh, hole):
    collapsed = True
    while collapsed and (len(hole) > 3):
        collapsed = False
        for i, eh in enumerate(hole):
            if mesh.safe_collapse_edge(eh):
                del hole[i]
                collapsed = True
                break

def close_triangle(mesh, hole):
    # Looks for three remaining edges (the last one among them) forming a cycle
    edges = mesh.edges
    count = len(hole)
    back = edges[hole[-1]]

    for i in range(count - 1):
        edge_i = edges[hole[i]]
        if edge_i.start != back.end: continue
        for j in range(count - 1):
            if j == i: continue
            edge_j = edges[hole[j]]
            if (edge_j.start != edge_i.end) or (edge_j.end != back.start): continue

            mesh.fill_face(hole[-1], hole[i], hole[j])
            for k in sorted((i, j, count - 1), reverse=True):
                del hole[k]
            return True

    return False

def clip_ear(mesh, hole):
    """
    Closes one convex corner of the loop with a new face. The loop
    is updated in place; returns the new boundary edge, or None.
    """

    edges = mesh.edges
    vertices = mesh.vertices
    count = len(hole)
    if count < 3: return None

    loop_vertices = [edges[eh].start for eh in hole]
    normal = newell_normal([vertices[vh].position for vh in loop_vertices])
    if not normal.any(): return None

    for k in range(count):
        e1h = hole[k]
        e2h = hole[(k+1) % count]
        e1 = edges[e1h]
        e2 = edges[e2h]
        if e1.end != e2.start: continue

        a, b, c = e1.start, e1.end, e2.end
        if (a == c) or (mesh.find_edge(a, c) is not None): continue

        pa = vertices[a].position
        pb = vertices[b].position
        pc = vertices[c].position
        if np.dot(np.cross(pb - pa, pc - pb), normal) <= 0: continue

        is_ear = True
        for vh in loop_vertices:
            if vh in (a, b, c): continue
            if point_in_triangle(vertices[vh].position, pa, pb, pc, normal):
                is_ear = False
                break
        if not is_ear: continue

        diagonal = mesh.add_edge_pair(a, c)
        mesh.fill_face(e1h, e2h, edges[diagonal].pair)

        if k + 1 < count:
            hole[k:k+2] = [diagonal]
        else:
            del hole[k]
            hole[0] = diagonal

        return diagonal

    return None

def fill_holes(mesh, max_size, collapse=True):
    """
    Best-effort hole filling. Each hole is first shrunk by safe edge
    collapses (if collapse is enabled), then closed face by face; a hole
    that can't be closed is left partially open.
    Returns the number of created faces.
    """

    edges = mesh.edges

    holes = find_holes(mesh, max_size)

    # Handles get recycled while holes are filled, so remember
    # which record each traced handle referred to
    records = {eh: edges[eh] for hole in holes for eh in hole}

    def is_open(eh):
        edge = edges.get(eh)
        return (edge is not None) and (edge is records.get(eh)) and (edge.face is None)

    mesh.progress.begin("Hole Filling", len(holes))

    created = 0
    residual = 0
    for hole in holes:
        mesh.progress.advance()

        hole = [eh for eh in hole if is_open(eh)]

        if collapse: collapse_hole(mesh, hole)

        while hole:
            if close_triangle(mesh, hole):
                created += 1
                continue

            diagonal = clip_ear(mesh, hole)
            if diagonal is not None:
                records[diagonal] = edges[diagonal]
                created += 1
                continue

            # No progress possible with the trailing edge; give up on it
            hole.pop()
            residual += 1

    logger.info(f"Filled {len(holes)} holes with {created} faces")
    if residual: logger.debug(f"{residual} hole edges left open")

    return created
