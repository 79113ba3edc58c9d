# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import logging

import numpy as np

from .utils import *

logger = logging.getLogger(__name__)

def signed_area(coords, polygon):
    area = 0.0
    count = len(polygon)
    for i in range(count):
        x0, y0 = coords[polygon[i-1]]
        x1, y1 = coords[polygon[i]]
        area += x0*y1 - x1*y0
    return area * 0.5

def corner_cross(a, b, c):
    # z component of (b - a) x (c - b)
    return (b[0] - a[0]) * (c[1] - b[1]) - (b[1] - a[1]) * (c[0] - b[0])

def orientation(a, b, p):
    return (b[0] - a[0]) * (p[1] - a[1]) - (b[1] - a[1]) * (p[0] - a[0])

def segments_cross(a, b, c, d, eps):
    # Proper crossing only; touching or collinear segments don't count
    d1 = orientation(c, d, a)
    d2 = orientation(c, d, b)
    d3 = orientation(a, b, c)
    d4 = orientation(a, b, d)
    return (((d1 > eps) and (d2 < -eps)) or ((d1 < -eps) and (d2 > eps))) and \
        (((d3 > eps) and (d4 < -eps)) or ((d3 < -eps) and (d4 > eps)))

class ContourTesselator:
    """
    Triangulates the boundary loops of a planar region: the loop with the
    largest area is the outer boundary, the others are holes in it
    """

    def __init__(self, epsilon=1e-9):
        self.epsilon = epsilon

    def tesselate(self, contours, normal):
        """
        contours: collection of closed loops of 3D points
        normal: normal of the plane the loops (approximately) lie in
        Returns (points, triangles) with triangles wound counter-clockwise
        around the normal, or (None, None) if nothing could be triangulated
        """

        eps = self.epsilon

        normal = normalize(*normal)
        if not any(normal): return None, None
        matrix, matrix_inv = make_axis_matrix(normal)

        points = []
        polygons = []
        for contour in contours:
            start = len(points)
            points.extend(np.asarray(contour, dtype=float))
            polygons.append(list(range(start, len(points))))

        if not points: return None, None

        points = np.array(points)
        coords = points.dot(matrix_inv[:2].T)

        polygons = [self.simplify(coords, polygon) for polygon in polygons]
        polygons = [polygon for polygon in polygons if len(polygon) >= 3]
        if not polygons: return None, None

        areas = [signed_area(coords, polygon) for polygon in polygons]
        outer_index = max(range(len(polygons)), key=(lambda i: abs(areas[i])))

        outer = polygons[outer_index]
        if areas[outer_index] < 0: outer.reverse()

        holes = []
        for i, polygon in enumerate(polygons):
            if i == outer_index: continue
            if areas[i] > 0: polygon.reverse()
            holes.append(polygon)

        # Rightmost holes first, so that later bridges can't cut earlier ones
        holes.sort(key=(lambda hole: max(coords[i][0] for i in hole)), reverse=True)
        for hole_index, hole in enumerate(holes):
            outer = self.bridge(coords, outer, hole, holes[hole_index+1:])

        triangles = self.clip_ears(coords, outer)
        if not triangles: return None, None

        # Keep only the points that ended up in triangles
        used = sorted({i for triangle in triangles for i in triangle})
        remap = {old: new for new, old in enumerate(used)}
        triangles = [tuple(remap[i] for i in triangle) for triangle in triangles]

        return points[used], triangles

    def simplify(self, coords, polygon):
        # Drops repeated and collinear vertices until none is left
        eps = self.epsilon
        polygon = list(polygon)
        changed = True
        while changed and (len(polygon) >= 3):
            changed = False
            for i in range(len(polygon)):
                a = coords[polygon[i-1]]
                b = coords[polygon[i]]
                c = coords[polygon[(i+1) % len(polygon)]]
                if abs(corner_cross(a, b, c)) <= eps:
                    del polygon[i]
                    changed = True
                    break
        return polygon

    def bridge(self, coords, outer, hole, other_holes):
        """
        Splices the hole into the outer polygon through a zero-width
        channel between the hole's rightmost vertex and the nearest
        outer vertex it can see
        """

        eps = self.epsilon

        m = max(range(len(hole)), key=(lambda i: coords[hole[i]][0]))
        pm = coords[hole[m]]

        obstacles = [outer, hole] + list(other_holes)

        def visible(p):
            po = coords[outer[p]]
            for polygon in obstacles:
                count = len(polygon)
                for i in range(count):
                    a = coords[polygon[i-1]]
                    b = coords[polygon[i]]
                    if segments_cross(pm, po, a, b, eps): return False
            return True

        candidates = sorted(range(len(outer)), key=(lambda p: norm(coords[outer[p]] - pm)))
        for p in candidates:
            if visible(p): break
        else:
            p = candidates[0]
            logger.debug(f"No visible bridge for a hole of {len(hole)} vertices")

        return outer[:p+1] + hole[m:] + hole[:m] + [hole[m]] + outer[p:]

    def clip_ears(self, coords, polygon):
        eps = self.epsilon
        polygon = list(polygon)
        triangles = []

        # Inclusive: a reflex vertex touching the diagonal disqualifies the ear
        def is_inside(p, a, b, c):
            return (orientation(a, b, p) >= -eps) and (orientation(b, c, p) >= -eps) and (orientation(c, a, p) >= -eps)

        while len(polygon) > 3:
            count = len(polygon)
            clipped = False
            for i in range(count):
                ia = polygon[i-1]
                ib = polygon[i]
                ic = polygon[(i+1) % count]
                a = coords[ia]
                b = coords[ib]
                c = coords[ic]
                if corner_cross(a, b, c) <= eps: continue

                is_ear = True
                for j in polygon:
                    if j in (ia, ib, ic): continue
                    if is_inside(coords[j], a, b, c):
                        is_ear = False
                        break
                if not is_ear: continue

                triangles.append((ia, ib, ic))
                del polygon[i]
                clipped = True
                break

            if clipped: continue

            # No proper ear (self-intersecting or numerically bad input):
            # cut off the most convex corner to keep making progress
            i = max(range(count), key=(lambda i: corner_cross(
                coords[polygon[i-1]], coords[polygon[i]], coords[polygon[(i+1) % count]])))
            a = polygon[i-1]
            b = polygon[i]
            c = polygon[(i+1) % count]
            if corner_cross(coords[a], coords[b], coords[c]) > eps: triangles.append((a, b, c))
            del polygon[i]

        if len(polygon) == 3:
            a, b, c = polygon
            if corner_cross(coords[a], coords[b], coords[c]) > eps: triangles.append((a, b, c))

        return triangles
