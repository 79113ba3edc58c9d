# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import numpy as np

from .utils import *

class PlaneFitter:
    """
    Least-squares (regression) planes, given as a support point and a
    unit normal, and the few plane operations the optimizer needs
    """

    @classmethod
    def fit(cls, points, weights=None):
        points = np.asarray(points, dtype=float)
        if len(points) < 3: return None, None
        if weights is None: return cls.fit_svd(points)
        return cls.fit_lsq(points, np.asarray(weights, dtype=float))

    @classmethod
    def fit_svd(cls, points):
        center = np.mean(points, axis=0)
        centered = points - center

        try:
            U, S, Vh = np.linalg.svd(centered, full_matrices=False)
        except np.linalg.LinAlgError:
            return None, None

        # All points coincide or are collinear: the plane is undefined
        if (len(S) < 3) or (S[1] <= epsilon * max(S[0], 1.0)): return None, None

        normal = Vh[-1] # already normalized
        return center, normal

    @classmethod
    def fit_lsq(cls, points, weights):
        w_sum = np.sum(weights)
        if not (w_sum > 0): return cls.fit_svd(points)

        center = np.average(points, weights=weights, axis=0)
        centered = points - center

        xx = np.dot(centered[:,0] * centered[:,0], weights)
        xy = np.dot(centered[:,0] * centered[:,1], weights)
        xz = np.dot(centered[:,0] * centered[:,2], weights)
        yy = np.dot(centered[:,1] * centered[:,1], weights)
        yz = np.dot(centered[:,1] * centered[:,2], weights)
        zz = np.dot(centered[:,2] * centered[:,2], weights)

        nx, ny, nz = cls.covariance_to_normal(xx, xy, xz, yy, yz, zz, w_sum)
        n_mag2 = nx*nx + ny*ny + nz*nz
        if n_mag2 == 0: return None, None

        n_mag = sqrt(n_mag2)
        return center, np.array((nx/n_mag, ny/n_mag, nz/n_mag))

    @classmethod
    def covariance_to_normal(cls, xx, xy, xz, yy, yz, zz, w):
        # https://www.ilikebigbits.com/2017_09_25_plane_from_points_2.html

        xx /= w; xy /= w; xz /= w; yy /= w; yz /= w; zz /= w

        Xx, Xy, Xz = yy*zz - yz*yz, xz*yz - xy*zz, xy*yz - xz*yy # Xx is determinant
        Yx, Yy, Yz = xz*yz - xy*zz, xx*zz - xz*xz, xy*xz - yz*xx # Yy is determinant
        Zx, Zy, Zz = xy*yz - xz*yy, xy*xz - yz*xx, xx*yy - xy*xy # Zz is determinant

        # Weigh each axis solution by its squared determinant, keeping
        # the accumulated direction consistent
        weight = Xx*Xx
        nx = Xx * weight
        ny = Xy * weight
        nz = Xz * weight
        weight = Yy*Yy * copysign(1.0, (nx*Yx + ny*Yy + nz*Yz))
        nx += Yx * weight
        ny += Yy * weight
        nz += Yz * weight
        weight = Zz*Zz * copysign(1.0, (nx*Zx + ny*Zy + nz*Zz))
        nx += Zx * weight
        ny += Zy * weight
        nz += Zz * weight

        return nx, ny, nz

    @classmethod
    def distance(cls, points, support, normal):
        "Returns signed distances (for each point)"
        return np.dot(np.asarray(points) - support, normal)

    @classmethod
    def intersect(cls, support0, normal0, support1, normal1):
        """
        Returns (point, direction) of the line where two planes meet,
        or (None, None) for parallel planes
        """

        direction = np.cross(normal0, normal1)
        denominator = np.dot(direction, direction)
        if denominator <= epsilon: return None, None

        d0 = np.dot(normal0, support0)
        d1 = np.dot(normal1, support1)
        point = np.cross(normal1 * d0 - normal0 * d1, direction) / denominator
        return point, direction / sqrt(denominator)

    @classmethod
    def project_onto_line(cls, point, origin, direction):
        # direction is expected to be normalized
        return origin + direction * np.dot(point - origin, direction)
