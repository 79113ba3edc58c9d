# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import sys
import math

import numpy as np

# math.ulp(0) returns the minimal denormalized number, but on platforms
# (or if compiled) without their support, it will be treated as 0
nonzero = math.ulp(0) or sys.float_info.min
epsilon = sys.float_info.epsilon
sqrt = math.sqrt
copysign = math.copysign
log = math.log
cos = math.cos
sin = math.sin
norm = np.linalg.norm

def orthogonal_3d(x, y, z):
    # https://math.stackexchange.com/questions/137362/
    return copysign(z, x), copysign(z, y), -(copysign(x, z) + copysign(y, z))

def dot_product(ax, ay, az, bx, by, bz):
    return ax*bx + ay*by + az*bz

def cross_product(ax, ay, az, bx, by, bz):
    return (ay*bz - az*by, az*bx - ax*bz, ax*by - ay*bx)

def normalize(x, y, z):
    mag = sqrt(x*x + y*y + z*z)
    return ((x/mag, y/mag, z/mag) if mag > 0.0 else (0.0, 0.0, 0.0))

def triangle_normal(p0, p1, p2):
    """
    Unit normal of the triangle p0 p1 p2 (counter-clockwise winding),
    or a zero vector if the triangle is degenerate
    """
    x0, y0, z0 = p0
    x1, y1, z1 = p1
    x2, y2, z2 = p2

    ax = x1 - x0; ay = y1 - y0; az = z1 - z0
    bx = x2 - x0; by = y2 - y0; bz = z2 - z0

    nx = ay*bz - az*by
    ny = az*bx - ax*bz
    nz = ax*by - ay*bx

    magnitude = sqrt(nx*nx + ny*ny + nz*nz) or nonzero
    return np.array((nx/magnitude, ny/magnitude, nz/magnitude))

def triangle_area(p0, p1, p2):
    return norm(np.cross(np.subtract(p1, p0), np.subtract(p2, p0))) * 0.5

def newell_normal(points):
    # Robust normal of a (possibly non-planar) closed polygon
    nx = 0.0
    ny = 0.0
    nz = 0.0
    count = len(points)
    for i in range(count):
        x0, y0, z0 = points[i-1]
        x1, y1, z1 = points[i]
        nx = nx + (y0 - y1) * (z0 + z1)
        ny = ny + (z0 - z1) * (x0 + x1)
        nz = nz + (x0 - x1) * (y0 + y1)
    return np.array(normalize(nx, ny, nz))

def make_axis_matrix(z_axis):
    # z axis is expected to be normalized
    zx, zy, zz = z_axis
    xx, xy, xz = orthogonal_3d(zx, zy, zz)
    x_mag = sqrt(xx*xx + xy*xy + xz*xz)
    x_axis = xx/x_mag, xy/x_mag, xz/x_mag
    xx, xy, xz = x_axis
    y_axis = zy*xz - zz*xy, zz*xx - zx*xz, zx*xy - zy*xx
    # rotation matrices are orthogonal, so we can use transpose instead of inverse
    matrix_inv = np.array((x_axis, y_axis, z_axis))
    matrix = matrix_inv.T
    return matrix, matrix_inv

def clamp(value, value_min, value_max):
    return min(max(value, value_min), value_max)

def region_color(region_id):
    # Deterministic pseudo-random color per region
    return abs(cos(region_id)), abs(sin(region_id * 30)), abs(sin(region_id * 2))
