# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import math

import numpy as np

from .utils import *

class Texture:
    """
    Image covering a rectangle of a region's plane.
    origin: 3D corner of the rectangle
    axes: the two unit in-plane axes (2x3)
    size: width and height of the rectangle, in world units
    pixels: uint8 array of shape (height, width, 3)
    """

    def __init__(self, texture_id, region_id, origin, axes, size, pixels):
        self.id = texture_id
        self.region_id = region_id
        self.origin = np.asarray(origin, dtype=float)
        self.axes = np.asarray(axes, dtype=float)
        self.size = np.asarray(size, dtype=float)
        self.pixels = pixels

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]

    def coords(self, points):
        # Third coordinate is unused and stays 0
        local = (np.asarray(points, dtype=float) - self.origin).dot(self.axes.T)
        result = np.zeros((len(local), 3))
        result[:, :2] = np.clip(local / self.size, 0.0, 1.0)
        return result

class PlanarTexturer:
    """
    Generates a uniformly colored texture over the bounding
    rectangle of a region in its plane frame
    """

    def __init__(self, pixel_size=0.01, max_size=512):
        self.pixel_size = pixel_size
        self.max_size = max_size
        self.next_id = 0

    def texture_region(self, region, points):
        if (region.normal is None) or (len(points) == 0): return None

        matrix, matrix_inv = make_axis_matrix(tuple(region.normal))
        axes = matrix_inv[:2]

        local = np.asarray(points, dtype=float).dot(axes.T)
        lo = local.min(axis=0)
        hi = local.max(axis=0)
        size = hi - lo
        if not (size > 0).all(): return None

        width = int(clamp(math.ceil(size[0] / self.pixel_size), 1, self.max_size))
        height = int(clamp(math.ceil(size[1] / self.pixel_size), 1, self.max_size))

        pixels = np.empty((height, width, 3), dtype=np.uint8)
        pixels[:, :] = np.round(np.array(region_color(region.id)) * 255)

        origin = axes.T.dot(lo)

        texture = Texture(self.next_id, region.id, origin, axes, size, pixels)
        self.next_id += 1
        return texture
