# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import logging

from .utils import *
from .segmentation import remove_dangling_artifacts, clean_contours, optimize_planes
from .hole_filler import fill_holes
from .plane_optimizer import optimize_plane_intersections, restore_planes
from .finalize import finalize, finalize_and_retesselate

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = dict(
    dangling_artifacts=0, # patches with fewer faces are removed
    clean_contour_iterations=0,
    plane_iterations=3,
    normal_threshold=0.85, # cosine bound for coplanar faces
    min_plane_size=7,
    small_region_threshold=0,
    remove_flickering=True,
    fill_holes=0, # max hole size in edges; 0 disables
    plane_intersections=False,
    retesselate=False,
    color_regions=False,
)

def resolve_options(**kwargs):
    for name in kwargs:
        if name not in DEFAULT_OPTIONS: logger.warning(f"Unknown option {name!r} ignored")

    def get_option(name):
        result = kwargs.get(name)
        return (DEFAULT_OPTIONS[name] if result is None else result)

    return dict(
        dangling_artifacts=max(int(get_option("dangling_artifacts")), 0),
        clean_contour_iterations=max(int(get_option("clean_contour_iterations")), 0),
        plane_iterations=max(int(get_option("plane_iterations")), 0),
        normal_threshold=clamp(float(get_option("normal_threshold")), 0.0, 1.0),
        min_plane_size=max(int(get_option("min_plane_size")), 0),
        small_region_threshold=max(int(get_option("small_region_threshold")), 0),
        remove_flickering=bool(get_option("remove_flickering")),
        fill_holes=max(int(get_option("fill_holes")), 0),
        plane_intersections=bool(get_option("plane_intersections")),
        retesselate=bool(get_option("retesselate")),
        color_regions=bool(get_option("color_regions")),
    )

def optimize_mesh(mesh, tesselator=None, texturer=None, **kwargs):
    """
    Runs the whole optimization sequence on the mesh (modifying it)
    and returns the finalized MeshBuffer. See DEFAULT_OPTIONS for the
    recognized keyword options.
    """

    options = resolve_options(**kwargs)

    logger.info(f"Optimizing mesh: {mesh.vertex_count} vertices, {mesh.face_count} faces")

    if options["dangling_artifacts"]:
        remove_dangling_artifacts(mesh, options["dangling_artifacts"])

    if options["clean_contour_iterations"]:
        clean_contours(mesh, options["clean_contour_iterations"])

    if options["plane_iterations"]:
        optimize_planes(mesh,
            iterations=options["plane_iterations"],
            angle=options["normal_threshold"],
            min_region_size=options["min_plane_size"],
            small_region_size=options["small_region_threshold"],
            remove_flickering=options["remove_flickering"],
        )

    if options["fill_holes"]:
        fill_holes(mesh, options["fill_holes"])

    if options["plane_intersections"]:
        optimize_plane_intersections(mesh)

    if options["plane_iterations"]:
        restore_planes(mesh)

    if options["retesselate"]:
        return finalize_and_retesselate(mesh, tesselator, texturer, color_regions=options["color_regions"])

    return finalize(mesh, color_regions=options["color_regions"])
