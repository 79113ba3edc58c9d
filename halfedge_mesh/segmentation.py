# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import logging

import numpy as np

from .utils import *
from .regions import Region

logger = logging.getLogger(__name__)

def region_growing(mesh, fh, region, normal=None, angle=None):
    """
    Flood-fills the region from the seed face through face adjacency.
    With an angle threshold, a neighbour is only admitted if the absolute
    cosine between its normal and the reference normal exceeds it.
    Returns the number of faces added besides the seed.
    """

    edges = mesh.edges
    faces = mesh.faces

    faces[fh].used = True
    region.add_face(fh)

    added = 0
    queue = [fh]
    while queue:
        current = queue.pop()
        for eh in mesh.face_edges(current):
            neighbor_h = edges[edges[eh].pair].face
            if neighbor_h is None: continue
            neighbor = faces[neighbor_h]
            if neighbor.used: continue
            if (angle is not None) and not (abs(np.dot(neighbor.normal, normal)) > angle): continue
            # Must be marked immediately, to not process faces multiple times
            neighbor.used = True
            region.add_face(neighbor_h)
            queue.append(neighbor_h)
            added += 1

    return added

def delete_region(mesh, region):
    for fh in list(region.faces):
        mesh.delete_face(fh)

def remove_flickering_faces(mesh):
    faces = mesh.faces
    regions = mesh.regions

    flickering = []
    for fh, face in faces.items():
        if face.region is None: continue
        if regions[face.region].detect_flicker(face.normal): flickering.append(fh)

    for fh in flickering:
        mesh.delete_face(fh)

    return len(flickering)

def optimize_planes(mesh, iterations=3, angle=0.85, min_region_size=7, small_region_size=0, remove_flickering=True):
    """
    iterations: number of segmentation passes; planar regions are dragged
        into their regression planes on every pass
    angle: cosine bound for two faces to count as coplanar
    min_region_size: regions must be larger than this (and than a
        face-count dependent threshold) to be fit to a plane
    small_region_size: regions with fewer faces are deleted
    remove_flickering: delete faces pointing against their region's plane
    """

    progress = mesh.progress
    faces = mesh.faces

    face_count = len(faces)
    default_threshold = (int(10 * log(face_count)) if face_count > 0 else 0)
    plane_threshold = max(min_region_size, default_threshold)

    logger.info(f"Starting plane optimization with threshold {angle}")

    regions = []
    small_regions = []

    for iteration in range(iterations):
        is_final = (iteration == iterations - 1)

        progress.begin(f"Plane Optimization {iteration+1}/{iterations}", len(faces))

        mesh.reset_used()
        pass_regions = []
        moved = set()

        for fh in list(faces):
            progress.advance()
            face = faces[fh]
            if face.used: continue

            region = Region(len(pass_regions))
            pass_regions.append(region)
            region_size = region_growing(mesh, fh, region, face.normal.copy(), angle) + 1

            # Fit big regions into the regression plane
            if (region_size > plane_threshold) and region.regression_plane(mesh):
                moved.update(region.drag_into_plane(mesh))

            if is_final and (region_size < small_region_size):
                small_regions.append(region)

        mesh.update_vertex_faces(moved)

        if is_final: regions = pass_regions

    mesh.reset_used()
    mesh.set_regions(regions)

    planes = sum(1 for region in regions if region.in_plane)
    logger.info(f"Found {len(regions)} regions, {planes} of them planar")

    deleted = 0
    for region in small_regions:
        deleted += len(region)
        delete_region(mesh, region)
    if deleted: logger.info(f"Deleted {len(small_regions)} small regions ({deleted} faces)")

    if remove_flickering:
        flickering = remove_flickering_faces(mesh)
        if flickering: logger.info(f"Deleted {flickering} flickering faces")

    return regions

def remove_dangling_artifacts(mesh, threshold):
    """
    Deletes every connected patch with fewer than threshold faces
    """

    progress = mesh.progress
    faces = mesh.faces

    progress.begin("Dangling Artifacts", len(faces))

    mesh.reset_used()
    patches = []
    for fh in list(faces):
        progress.advance()
        if faces[fh].used: continue
        patch = Region(-1) # not registered in the mesh
        if region_growing(mesh, fh, patch) + 1 < threshold: patches.append(patch)
    mesh.reset_used()

    deleted = 0
    for patch in patches:
        deleted += len(patch)
        delete_region(mesh, patch)

    if deleted: logger.info(f"Removed {len(patches)} dangling artifacts ({deleted} faces)")

    return deleted

def clean_contours(mesh, iterations):
    """
    Deletes faces with two or more open sides, peeling off spikes
    and one-triangle-wide strips along the contours
    """

    edges = mesh.edges
    faces = mesh.faces

    deleted = 0
    for iteration in range(iterations):
        mesh.progress.begin(f"Contour Cleaning {iteration+1}/{iterations}", len(faces))

        fragile = []
        for fh in faces:
            mesh.progress.advance()
            open_sides = 0
            for eh in mesh.face_edges(fh):
                if edges[edges[eh].pair].face is None: open_sides += 1
            if open_sides >= 2: fragile.append(fh)

        if not fragile: break

        for fh in fragile:
            mesh.delete_face(fh)
        deleted += len(fragile)

    if deleted: logger.info(f"Cleaned {deleted} contour faces")

    return deleted
