# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

from .storage import HandleArena
from .elements import Vertex, HalfEdge, Face
from .progress import Progress
from .mesh import HalfEdgeMesh
from .regions import Region
from .plane_fitter import PlaneFitter
from .segmentation import (
    region_growing, delete_region, remove_flickering_faces,
    optimize_planes, remove_dangling_artifacts, clean_contours,
)
from .plane_optimizer import optimize_plane_intersections, restore_planes
from .hole_filler import find_holes, fill_holes
from .tesselator import ContourTesselator
from .texturer import Texture, PlanarTexturer
from .finalize import NO_TEXTURE, DEFAULT_COLOR, MeshBuffer, finalize, finalize_and_retesselate
from .pipeline import DEFAULT_OPTIONS, optimize_mesh
from .logging_config import setup_logging
