import math
import random

from halfedge_mesh import HalfEdgeMesh, optimize_mesh, setup_logging

def make_test_object(size, fold, noise=0.01, hole=None, seed=0):
    """
    A square grid of size x size cells, folded upwards along x = fold,
    with some noise and an optional rectangular hole of cells
    """
    rng = random.Random(seed)
    verts = []
    for j in range(size+1):
        for i in range(size+1):
            z = max(i - fold, 0) + rng.uniform(-noise, noise)
            verts.append((float(i), float(j), z))

    tris = []
    for j in range(size):
        for i in range(size):
            if hole and (hole[0] <= i < hole[2]) and (hole[1] <= j < hole[3]): continue
            a = j * (size+1) + i
            b = a + 1
            c = a + (size+1) + 1
            d = a + (size+1)
            tris.append((a, b, c))
            tris.append((a, c, d))
    return dict(verts=verts, tris=tris)

setup_logging()

info = make_test_object(12, 6, hole=(2, 2, 4, 3))
mesh = HalfEdgeMesh.build(info["verts"], info["tris"])

buffer = optimize_mesh(mesh,
    fill_holes=30,
    plane_intersections=True,
    retesselate=True,
    color_regions=True,
)

print(f"{buffer.vertex_count} vertices, {buffer.face_count} faces, {len(buffer.textures)} textures")
planes = [region for region in mesh.regions if region.in_plane]
for region in planes:
    tilt = math.degrees(math.acos(min(abs(region.normal[2]), 1.0)))
    print(f"region {region.id}: {len(region)} faces, tilt {tilt:.1f} degrees")
