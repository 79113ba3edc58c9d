# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import logging

import numpy as np

from .utils import *
from .storage import HandleArena
from .elements import Vertex, HalfEdge, Face
from .progress import Progress

logger = logging.getLogger(__name__)

class HalfEdgeMesh:
    """
    Half-edge triangle mesh. Vertices, half-edges and faces live in handle
    arenas owned by the mesh; everything else (regions, hole contours,
    export) refers to them only by handle.
    """

    def __init__(self, progress=None):
        self.vertices = HandleArena("vertex")
        self.edges = HandleArena("edge")
        self.faces = HandleArena("face")
        self.regions = []
        self.vertex_handles = [] # insertion index -> vertex handle
        self.progress = progress or Progress()

    @classmethod
    def build(cls, positions, triangles, normals=None, progress=None):
        """
        positions: collection of 3D positions for each vertex
        triangles: collection of vertex index triples
        normals: optional collection of 3D normals for each vertex
        """

        mesh = cls(progress)

        mesh.progress.begin("Mesh Vertices", len(positions))
        for i, position in enumerate(positions):
            mesh.add_vertex(position, (None if normals is None else normals[i]))
            mesh.progress.advance()

        mesh.progress.begin("Mesh Faces", len(triangles))
        rejected = 0
        for a, b, c in triangles:
            if mesh.add_triangle(a, b, c) is None: rejected += 1
            mesh.progress.advance()

        if rejected: logger.info(f"Rejected {rejected} of {len(triangles)} triangles")

        return mesh

    def clear(self):
        self.vertices.clear()
        self.edges.clear()
        self.faces.clear()
        self.regions = []
        self.vertex_handles = []

    # ===== Traversal ===== #

    def face_edges(self, fh):
        edges = self.edges
        e0 = self.faces[fh].edge
        e1 = edges[e0].next
        e2 = edges[e1].next
        return e0, e1, e2

    def face_vertices(self, fh):
        edges = self.edges
        return tuple(edges[eh].start for eh in self.face_edges(fh))

    def face_positions(self, fh):
        vertices = self.vertices
        return tuple(vertices[vh].position for vh in self.face_vertices(fh))

    def vertex_faces(self, vh):
        edges = self.edges
        result = []
        for eh in self.vertices[vh].outgoing:
            fh = edges[eh].face
            if (fh is not None) and (fh not in result): result.append(fh)
        return result

    def vertex_neighbors(self, vh):
        edges = self.edges
        return {edges[eh].end for eh in self.vertices[vh].outgoing}

    def find_edge(self, start, end):
        edges = self.edges
        for eh in self.vertices[start].outgoing:
            if edges[eh].end == end: return eh
        return None

    def half_edge_to_vertex(self, vh, origin):
        # Half-edge running from origin into vh
        edges = self.edges
        for eh in self.vertices[vh].incoming:
            if edges[eh].start == origin: return eh
        return None

    def boundary_edges(self):
        return [eh for eh, edge in self.edges.items() if edge.face is None]

    def interior_edge_count(self):
        # Number of undirected edges with a face on both sides
        edges = self.edges
        count = 0
        for eh, edge in edges.items():
            if (edge.face is not None) and (edges[edge.pair].face is not None): count += 1
        return count // 2

    def reset_used(self):
        for fh, face in self.faces.items():
            face.used = False
        for eh, edge in self.edges.items():
            edge.used = False

    @property
    def vertex_count(self):
        return len(self.vertices)

    @property
    def face_count(self):
        return len(self.faces)

    @property
    def edge_pair_count(self):
        return len(self.edges) // 2

    # ===== Normals ===== #

    def calc_face_normal(self, fh):
        return triangle_normal(*self.face_positions(fh))

    def update_face_normal(self, fh):
        self.faces[fh].normal = self.calc_face_normal(fh)

    def update_face_normals(self, fhs=None):
        for fh in (self.faces if fhs is None else fhs):
            self.update_face_normal(fh)

    def update_vertex_faces(self, vhs):
        fhs = set()
        for vh in vhs:
            if vh in self.vertices: fhs.update(self.vertex_faces(vh))
        self.update_face_normals(fhs)

    # ===== Builder ===== #

    def add_vertex(self, position, normal=None):
        index = len(self.vertex_handles)
        vh = self.vertices.add(Vertex(position, normal, index))
        self.vertex_handles.append(vh)
        return vh

    def add_triangle(self, a, b, c):
        handles = self.vertex_handles
        v1, v2, v3 = handles[a], handles[b], handles[c]
        assert (v1 is not None) and (v2 is not None) and (v3 is not None), f"deleted vertex in ({a}, {b}, {c})"
        return self.add_face(v1, v2, v3)

    def add_face(self, v1, v2, v3):
        if (v1 == v2) or (v2 == v3) or (v3 == v1):
            logger.debug(f"Rejected degenerate face ({v1}, {v2}, {v3})")
            return None

        edges = self.edges
        corners = ((v1, v2), (v2, v3), (v3, v1))

        # Resolve every side before mutating anything, so that
        # a rejected face leaves no trace in the mesh
        resolved = []
        for current, following in corners:
            eh = self.half_edge_to_vertex(current, following)
            if eh is not None:
                eh = edges[eh].pair
                if edges[eh].face is not None:
                    logger.debug(f"Rejected non-manifold face ({v1}, {v2}, {v3})")
                    return None
            resolved.append(eh)

        face_edges = []
        for (current, following), eh in zip(corners, resolved):
            if eh is None: eh = self.add_edge_pair(current, following)
            face_edges.append(eh)

        fh = self.faces.add(Face())
        self.link_face(fh, face_edges)
        return fh

    def add_edge_pair(self, start, end):
        edges = self.edges
        eh = edges.add(HalfEdge(start, end))
        ph = edges.add(HalfEdge(end, start))
        edges[eh].pair = ph
        edges[ph].pair = eh

        v_start = self.vertices[start]
        v_end = self.vertices[end]
        v_start.outgoing.append(eh)
        v_end.incoming.append(eh)
        v_end.outgoing.append(ph)
        v_start.incoming.append(ph)

        return eh

    def link_face(self, fh, face_edges):
        edges = self.edges
        self.faces[fh].edge = face_edges[0]
        for i, eh in enumerate(face_edges):
            edge = edges[eh]
            edge.face = fh
            edge.next = face_edges[(i+1) % 3]
        self.update_face_normal(fh)

    def fill_face(self, e0, e1, e2):
        """
        Creates a face on three boundary half-edges that already form a
        cycle; the face joins the region of the first neighbour found
        across one of its edges
        """

        edges = self.edges
        face_edges = (e0, e1, e2)
        for i, eh in enumerate(face_edges):
            edge = edges[eh]
            assert edge.face is None, f"edge {eh} already has a face"
            assert edge.end == edges[face_edges[(i+1) % 3]].start, "edges do not form a cycle"

        fh = self.faces.add(Face())
        self.link_face(fh, face_edges)

        for eh in face_edges:
            neighbor = edges[edges[eh].pair].face
            if neighbor is None: continue
            region_id = self.faces[neighbor].region
            if region_id is None: continue
            self.faces[fh].region = region_id
            self.regions[region_id].add_face(fh)
            break

        return fh

    # ===== Topology editor ===== #

    def evict_from_region(self, fh):
        face = self.faces[fh]
        if face.region is None: return
        if face.region < len(self.regions): self.regions[face.region].remove_face(fh)
        face.region = None

    def delete_vertex(self, vh):
        vertex = self.vertices[vh]
        assert not (vertex.outgoing or vertex.incoming), f"vertex {vh} is still referenced"
        if self.vertex_handles[vertex.index] == vh: self.vertex_handles[vertex.index] = None
        self.vertices.remove(vh)

    def delete_edge(self, eh, delete_pair=True):
        edges = self.edges
        vertices = self.vertices
        edge = edges[eh]

        vertices[edge.start].outgoing.remove(eh)
        vertices[edge.end].incoming.remove(eh)

        if delete_pair:
            ph = edge.pair
            pair = edges[ph]
            vertices[pair.start].outgoing.remove(ph)
            vertices[pair.end].incoming.remove(ph)
            edges.remove(ph)

        edges.remove(eh)

    def delete_face(self, fh):
        edges = self.edges
        face_edges = self.face_edges(fh)
        corners = [edges[eh].start for eh in face_edges]

        self.evict_from_region(fh)

        for eh in face_edges:
            edge = edges[eh]
            edge.face = None
            edge.next = None

        for eh in face_edges:
            if edges[edges[eh].pair].face is None: self.delete_edge(eh)

        for vh in corners:
            if (vh in self.vertices) and not self.vertices[vh].outgoing:
                self.delete_vertex(vh)

        self.faces.remove(fh)

    def collapse_edge(self, eh):
        """
        Merges the end vertex of the edge into its start vertex, which is
        moved to the edge midpoint. Returns the surviving vertex.
        """

        edges = self.edges
        edge = edges[eh]
        ph = edge.pair
        keep = edge.start
        gone = edge.end
        v_keep = self.vertices[keep]
        v_gone = self.vertices[gone]

        v_keep.position = (v_keep.position + v_gone.position) * 0.5

        # Remove the triangles on either side; the outer edges of
        # each removed triangle are paired with each other
        removed_faces = []
        for side in (eh, ph):
            side_edge = edges[side]
            if side_edge.face is None: continue
            nh = side_edge.next
            nnh = edges[nh].next
            n_pair = edges[nh].pair
            nn_pair = edges[nnh].pair
            edges[n_pair].pair = nn_pair
            edges[nn_pair].pair = n_pair
            self.delete_edge(nnh, False)
            self.delete_edge(nh, False)
            removed_faces.append(side_edge.face)

        for fh in removed_faces:
            self.evict_from_region(fh)
            self.faces.remove(fh)

        self.delete_edge(eh)

        for oh in v_gone.outgoing:
            edges[oh].start = keep
            v_keep.outgoing.append(oh)
        for ih in v_gone.incoming:
            edges[ih].end = keep
            v_keep.incoming.append(ih)
        v_gone.outgoing = []
        v_gone.incoming = []

        self.delete_vertex(gone)

        self.update_face_normals(self.vertex_faces(keep))

        return keep

    def flip_edge(self, eh):
        """
        Replaces the edge by the other diagonal of the quad formed by its two
        faces. Returns the new half-edge (in the face of the original one),
        or None if the edge cannot be flipped.
        """

        edges = self.edges
        edge = edges[eh]
        pair = edges[edge.pair]
        if (edge.face is None) or (pair.face is None): return None

        fh = edge.face
        gh = pair.face
        en = edge.next
        enn = edges[en].next
        pn = pair.next
        pnn = edges[pn].next

        c = edges[en].end
        d = edges[pn].end
        if (c == d) or (self.find_edge(c, d) is not None): return None

        new_eh = self.add_edge_pair(d, c)
        new_ph = edges[new_eh].pair

        self.delete_edge(eh)

        self.link_face(fh, (enn, pn, new_eh))
        self.link_face(gh, (pnn, en, new_ph))

        return new_eh

    def is_cap(self, eh):
        # True if the apex of the edge's triangle has exactly three faces
        # around it, in which case the collapse would fold the mesh
        edges = self.edges
        edge = edges[eh]
        if edge.face is None: return False
        n = edges[edge.next]
        nn = edges[n.next]
        n_pair = edges[n.pair]
        nn_pair = edges[nn.pair]
        if (n_pair.face is None) or (nn_pair.face is None): return False
        return edges[n_pair.next].next == edges[nn_pair.next].pair

    def triangle_apex(self, eh):
        edges = self.edges
        edge = edges[eh]
        if edge.face is None: return None
        return edges[edge.next].end

    def detect_flicker(self, vhs):
        faces = self.faces
        regions = self.regions
        for vh in vhs:
            for fh in self.vertex_faces(vh):
                region_id = faces[fh].region
                if region_id is None: continue
                if regions[region_id].detect_flicker(self.calc_face_normal(fh)): return True
        return False

    def safe_collapse_edge(self, eh):
        """
        Collapses the edge only if this keeps the mesh well-formed and
        visually stable. Returns False (mesh untouched) otherwise.
        """

        edges = self.edges
        vertices = self.vertices
        edge = edges[eh]
        ph = edge.pair
        start = edge.start
        end = edge.end

        # Reject caps
        if self.is_cap(eh) or self.is_cap(ph): return False

        # Reject redundant edges between the endpoints
        count = 0
        for oh in vertices[start].outgoing:
            if edges[oh].end == end: count += 1
        if count != 1: return False

        # Shared neighbours other than the triangle apexes would become duplicate edges
        apexes = {self.triangle_apex(eh), self.triangle_apex(ph)}
        apexes.discard(None)
        if (self.vertex_neighbors(start) & self.vertex_neighbors(end)) - apexes: return False

        # Avoid creation of edges without faces
        for side in (eh, ph):
            side_edge = edges[side]
            if side_edge.face is None: continue
            n = edges[side_edge.next]
            nn = edges[n.next]
            if (edges[n.pair].face is None) and (edges[nn.pair].face is None): return False

        # Do not remove the last bridge across a triangular hole
        for oh in vertices[end].outgoing:
            out = edges[oh]
            if out.face is not None: continue
            for o2h in vertices[out.end].outgoing:
                out2 = edges[o2h]
                if (out2.face is None) and (out2.end == start): return False

        # Check for flickering with both endpoints moved to the midpoint
        v_start = vertices[start]
        v_end = vertices[end]
        origin_start = v_start.position
        origin_end = v_end.position
        middle = (origin_start + origin_end) * 0.5
        v_start.position = middle
        v_end.position = middle
        flickering = self.detect_flicker((start, end))
        v_start.position = origin_start
        v_end.position = origin_end
        if flickering: return False

        self.collapse_edge(eh)
        return True

    # ===== Regions ===== #

    def set_regions(self, regions):
        """
        Replaces the whole face -> region mapping; ids are reassigned
        to match the positions in the list
        """

        faces = self.faces
        for fh, face in faces.items():
            face.region = None

        for region_id, region in enumerate(regions):
            region.id = region_id
            for fh in region.faces:
                faces[fh].region = region_id

        self.regions = list(regions)

    # ===== Validation ===== #

    def check_invariants(self):
        edges = self.edges
        faces = self.faces
        vertices = self.vertices

        for eh, edge in edges.items():
            pair = edges[edge.pair]
            assert pair.pair == eh, f"edge {eh}: asymmetric pairing"
            assert (pair.start == edge.end) and (pair.end == edge.start), f"edge {eh}: pair is not reversed"
            assert eh in vertices[edge.start].outgoing, f"edge {eh}: missing from outgoing list"
            assert eh in vertices[edge.end].incoming, f"edge {eh}: missing from incoming list"
            if edge.face is not None: assert edge.face in faces, f"edge {eh}: dangling face"

        for fh, face in faces.items():
            eh = face.edge
            for i in range(3):
                assert edges[eh].face == fh, f"face {fh}: edge {eh} belongs elsewhere"
                eh = edges[eh].next
            assert eh == face.edge, f"face {fh}: edge cycle is not a triangle"
            if face.region is not None: assert fh in self.regions[face.region].faces, f"face {fh}: not in its region"

        for vh, vertex in vertices.items():
            for eh in vertex.outgoing:
                assert edges[eh].start == vh, f"vertex {vh}: foreign outgoing edge {eh}"
            for eh in vertex.incoming:
                assert edges[eh].end == vh, f"vertex {vh}: foreign incoming edge {eh}"

        for region in self.regions:
            for fh in region.faces:
                assert faces[fh].region == region.id, f"region {region.id}: face {fh} points elsewhere"

        return True
