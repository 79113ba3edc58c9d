# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import numpy as np

# All cross-references between elements are handles into the
# arenas of the owning mesh, never direct object references

class Vertex:
    def __init__(self, position, normal, index):
        self.position = np.array(position, dtype=float)
        self.normal = (np.zeros(3) if normal is None else np.array(normal, dtype=float))
        self.index = index # insertion order, not an identity
        self.outgoing = []
        self.incoming = []

class HalfEdge:
    def __init__(self, start, end):
        self.start = start
        self.end = end
        self.pair = None
        self.face = None
        self.next = None # only meaningful while the edge belongs to a face
        self.used = False

class Face:
    def __init__(self):
        self.edge = None
        self.normal = np.zeros(3)
        self.region = None # region id
        self.used = False
