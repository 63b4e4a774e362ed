# SPDX-FileCopyrightText: Copyright (c) 2023 - 2026 NVIDIA CORPORATION & AFFILIATES.
# SPDX-FileCopyrightText: All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Index-addressed half-edge mesh used as the mutable stitching substrate.

Storage follows the usual arena layout: edge ``e`` owns half-edges ``2e`` and
``2e + 1`` so that ``opposite(h) == h ^ 1``. Border half-edges are stored
explicitly, carry ``face == BORDER_FACE`` and are linked by ``next``/``prev``
into closed boundary loops. Every "pointer" is a plain ``int`` held in a
Python list, which keeps the scalar pointer-chasing of in-place surgery cheap;
tensors are only used at the construction and export boundaries.

Removed elements are flagged rather than compacted, so indices stay stable for
the lifetime of the arena. :meth:`HalfEdgeMesh.to_mesh` compacts.
"""

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

import torch
from tensordict import TensorDict

if TYPE_CHECKING:
    from meshstitch.mesh import Mesh

BORDER_FACE = -1
NULL_INDEX = -1

Point = tuple[float, ...]


class HalfEdgeMesh:
    """Mutable half-edge graph of an oriented 2-manifold with boundary.

    Instances are normally created with :meth:`from_mesh` or
    :meth:`from_polygons`. Vertex indices equal the input point indices and
    face indices equal the input face (cell) indices.

    Parameters
    ----------
    points : list[tuple[float, ...]]
        Point of each vertex. Points are compared for exact equality.
    target, next_halfedge, prev_halfedge, face : list[int]
        Per half-edge connectivity. All four lists have the same even length.
    vertex_halfedge : list[int]
        Per vertex, one half-edge whose target is that vertex, or
        ``NULL_INDEX`` for isolated vertices.
    face_halfedge : list[int]
        Per face, one half-edge of its cycle.
    dtype, device
        Dtype and device used when exporting points back to tensors.
    """

    def __init__(
        self,
        points: list[Point],
        target: list[int],
        next_halfedge: list[int],
        prev_halfedge: list[int],
        face: list[int],
        vertex_halfedge: list[int],
        face_halfedge: list[int],
        dtype: torch.dtype = torch.float32,
        device: torch.device | str = "cpu",
        n_spatial_dims: int | None = None,
    ) -> None:
        if not (len(target) == len(next_halfedge) == len(prev_halfedge) == len(face)):
            raise ValueError(
                f"Per half-edge lists must have equal length, got "
                f"{len(target)=}, {len(next_halfedge)=}, {len(prev_halfedge)=}, {len(face)=}."
            )
        if len(target) % 2 != 0:
            raise ValueError(f"Half-edges come in pairs, got {len(target)=}.")
        if len(vertex_halfedge) != len(points):
            raise ValueError(f"{len(vertex_halfedge)=} must equal {len(points)=}.")

        self._points = points
        self._target = target
        self._next = next_halfedge
        self._prev = prev_halfedge
        self._face = face
        self._vertex_halfedge = vertex_halfedge
        self._face_halfedge = face_halfedge

        self._vertex_removed = [False] * len(points)
        self._edge_removed = [False] * (len(target) // 2)
        self._n_removed_vertices = 0
        self._n_removed_edges = 0

        self.dtype = dtype
        self.device = torch.device(device)
        if n_spatial_dims is None:
            n_spatial_dims = len(points[0]) if points else 3
        self.n_spatial_dims = n_spatial_dims

    ### Construction ###

    @classmethod
    def from_mesh(cls, mesh: "Mesh") -> "HalfEdgeMesh":
        """Build a half-edge mesh from a triangle :class:`~meshstitch.Mesh`.

        Raises
        ------
        ValueError
            If the mesh is not a surface mesh or is not an oriented
            combinatorial 2-manifold with boundary.
        """
        if mesh.n_manifold_dims != 2:
            raise ValueError(
                f"Half-edge meshes require a triangle mesh, got {mesh.n_manifold_dims=}."
            )
        from meshstitch.halfedge._construction import build_connectivity

        face_sizes = torch.full(
            (mesh.n_cells,), 3, dtype=torch.long, device=mesh.cells.device
        )
        return build_connectivity(
            cls, mesh.points, mesh.cells.reshape(-1).long(), face_sizes
        )

    @classmethod
    def from_polygons(
        cls,
        points: torch.Tensor,
        faces: Sequence[Sequence[int]],
    ) -> "HalfEdgeMesh":
        """Build a half-edge mesh from points and polygonal faces.

        Parameters
        ----------
        points : torch.Tensor
            Point coordinates, shape (n_points, n_spatial_dims).
        faces : Sequence[Sequence[int]]
            Each face lists at least 3 distinct point indices in
            counter-clockwise order.

        Examples
        --------
        >>> import torch
        >>> points = torch.tensor([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
        >>> hmesh = HalfEdgeMesh.from_polygons(points, [[0, 1, 2, 3]])
        >>> hmesh.n_vertices, hmesh.n_edges, hmesh.n_faces
        (4, 4, 1)
        """
        from meshstitch.halfedge._construction import build_connectivity

        face_sizes = torch.tensor(
            [len(f) for f in faces], dtype=torch.long, device=points.device
        )
        corner_vertex = torch.tensor(
            [v for f in faces for v in f], dtype=torch.long, device=points.device
        )
        return build_connectivity(cls, points, corner_vertex, face_sizes)

    def copy(self) -> "HalfEdgeMesh":
        """Return an independent copy of this arena."""
        other = HalfEdgeMesh(
            points=list(self._points),
            target=list(self._target),
            next_halfedge=list(self._next),
            prev_halfedge=list(self._prev),
            face=list(self._face),
            vertex_halfedge=list(self._vertex_halfedge),
            face_halfedge=list(self._face_halfedge),
            dtype=self.dtype,
            device=self.device,
            n_spatial_dims=self.n_spatial_dims,
        )
        other._vertex_removed = list(self._vertex_removed)
        other._edge_removed = list(self._edge_removed)
        other._n_removed_vertices = self._n_removed_vertices
        other._n_removed_edges = self._n_removed_edges
        return other

    ### Navigation ###

    @staticmethod
    def opposite(h: int) -> int:
        return h ^ 1

    @staticmethod
    def edge(h: int) -> int:
        return h >> 1

    def target(self, h: int) -> int:
        return self._target[h]

    def source(self, h: int) -> int:
        return self._target[h ^ 1]

    def next(self, h: int) -> int:
        return self._next[h]

    def prev(self, h: int) -> int:
        return self._prev[h]

    def face(self, h: int) -> int:
        return self._face[h]

    def is_border(self, h: int) -> bool:
        return self._face[h] == BORDER_FACE

    def is_border_edge(self, h: int) -> bool:
        """True if either half-edge of ``h``'s edge is a border half-edge."""
        return self._face[h] == BORDER_FACE or self._face[h ^ 1] == BORDER_FACE

    def halfedge(self, v: int) -> int:
        """Anchor half-edge of vertex ``v`` (its target is ``v``)."""
        return self._vertex_halfedge[v]

    def face_halfedge(self, f: int) -> int:
        return self._face_halfedge[f]

    def point(self, v: int) -> Point:
        return self._points[v]

    ### Mutation ###

    def set_target(self, h: int, v: int) -> None:
        self._target[h] = v

    def set_next(self, h: int, h_next: int) -> None:
        """Link ``h_next`` after ``h`` (updates ``prev(h_next)`` as well)."""
        self._next[h] = h_next
        self._prev[h_next] = h

    def set_face(self, h: int, f: int) -> None:
        self._face[h] = f

    def set_vertex_halfedge(self, v: int, h: int) -> None:
        self._vertex_halfedge[v] = h

    def set_face_halfedge(self, f: int, h: int) -> None:
        self._face_halfedge[f] = h

    def remove_edge(self, e: int) -> None:
        """Remove edge ``e`` and both of its half-edges.

        Neighbouring links are not touched; the caller is responsible for
        routing ``next``/``prev`` around the removed half-edges first.
        """
        if self._edge_removed[e]:
            raise ValueError(f"Edge {e=} has already been removed.")
        self._edge_removed[e] = True
        self._n_removed_edges += 1

    def remove_vertex(self, v: int) -> None:
        if self._vertex_removed[v]:
            raise ValueError(f"Vertex {v=} has already been removed.")
        self._vertex_removed[v] = True
        self._vertex_halfedge[v] = NULL_INDEX
        self._n_removed_vertices += 1

    ### Liveness ###

    def is_vertex_removed(self, v: int) -> bool:
        return self._vertex_removed[v]

    def is_edge_removed(self, e: int) -> bool:
        return self._edge_removed[e]

    def is_halfedge_removed(self, h: int) -> bool:
        return self._edge_removed[h >> 1]

    ### Counts ###

    @property
    def n_vertices(self) -> int:
        return len(self._points) - self._n_removed_vertices

    @property
    def n_edges(self) -> int:
        return len(self._edge_removed) - self._n_removed_edges

    @property
    def n_halfedges(self) -> int:
        return 2 * self.n_edges

    @property
    def n_faces(self) -> int:
        return len(self._face_halfedge)

    @property
    def n_border_halfedges(self) -> int:
        return sum(1 for _ in self.border_halfedges())

    @property
    def n_vertex_slots(self) -> int:
        """Number of vertex indices ever allocated, removed ones included."""
        return len(self._points)

    @property
    def n_halfedge_slots(self) -> int:
        return len(self._target)

    ### Iteration ###

    def vertices(self) -> Iterator[int]:
        for v, removed in enumerate(self._vertex_removed):
            if not removed:
                yield v

    def edges(self) -> Iterator[int]:
        for e, removed in enumerate(self._edge_removed):
            if not removed:
                yield e

    def halfedges(self) -> Iterator[int]:
        for e in self.edges():
            yield 2 * e
            yield 2 * e + 1

    def border_halfedges(self) -> Iterator[int]:
        for h in self.halfedges():
            if self._face[h] == BORDER_FACE:
                yield h

    def faces(self) -> Iterator[int]:
        yield from range(len(self._face_halfedge))

    def halfedges_around_target(self, v: int) -> Iterator[int]:
        """Walk the fan of half-edges pointing at ``v``, starting at its anchor.

        Consecutive half-edges are related by ``h -> opposite(next(h))``.

        Raises
        ------
        ValueError
            If the walk does not close, which means the connectivity is corrupt.
        """
        start = self._vertex_halfedge[v]
        if start == NULL_INDEX:
            return
        h = start
        for _ in range(len(self._target)):
            yield h
            h = self._next[h] ^ 1
            if h == start:
                return
        raise ValueError(f"Fan around vertex {v=} does not close.")

    def halfedges_around_face(self, h: int) -> Iterator[int]:
        """Walk the ``next`` cycle containing ``h`` (a face or a boundary loop)."""
        start = h
        for _ in range(len(self._target)):
            yield h
            h = self._next[h]
            if h == start:
                return
        raise ValueError(f"Cycle through half-edge {start=} does not close.")

    def face_vertices(self, f: int) -> list[int]:
        """Vertices of face ``f`` in cycle order, starting at the anchor's source."""
        return [self.source(h) for h in self.halfedges_around_face(self._face_halfedge[f])]

    def polygons(self) -> list[list[int]]:
        return [self.face_vertices(f) for f in self.faces()]

    ### Export ###

    @property
    def points(self) -> torch.Tensor:
        """Points of every vertex slot, removed vertices included."""
        if not self._points:
            return torch.empty(
                (0, self.n_spatial_dims), dtype=self.dtype, device=self.device
            )
        return torch.tensor(self._points, dtype=self.dtype, device=self.device)

    def to_mesh(
        self,
        point_data: TensorDict | None = None,
        cell_data: TensorDict | None = None,
        global_data: TensorDict | None = None,
    ) -> "Mesh":
        """Compact live vertices and faces into a new triangle :class:`Mesh`.

        Polygonal faces are fan-triangulated from their first vertex.

        Parameters
        ----------
        point_data : TensorDict, optional
            Data indexed by the *original* vertex indices of this arena.
            Rows of removed vertices are dropped.
        cell_data : TensorDict, optional
            Data indexed by face index. Rows are repeated for every triangle
            a face is split into.
        global_data : TensorDict, optional
            Passed through unchanged.

        Returns
        -------
        Mesh
            Compacted mesh whose point order follows the surviving vertex
            indices in increasing order.
        """
        from meshstitch.mesh import Mesh

        kept_vertices = list(self.vertices())
        new_index = [NULL_INDEX] * len(self._points)
        for i, v in enumerate(kept_vertices):
            new_index[v] = i

        triangles: list[tuple[int, int, int]] = []
        parent_faces: list[int] = []
        for f in self.faces():
            cycle = [new_index[v] for v in self.face_vertices(f)]
            for i in range(1, len(cycle) - 1):
                triangles.append((cycle[0], cycle[i], cycle[i + 1]))
                parent_faces.append(f)

        kept = torch.tensor(kept_vertices, dtype=torch.long, device=self.device)
        points = self.points[kept]
        if triangles:
            cells = torch.tensor(triangles, dtype=torch.long, device=self.device)
        else:
            cells = torch.empty((0, 3), dtype=torch.long, device=self.device)
        parents = torch.tensor(parent_faces, dtype=torch.long, device=self.device)

        return Mesh(
            points=points,
            cells=cells,
            point_data=None if point_data is None else point_data[kept],
            cell_data=None if cell_data is None else cell_data[parents],
            global_data=global_data,
        )

    def __repr__(self) -> str:
        return (
            f"HalfEdgeMesh(n_vertices={self.n_vertices}, n_edges={self.n_edges}, "
            f"n_faces={self.n_faces}, n_border_halfedges={self.n_border_halfedges})"
        )
