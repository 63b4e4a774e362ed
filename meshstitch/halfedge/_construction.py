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

"""Vectorised construction of half-edge connectivity from polygon corners.

Algorithm
---------
1. Flatten faces into corners; corner ``c`` emits the directed edge
   ``(vertex[c], vertex[next_corner[c]])``.
2. Reject faces with too few or repeated vertices and directed edges used
   twice (inconsistent orientation or a non-manifold edge).
3. Deduplicate undirected edges with ``torch.unique``. The half-edge running
   from the smaller to the larger vertex index gets slot ``2e``, the other one
   ``2e + 1``. Slots no face claims become border half-edges.
4. Link border half-edges into boundary loops by rotating around their target
   vertex (CPU, pure-Python lists).
"""

from typing import TYPE_CHECKING

import torch

from meshstitch.halfedge._halfedge_mesh import BORDER_FACE, NULL_INDEX

if TYPE_CHECKING:
    from meshstitch.halfedge._halfedge_mesh import HalfEdgeMesh


def _link_border_loops(
    target: list[int], next_: list[int], prev: list[int], face: list[int]
) -> None:
    """Set ``next``/``prev`` of every border half-edge in place.

    For a border half-edge ``h`` pointing at ``w``, the successor is the first
    border half-edge leaving ``w`` found by rotating from ``opposite(h)``
    through ``opposite(prev(.))``. This stays within one face fan, so pinched
    (non-manifold) boundary vertices still get consistent loops.
    """
    n_halfedges = len(target)
    for h in range(n_halfedges):
        if face[h] != BORDER_FACE:
            continue
        g = h ^ 1
        for _ in range(n_halfedges):
            g = prev[g] ^ 1
            if face[g] == BORDER_FACE:
                next_[h] = g
                prev[g] = h
                break
        else:
            raise ValueError(f"Could not close the boundary loop at half-edge {h=}.")


def build_connectivity(
    cls: type["HalfEdgeMesh"],
    points: torch.Tensor,
    corner_vertex: torch.Tensor,
    face_sizes: torch.Tensor,
) -> "HalfEdgeMesh":
    """Build a :class:`HalfEdgeMesh` from flattened polygon corners.

    Parameters
    ----------
    cls : type[HalfEdgeMesh]
        Class to instantiate.
    points : torch.Tensor
        Point coordinates, shape (n_points, n_spatial_dims).
    corner_vertex : torch.Tensor
        Vertex index of each corner, faces concatenated, shape (n_corners,).
    face_sizes : torch.Tensor
        Number of corners of each face, shape (n_faces,).

    Returns
    -------
    HalfEdgeMesh
        Connected arena with border loops.

    Raises
    ------
    ValueError
        If indices are out of range, a face has fewer than 3 or repeated
        vertices, or a directed edge is used by more than one face.
    """
    if points.ndim != 2:
        raise ValueError(f"`points` must be 2D, got {points.shape=}.")

    device = corner_vertex.device
    n_points = points.shape[0]
    n_faces = len(face_sizes)
    n_corners = len(corner_vertex)

    ### Validate faces
    if n_faces > 0 and int(face_sizes.min()) < 3:
        raise ValueError(
            f"Every face needs at least 3 vertices, got {int(face_sizes.min())=}."
        )
    if n_corners > 0 and (
        int(corner_vertex.min()) < 0 or int(corner_vertex.max()) >= n_points
    ):
        raise ValueError(f"Face vertex indices must lie in [0, {n_points=}).")

    offsets = torch.cumsum(face_sizes, dim=0) - face_sizes
    corner_face = torch.repeat_interleave(
        torch.arange(n_faces, dtype=torch.long, device=device), face_sizes
    )
    corner_ids = torch.arange(n_corners, dtype=torch.long, device=device)
    position = corner_ids - offsets[corner_face]
    corner_next = torch.where(
        position + 1 == face_sizes[corner_face], offsets[corner_face], corner_ids + 1
    )

    face_vertex_keys = corner_face * n_points + corner_vertex
    if len(torch.unique(face_vertex_keys)) != n_corners:
        raise ValueError("A face references the same vertex more than once.")

    src = corner_vertex
    dst = corner_vertex[corner_next]

    directed_keys = src * n_points + dst
    if len(torch.unique(directed_keys)) != n_corners:
        raise ValueError(
            "A directed edge is shared by several faces: the input is either "
            "inconsistently oriented or has a non-manifold edge."
        )

    ### Assign half-edge slots per undirected edge
    undirected_keys = torch.minimum(src, dst) * n_points + torch.maximum(src, dst)
    _, edge_ids = torch.unique(undirected_keys, return_inverse=True)
    n_edges = int(edge_ids.max()) + 1 if n_corners > 0 else 0
    n_halfedges = 2 * n_edges
    slot = 2 * edge_ids + (src > dst).long()

    target_t = torch.full((n_halfedges,), NULL_INDEX, dtype=torch.long, device=device)
    target_t[slot ^ 1] = src
    target_t[slot] = dst

    face_t = torch.full((n_halfedges,), BORDER_FACE, dtype=torch.long, device=device)
    face_t[slot] = corner_face

    next_t = torch.full((n_halfedges,), NULL_INDEX, dtype=torch.long, device=device)
    prev_t = torch.full((n_halfedges,), NULL_INDEX, dtype=torch.long, device=device)
    next_t[slot] = slot[corner_next]
    prev_t[slot[corner_next]] = slot

    face_halfedge = slot[offsets].tolist() if n_faces > 0 else []

    ### Scalar phase: border loops and vertex anchors
    target = target_t.tolist()
    face = face_t.tolist()
    next_ = next_t.tolist()
    prev = prev_t.tolist()
    _link_border_loops(target, next_, prev, face)

    # Border vertices are anchored on an incoming border half-edge.
    vertex_halfedge = [NULL_INDEX] * n_points
    for h in range(n_halfedges):
        v = target[h]
        anchor = vertex_halfedge[v]
        if anchor == NULL_INDEX or (
            face[h] == BORDER_FACE and face[anchor] != BORDER_FACE
        ):
            vertex_halfedge[v] = h

    point_list = [tuple(p) for p in points.detach().cpu().tolist()]

    return cls(
        points=point_list,
        target=target,
        next_halfedge=next_,
        prev_halfedge=prev,
        face=face,
        vertex_halfedge=vertex_halfedge,
        face_halfedge=face_halfedge,
        dtype=points.dtype,
        device=points.device,
        n_spatial_dims=points.shape[1],
    )
