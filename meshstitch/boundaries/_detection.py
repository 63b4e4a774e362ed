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

"""Boundary detection for simplicial meshes.

A facet (codimension-1 sub-simplex) is on the boundary if it appears in only
one cell. Detection is purely combinatorial: two facets made of distinct but
coincident points are *both* boundary facets, which is what makes a seam
visible before it is stitched.
"""

from itertools import combinations
from typing import TYPE_CHECKING

import torch

if TYPE_CHECKING:
    from meshstitch.mesh import Mesh


def extract_candidate_facets(cells: torch.Tensor) -> torch.Tensor:
    """Extract every codimension-1 facet of every cell, sorted to canonical form.

    Parameters
    ----------
    cells : torch.Tensor
        Connectivity, shape (n_cells, n_vertices_per_cell).

    Returns
    -------
    torch.Tensor
        Facets with duplicates, shape (n_cells * n_vertices_per_cell,
        n_vertices_per_cell - 1). Vertex indices within a facet are sorted.

    Examples
    --------
    >>> import torch
    >>> facets = extract_candidate_facets(torch.tensor([[0, 1, 2]]))
    >>> facets.tolist()
    [[0, 1], [0, 2], [1, 2]]
    """
    n_vertices_per_cell = cells.shape[1]
    combo = torch.tensor(
        list(combinations(range(n_vertices_per_cell), n_vertices_per_cell - 1)),
        dtype=torch.long,
        device=cells.device,
    )
    facets = cells[:, combo]  # (n_cells, n_combinations, n_vertices_per_facet)
    facets = torch.sort(facets, dim=-1).values
    return facets.reshape(-1, n_vertices_per_cell - 1)


def _count_facets(mesh: "Mesh") -> tuple[torch.Tensor, torch.Tensor]:
    """Deduplicate codimension-1 facets and count how many cells share each."""
    candidate_facets = extract_candidate_facets(mesh.cells)
    unique_facets, counts = torch.unique(candidate_facets, dim=0, return_counts=True)
    return unique_facets, counts


def get_boundary_edges(mesh: "Mesh") -> torch.Tensor:
    """Get edges that lie on the boundary of a surface mesh.

    Parameters
    ----------
    mesh : Mesh
        Input triangle mesh (``n_manifold_dims == 2``).

    Returns
    -------
    torch.Tensor
        Tensor of shape (n_boundary_edges, 2) with sorted vertex indices.
        Empty (0, 2) tensor for watertight meshes.

    Raises
    ------
    ValueError
        If the mesh is not a 2-manifold.

    Examples
    --------
    >>> from meshstitch.primitives.surfaces import cylinder_open
    >>> mesh = cylinder_open.load(n_circ=32, n_height=16)
    >>> # Top and bottom circles each have 32 edges
    >>> assert len(get_boundary_edges(mesh)) == 64
    """
    if mesh.n_manifold_dims != 2:
        raise ValueError(
            f"Boundary edges are only defined here for surface meshes, "
            f"got {mesh.n_manifold_dims=}."
        )
    if mesh.n_cells == 0:
        return torch.zeros((0, 2), dtype=torch.int64, device=mesh.cells.device)

    unique_edges, counts = _count_facets(mesh)
    return unique_edges[counts == 1]


def get_boundary_vertices(mesh: "Mesh") -> torch.Tensor:
    """Identify vertices that lie on the mesh boundary.

    Returns
    -------
    torch.Tensor
        Boolean tensor of shape (n_points,), True for boundary vertices.
    """
    is_boundary_vertex = torch.zeros(
        mesh.n_points, dtype=torch.bool, device=mesh.points.device
    )
    boundary_edges = get_boundary_edges(mesh)
    if len(boundary_edges) > 0:
        is_boundary_vertex.scatter_(0, boundary_edges.flatten(), True)
    return is_boundary_vertex


def is_watertight(mesh: "Mesh") -> bool:
    """Check if mesh is watertight (has no boundary).

    A mesh is watertight if every codimension-1 facet is shared by exactly 2
    cells. An empty mesh is considered watertight.
    """
    if mesh.n_cells == 0:
        return True

    _, counts = _count_facets(mesh)
    return bool(torch.all(counts == 2))
