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

"""Stitch coincident open boundaries of triangle meshes.

Converts a :class:`~meshstitch.Mesh` into a half-edge mesh, fuses every
manifold pair of geometrically coincident border edges, and converts back.
"""

import logging
from typing import TYPE_CHECKING

from meshstitch.boundaries import get_boundary_edges
from meshstitch.halfedge import HalfEdgeMesh
from meshstitch.stitching import stitch_borders

if TYPE_CHECKING:
    from meshstitch.mesh import Mesh

logger = logging.getLogger(__name__)

_EMPTY_STATS = {
    "n_pairs_stitched": 0,
    "n_points_removed": 0,
    "n_boundary_edges_before": 0,
    "n_boundary_edges_after": 0,
}


def stitch_mesh_borders(
    mesh: "Mesh",
    per_connected_component: bool = False,
) -> tuple["Mesh", dict[str, int]]:
    """Fuse geometrically coincident border edges of a triangle mesh.

    Two border edges are fused when their endpoints carry exactly equal
    coordinates with opposite orientation and no third border edge spans the
    same two points. Pairs whose fusion would duplicate an edge elsewhere are
    left open. Boundary loops that fold back onto themselves are zipped.

    Parameters
    ----------
    mesh : Mesh
        Input mesh (must be a 2D manifold, i.e., a triangle mesh).
    per_connected_component : bool
        If True, only border edges of the same connected component are
        paired with each other.

    Returns
    -------
    tuple[Mesh, dict[str, int]]
        Tuple of (stitched_mesh, stats_dict) where stats_dict contains:

        - ``"n_pairs_stitched"``: Number of border edge pairs fused.
        - ``"n_points_removed"``: Number of points merged away.
        - ``"n_boundary_edges_before"``: Boundary edges of the input.
        - ``"n_boundary_edges_after"``: Boundary edges of the output.

        Point, cell and global data are carried over; data of merged-away
        points is dropped. If nothing is stitched the input mesh is returned.

    Raises
    ------
    ValueError
        If mesh is not a 2D manifold, or is not an oriented combinatorial
        manifold (see :meth:`~meshstitch.halfedge.HalfEdgeMesh.from_mesh`).

    Example
    -------
    >>> from meshstitch.primitives.surfaces import cylinder_open
    >>> mesh = cylinder_open.load(n_circ=16, n_height=4, seamed=True)
    >>> stitched, stats = stitch_mesh_borders(mesh)
    >>> stats["n_pairs_stitched"], stats["n_points_removed"]
    (3, 4)
    >>> stats["n_boundary_edges_after"]
    32
    """
    if mesh.n_manifold_dims != 2:
        raise ValueError(
            f"Border stitching only implemented for 2D manifolds (triangle meshes). "
            f"Got {mesh.n_manifold_dims=}."
        )

    if mesh.n_cells == 0:
        return mesh, dict(_EMPTY_STATS)

    n_boundary_before = len(get_boundary_edges(mesh))
    if n_boundary_before == 0:
        return mesh, dict(_EMPTY_STATS)

    hmesh = HalfEdgeMesh.from_mesh(mesh)
    n_stitched = stitch_borders(hmesh, per_connected_component=per_connected_component)

    if n_stitched == 0:
        stats = dict(_EMPTY_STATS)
        stats["n_boundary_edges_before"] = n_boundary_before
        stats["n_boundary_edges_after"] = n_boundary_before
        return mesh, stats

    stitched_mesh = hmesh.to_mesh(
        point_data=mesh.point_data,
        cell_data=mesh.cell_data,
        global_data=mesh.global_data.clone(),
    )

    stats = {
        "n_pairs_stitched": n_stitched,
        "n_points_removed": mesh.n_points - stitched_mesh.n_points,
        "n_boundary_edges_before": n_boundary_before,
        "n_boundary_edges_after": len(get_boundary_edges(stitched_mesh)),
    }
    logger.debug("Stitched mesh borders: %s", stats)
    return stitched_mesh, stats
