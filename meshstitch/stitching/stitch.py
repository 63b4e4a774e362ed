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

"""Public stitching operations on half-edge meshes.

Every operation mutates the mesh in place and returns the number of border
half-edge pairs that were fused into interior edges. Pairs whose fusion would
create a non-manifold edge are silently left open; the mesh is only changed
after that decision has been made for the whole batch.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from meshstitch.stitching._boundary_cycles import extract_boundary_cycles, iter_zip_passes
from meshstitch.stitching._candidates import collect_stitchable_pairs
from meshstitch.stitching._planning import plan_stitching
from meshstitch.stitching._surgery import execute_stitch_plan

if TYPE_CHECKING:
    from meshstitch.halfedge import HalfEdgeMesh

logger = logging.getLogger(__name__)


def stitch_halfedge_pairs(
    hmesh: "HalfEdgeMesh",
    pairs: Iterable[tuple[int, int]],
) -> int:
    """Stitch explicitly given pairs of border half-edges.

    For each pair ``(h1, h2)`` that survives conflict filtering, ``h2`` and
    its opposite are removed and ``h1`` becomes the interior edge shared by
    the faces of ``opposite(h1)`` and ``opposite(h2)``. The caller is
    responsible for the geometric precondition
    ``point(source(h2)) == point(target(h1))`` and
    ``point(target(h2)) == point(source(h1))``.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh to modify in place.
    pairs : Iterable[tuple[int, int]]
        Border half-edge pairs.

    Returns
    -------
    int
        Number of pairs fused.

    Raises
    ------
    ValueError
        If a half-edge is not a live border half-edge with a non-border
        opposite, or appears in several pairs. The mesh is left untouched.

    Examples
    --------
    >>> import torch
    >>> from meshstitch.halfedge import HalfEdgeMesh
    >>> from meshstitch.stitching import collect_stitchable_pairs
    >>> points = torch.tensor(
    ...     [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]
    ... )
    >>> hmesh = HalfEdgeMesh.from_polygons(points, [[0, 1, 2], [3, 4, 5]])
    >>> stitch_halfedge_pairs(hmesh, collect_stitchable_pairs(hmesh))
    1
    >>> hmesh.n_vertices, hmesh.n_edges
    (4, 5)
    """
    plan = plan_stitching(hmesh, pairs)
    if not plan.pairs:
        return 0
    return execute_stitch_plan(hmesh, plan)


def stitch_boundary_cycle(hmesh: "HalfEdgeMesh", h: int) -> int:
    """Stitch a boundary loop onto itself wherever it folds back.

    Each zip point of the loop through ``h`` starts a pass that pairs the
    half-edges on both sides of the turn, moving outwards until the loop
    closes, the geometry stops matching, or the two half-edges border the
    same face. Each pass is planned and executed before the next one starts.
    Pairs collected by a pass that stopped early are still stitched.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh to modify in place.
    h : int
        Any border half-edge of the loop.

    Returns
    -------
    int
        Number of pairs fused.

    Raises
    ------
    ValueError
        If ``h`` is not a live border half-edge.
    """
    if hmesh.is_halfedge_removed(h) or not hmesh.is_border(h):
        raise ValueError(f"Half-edge {h=} is not a live border half-edge.")

    n_stitched = 0
    for pairs in iter_zip_passes(hmesh, h):
        n_stitched += stitch_halfedge_pairs(hmesh, pairs)
    return n_stitched


def stitch_boundary_cycles(hmesh: "HalfEdgeMesh") -> int:
    """Apply :func:`stitch_boundary_cycle` to every boundary loop.

    Loops are enumerated once, before any stitching. Loops created by
    splitting a loop during stitching are not revisited.

    Returns
    -------
    int
        Number of pairs fused.
    """
    n_stitched = 0
    for h in extract_boundary_cycles(hmesh):
        if hmesh.is_halfedge_removed(h) or not hmesh.is_border(h):
            continue
        n_stitched += stitch_boundary_cycle(hmesh, h)
    return n_stitched


def stitch_borders(
    hmesh: "HalfEdgeMesh",
    per_connected_component: bool = False,
) -> int:
    """Find and stitch every manifold pair of coincident border half-edges.

    Runs :func:`stitch_boundary_cycles`, then stitches the pairs found by
    :func:`~meshstitch.stitching.collect_stitchable_pairs`, then runs
    :func:`stitch_boundary_cycles` again to zip loops that only fold back
    once their neighbours have been stitched.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh to modify in place.
    per_connected_component : bool
        If True, border half-edges are only paired within their own
        face-connected component.

    Returns
    -------
    int
        Total number of pairs fused.

    Examples
    --------
    >>> from meshstitch.primitives.surfaces import cylinder_open
    >>> hmesh = cylinder_open.load(n_circ=8, n_height=3, seamed=True).to_halfedge_mesh()
    >>> stitch_borders(hmesh)
    2
    """
    n_from_cycles = stitch_boundary_cycles(hmesh)
    pairs = collect_stitchable_pairs(hmesh, per_connected_component=per_connected_component)
    n_from_pairs = stitch_halfedge_pairs(hmesh, pairs)
    n_from_cycles += stitch_boundary_cycles(hmesh)

    logger.debug(
        "stitch_borders fused %d pairs (%d from boundary cycles, %d from candidate pairs)",
        n_from_cycles + n_from_pairs,
        n_from_cycles,
        n_from_pairs,
    )
    return n_from_cycles + n_from_pairs
