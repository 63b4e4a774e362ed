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

"""Execution phase of stitching: in-place half-edge surgery.

For each pair ``(h1, h2)`` the edge of ``h2`` disappears and ``h1`` takes its
place in the face of ``opposite(h2)``::

      face A                 face A
    --------->  h1 (border)
                     ==>   ---------> h1 / <--------- opposite(h1)
    <---------  h2 (border)
      face B                 face B (now bounded by h1)

The surgery runs in four sweeps over all pairs: re-target vertex fans to their
master vertex, relink boundary neighbours across every seam, fuse every edge,
then delete merged-away vertices. Between sweeps the mesh violates its own
invariants, so no reader may observe it until :func:`execute_stitch_plan`
returns.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meshstitch.halfedge import HalfEdgeMesh
    from meshstitch.stitching._planning import StitchPlan

logger = logging.getLogger(__name__)


def _update_target_vertex(hmesh: "HalfEdgeMesh", h: int, v_kept: int) -> None:
    """Point every half-edge of the fan through ``h`` at ``v_kept``."""
    start = h
    while True:
        hmesh.set_target(h, v_kept)
        h = hmesh.opposite(hmesh.next(h))
        if h == start:
            break


def execute_stitch_plan(hmesh: "HalfEdgeMesh", plan: "StitchPlan") -> int:
    """Fuse every pair of ``plan`` into a single interior edge.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh the plan was computed on, unmodified since.
    plan : StitchPlan
        Output of :func:`~meshstitch.stitching._planning.plan_stitching`.

    Returns
    -------
    int
        Number of pairs fused, i.e. ``len(plan.pairs)``.
    """
    partition = plan.partition
    vertices_to_delete: dict[int, None] = {}
    opposite = hmesh.opposite

    ### Merge vertices: target(h1) with source(h2), then source(h1) with target(h2)
    for h1, h2 in plan.pairs:
        h1_tgt = hmesh.target(h1)
        h2_src = hmesh.source(h2)
        v_kept = partition.find(h1_tgt)
        if v_kept != h1_tgt:
            vertices_to_delete[h1_tgt] = None
            _update_target_vertex(hmesh, h1, v_kept)
        if v_kept != h2_src and h1_tgt != h2_src:
            vertices_to_delete[h2_src] = None
            _update_target_vertex(hmesh, opposite(h2), v_kept)
        hmesh.set_vertex_halfedge(v_kept, h1)

        h1_src = hmesh.source(h1)
        h2_tgt = hmesh.target(h2)
        v_kept = partition.find(h2_tgt)
        if v_kept != h2_tgt:
            vertices_to_delete[h2_tgt] = None
            _update_target_vertex(hmesh, h2, v_kept)
        if v_kept != h1_src and h1_src != h2_tgt:
            vertices_to_delete[h1_src] = None
            _update_target_vertex(hmesh, opposite(h1), v_kept)
        hmesh.set_vertex_halfedge(v_kept, opposite(h1))

    ### Route boundary neighbours across each seam.
    # Some of these links point at half-edges that are about to be fused;
    # the fusing sweep below overwrites them.
    for h1, h2 in plan.pairs:
        hmesh.set_next(hmesh.prev(h2), hmesh.next(h1))
        hmesh.set_next(hmesh.prev(h1), hmesh.next(h2))

    ### Fuse: h1 replaces h2 in the face of opposite(h2)
    for h1, h2 in plan.pairs:
        h2_opp = opposite(h2)
        f = hmesh.face(h2_opp)
        hmesh.set_face(h1, f)
        hmesh.set_face_halfedge(f, h1)
        hmesh.set_next(hmesh.prev(h2_opp), h1)
        hmesh.set_next(h1, hmesh.next(h2_opp))
        hmesh.remove_edge(hmesh.edge(h2))

    for v in vertices_to_delete:
        hmesh.remove_vertex(v)

    logger.debug(
        "Stitched %d pairs, removed %d vertices", len(plan.pairs), len(vertices_to_delete)
    )
    return len(plan.pairs)
