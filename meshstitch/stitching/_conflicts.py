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

"""Detection of vertex merges that would duplicate an edge.

After the tentative identification, every edge incident to a merged vertex is
re-keyed by the representatives of its endpoints. Two edges that end up with
the same key will coincide after stitching. This is only harmless when both
are border edges, which is the shape of a pair that is itself scheduled for
stitching (or of a two-edge loop that will close). Anything else would leave
a duplicated, non-manifold edge behind, so all endpoints involved are vetoed.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meshstitch.halfedge import HalfEdgeMesh
    from meshstitch.stitching._union_find import VertexPartition

logger = logging.getLogger(__name__)


def find_unstitchable_vertices(
    hmesh: "HalfEdgeMesh",
    partition: "VertexPartition",
) -> set[int]:
    """Vertices whose merge would create an edge present more than once.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh before stitching.
    partition : VertexPartition
        Tentative vertex identification.

    Returns
    -------
    set[int]
        Endpoints of every half-edge in a colliding group. Vetoing whole
        groups is stricter than needed but never keeps a pair that relies on
        a vetoed master vertex.
    """
    groups: dict[tuple[int, int], list[int]] = {}
    for v in partition:
        v_master = partition.find(v)
        for h in hmesh.halfedges_around_target(v):
            other = hmesh.source(h)
            if other in partition:
                # The same edge is also seen from `other`; count it once.
                if other < v:
                    continue
                other_master = partition.find(other)
            else:
                other_master = other
            key = (
                (v_master, other_master)
                if v_master < other_master
                else (other_master, v_master)
            )
            groups.setdefault(key, []).append(h)

    unstitchable: set[int] = set()
    for group in groups.values():
        if len(group) == 1:
            continue
        if len(group) == 2 and all(hmesh.is_border_edge(h) for h in group):
            continue
        for h in group:
            unstitchable.add(hmesh.source(h))
            unstitchable.add(hmesh.target(h))

    if unstitchable:
        logger.debug("Vetoed %d vertices to avoid duplicated edges", len(unstitchable))
    return unstitchable


def filter_pairs(
    hmesh: "HalfEdgeMesh",
    pairs: Iterable[tuple[int, int]],
    unstitchable: set[int],
) -> list[tuple[int, int]]:
    """Drop every pair with an endpoint in ``unstitchable``.

    Both half-edges are tested since a colliding group may involve only one
    of them.
    """
    return [
        (h1, h2)
        for h1, h2 in pairs
        if hmesh.source(h1) not in unstitchable
        and hmesh.target(h1) not in unstitchable
        and hmesh.source(h2) not in unstitchable
        and hmesh.target(h2) not in unstitchable
    ]
