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

"""Planning phase of stitching: validate, identify, detect conflicts, filter.

Planning never mutates the mesh. Its result, a :class:`StitchPlan`, is the
complete decision of which pairs get fused and which vertex survives each
merge; :func:`~meshstitch.stitching._surgery.execute_stitch_plan` carries it
out.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, NamedTuple

from meshstitch.stitching._conflicts import filter_pairs, find_unstitchable_vertices
from meshstitch.stitching._union_find import VertexPartition, identify_vertices

if TYPE_CHECKING:
    from meshstitch.halfedge import HalfEdgeMesh

logger = logging.getLogger(__name__)


class StitchPlan(NamedTuple):
    """Immutable outcome of planning.

    Attributes
    ----------
    pairs : tuple[tuple[int, int], ...]
        Pairs ``(h1, h2)`` that survived filtering, in input order. For each,
        ``h2`` and its opposite will be removed.
    partition : VertexPartition
        Vertex identification built from ``pairs`` only.
    unstitchable_vertices : frozenset[int]
        Vertices vetoed during conflict detection.
    n_candidates : int
        Number of pairs submitted for planning.
    """

    pairs: tuple[tuple[int, int], ...]
    partition: VertexPartition
    unstitchable_vertices: frozenset[int]
    n_candidates: int

    @property
    def n_rejected(self) -> int:
        return self.n_candidates - len(self.pairs)


def check_stitchable_pairs(
    hmesh: "HalfEdgeMesh",
    pairs: Iterable[tuple[int, int]],
) -> list[tuple[int, int]]:
    """Check the topological preconditions of stitching.

    Every half-edge must be a live border half-edge whose opposite is not a
    border half-edge, and no half-edge may appear in more than one pair.

    Returns
    -------
    list[tuple[int, int]]
        The pairs, materialised as a list.

    Raises
    ------
    ValueError
        On the first violated precondition.
    """
    checked: list[tuple[int, int]] = []
    seen: set[int] = set()
    for h1, h2 in pairs:
        for h in (h1, h2):
            if not 0 <= h < hmesh.n_halfedge_slots or hmesh.is_halfedge_removed(h):
                raise ValueError(f"Half-edge {h=} does not exist in the mesh.")
            if not hmesh.is_border(h):
                raise ValueError(f"Half-edge {h=} is not a border half-edge.")
            if hmesh.is_border(hmesh.opposite(h)):
                raise ValueError(
                    f"Half-edge {h=} is an isolated edge: its opposite is also on the border."
                )
            if h in seen:
                raise ValueError(f"Half-edge {h=} appears in more than one pair.")
            seen.add(h)
        checked.append((h1, h2))
    return checked


def plan_stitching(
    hmesh: "HalfEdgeMesh",
    pairs: Iterable[tuple[int, int]],
) -> StitchPlan:
    """Decide which of ``pairs`` can be fused without breaking manifoldness.

    1. Identify vertices implied by all pairs.
    2. Veto vertices whose merge would duplicate an edge.
    3. Drop pairs touching a vetoed vertex and, if any were dropped, rebuild
       the identification from the survivors, since a dropped pair may have
       provided the master vertex of a surviving one.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh to stitch. It is not modified.
    pairs : Iterable[tuple[int, int]]
        Candidate border half-edge pairs.

    Returns
    -------
    StitchPlan
        The filtered pairs and their vertex identification.

    Raises
    ------
    ValueError
        If a pair violates the preconditions of :func:`check_stitchable_pairs`.
    """
    candidates = check_stitchable_pairs(hmesh, pairs)
    partition = identify_vertices(hmesh, candidates)
    unstitchable = find_unstitchable_vertices(hmesh, partition)

    if unstitchable:
        kept = filter_pairs(hmesh, candidates, unstitchable)
        partition = identify_vertices(hmesh, kept)
        logger.debug(
            "Dropped %d of %d candidate pairs", len(candidates) - len(kept), len(candidates)
        )
    else:
        kept = candidates

    return StitchPlan(
        pairs=tuple(kept),
        partition=partition,
        unstitchable_vertices=frozenset(unstitchable),
        n_candidates=len(candidates),
    )
