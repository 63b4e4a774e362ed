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

"""Discovery of border half-edge pairs that coincide geometrically.

Border half-edges are grouped by the unordered pair of their endpoint points.
A group of exactly two reverse-oriented half-edges is a manifold stitch
candidate. A group of three or more half-edges is a non-manifold geometric
edge and none of its half-edges is ever proposed: picking one pairing out of
several would make stitching along a chain of such edges inconsistent.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from meshstitch.halfedge import face_connected_components

if TYPE_CHECKING:
    from meshstitch.halfedge import HalfEdgeMesh
    from meshstitch.halfedge._halfedge_mesh import Point

logger = logging.getLogger(__name__)


def border_edge_key(hmesh: "HalfEdgeMesh", h: int) -> tuple["Point", "Point"]:
    """Unordered endpoint points of ``h``, sorted lexicographically."""
    p_src = hmesh.point(hmesh.source(h))
    p_tgt = hmesh.point(hmesh.target(h))
    return (p_src, p_tgt) if p_src < p_tgt else (p_tgt, p_src)


def _pair_border_halfedges(
    hmesh: "HalfEdgeMesh",
    border_halfedges: Iterable[int],
) -> list[tuple[int, int]]:
    """Group ``border_halfedges`` by geometric edge and keep manifold pairs.

    Pairs are returned in the order their second half-edge is encountered;
    within a pair the half-edge seen first comes first.
    """
    # key -> [multiplicity, first half-edge, index into `pairs`]
    groups: dict[tuple, list[int]] = {}
    pairs: list[tuple[int, int]] = []
    is_manifold: list[bool] = []

    for h in border_halfedges:
        key = border_edge_key(hmesh, h)
        group = groups.get(key)
        if group is None:
            groups[key] = [1, h, -1]
            continue

        group[0] += 1
        if group[0] == 2:
            first = group[1]
            group[2] = len(pairs)
            pairs.append((first, h))
            is_manifold.append(
                hmesh.point(hmesh.source(h)) == hmesh.point(hmesh.target(first))
                and hmesh.point(hmesh.target(h)) == hmesh.point(hmesh.source(first))
            )
        else:
            is_manifold[group[2]] = False

    n_rejected = is_manifold.count(False)
    if n_rejected:
        logger.debug(
            "Rejected %d coincident border pairs (non-manifold or same orientation)",
            n_rejected,
        )
    return [pair for pair, ok in zip(pairs, is_manifold) if ok]


def collect_stitchable_pairs(
    hmesh: "HalfEdgeMesh",
    per_connected_component: bool = False,
) -> list[tuple[int, int]]:
    """Find every manifold pair of geometrically coincident border half-edges.

    Two border half-edges ``h1`` and ``h2`` form a pair when
    ``point(source(h2)) == point(target(h1))`` and
    ``point(target(h2)) == point(source(h1))`` and no third border half-edge
    spans the same two points. Points are compared exactly.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh to scan. It is not modified.
    per_connected_component : bool
        If True, border half-edges are only grouped with border half-edges
        of the same face-connected component, so coincidences across
        unrelated components neither produce pairs nor veto pairs.

    Returns
    -------
    list[tuple[int, int]]
        Candidate pairs ``(h1, h2)``.

    Examples
    --------
    >>> import torch
    >>> from meshstitch.halfedge import HalfEdgeMesh
    >>> points = torch.tensor(
    ...     [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]
    ... )
    >>> hmesh = HalfEdgeMesh.from_polygons(points, [[0, 1, 2], [3, 4, 5]])
    >>> len(collect_stitchable_pairs(hmesh))
    1
    """
    border = list(hmesh.border_halfedges())

    if not per_connected_component:
        pairs = _pair_border_halfedges(hmesh, border)
    else:
        labels, n_components = face_connected_components(hmesh)
        labels = labels.tolist()
        border_per_component: list[list[int]] = [[] for _ in range(n_components)]
        for h in border:
            border_per_component[labels[hmesh.face(hmesh.opposite(h))]].append(h)

        pairs = []
        for component_border in border_per_component:
            pairs.extend(_pair_border_halfedges(hmesh, component_border))

    logger.debug(
        "Found %d stitchable pairs among %d border half-edges", len(pairs), len(border)
    )
    return pairs
