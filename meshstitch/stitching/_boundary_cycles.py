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

"""Self-stitching of a single boundary loop.

A boundary loop can fold back onto itself: walking along it, the loop reaches
a point ``p``, turns around and retraces its way back. Such a zig-zag is
"zipped" starting from the turning point, pairing the half-edge entering the
turn with the one leaving it, then moving outwards on both sides::

                        v11 ------ v10
                         |          |
   v0 --- v1(v13) === v2(v12)     v5(v9) === v6(v8) --- v7
                         |          |
                        v3 ------- v4

A single loop may have several independent turning points (here at ``v0``
and ``v7``), so every one of them starts its own pass.
"""

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meshstitch.halfedge import HalfEdgeMesh

logger = logging.getLogger(__name__)


def extract_boundary_cycles(hmesh: "HalfEdgeMesh") -> list[int]:
    """Return one border half-edge per boundary loop.

    Examples
    --------
    >>> from meshstitch.primitives.surfaces import cylinder_open
    >>> hmesh = cylinder_open.load(n_circ=8, n_height=3).to_halfedge_mesh()
    >>> len(extract_boundary_cycles(hmesh))
    2
    """
    visited: set[int] = set()
    representatives: list[int] = []
    for h in hmesh.border_halfedges():
        if h in visited:
            continue
        representatives.append(h)
        visited.update(hmesh.halfedges_around_face(h))
    return representatives


def is_zip_point(hmesh: "HalfEdgeMesh", h: int) -> bool:
    """True if the loop turns around after ``h``.

    That is, ``next(h)`` leads back to the point ``h`` started from and ``h``
    is not a zero-length edge.
    """
    p_src = hmesh.point(hmesh.source(h))
    return p_src == hmesh.point(hmesh.target(hmesh.next(h))) and p_src != hmesh.point(
        hmesh.target(h)
    )


def find_zip_starting_points(hmesh: "HalfEdgeMesh", h: int) -> list[int]:
    """Zip points of the loop through ``h``, starting the walk at ``next(h)``."""
    loop = list(hmesh.halfedges_around_face(h))
    return [hn for hn in loop[1:] + loop[:1] if is_zip_point(hmesh, hn)]


def _zip_pass(
    hmesh: "HalfEdgeMesh",
    start: int,
    visited: set[int],
) -> list[tuple[int, int]]:
    """Collect the pairs of one zipping pass starting at ``start``."""
    h = start
    hn = hmesh.next(h)
    pairs: list[tuple[int, int]] = []
    while True:
        # Fusing two sides of the same face would leave it adjacent to itself.
        if hmesh.face(hmesh.opposite(h)) == hmesh.face(hmesh.opposite(hn)):
            break

        pairs.append((h, hn))
        visited.add(h)
        visited.add(hn)

        if hmesh.next(hn) == h:
            break

        h = hmesh.prev(h)
        hn = hmesh.next(hn)

        p_src_hn = hmesh.point(hmesh.source(hn))
        p_tgt_hn = hmesh.point(hmesh.target(hn))
        if hmesh.point(hmesh.source(h)) != p_tgt_hn or p_src_hn == p_tgt_hn:
            break
    return pairs


def iter_zip_passes(hmesh: "HalfEdgeMesh", h: int) -> Iterator[list[tuple[int, int]]]:
    """Yield the pairs of each zipping pass along the loop through ``h``.

    Starting points are collected once up front. Each pass is computed
    lazily from the current connectivity, so the caller must stitch the
    yielded pairs before advancing the iterator. Starting points consumed by
    an earlier pass, removed, or no longer on the border are skipped, and the
    zip condition is re-checked since earlier passes rewire the loop.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh containing the loop.
    h : int
        Any border half-edge of the loop.

    Yields
    ------
    list[tuple[int, int]]
        Non-empty list of pairs ``(h, hn)`` to fuse together.
    """
    starting_points = find_zip_starting_points(hmesh, h)
    logger.debug("Boundary loop at half-edge %d has %d zip points", h, len(starting_points))

    visited: set[int] = set()
    for start in starting_points:
        if (
            start in visited
            or hmesh.is_halfedge_removed(start)
            or not hmesh.is_border(start)
            or not is_zip_point(hmesh, start)
        ):
            continue

        pairs = _zip_pass(hmesh, start, visited)
        if pairs:
            logger.debug("Zip pass from half-edge %d collected %d pairs", start, len(pairs))
            yield pairs
