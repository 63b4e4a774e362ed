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

"""Half-edge mesh validation.

Checks the connectivity invariants that in-place surgery must preserve and the
manifoldness properties stitching must not break.
"""

from collections import Counter, defaultdict
from collections.abc import Mapping
from typing import TYPE_CHECKING

from meshstitch.halfedge._halfedge_mesh import BORDER_FACE, NULL_INDEX

if TYPE_CHECKING:
    from meshstitch.halfedge._halfedge_mesh import HalfEdgeMesh

_MESSAGES = {
    "n_dangling_references": "half-edges referencing removed or missing elements",
    "n_broken_links": "half-edges whose next/prev links are not mutually inverse",
    "n_inconsistent_targets": "half-edges h with source(next(h)) != target(h)",
    "n_inconsistent_faces": "half-edges h with face(next(h)) != face(h)",
    "n_bad_vertex_anchors": "vertices whose anchor half-edge does not point at them",
    "n_bad_face_anchors": "faces whose anchor half-edge does not belong to them",
    "n_degenerate_faces": "faces with fewer than 3 sides or a self-loop edge",
    "n_duplicate_edges": "edges joining a vertex pair already joined by a non-border edge",
    "n_non_manifold_vertices": "vertices whose fan does not cover all incident half-edges",
}


def validate_halfedge_mesh(
    hmesh: "HalfEdgeMesh",
    check_manifoldness: bool = True,
    raise_on_error: bool = False,
) -> Mapping[str, bool | int]:
    """Validate the connectivity of a half-edge mesh.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh to validate.
    check_manifoldness : bool
        Also check for duplicate edges and non-manifold vertices. Exactly two
        border edges over the same vertex pair are not counted as duplicates.
        These checks are only evaluated when the basic link checks pass, since fan walks are
        meaningless on broken links.
    raise_on_error : bool
        If True, raise ValueError on the first failing check. If False,
        return the full report.

    Returns
    -------
    Mapping[str, bool | int]
        ``"valid"`` plus one count per check (see ``_MESSAGES`` keys).

    Raises
    ------
    ValueError
        If ``raise_on_error=True`` and a check fails.

    Examples
    --------
    >>> import torch
    >>> from meshstitch.halfedge import HalfEdgeMesh
    >>> hmesh = HalfEdgeMesh.from_polygons(torch.rand(3, 2), [[0, 1, 2]])
    >>> assert validate_halfedge_mesh(hmesh)["valid"]
    """
    results: dict[str, bool | int] = {"valid": True}

    def record(key: str, count: int) -> None:
        results[key] = count
        if count > 0:
            results["valid"] = False
            if raise_on_error:
                raise ValueError(f"Invalid half-edge mesh: {count} {_MESSAGES[key]}.")

    n_vertex_slots = hmesh.n_vertex_slots
    n_halfedge_slots = hmesh.n_halfedge_slots
    live_halfedges = list(hmesh.halfedges())

    def live_halfedge(h: int) -> bool:
        return 0 <= h < n_halfedge_slots and not hmesh.is_halfedge_removed(h)

    ### References
    n_dangling = 0
    for h in live_halfedges:
        v = hmesh.target(h)
        f = hmesh.face(h)
        if (
            not 0 <= v < n_vertex_slots
            or hmesh.is_vertex_removed(v)
            or not live_halfedge(hmesh.next(h))
            or not live_halfedge(hmesh.prev(h))
            or not (f == BORDER_FACE or 0 <= f < hmesh.n_faces)
        ):
            n_dangling += 1
    record("n_dangling_references", n_dangling)
    if n_dangling > 0:
        return results

    ### Links
    record(
        "n_broken_links",
        sum(
            1
            for h in live_halfedges
            if hmesh.next(hmesh.prev(h)) != h or hmesh.prev(hmesh.next(h)) != h
        ),
    )
    record(
        "n_inconsistent_targets",
        sum(1 for h in live_halfedges if hmesh.source(hmesh.next(h)) != hmesh.target(h)),
    )
    record(
        "n_inconsistent_faces",
        sum(1 for h in live_halfedges if hmesh.face(hmesh.next(h)) != hmesh.face(h)),
    )

    ### Anchors
    n_bad_vertex_anchors = 0
    for v in hmesh.vertices():
        anchor = hmesh.halfedge(v)
        if anchor == NULL_INDEX:
            continue
        if not live_halfedge(anchor) or hmesh.target(anchor) != v:
            n_bad_vertex_anchors += 1
    record("n_bad_vertex_anchors", n_bad_vertex_anchors)

    n_bad_face_anchors = 0
    for f in hmesh.faces():
        anchor = hmesh.face_halfedge(f)
        if not live_halfedge(anchor) or hmesh.face(anchor) != f:
            n_bad_face_anchors += 1
    record("n_bad_face_anchors", n_bad_face_anchors)

    if not results["valid"]:
        return results

    n_degenerate = 0
    for f in hmesh.faces():
        cycle = list(hmesh.halfedges_around_face(hmesh.face_halfedge(f)))
        if len(cycle) < 3 or any(hmesh.source(h) == hmesh.target(h) for h in cycle):
            n_degenerate += 1
    record("n_degenerate_faces", n_degenerate)

    if not check_manifoldness:
        return results

    ### Manifoldness
    # Two border edges over the same vertex pair are a seam waiting to be stitched.
    edges_by_key: dict[tuple[int, int], list[int]] = defaultdict(list)
    for e in hmesh.edges():
        h = 2 * e
        edges_by_key[tuple(sorted((hmesh.source(h), hmesh.target(h))))].append(h)
    n_duplicate_edges = 0
    for group in edges_by_key.values():
        if len(group) == 2 and all(hmesh.is_border_edge(h) for h in group):
            continue
        n_duplicate_edges += len(group) - 1
    record("n_duplicate_edges", n_duplicate_edges)

    n_incoming = Counter(hmesh.target(h) for h in live_halfedges)
    n_non_manifold = 0
    for v in hmesh.vertices():
        fan_size = sum(1 for _ in hmesh.halfedges_around_target(v))
        if fan_size != n_incoming.get(v, 0):
            n_non_manifold += 1
    record("n_non_manifold_vertices", n_non_manifold)

    return results
