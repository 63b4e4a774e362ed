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

"""Disjoint-set partition of the vertices a set of stitch pairs will merge.

Fusing a border pair ``(h1, h2)`` identifies ``target(h1)`` with
``source(h2)`` and ``source(h1)`` with ``target(h2)``. The partition records
those identities; its representative ("master") vertex of each class is the
vertex that survives the merge.
"""

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meshstitch.halfedge import HalfEdgeMesh


class VertexPartition:
    """Union-find over vertex indices with union by rank and path compression.

    Vertices are mapped lazily to dense slots; ``parent`` and ``rank`` are
    plain lists indexed by slot. Only vertices passed to :meth:`add` or
    :meth:`union` belong to the partition.

    Examples
    --------
    >>> partition = VertexPartition()
    >>> partition.union(4, 7)
    4
    >>> partition.union(9, 7)
    4
    >>> partition.find(9), 5 in partition, len(partition)
    (4, False, 3)
    """

    def __init__(self) -> None:
        self._slot: dict[int, int] = {}
        self._vertex: list[int] = []
        self._parent: list[int] = []
        self._rank: list[int] = []
        self._n_sets = 0

    def add(self, v: int) -> int:
        """Add ``v`` as a singleton if absent; return its slot."""
        slot = self._slot.get(v)
        if slot is None:
            slot = len(self._vertex)
            self._slot[v] = slot
            self._vertex.append(v)
            self._parent.append(slot)
            self._rank.append(0)
            self._n_sets += 1
        return slot

    def _root(self, slot: int) -> int:
        root = slot
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[slot] != root:
            self._parent[slot], slot = root, self._parent[slot]
        return root

    def find(self, v: int) -> int:
        """Representative vertex of the class containing ``v``.

        Raises
        ------
        KeyError
            If ``v`` is not part of the partition.
        """
        return self._vertex[self._root(self._slot[v])]

    def union(self, a: int, b: int) -> int:
        """Merge the classes of ``a`` and ``b`` (adding them if needed).

        On equal rank the representative of ``a`` wins.

        Returns
        -------
        int
            Representative vertex of the merged class.
        """
        root_a = self._root(self.add(a))
        root_b = self._root(self.add(b))
        if root_a != root_b:
            if self._rank[root_a] < self._rank[root_b]:
                root_a, root_b = root_b, root_a
            self._parent[root_b] = root_a
            if self._rank[root_a] == self._rank[root_b]:
                self._rank[root_a] += 1
            self._n_sets -= 1
        return self._vertex[root_a]

    def classes(self) -> dict[int, list[int]]:
        """Members of every class keyed by representative, in insertion order."""
        result: dict[int, list[int]] = {}
        for v in self._vertex:
            result.setdefault(self.find(v), []).append(v)
        return result

    @property
    def n_sets(self) -> int:
        return self._n_sets

    def __contains__(self, v: object) -> bool:
        return v in self._slot

    def __iter__(self) -> Iterator[int]:
        return iter(self._vertex)

    def __len__(self) -> int:
        return len(self._vertex)

    def __repr__(self) -> str:
        return f"VertexPartition(n_vertices={len(self)}, n_sets={self.n_sets})"


def identify_vertices(
    hmesh: "HalfEdgeMesh",
    pairs: Iterable[tuple[int, int]],
) -> VertexPartition:
    """Build the partition implied by fusing every pair in ``pairs``.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Mesh the half-edges belong to.
    pairs : Iterable[tuple[int, int]]
        Border half-edge pairs ``(h1, h2)``.

    Returns
    -------
    VertexPartition
        Fresh partition over every endpoint of every pair.
    """
    partition = VertexPartition()
    for h1, h2 in pairs:
        partition.union(hmesh.target(h1), hmesh.source(h2))
        partition.union(hmesh.source(h1), hmesh.target(h2))
    return partition
