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

"""Tests for the vertex partition (union-find) used to plan stitching."""

import pytest
import torch

from meshstitch.halfedge import HalfEdgeMesh
from meshstitch.stitching import VertexPartition, identify_vertices


class TestVertexPartition:
    """Tests for VertexPartition."""

    def test_singletons(self):
        partition = VertexPartition()
        partition.add(3)
        partition.add(3)

        assert len(partition) == 1
        assert partition.n_sets == 1
        assert partition.find(3) == 3
        assert 3 in partition
        assert 4 not in partition

    def test_find_unknown_vertex(self):
        with pytest.raises(KeyError):
            VertexPartition().find(0)

    def test_first_argument_wins_on_equal_rank(self):
        partition = VertexPartition()

        assert partition.union(8, 2) == 8
        assert partition.find(2) == 8

    def test_union_by_rank(self):
        """A singleton is always hooked under a deeper tree."""
        partition = VertexPartition()
        partition.union(0, 1)
        partition.union(2, 3)
        partition.union(0, 2)

        assert partition.union(9, 3) == 0
        assert {partition.find(v) for v in (0, 1, 2, 3, 9)} == {0}
        assert partition.n_sets == 1

    def test_union_is_idempotent(self):
        partition = VertexPartition()
        partition.union(5, 6)

        assert partition.union(6, 5) == 5
        assert partition.n_sets == 1
        assert len(partition) == 2

    def test_long_chain_compresses(self):
        """Representatives stay stable along a long chain of unions."""
        partition = VertexPartition()
        for v in range(1, 1000):
            partition.union(0, v)

        assert all(partition.find(v) == 0 for v in range(1000))
        assert partition.n_sets == 1

    def test_classes(self):
        partition = VertexPartition()
        partition.union(1, 2)
        partition.union(3, 4)
        partition.union(2, 5)

        assert partition.classes() == {1: [1, 2, 5], 3: [3, 4]}
        assert list(partition) == [1, 2, 3, 4, 5]
        assert partition.n_sets == 2


class TestIdentifyVertices:
    """Tests for identify_vertices."""

    def test_two_triangles(self):
        """Fusing one pair identifies both endpoint pairs."""
        points = torch.tensor(
            [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]
        )
        hmesh = HalfEdgeMesh.from_polygons(points, [[0, 1, 2], [3, 4, 5]])
        # Border 2 -> 1 of the first triangle against border 3 -> 5 of the second
        h1 = next(
            h
            for h in hmesh.border_halfedges()
            if (hmesh.source(h), hmesh.target(h)) == (2, 1)
        )
        h2 = next(
            h
            for h in hmesh.border_halfedges()
            if (hmesh.source(h), hmesh.target(h)) == (3, 5)
        )

        partition = identify_vertices(hmesh, [(h1, h2)])

        assert partition.classes() == {1: [1, 3], 2: [2, 5]}
