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

"""Tests for connected-component labelling."""

import torch

from meshstitch.utilities._connected_components import connected_component_labels


class TestConnectedComponentLabels:
    def test_no_pairs(self, device):
        adjacency = torch.zeros((0, 2), dtype=torch.long, device=device)
        labels, n_components = connected_component_labels(adjacency, 4)

        assert n_components == 4
        assert labels.tolist() == [0, 1, 2, 3]

    def test_components_numbered_by_smallest_element(self, device):
        adjacency = torch.tensor([[4, 3], [3, 2], [6, 5]], device=device)
        labels, n_components = connected_component_labels(adjacency, 7)

        assert n_components == 4
        assert labels.tolist() == [0, 1, 2, 2, 2, 3, 3]

    def test_long_path(self):
        """A path listed from its far end still collapses to one component."""
        n = 200
        adjacency = torch.stack([torch.arange(1, n), torch.arange(0, n - 1)], dim=1)
        labels, n_components = connected_component_labels(adjacency, n)

        assert n_components == 1
        assert torch.all(labels == 0)

    def test_cycle(self):
        adjacency = torch.tensor([[0, 3], [3, 1], [1, 4], [4, 0], [2, 2]])
        labels, n_components = connected_component_labels(adjacency, 5)

        assert n_components == 2
        assert labels.tolist() == [0, 0, 1, 0, 0]

    def test_empty(self):
        labels, n_components = connected_component_labels(
            torch.zeros((0, 2), dtype=torch.long), 0
        )

        assert n_components == 0
        assert len(labels) == 0
