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

"""Tests for the procedural surface meshes."""

import pytest
import torch

from meshstitch.primitives.surfaces import cylinder_open, octahedron_surface


class TestOctahedron:
    def test_shape(self, device):
        mesh = octahedron_surface.load(device=device)

        assert mesh.n_points == 6
        assert mesh.n_cells == 8
        assert mesh.n_manifold_dims == 2
        assert mesh.n_spatial_dims == 3
        assert mesh.is_watertight()

    def test_outward_orientation(self):
        mesh = octahedron_surface.load(radius=2.0)
        corners = mesh.points[mesh.cells]
        normals = torch.linalg.cross(
            corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0]
        )
        centroids = corners.mean(dim=1)

        assert torch.all((normals * centroids).sum(dim=-1) > 0)
        assert torch.allclose(mesh.points.norm(dim=-1), torch.full((6,), 2.0))


class TestOpenCylinder:
    def test_shape(self, device):
        mesh = cylinder_open.load(n_circ=8, n_height=3, device=device)

        assert mesh.n_points == 24
        assert mesh.n_cells == 32
        assert not mesh.is_watertight()

    def test_seamed_duplicates_first_column(self, device):
        n_circ, n_height = 8, 3
        mesh = cylinder_open.load(
            n_circ=n_circ, n_height=n_height, seamed=True, device=device
        )
        grid = mesh.points.reshape(n_height, n_circ + 1, 3)

        assert mesh.n_points == n_height * (n_circ + 1)
        assert mesh.n_cells == 2 * n_circ * (n_height - 1)
        assert torch.equal(grid[:, 0], grid[:, -1])

    def test_invalid_resolution(self):
        with pytest.raises(ValueError, match="n_circ"):
            cylinder_open.load(n_circ=2)
        with pytest.raises(ValueError, match="n_height"):
            cylinder_open.load(n_height=1)
