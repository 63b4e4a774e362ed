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

"""Pytest configuration and shared fixtures for meshstitch tests.

Provides the device parametrization, custom markers, and builders for meshes
with open seams (closed meshes cut into patches whose boundaries coincide
geometrically but share no points).
"""

import pytest
import torch

from meshstitch import Mesh
from meshstitch.primitives.surfaces import cylinder_open, octahedron_surface

### Pytest Hooks ###


def pytest_configure(config):
    """Register custom pytest markers used in meshstitch tests."""
    config.addinivalue_line(
        "markers", "cuda: mark test as requiring CUDA (skipped if unavailable)"
    )


def pytest_collection_modifyitems(config, items):
    """Skip tests marked with 'cuda' if CUDA is not available."""
    if torch.cuda.is_available():
        return  # CUDA available, run all tests

    skip_cuda = pytest.mark.skip(reason="CUDA not available")
    for item in items:
        if "cuda" in item.keywords:
            item.add_marker(skip_cuda)


### Mesh Builders ###


def detach_cells(mesh: Mesh, cell_mask: torch.Tensor) -> Mesh:
    """Cut the cells selected by ``cell_mask`` loose from the rest of the mesh.

    Every point shared between a masked and an unmasked cell is duplicated;
    masked cells are rewired to the copies, which are appended in increasing
    order of the original point index. The cut is geometrically invisible.
    """
    masked = mesh.cells[cell_mask]
    unmasked = mesh.cells[~cell_mask]
    shared = torch.unique(masked[torch.isin(masked, unmasked)])

    remap = torch.arange(mesh.n_points, device=mesh.cells.device)
    remap[shared] = mesh.n_points + torch.arange(
        len(shared), device=mesh.cells.device
    )

    cells = mesh.cells.clone()
    cells[cell_mask] = remap[masked]
    points = torch.cat([mesh.points, mesh.points[shared]], dim=0)
    return Mesh(points=points, cells=cells)


### Pytest Fixtures ###


@pytest.fixture(
    params=[
        "cpu",
        pytest.param("cuda", marks=pytest.mark.cuda),
    ]
)
def device(request):
    """Parametrize tests over all available devices (CPU, CUDA).

    CUDA tests are automatically skipped if CUDA is not available via
    the pytest_collection_modifyitems hook.
    """
    return request.param


@pytest.fixture
def split_octahedron(device) -> Mesh:
    """Octahedron cut along its equator into two open pyramids.

    Points 0-5 are the original octahedron points; points 6-9 are copies of
    the equator points 0-3 used by the southern hemisphere.
    """
    mesh = octahedron_surface.load(device=device)
    southern = torch.zeros(mesh.n_cells, dtype=torch.bool, device=device)
    southern[4:] = True
    return detach_cells(mesh, southern)


@pytest.fixture
def seamed_cylinder(device) -> Mesh:
    """Open cylinder whose theta=0 seam is split into two coincident sides."""
    return cylinder_open.load(n_circ=8, n_height=3, seamed=True, device=device)
