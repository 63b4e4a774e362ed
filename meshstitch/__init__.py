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

"""Stitching of coincident open boundaries on polygon meshes.

The tensor-based :class:`Mesh` is the storage and I/O type; stitching runs on
an index-addressed :class:`HalfEdgeMesh` built from it.
"""

from meshstitch.halfedge import HalfEdgeMesh, validate_halfedge_mesh
from meshstitch.mesh import Mesh
from meshstitch.repair import stitch_mesh_borders
from meshstitch.stitching import (
    stitch_borders,
    stitch_boundary_cycle,
    stitch_boundary_cycles,
    stitch_halfedge_pairs,
)

__version__ = "0.1.0"
