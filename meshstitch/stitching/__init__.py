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

"""Stitching of coincident border half-edges.

Stitching is split into a planning phase that decides which pairs can be
fused without creating non-manifold edges, and an execution phase that
performs the half-edge surgery.
"""

from meshstitch.stitching._boundary_cycles import (
    extract_boundary_cycles,
    find_zip_starting_points,
    is_zip_point,
    iter_zip_passes,
)
from meshstitch.stitching._candidates import collect_stitchable_pairs
from meshstitch.stitching._conflicts import filter_pairs, find_unstitchable_vertices
from meshstitch.stitching._planning import StitchPlan, plan_stitching
from meshstitch.stitching._surgery import execute_stitch_plan
from meshstitch.stitching._union_find import VertexPartition, identify_vertices
from meshstitch.stitching.stitch import (
    stitch_borders,
    stitch_boundary_cycle,
    stitch_boundary_cycles,
    stitch_halfedge_pairs,
)
