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

"""Connected components of the faces of a half-edge mesh."""

from typing import TYPE_CHECKING

import torch

from meshstitch.utilities._connected_components import connected_component_labels

if TYPE_CHECKING:
    from meshstitch.halfedge._halfedge_mesh import HalfEdgeMesh


def face_connected_components(hmesh: "HalfEdgeMesh") -> tuple[torch.Tensor, int]:
    """Label faces by edge-connected component.

    Two faces are connected when they share an interior edge. Faces that only
    touch at a vertex end up in different components.

    Parameters
    ----------
    hmesh : HalfEdgeMesh
        Input half-edge mesh.

    Returns
    -------
    tuple[torch.Tensor, int]
        ``labels`` of shape (n_faces,), dtype int64, with values in
        ``[0, n_components)``, and ``n_components``. Component 0 contains
        face 0.

    Examples
    --------
    >>> import torch
    >>> from meshstitch.halfedge import HalfEdgeMesh
    >>> points = torch.rand(6, 3)
    >>> hmesh = HalfEdgeMesh.from_polygons(points, [[0, 1, 2], [3, 4, 5]])
    >>> labels, n_components = face_connected_components(hmesh)
    >>> n_components
    2
    """
    pairs = [
        (hmesh.face(2 * e), hmesh.face(2 * e + 1))
        for e in hmesh.edges()
        if not hmesh.is_border_edge(2 * e)
    ]
    pairs_tensor = torch.tensor(pairs, dtype=torch.long).reshape(-1, 2)
    return connected_component_labels(pairs_tensor, hmesh.n_faces)
