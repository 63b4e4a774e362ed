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

"""Connected-component labelling of elements joined by adjacency pairs.

Used to group faces of a half-edge mesh into edge-connected components.
Labels are found by min-label propagation: every element repeatedly takes the
smallest label among itself and its neighbours, then jumps to the label of
its label. Labels only ever decrease and always name an element of the same
component, so the fixed point labels each component by its smallest element.
"""

import torch


def connected_component_labels(
    adjacency: torch.Tensor, n_elements: int
) -> tuple[torch.Tensor, int]:
    """Label elements by connected component.

    Parameters
    ----------
    adjacency : torch.Tensor
        Shape (n_pairs, 2), dtype int64. Each row joins two elements.
    n_elements : int
        Total number of elements, including isolated ones.

    Returns
    -------
    tuple[torch.Tensor, int]
        Labels of shape (n_elements,) with values in ``[0, n_components)``,
        and ``n_components``. Components are numbered by their smallest
        element, so element 0 is always in component 0.
    """
    labels = torch.arange(n_elements, dtype=torch.long, device=adjacency.device)
    if n_elements == 0:
        return labels, 0

    src = torch.cat([adjacency[:, 0], adjacency[:, 1]])
    dst = torch.cat([adjacency[:, 1], adjacency[:, 0]])
    while True:
        updated = labels.scatter_reduce(0, dst, labels[src], reduce="amin")
        updated = updated[updated]
        if torch.equal(updated, labels):
            break
        labels = updated

    roots, compact = torch.unique(labels, sorted=True, return_inverse=True)
    return compact, len(roots)
