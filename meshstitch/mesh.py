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

from typing import TYPE_CHECKING, Any, Self

import torch
from tensordict import TensorDict, tensorclass

if TYPE_CHECKING:
    from meshstitch.halfedge import HalfEdgeMesh


@tensorclass(tensor_only=True)
class Mesh:
    r"""A PyTorch-based simplicial surface mesh.

    A ``Mesh`` stores the points and cells of a discretised manifold embedded in
    Euclidean space, together with field data attached to points, cells or the
    mesh as a whole. It is the container callers load, save and hand around;
    stitching itself operates on a :class:`~meshstitch.halfedge.HalfEdgeMesh`
    built from it (see :meth:`to_halfedge_mesh` and :meth:`stitch_borders`).

    **Core Data Structure**

    - ``points``: Vertex coordinates with shape :math:`(N_p, D_s)`.
    - ``cells``: Cell connectivity with shape :math:`(N_c, D_m + 1)`. Each row
      lists point indices of one simplex. Surface meshes (the only ones that
      can be stitched) use triangles, i.e. :math:`D_m = 2`.

    Two points that carry identical coordinates but different indices are
    *combinatorially* distinct. A seam made of such duplicates is geometrically
    closed but topologically open, which is exactly what stitching repairs.

    Parameters
    ----------
    points : torch.Tensor
        Vertex coordinates with shape :math:`(N_p, D_s)`. Must be floating-point.
    cells : torch.Tensor
        Cell connectivity with shape :math:`(N_c, D_m + 1)`. Must be integer dtype.
    point_data : TensorDict or dict[str, torch.Tensor], optional
        Per-vertex data. Dicts are automatically converted to TensorDict.
    cell_data : TensorDict or dict[str, torch.Tensor], optional
        Per-cell data. Dicts are automatically converted to TensorDict.
    global_data : TensorDict or dict[str, torch.Tensor], optional
        Mesh-level data. Dicts are automatically converted to TensorDict.

    Raises
    ------
    ValueError
        If ``points`` is not 2D, ``cells`` is not 2D, or manifold dimension
        exceeds spatial dimension.
    TypeError
        If ``cells`` has a floating-point dtype (indices must be integers).

    Examples
    --------
    Two triangles that share an edge geometrically but not combinatorially:

    >>> import torch
    >>> from meshstitch import Mesh
    >>> points = torch.tensor([
    ...     [0.0, 0.0], [1.0, 0.0], [0.0, 1.0],  # lower-left triangle
    ...     [1.0, 0.0], [1.0, 1.0], [0.0, 1.0],  # upper-right triangle
    ... ])
    >>> cells = torch.tensor([[0, 1, 2], [3, 4, 5]])
    >>> mesh = Mesh(points=points, cells=cells)
    >>> stitched, stats = mesh.stitch_borders()
    >>> stitched.n_points, stats["n_pairs_stitched"]
    (4, 1)
    """

    points: torch.Tensor  # shape: (n_points, n_spatial_dimensions)
    cells: torch.Tensor  # shape: (n_cells, n_manifold_dimensions + 1)
    point_data: TensorDict
    cell_data: TensorDict
    global_data: TensorDict

    def __init__(
        self,
        points: torch.Tensor,
        cells: torch.Tensor,
        point_data: TensorDict | dict[str, torch.Tensor] | None = None,
        cell_data: TensorDict | dict[str, torch.Tensor] | None = None,
        global_data: TensorDict | dict[str, torch.Tensor] | None = None,
    ) -> None:
        ### Assign tensorclass fields
        self.points = points
        self.cells = cells

        # For data fields, convert inputs to TensorDicts if needed
        if isinstance(point_data, TensorDict):
            point_data.batch_size = torch.Size([self.n_points])
        else:
            point_data = TensorDict(
                {} if point_data is None else dict(point_data),
                batch_size=torch.Size([self.n_points]),
                device=self.points.device,
            )
        self.point_data = point_data

        if isinstance(cell_data, TensorDict):
            cell_data.batch_size = torch.Size([self.n_cells])
        else:
            cell_data = TensorDict(
                {} if cell_data is None else dict(cell_data),
                batch_size=torch.Size([self.n_cells]),
                device=self.cells.device,
            )
        self.cell_data = cell_data

        if isinstance(global_data, TensorDict):
            global_data.batch_size = torch.Size([])
        else:
            global_data = TensorDict(
                {} if global_data is None else dict(global_data),
                batch_size=torch.Size([]),
                device=self.points.device,
            )
        self.global_data = global_data

        ### Validate shapes and dtypes
        if not torch.compiler.is_compiling():
            if self.points.ndim != 2:
                raise ValueError(
                    f"`points` must have shape (n_points, n_spatial_dimensions), but got {self.points.shape=}."
                )
            if self.cells.ndim != 2:
                raise ValueError(
                    f"`cells` must have shape (n_cells, n_manifold_dimensions + 1), but got {self.cells.shape=}."
                )
            if self.n_manifold_dims > self.n_spatial_dims:
                raise ValueError(
                    f"`n_manifold_dims` must be <= `n_spatial_dims`, but got {self.n_manifold_dims=} > {self.n_spatial_dims=}."
                )
            if torch.is_floating_point(self.cells):
                raise TypeError(
                    f"`cells` must have an int-like dtype, but got {self.cells.dtype=}."
                )
            if self.points.device != self.cells.device:
                raise ValueError(
                    f"`points` and `cells` must be on the same device, "
                    f"but got {self.points.device=} and {self.cells.device=}."
                )

    if TYPE_CHECKING:
        # Type stubs for methods dynamically added by @tensorclass.
        def to(self, *args: Any, **kwargs: Any) -> Self:
            """Move mesh and all attached data to a device and/or dtype."""
            ...

        def clone(self) -> Self:
            """Return a clone of this Mesh."""
            ...

    @property
    def n_points(self) -> int:
        return self.points.shape[0]

    @property
    def n_spatial_dims(self) -> int:
        return self.points.shape[-1]

    @property
    def n_cells(self) -> int:
        return self.cells.shape[0]

    @property
    def n_manifold_dims(self) -> int:
        return self.cells.shape[-1] - 1

    @property
    def codimension(self) -> int:
        """Difference between the spatial and the manifold dimension."""
        return self.n_spatial_dims - self.n_manifold_dims

    def is_watertight(self) -> bool:
        """Check if mesh is watertight (every facet shared by exactly 2 cells).

        Returns
        -------
        bool
            True if mesh has no boundary facets, False otherwise.

        Examples
        --------
        >>> from meshstitch.primitives.surfaces import octahedron_surface, cylinder_open
        >>> assert octahedron_surface.load().is_watertight()
        >>> assert not cylinder_open.load().is_watertight()
        """
        from meshstitch.boundaries import is_watertight

        return is_watertight(self)

    def to_halfedge_mesh(self) -> "HalfEdgeMesh":
        """Build a mutable half-edge arena from this triangle mesh.

        Vertex and face indices of the arena equal the point and cell indices
        of this mesh.

        Returns
        -------
        HalfEdgeMesh
            A new half-edge mesh. Point coordinates are copied.
        """
        from meshstitch.halfedge import HalfEdgeMesh

        return HalfEdgeMesh.from_mesh(self)

    def stitch_borders(
        self,
        per_connected_component: bool = False,
    ) -> tuple["Mesh", dict[str, int]]:
        """Fuse geometrically coincident border edges into shared interior edges.

        Convenience wrapper around :func:`meshstitch.repair.stitch_mesh_borders`.

        Parameters
        ----------
        per_connected_component : bool
            If True, only border edges of the same connected component are
            paired with each other.

        Returns
        -------
        tuple[Mesh, dict[str, int]]
            The stitched mesh and a statistics dictionary.
        """
        from meshstitch.repair import stitch_mesh_borders

        return stitch_mesh_borders(self, per_connected_component=per_connected_component)
