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

"""Tests for zipping boundary loops that fold back onto themselves."""

import math

import pytest
import torch

from meshstitch.halfedge import HalfEdgeMesh, validate_halfedge_mesh
from meshstitch.primitives.surfaces import cylinder_open, octahedron_surface
from meshstitch.stitching import (
    extract_boundary_cycles,
    find_zip_starting_points,
    is_zip_point,
    iter_zip_passes,
    stitch_borders,
    stitch_boundary_cycle,
    stitch_boundary_cycles,
)


def _slit_disk(n_sectors: int = 6) -> HalfEdgeMesh:
    """Two-ring polar disk cut open along the ray at angle 0.

    Point 0 is the centre; inner ring points are ``1 .. n_sectors + 1`` and
    outer ring points follow. The last point of each ring is an exact copy of
    the first, so the slit is two coincident edges long and its only turning
    point is the centre.
    """
    ring = []
    for k in range(n_sectors):
        theta = 2 * math.pi * k / n_sectors
        ring.append([math.cos(theta), math.sin(theta)])
    ring.append(ring[0])

    points = [[0.0, 0.0]]
    points += ring
    points += [[2 * x, 2 * y] for x, y in ring]

    inner = [1 + k for k in range(n_sectors + 1)]
    outer = [2 + n_sectors + k for k in range(n_sectors + 1)]
    faces = []
    for k in range(n_sectors):
        faces.append([0, inner[k], inner[k + 1]])
        faces.append([inner[k], outer[k], outer[k + 1]])
        faces.append([inner[k], outer[k + 1], inner[k + 1]])
    return HalfEdgeMesh.from_polygons(torch.tensor(points), faces)


def _slit_strip() -> HalfEdgeMesh:
    """4x2 grid of squares with a one-edge slit cut in from each short side.

    Grid point ``(i, j)`` has index ``5 * j + i``. The upper row of squares
    uses point 15 instead of ``(0, 1)`` and point 16 instead of ``(4, 1)``, so
    the single boundary loop has two turning points, at ``(1, 1)`` and
    ``(3, 1)``.
    """
    points = [[float(i), float(j)] for j in range(3) for i in range(5)]
    points += [[0.0, 1.0], [4.0, 1.0]]

    faces = []
    for j in range(2):
        for i in range(4):
            a, b = 5 * j + i, 5 * j + i + 1
            c, d = b + 5, a + 5
            if (i, j) == (0, 1):
                a = 15
            if (i, j) == (3, 1):
                b = 16
            faces.append([a, b, c])
            faces.append([a, c, d])
    return HalfEdgeMesh.from_polygons(torch.tensor(points), faces)


def _collapsed_fan() -> HalfEdgeMesh:
    """Two triangles whose boundary loop runs through three coincident points.

    Points 0, 1 and 2 all sit at the origin and point 3 at ``(1, 0)``. The
    border loop is ``0 -> 3 -> 2 -> 1 -> 0``: it turns around at point 3 and
    then continues over the zero-length edges ``2 -> 1`` and ``1 -> 0``.
    """
    points = torch.tensor([[0.0, 0.0], [0.0, 0.0], [0.0, 0.0], [1.0, 0.0]])
    return HalfEdgeMesh.from_polygons(points, [[0, 1, 3], [1, 2, 3]])


def _border_halfedge(hmesh: HalfEdgeMesh, source: int, target: int) -> int:
    return next(
        h
        for h in hmesh.border_halfedges()
        if (hmesh.source(h), hmesh.target(h)) == (source, target)
    )


def _state(hmesh: HalfEdgeMesh):
    return sorted(hmesh.vertices()), hmesh.polygons(), hmesh.n_border_halfedges


class TestExtractBoundaryCycles:
    """Tests for extract_boundary_cycles."""

    def test_counts(self, device, split_octahedron, seamed_cylinder):
        cases = [
            (octahedron_surface.load(device=device), 0),
            (cylinder_open.load(n_circ=8, n_height=3, device=device), 2),
            (split_octahedron, 2),
            (seamed_cylinder, 1),
        ]
        for mesh, n_cycles in cases:
            assert len(extract_boundary_cycles(mesh.to_halfedge_mesh())) == n_cycles

    def test_representatives_are_border(self, split_octahedron):
        hmesh = split_octahedron.to_halfedge_mesh()
        for h in extract_boundary_cycles(hmesh):
            assert hmesh.is_border(h)
            assert len(list(hmesh.halfedges_around_face(h))) == 4


class TestZipStartingPoints:
    """Tests for the detection of turning points along a boundary loop."""

    def test_slit_disk(self):
        hmesh = _slit_disk()
        h = next(iter(hmesh.border_halfedges()))
        (start,) = find_zip_starting_points(hmesh, h)

        assert hmesh.target(start) == 0
        assert hmesh.source(hmesh.next(start)) == 0

    def test_two_turning_points(self):
        hmesh = _slit_strip()
        h = next(iter(hmesh.border_halfedges()))
        starts = find_zip_starting_points(hmesh, h)

        assert sorted(hmesh.target(s) for s in starts) == [6, 8]

    def test_plain_loops_have_none(self, split_octahedron, seamed_cylinder):
        for mesh in (split_octahedron, seamed_cylinder):
            hmesh = mesh.to_halfedge_mesh()
            for h in extract_boundary_cycles(hmesh):
                assert find_zip_starting_points(hmesh, h) == []

    def test_zip_pass_pairs_are_coincident(self):
        hmesh = _slit_disk()
        h = next(iter(hmesh.border_halfedges()))
        (pairs,) = list(iter_zip_passes(hmesh, h))

        assert len(pairs) == 2
        for h1, h2 in pairs:
            assert hmesh.point(hmesh.source(h2)) == hmesh.point(hmesh.target(h1))
            assert hmesh.point(hmesh.target(h2)) == hmesh.point(hmesh.source(h1))


class TestStitchBoundaryCycle:
    """Tests for stitch_boundary_cycle and stitch_boundary_cycles."""

    def test_slit_disk_closes(self):
        """The pass stops at the rim, and the slit pairs before it are kept."""
        n_sectors = 6
        hmesh = _slit_disk(n_sectors)
        h = next(iter(hmesh.border_halfedges()))

        assert stitch_boundary_cycle(hmesh, h) == 2
        assert hmesh.n_vertices == 1 + 2 * n_sectors
        assert hmesh.n_border_halfedges == n_sectors
        assert len(extract_boundary_cycles(hmesh)) == 1
        assert validate_halfedge_mesh(hmesh)["valid"]

    def test_two_turning_points_close(self):
        hmesh = _slit_strip()
        h = next(iter(hmesh.border_halfedges()))

        assert stitch_boundary_cycle(hmesh, h) == 2
        assert hmesh.n_vertices == 15
        assert hmesh.n_border_halfedges == 12
        assert validate_halfedge_mesh(hmesh)["valid"]

    def test_result_does_not_depend_on_start(self):
        """Every border half-edge of the loop leads to the same stitched mesh."""
        reference = _slit_strip()
        stitch_boundary_cycle(reference, next(iter(reference.border_halfedges())))
        expected = _state(reference)

        original = _slit_strip()
        border = list(original.border_halfedges())
        assert len(border) == 16
        for h in border:
            hmesh = original.copy()
            assert stitch_boundary_cycle(hmesh, h) == 2
            assert _state(hmesh) == expected

    def test_fold_within_one_face_is_not_zipped(self):
        """Zipping two sides of the same face would glue the face to itself."""
        points = torch.tensor([[0.0, 0.0], [1.0, 0.0], [0.0, 0.0]])
        hmesh = HalfEdgeMesh.from_polygons(points, [[0, 1, 2]])
        h = next(iter(hmesh.border_halfedges()))

        assert stitch_boundary_cycle(hmesh, h) == 0
        assert hmesh.n_vertices == 3
        assert hmesh.n_edges == 3

    def test_requires_border_halfedge(self):
        hmesh = octahedron_surface.load().to_halfedge_mesh()
        with pytest.raises(ValueError, match="not a live border half-edge"):
            stitch_boundary_cycle(hmesh, 0)

    def test_all_cycles(self):
        hmesh = _slit_disk()
        assert stitch_boundary_cycles(hmesh) == 2
        assert stitch_boundary_cycles(hmesh) == 0

    def test_seams_are_not_cycles(self, seamed_cylinder):
        """A seam between two distant sides of a loop needs pair discovery."""
        hmesh = seamed_cylinder.to_halfedge_mesh()

        assert stitch_boundary_cycles(hmesh) == 0
        assert hmesh.n_vertices == 27

    def test_stitch_borders_zips_slits(self):
        hmesh = _slit_strip()
        assert stitch_borders(hmesh) == 2
        assert hmesh.n_border_halfedges == 12


class TestZeroLengthEdges:
    """Zero-length border edges are never zipped."""

    def test_not_a_turning_point(self):
        hmesh = _collapsed_fan()
        h_03 = _border_halfedge(hmesh, 0, 3)
        h_21 = _border_halfedge(hmesh, 2, 1)

        # 2 -> 1 -> 0 returns to its start point, but only over zero-length edges.
        assert not is_zip_point(hmesh, h_21)
        assert is_zip_point(hmesh, h_03)
        for h in hmesh.border_halfedges():
            assert find_zip_starting_points(hmesh, h) == [h_03]

    def test_pass_stops_before_zero_length_edge(self):
        hmesh = _collapsed_fan()
        h_03 = _border_halfedge(hmesh, 0, 3)
        h_32 = _border_halfedge(hmesh, 3, 2)

        assert list(iter_zip_passes(hmesh, h_03)) == [[(h_03, h_32)]]

    def test_stitch_count(self):
        hmesh = _collapsed_fan()

        assert stitch_boundary_cycle(hmesh, _border_halfedge(hmesh, 1, 0)) == 1
        assert hmesh.n_vertices == 3
        assert hmesh.n_edges == 4
        assert hmesh.n_border_halfedges == 2
