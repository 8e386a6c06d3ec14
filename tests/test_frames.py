"""Tests for applying transforms to points and the reference cube."""

import pytest
import torch

from matrixviz.core.affine import compose, identity
from matrixviz.core.errors import ShapeError
from matrixviz.core.frames import cube_vertices, to_world, transform_cube

ABS_TOL = 1e-5
REL_TOL = 1e-5


def test_identity_transform():
    p_local = torch.tensor([[1.0, 2.0, 3.0]])

    torch.testing.assert_close(to_world(p_local, identity()), p_local)


def test_translation_only():
    t = (1.0, 2.0, 3.0)
    m = compose(t, (1.0, 1.0, 1.0), (0.0, 0.0, 0.0))

    torch.testing.assert_close(to_world([0.0, 0.0, 0.0], m), torch.tensor(t))


def test_points_keep_batch_shape():
    m = compose((1.0, 0.0, 0.0), (1.0, 1.0, 1.0), (0.0, 30.0, 0.0))
    points = torch.randn(4, 5, 3)

    assert to_world(points, m).shape == (4, 5, 3)


def test_batched_matrices_pair_with_points():
    # Each point goes through the transform at the same batch index
    m = compose([[10.0, 0.0, 0.0], [0.0, 20.0, 0.0]], torch.ones(2, 3), torch.zeros(2, 3))
    points = torch.tensor([[1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])

    world = to_world(points, m)

    assert world.shape == (2, 3)
    torch.testing.assert_close(world, torch.tensor([[11.0, 0.0, 0.0], [1.0, 20.0, 0.0]]))


def test_every_point_through_every_matrix():
    m = compose([[10.0, 0.0, 0.0], [0.0, 20.0, 0.0]], torch.ones(2, 3), torch.zeros(2, 3))
    points = torch.randn(5, 3)

    world = to_world(points, m.unsqueeze(-3))

    assert world.shape == (2, 5, 3)
    torch.testing.assert_close(world[1], points + torch.tensor([0.0, 20.0, 0.0]))


def test_mismatched_batches_raise():
    m = identity((2,))

    with pytest.raises(ShapeError, match="does not broadcast"):
        to_world(torch.zeros(3, 3), m)


def test_cube_vertices():
    v = cube_vertices(2.0)

    assert v.shape == (8, 3)
    assert v.dtype == torch.float32
    assert torch.equal(v.abs(), torch.ones(8, 3))
    # All corners are distinct
    assert len({tuple(row) for row in v.tolist()}) == 8


def test_transform_cube_preserves_center_and_scales_edges():
    p = (1.0, -2.0, 0.5)
    m = compose(p, (2.0, 2.0, 2.0), (25.0, -40.0, 70.0))

    world = transform_cube(m, size=2.0)

    torch.testing.assert_close(world.mean(dim=0), torch.tensor(p), atol=ABS_TOL, rtol=REL_TOL)
    # Uniform scale 2 on a 2x2x2 cube: every corner sits 2*sqrt(3) from the center
    dist = torch.linalg.vector_norm(world - torch.tensor(p), dim=-1)
    torch.testing.assert_close(dist, torch.full((8,), 2.0 * 3**0.5), atol=ABS_TOL, rtol=REL_TOL)


def test_rigid_transform_preserves_distances():
    m = compose((10.0, 20.0, 30.0), (1.0, 1.0, 1.0), (28.6, 17.2, 5.7))

    p1, p2 = torch.tensor([0.0, 0.0, 0.0]), torch.tensor([1.0, 0.0, 0.0])
    d_world = torch.linalg.vector_norm(to_world(p2, m) - to_world(p1, m))

    torch.testing.assert_close(d_world, torch.tensor(1.0), atol=ABS_TOL, rtol=REL_TOL)


def test_transform_cube_batched():
    positions = torch.tensor([[1.0, 0.0, 0.0], [0.0, 0.0, -3.0], [2.0, 2.0, 2.0]])
    m = compose(positions, torch.ones(3, 3), torch.zeros(3, 3))

    world = transform_cube(m, size=2.0)

    assert world.shape == (3, 8, 3)
    torch.testing.assert_close(world.mean(dim=-2), positions, atol=ABS_TOL, rtol=REL_TOL)
    torch.testing.assert_close(world[1], cube_vertices(2.0) + positions[1])
