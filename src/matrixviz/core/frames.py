"""Applying affine matrices to points.

The reference object is an axis-aligned cube centered at the origin, the
same 2x2x2 box the interactive viewport transforms.
"""

from __future__ import annotations

import itertools

import torch

from .errors import ShapeError
from .precision import DTYPE, as_matrix4, as_vector3
from .types import ArrayLike, Matrix4, Tensor


def to_world(points: ArrayLike, m: ArrayLike) -> Tensor:
    """Transform points from local to world coordinates.

    Leading dimensions of ``points`` and ``m`` broadcast against each other,
    so points of shape (B, 3) with matrices of shape (B, 4, 4) map each point
    through its own matrix. To push the same N points through every one of
    B matrices, pass ``m.unsqueeze(-3)`` to get a (B, N, 3) result.

    Args:
        points: Local points, shape (..., 3)
        m: Affine matrix, shape (..., 4, 4)

    Returns:
        World points, shape of the broadcast batch plus (3,)

    Raises:
        ShapeError: If the batch dimensions do not broadcast
    """
    p = as_vector3(points, "points")
    m = as_matrix4(m)

    try:
        torch.broadcast_shapes(p.shape[:-1], m.shape[:-2])
    except RuntimeError as e:
        raise ShapeError(
            f"points batch {tuple(p.shape[:-1])} does not broadcast with "
            f"matrix batch {tuple(m.shape[:-2])}"
        ) from e

    # p_world = R_S @ p + t per batch entry
    return torch.matmul(m[..., :3, :3], p.unsqueeze(-1)).squeeze(-1) + m[..., :3, 3]


def cube_vertices(size: float = 2.0) -> Tensor:
    """Corners of an axis-aligned cube centered at the origin.

    Args:
        size: Edge length

    Returns:
        Vertices, shape (8, 3), ordered with x varying slowest
    """
    h = size / 2.0
    corners = list(itertools.product((-h, h), repeat=3))
    return torch.tensor(corners, dtype=DTYPE)


def transform_cube(m: Matrix4, size: float = 2.0) -> Tensor:
    """Cube corners mapped through ``m``, shape (..., 8, 3) for ``m`` of shape (..., 4, 4)."""
    return to_world(cube_vertices(size), as_matrix4(m).unsqueeze(-3))


__all__ = [
    "to_world",
    "cube_vertices",
    "transform_cube",
]
