"""Affine transform composition and decomposition.

Matrices use the column-vector convention: a point ``p`` maps to
``M @ [p, 1]``, so the right-most factor of a product is applied first and
the translation lives in the fourth column. Tensors are indexed
``[..., row, col]`` and every function broadcasts over leading batch
dimensions.

The composed transform is always ``T @ R @ S``: scale in the object's
local axes, then rotation, then translation in world space.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

import torch

from .logging import get_logger
from .precision import DTYPE, as_matrix3, as_matrix4, as_vector3, assert_float32
from .types import ArrayLike, Matrix3, Matrix4, Vector3
from .units import deg_to_rad, rad_to_deg

logger = get_logger(__name__)

# Below this, cos(y) is treated as zero and X/Z rotations are coupled
GIMBAL_EPS = 1e-6


def identity(batch_shape: tuple[int, ...] = ()) -> Matrix4:
    """Create a 4x4 identity matrix, optionally batched."""
    return torch.eye(4, dtype=DTYPE).expand(*batch_shape, 4, 4).clone()


def multiply(a: ArrayLike, b: ArrayLike) -> Matrix4:
    """Matrix product ``a @ b``; ``b`` is applied to a point first."""
    return torch.matmul(as_matrix4(a, "a"), as_matrix4(b, "b"))


def rotation_zyx(euler_degrees: ArrayLike) -> Matrix3:
    """Build the ZYX rotation ``Rz @ Ry @ Rx`` from Euler angles.

    Args:
        euler_degrees: Rotation (x, y, z) about each axis in degrees, shape (..., 3)

    Returns:
        Rotation matrix, shape (..., 3, 3)
    """
    rad = deg_to_rad(as_vector3(euler_degrees, "euler_degrees"))
    rx, ry, rz = rad.unbind(-1)

    cx, sx = torch.cos(rx), torch.sin(rx)
    cy, sy = torch.cos(ry), torch.sin(ry)
    cz, sz = torch.cos(rz), torch.sin(rz)

    rows = [
        torch.stack([cy * cz, sx * sy * cz - cx * sz, cx * sy * cz + sx * sz], dim=-1),
        torch.stack([cy * sz, sx * sy * sz + cx * cz, cx * sy * sz - sx * cz], dim=-1),
        torch.stack([-sy, sx * cy, cx * cy], dim=-1),
    ]
    return torch.stack(rows, dim=-2)


def embed_rotation(rotation: ArrayLike) -> Matrix4:
    """Place a 3x3 rotation into a 4x4 matrix with zero translation."""
    r = as_matrix3(rotation, "rotation")
    m = torch.zeros(*r.shape[:-2], 4, 4, dtype=DTYPE)
    m[..., :3, :3] = r
    m[..., 3, 3] = 1.0
    return m


def translation_matrix(position: ArrayLike) -> Matrix4:
    """Identity with the translation vector in the fourth column."""
    p = as_vector3(position, "position")
    m = identity(tuple(p.shape[:-1]))
    m[..., :3, 3] = p
    return m


def diagonal_scale_matrix(scale: ArrayLike) -> Matrix4:
    """Diagonal matrix ``diag(sx, sy, sz, 1)``."""
    s = as_vector3(scale, "scale")
    return torch.diag_embed(torch.cat([s, torch.ones_like(s[..., :1])], dim=-1))


def compose(position: ArrayLike, scale: ArrayLike, euler_degrees_zyx: ArrayLike) -> Matrix4:
    """Compose translation, ZYX rotation and scale into one affine matrix.

    Any finite floats are accepted; NaN and Inf propagate unchanged.

    Args:
        position: Translation (x, y, z) in world units, shape (..., 3)
        scale: Per-axis scale factors, shape (..., 3)
        euler_degrees_zyx: Rotation (x, y, z) in degrees, shape (..., 3)

    Returns:
        ``T @ R @ S``, shape (..., 4, 4)
    """
    t = translation_matrix(position)
    r = embed_rotation(rotation_zyx(euler_degrees_zyx))
    s = diagonal_scale_matrix(scale)

    if logger.is_enabled_for(logging.DEBUG):
        logger.debug(
            "Composing transform",
            {"position": position, "scale": scale, "rotation_deg": euler_degrees_zyx},
        )

    m = multiply(multiply(t, r), s)
    assert_float32(m, "composed matrix")
    return m


def position(m: ArrayLike) -> Vector3:
    """Translation stored in the fourth column."""
    return as_matrix4(m)[..., :3, 3].clone()


def scale(m: ArrayLike) -> Vector3:
    """Length of each of the first three columns of the linear block.

    Always non-negative, so the sign of a negative scale is lost.
    """
    return torch.linalg.vector_norm(as_matrix4(m)[..., :3, :3], dim=-2)


def rotation_matrix(m: ArrayLike) -> Matrix3:
    """Linear block with each column divided by its scale factor.

    A zero-length column divides by zero and yields Inf/NaN in that column.
    """
    m = as_matrix4(m)
    return m[..., :3, :3] / scale(m).unsqueeze(-2)


def euler_degrees_zyx(m: ArrayLike) -> Vector3:
    """Recover ZYX Euler angles (x, y, z) in degrees.

    Near y = +-90 degrees the X and Z rotations are coupled; z is then
    fixed at 0 and the whole residual rotation is reported in x.
    """
    r = rotation_matrix(m)
    sy = torch.sqrt(r[..., 0, 0] * r[..., 0, 0] + r[..., 1, 0] * r[..., 1, 0])
    singular = sy < GIMBAL_EPS

    x = torch.where(
        singular,
        torch.atan2(-r[..., 1, 2], r[..., 1, 1]),
        torch.atan2(r[..., 2, 1], r[..., 2, 2]),
    )
    y = torch.atan2(-r[..., 2, 0], sy)
    z = torch.where(singular, torch.zeros_like(sy), torch.atan2(r[..., 1, 0], r[..., 0, 0]))

    if bool(singular.any()):
        logger.debug("Gimbal lock in Euler extraction, z fixed at 0", {"sy": sy})

    return rad_to_deg(torch.stack([x, y, z], dim=-1))


def position_matrix(m: ArrayLike) -> Matrix4:
    """Translation-only part of ``m``."""
    return translation_matrix(position(m))


def scale_matrix(m: ArrayLike) -> Matrix4:
    """Scale-only part of ``m``."""
    return diagonal_scale_matrix(scale(m))


@dataclass(frozen=True, slots=True)
class Decomposition:
    """Parts recovered from a composed affine matrix."""

    position: Vector3
    scale: Vector3
    rotation_matrix: Matrix3
    euler_degrees_zyx: Vector3
    position_matrix: Matrix4
    scale_matrix: Matrix4


def decompose(m: ArrayLike) -> Decomposition:
    """Decompose an affine matrix into position, scale and rotation.

    Args:
        m: Affine matrix, shape (..., 4, 4) or 16 row-major values

    Returns:
        Decomposition with every accessor evaluated
    """
    m = as_matrix4(m)
    parts = Decomposition(
        position=position(m),
        scale=scale(m),
        rotation_matrix=rotation_matrix(m),
        euler_degrees_zyx=euler_degrees_zyx(m),
        position_matrix=position_matrix(m),
        scale_matrix=scale_matrix(m),
    )
    for field in fields(parts):
        assert_float32(getattr(parts, field.name), field.name)
    return parts


__all__ = [
    "GIMBAL_EPS",
    "Decomposition",
    "compose",
    "decompose",
    "diagonal_scale_matrix",
    "embed_rotation",
    "euler_degrees_zyx",
    "identity",
    "multiply",
    "position",
    "position_matrix",
    "rotation_matrix",
    "rotation_zyx",
    "scale",
    "scale_matrix",
    "translation_matrix",
]
