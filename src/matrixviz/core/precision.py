"""Precision policy for matrixviz.

All vectors and matrices are single precision (float32), matching the
simd float4x4 values the demo was designed around. Inputs of any
array-like kind are coerced here so the math in ``affine`` only ever
sees float32 tensors of a known trailing shape.
"""

import torch

from .errors import ShapeError
from .types import ArrayLike, Matrix3, Matrix4, Tensor, Vector3

DTYPE = torch.float32


def to_float32(value: ArrayLike, name: str = "tensor") -> Tensor:
    """Convert an array-like to a float32 tensor.

    Args:
        value: Tensor, numpy array or (nested) sequence of numbers
        name: Name used in error messages

    Returns:
        float32 tensor; tensors already in float32 are returned as-is

    Raises:
        ShapeError: If the value is ragged or not numeric
    """
    if isinstance(value, torch.Tensor):
        return value if value.dtype == DTYPE else value.to(DTYPE)
    try:
        return torch.as_tensor(value, dtype=DTYPE)
    except (TypeError, ValueError, RuntimeError) as e:
        raise ShapeError(f"{name} is not a numeric array: {e}") from e


def as_vector3(value: ArrayLike, name: str = "vector") -> Vector3:
    """Coerce to a float32 tensor of shape (..., 3)."""
    t = to_float32(value, name)
    if t.dim() == 0 or t.shape[-1] != 3:
        raise ShapeError(f"{name} must have shape (..., 3), got {tuple(t.shape)}")
    return t


def as_matrix3(value: ArrayLike, name: str = "matrix") -> Matrix3:
    """Coerce to a float32 tensor of shape (..., 3, 3)."""
    t = to_float32(value, name)
    if t.dim() < 2 or t.shape[-2:] != (3, 3):
        raise ShapeError(f"{name} must have shape (..., 3, 3), got {tuple(t.shape)}")
    return t


def as_matrix4(value: ArrayLike, name: str = "matrix") -> Matrix4:
    """Coerce to a float32 tensor of shape (..., 4, 4).

    A flat sequence of 16 numbers is read in row-major order.
    """
    t = to_float32(value, name)
    if t.shape == (16,):
        t = t.reshape(4, 4)
    if t.dim() < 2 or t.shape[-2:] != (4, 4):
        raise ShapeError(f"{name} must have shape (..., 4, 4), got {tuple(t.shape)}")
    return t


def assert_float32(tensor: Tensor, name: str = "tensor") -> None:
    """Assert that a tensor follows the float32 policy.

    Raises:
        AssertionError: If the tensor is not float32
    """
    assert tensor.dtype == DTYPE, f"{name} must be float32, got {tensor.dtype}"


__all__ = [
    "DTYPE",
    "to_float32",
    "as_vector3",
    "as_matrix3",
    "as_matrix4",
    "assert_float32",
]
