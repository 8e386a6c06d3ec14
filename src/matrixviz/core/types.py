"""Type definitions and aliases for matrixviz."""

from collections.abc import Sequence
from typing import Union

import numpy as np
import torch

Tensor = torch.Tensor

# Anything that can be coerced into a float32 tensor
ArrayLike = Union[Tensor, np.ndarray, Sequence[float], Sequence[Sequence[float]]]

# Shape-documenting aliases; all are float32 tensors
Vector3 = Tensor  # (..., 3)
Matrix3 = Tensor  # (..., 3, 3)
Matrix4 = Tensor  # (..., 4, 4)

__all__ = [
    "Tensor",
    "ArrayLike",
    "Vector3",
    "Matrix3",
    "Matrix4",
]
