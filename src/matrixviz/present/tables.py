"""Plain-text rendering of matrices and decompositions.

Tables are printed row by row in the mathematical layout, so the
translation shows up in the last column of the transformation matrix.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from ..core.affine import Decomposition
from ..core.precision import as_matrix4, to_float32
from ..core.types import ArrayLike

CELL_WIDTH = 8


def _as_numpy(value: ArrayLike) -> np.ndarray:
    return to_float32(value).detach().cpu().numpy()


def json_values(value: ArrayLike) -> Any:
    """Nested lists of floats with NaN and Inf replaced by None (JSON null)."""

    def finite(v: Any) -> Any:
        if isinstance(v, list):
            return [finite(x) for x in v]
        return v if math.isfinite(v) else None

    return finite(_as_numpy(value).tolist())


def format_matrix(m: ArrayLike, precision: int = 2, title: str | None = None) -> str:
    """Format a 2D matrix as a right-aligned fixed-width table.

    Args:
        m: Matrix of any 2D shape (3x3 and 4x4 in practice)
        precision: Decimal places per value
        title: Optional heading line

    Returns:
        Multi-line string without a trailing newline
    """
    arr = _as_numpy(m)
    if arr.ndim != 2:
        raise ValueError(f"Only single matrices can be formatted, got shape {arr.shape}")

    width = max(CELL_WIDTH, precision + 6)
    lines = [title] if title else []
    for row in arr:
        # +0.0 turns -0.0 into 0.0 so identity blocks print cleanly
        lines.append(" ".join(f"{v + 0.0:>{width}.{precision}f}" for v in row))
    return "\n".join(lines)


def format_vector(
    v: ArrayLike,
    precision: int = 2,
    labels: tuple[str, ...] = ("X", "Y", "Z"),
    suffix: str = "",
) -> str:
    """Format a vector as ``X: 1.00  Y: 2.00  Z: 3.00``."""
    arr = _as_numpy(v)
    return "  ".join(
        f"{label}: {value + 0.0:.{precision}f}{suffix}" for label, value in zip(labels, arr)
    )


def render_report(decomposition: Decomposition, matrix: ArrayLike, precision: int = 2) -> str:
    """Render the transformation matrix and all of its decomposed parts."""
    sections = [
        format_matrix(as_matrix4(matrix), precision, "Transformation Matrix"),
        format_matrix(decomposition.position_matrix, precision, "Position Matrix"),
        format_matrix(decomposition.scale_matrix, precision, "Scale Matrix"),
        "\n".join(
            [
                "Rotation Information",
                "Euler Angles (degrees):",
                format_vector(decomposition.euler_degrees_zyx, precision, suffix="°"),
                format_matrix(decomposition.rotation_matrix, precision, "Rotation Matrix:"),
            ]
        ),
    ]
    return "\n\n".join(sections)


def report_dict(decomposition: Decomposition, matrix: ArrayLike) -> dict[str, Any]:
    """JSON-ready view of a matrix and its decomposition.

    A degenerate matrix (a zero scale) leaves NaN in the rotation parts;
    those entries come out as None so the result passes strict JSON.
    """
    return {
        "matrix": json_values(as_matrix4(matrix)),
        "position": json_values(decomposition.position),
        "scale": json_values(decomposition.scale),
        "euler_degrees_zyx": json_values(decomposition.euler_degrees_zyx),
        "rotation_matrix": json_values(decomposition.rotation_matrix),
        "position_matrix": json_values(decomposition.position_matrix),
        "scale_matrix": json_values(decomposition.scale_matrix),
    }


__all__ = [
    "format_matrix",
    "format_vector",
    "json_values",
    "render_report",
    "report_dict",
]
