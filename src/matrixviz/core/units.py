"""Angle conversion utilities.

Rotations are entered in degrees and computed in radians. Both helpers
accept plain numbers or tensors and keep the input type.
"""

import math

import torch


def deg_to_rad(value):  # type: ignore[no-untyped-def]
    """Convert degrees to radians."""
    if isinstance(value, torch.Tensor):
        return torch.deg2rad(value)
    return float(value) * math.pi / 180.0


def rad_to_deg(value):  # type: ignore[no-untyped-def]
    """Convert radians to degrees."""
    if isinstance(value, torch.Tensor):
        return torch.rad2deg(value)
    return float(value) * 180.0 / math.pi


__all__ = [
    "deg_to_rad",
    "rad_to_deg",
]
