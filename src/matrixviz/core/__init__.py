"""Core module with the affine math, precision policy, frames, config and utilities."""

from .affine import Decomposition, compose, decompose, multiply

__all__ = [
    "Decomposition",
    "compose",
    "decompose",
    "multiply",
    "affine",
    "config",
    "errors",
    "frames",
    "logging",
    "precision",
    "types",
    "units",
]
