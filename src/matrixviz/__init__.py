"""Affine transform visualizer.

Compose a 4x4 transformation matrix from position, scale and ZYX Euler
rotation, then decompose it back into its parts for display.
"""

__version__ = "0.1.0"

__all__ = [
    "cli",
    "core",
    "present",
]
