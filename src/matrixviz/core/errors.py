"""Custom exception types for matrixviz."""


class MatrixVizError(Exception):
    """Base exception for all matrixviz errors."""

    pass


class ConfigError(MatrixVizError):
    """Configuration-related errors."""

    pass


class ShapeError(MatrixVizError):
    """Input cannot be interpreted as a vector or matrix of the expected shape."""

    pass


__all__ = [
    "MatrixVizError",
    "ConfigError",
    "ShapeError",
]
