"""Configuration models and I/O for matrixviz.

Pydantic models for the three input vectors, their slider ranges and the
display options, with YAML/JSON I/O. Rotations are stored in degrees;
radians are accepted at input under ``rotation_rad``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import affine
from .errors import ConfigError
from .logging import get_logger
from .precision import as_matrix4
from .types import Matrix4
from .units import rad_to_deg

logger = get_logger(__name__)

FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]
Vec3 = tuple[FiniteFloat, FiniteFloat, FiniteFloat]

AXES = ("x", "y", "z")


class SliderRange(BaseModel):
    """Closed interval a slider can move through."""

    min: FiniteFloat = Field(description="Lower bound")
    max: FiniteFloat = Field(description="Upper bound")

    @model_validator(mode="after")
    def validate_bounds(self) -> SliderRange:
        """Ensure the interval is not empty."""
        if not self.min < self.max:
            raise ValueError(f"Slider range min must be below max, got [{self.min}, {self.max}]")
        return self

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def clamp(self, value: float) -> float:
        return min(max(value, self.min), self.max)

    def clamp_vector(self, values: Vec3) -> Vec3:
        return tuple(self.clamp(v) for v in values)  # type: ignore[return-value]


class ControlRanges(BaseModel):
    """Slider ranges for each input group."""

    position: SliderRange = Field(
        default_factory=lambda: SliderRange(min=-5.0, max=5.0),
        description="Position range in world units",
    )
    scale: SliderRange = Field(
        default_factory=lambda: SliderRange(min=0.1, max=2.0),
        description="Scale factor range",
    )
    rotation_deg: SliderRange = Field(
        default_factory=lambda: SliderRange(min=-180.0, max=180.0),
        description="Rotation range in degrees",
    )


class TransformInputs(BaseModel):
    """Position, scale and ZYX rotation driving the composed matrix."""

    model_config = ConfigDict(frozen=True)

    position: Vec3 = Field(default=(0.0, 0.0, 0.0), description="Translation (x, y, z)")
    scale: Vec3 = Field(default=(1.0, 1.0, 1.0), description="Scale factors (x, y, z)")
    rotation_deg: Vec3 = Field(
        default=(0.0, 0.0, 0.0), description="Euler ZYX rotation (x, y, z) in degrees"
    )

    @classmethod
    def reset(cls) -> TransformInputs:
        """Inputs that compose to the identity matrix."""
        return cls()

    def out_of_range(self, ranges: ControlRanges) -> list[str]:
        """Names of components outside their slider range, e.g. ``scale.x``."""
        names = []
        for group in ("position", "scale", "rotation_deg"):
            rng: SliderRange = getattr(ranges, group)
            for axis, value in zip(AXES, getattr(self, group)):
                if not rng.contains(value):
                    names.append(f"{group}.{axis}")
        return names

    def clamped(self, ranges: ControlRanges) -> TransformInputs:
        """Copy with every component clamped into its slider range."""
        return TransformInputs(
            position=ranges.position.clamp_vector(self.position),
            scale=ranges.scale.clamp_vector(self.scale),
            rotation_deg=ranges.rotation_deg.clamp_vector(self.rotation_deg),
        )

    def compose(self) -> Matrix4:
        return affine.compose(self.position, self.scale, self.rotation_deg)


class DisplayOptions(BaseModel):
    """How matrices and the reference cube are presented."""

    precision: int = Field(default=2, description="Decimal places in matrix tables")
    cube_size: float = Field(default=2.0, description="Edge length of the reference cube")

    @field_validator("precision")
    @classmethod
    def validate_precision(cls, v: int) -> int:
        """Validate precision is in a printable range."""
        if not 0 <= v <= 8:
            raise ValueError(f"Precision must be between 0 and 8, got {v}")
        return v

    @field_validator("cube_size")
    @classmethod
    def validate_cube_size(cls, v: float) -> float:
        """Validate cube size is positive."""
        if v <= 0:
            raise ValueError(f"Cube size must be positive, got {v}")
        return v


class Session(BaseModel):
    """Complete visualizer state."""

    inputs: TransformInputs = Field(default_factory=TransformInputs, description="Input vectors")
    ranges: ControlRanges = Field(default_factory=ControlRanges, description="Slider ranges")
    display: DisplayOptions = Field(default_factory=DisplayOptions, description="Display options")
    clamp_inputs: bool = Field(
        default=False, description="Clamp inputs into slider ranges instead of warning"
    )

    @model_validator(mode="after")
    def validate_inputs_in_range(self) -> Session:
        """Clamp or flag inputs that fall outside the slider ranges."""
        outside = self.inputs.out_of_range(self.ranges)
        if outside:
            if self.clamp_inputs:
                self.inputs = self.inputs.clamped(self.ranges)
            else:
                logger.warning("Inputs outside slider ranges", {"components": outside})
        return self

    def compose(self) -> Matrix4:
        return self.inputs.compose()


def _normalize(data: dict) -> dict:
    """Convert radians given at input to degrees."""
    inputs = data.get("inputs")
    if isinstance(inputs, dict) and "rotation_deg" not in inputs and "rotation_rad" in inputs:
        rad = inputs.pop("rotation_rad")
        if (
            not isinstance(rad, (list, tuple))
            or len(rad) != 3
            or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in rad)
        ):
            raise ConfigError(f"inputs.rotation_rad must be three numbers, got {rad!r}")
        inputs["rotation_deg"] = [rad_to_deg(float(v)) for v in rad]
    return data


def load_config(path: str | Path) -> Session:
    """Load a session from a YAML or JSON file.

    Args:
        path: Path to configuration file

    Returns:
        Validated Session object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the file cannot be parsed
        ValueError: If config values are invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        try:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigError(f"Unsupported config format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to parse config {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

    return Session.model_validate(_normalize(data))


def save_config(session: Session, path: str | Path) -> None:
    """Save a session to a YAML or JSON file.

    Args:
        session: Session to save
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = session.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in [".yaml", ".yml"]:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def load_matrix(path: str | Path) -> Matrix4:
    """Load a 4x4 matrix from a YAML or JSON file.

    The file holds either four rows of four numbers, 16 numbers in
    row-major order, or a mapping with one of those under ``matrix``.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the file cannot be parsed
        ShapeError: If the values do not form a 4x4 matrix
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Matrix file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            # JSON is a subset of YAML
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse matrix file {path}: {e}") from e

    if isinstance(data, dict):
        if "matrix" not in data:
            raise ConfigError(f"Matrix file {path} has no 'matrix' key")
        data = data["matrix"]
    if data is None:
        raise ConfigError(f"Matrix file {path} is empty")

    return as_matrix4(data, "matrix")


def round_trip_config(session: Session) -> Session:
    """Serialize a session to YAML and back."""
    data = session.model_dump(mode="json")
    yaml_str = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    return Session(**yaml.safe_load(yaml_str))


__all__ = [
    "SliderRange",
    "ControlRanges",
    "TransformInputs",
    "DisplayOptions",
    "Session",
    "load_config",
    "save_config",
    "load_matrix",
    "round_trip_config",
]
