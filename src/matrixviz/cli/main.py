"""CLI main module with subcommands for compose, decompose, cube, and inspect.

Usage:
    python -m matrixviz.cli compose -p 1 2 3 -s 2 2 2 -r 0 0 90
    python -m matrixviz.cli decompose --matrix matrix.yaml
    python -m matrixviz.cli cube --config session.yaml
    python -m matrixviz.cli inspect --config session.yaml
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ..core.affine import decompose
from ..core.config import Session, TransformInputs, load_config, load_matrix
from ..core.errors import MatrixVizError
from ..core.frames import transform_cube
from ..core.logging import get_logger, setup_logging
from ..present.tables import (
    format_matrix,
    format_vector,
    json_values,
    render_report,
    report_dict,
)

logger = get_logger(__name__)

CLI_ERRORS = (MatrixVizError, ValueError, OSError)


def session_from_args(args: argparse.Namespace) -> Session:
    """Build a session from an optional config file plus command line overrides."""
    session = load_config(args.config) if getattr(args, "config", None) else Session()
    current = session.inputs

    inputs = TransformInputs(
        position=args.position if args.position is not None else current.position,
        scale=args.scale if args.scale is not None else current.scale,
        rotation_deg=args.rotation if args.rotation is not None else current.rotation_deg,
    )
    return Session(
        inputs=inputs,
        ranges=session.ranges,
        display=session.display,
        clamp_inputs=session.clamp_inputs or args.clamp,
    )


def _precision(args: argparse.Namespace, session: Session | None = None) -> int:
    if args.precision is not None:
        return args.precision
    return session.display.precision if session is not None else 2


def cmd_compose(args: argparse.Namespace) -> int:
    """Compose a matrix from the inputs and print it with its decomposition."""
    try:
        session = session_from_args(args)
        matrix = session.compose()
        parts = decompose(matrix)
        logger.info("Composed transform", {"inputs": session.inputs.model_dump()})

        if args.json:
            print(json.dumps(report_dict(parts, matrix), indent=2, allow_nan=False))
        else:
            print(render_report(parts, matrix, _precision(args, session)))
        return 0
    except CLI_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_decompose(args: argparse.Namespace) -> int:
    """Load a matrix from file and print its decomposition."""
    try:
        matrix = load_matrix(args.matrix)
        parts = decompose(matrix)
        logger.info("Decomposed matrix", {"path": str(args.matrix)})

        if args.json:
            print(json.dumps(report_dict(parts, matrix), indent=2, allow_nan=False))
        else:
            print(render_report(parts, matrix, _precision(args)))
        return 0
    except CLI_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_cube(args: argparse.Namespace) -> int:
    """Print the reference cube corners after applying the composed matrix."""
    try:
        session = session_from_args(args)
        size = args.size if args.size is not None else session.display.cube_size
        if size <= 0:
            raise ValueError(f"Cube size must be positive, got {size}")
        vertices = transform_cube(session.compose(), size)

        if args.json:
            report = {"size": size, "vertices": json_values(vertices)}
            print(json.dumps(report, indent=2, allow_nan=False))
        else:
            title = f"Cube vertices (size {size})"
            print(format_matrix(vertices, _precision(args, session), title))
        return 0
    except CLI_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print the validated session and which inputs fall outside the slider ranges."""
    try:
        session = load_config(args.config)
        inputs, ranges = session.inputs, session.ranges
        precision = session.display.precision

        print("Session Summary:")
        print("-" * 40)
        print("  Position:   ", format_vector(inputs.position, precision))
        print("  Scale:      ", format_vector(inputs.scale, precision))
        print("  Rotation:   ", format_vector(inputs.rotation_deg, precision, suffix="°"))
        print()

        print("Slider Ranges:")
        print("-" * 40)
        for name in ("position", "scale", "rotation_deg"):
            rng = getattr(ranges, name)
            print(f"  {name:12} [{rng.min}, {rng.max}]")
        print()

        outside = inputs.out_of_range(ranges)
        print("Clamping:     ", "on" if session.clamp_inputs else "off")
        print("Out of range: ", ", ".join(outside) if outside else "none")
        return 0
    except CLI_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        required=False,
        help="Path to YAML/JSON session file",
    )
    parser.add_argument(
        "--position",
        "-p",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        help="Translation (overrides config)",
    )
    parser.add_argument(
        "--scale",
        "-s",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        help="Scale factors (overrides config)",
    )
    parser.add_argument(
        "--rotation",
        "-r",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        help="Euler ZYX rotation in degrees (overrides config)",
    )
    parser.add_argument(
        "--clamp",
        action="store_true",
        help="Clamp inputs into the slider ranges",
    )


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    parser.add_argument(
        "--precision",
        type=int,
        choices=range(0, 9),
        metavar="N",
        help="Decimal places in tables (0-8)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matrixviz.cli",
        description="Compose and decompose 4x4 affine transformation matrices",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, help="Write JSON lines log to this file")

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # Compose subcommand
    parser_compose = subparsers.add_parser(
        "compose",
        help="Compose a matrix from position, scale and rotation",
    )
    _add_input_arguments(parser_compose)
    _add_output_arguments(parser_compose)
    parser_compose.set_defaults(func=cmd_compose)

    # Decompose subcommand
    parser_decompose = subparsers.add_parser(
        "decompose",
        help="Decompose a 4x4 matrix read from a YAML/JSON file",
    )
    parser_decompose.add_argument(
        "--matrix",
        "-m",
        type=Path,
        required=True,
        help="Path to YAML/JSON file with a 4x4 matrix",
    )
    _add_output_arguments(parser_decompose)
    parser_decompose.set_defaults(func=cmd_decompose)

    # Cube subcommand
    parser_cube = subparsers.add_parser(
        "cube",
        help="Print the reference cube corners after the transform",
    )
    _add_input_arguments(parser_cube)
    _add_output_arguments(parser_cube)
    parser_cube.add_argument("--size", type=float, help="Cube edge length (overrides config)")
    parser_cube.set_defaults(func=cmd_cube)

    # Inspect subcommand
    parser_inspect = subparsers.add_parser(
        "inspect",
        help="Print the validated session and slider ranges",
    )
    parser_inspect.add_argument(
        "--config",
        "-c",
        type=Path,
        required=True,
        help="Path to YAML/JSON session file",
    )
    parser_inspect.set_defaults(func=cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.INFO)
    return int(args.func(args) or 0)


if __name__ == "__main__":
    sys.exit(main())
