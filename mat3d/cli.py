"""
Command-line interface for Mat3D.

Usage:
    mat3d apply recipe.yaml [--output OUTPUT]
    mat3d parse "Mat3D[...](l, t, r, b)"
    mat3d lerp BEGIN END T
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from .config import TransformRecipe
from .codec import parse_mat3d
from .core import Mat3D
from .tween import interpolate


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mat3d',
        description='Build, inspect and interpolate Mat3D transforms',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    # Apply a YAML recipe and print the resulting state
    mat3d apply recipe.yaml

    # Write the result to a file instead
    mat3d apply recipe.yaml --output state.txt

    # Show the matrix and rect stored in a Mat3D string
    mat3d parse "Mat3D[1,0,0,0,0,1,0,0,0,0,1,0,0,0,0,1](0, 0, 100, 100)"

    # Halfway between two states
    mat3d lerp "$(cat a.txt)" "$(cat b.txt)" 0.5
'''
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    apply_parser = subparsers.add_parser('apply', help='Apply a YAML transform recipe')
    apply_parser.add_argument('recipe', type=str, help='Path to YAML recipe file')
    apply_parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Write the resulting Mat3D string to this file (default: print it)'
    )

    parse_parser = subparsers.add_parser('parse', help='Show the contents of a Mat3D string')
    parse_parser.add_argument('source', type=str, help='Mat3D string')

    lerp_parser = subparsers.add_parser('lerp', help='Interpolate between two Mat3D strings')
    lerp_parser.add_argument('begin', type=str, help='Mat3D string at t = 0')
    lerp_parser.add_argument('end', type=str, help='Mat3D string at t = 1')
    lerp_parser.add_argument('t', type=float, help='Interpolation factor')

    return parser


def _run_apply(args: argparse.Namespace, logger: logging.Logger) -> int:
    recipe = TransformRecipe.from_yaml(args.recipe)
    state = recipe.build()
    logger.info(f"Applied {len(recipe.steps)} steps")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(str(state) + '\n')
        logger.info(f"Result written to {output_path}")
    else:
        print(state)
    return 0


def _run_parse(args: argparse.Namespace, logger: logging.Logger) -> int:
    parsed = parse_mat3d(args.source)
    if not parsed.matched:
        logger.warning("Input is not a Mat3D string, showing the default state")
    state = Mat3D.raw(parsed.matrix, parsed.rect)

    print("Matrix:")
    with np.printoptions(precision=6, suppress=True):
        for row in state.matrix:
            print(f"  {row}")
    rect = state.rect
    print(f"Rect:   left={rect.left} top={rect.top} right={rect.right} bottom={rect.bottom}")
    print(f"Center: ({state.center.dx}, {state.center.dy})")
    return 0


def _run_lerp(args: argparse.Namespace, logger: logging.Logger) -> int:
    begin = Mat3D.parse(args.begin)
    end = Mat3D.parse(args.end)
    print(interpolate(begin, end, args.t))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    commands = {
        'apply': _run_apply,
        'parse': _run_parse,
        'lerp': _run_lerp,
    }

    try:
        return commands[args.command](args, logger)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
