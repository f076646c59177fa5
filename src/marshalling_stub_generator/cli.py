"""Command-line interface for generating the marshalling headers of opaque types."""

from __future__ import annotations

import argparse
import logging
import os.path
from collections.abc import Sequence

from marshalling_stub_generator.cxx_types import DESCRIPTION_SUFFIX, USER_HEADER_SUFFIX
from marshalling_stub_generator.opaque_types import GenerationError
from marshalling_stub_generator.run import run

logger = logging.getLogger(__name__)


def _add_recursive_argument(parser: argparse.ArgumentParser):
    """Add a recursive argument to a parser.

    Args:
        parser (argparse.ArgumentParser): The parser to add the argument to.
    """
    parser.add_argument(
        "-r",
        "--recursive",
        dest="recursive",
        default=False,
        action="store_true",
        help=f"recursively search for *{DESCRIPTION_SUFFIX} files with a given glob expression.",
    )


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parser.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(description="Generate marshalling headers for the opaque types of components.")

    parser.add_argument(
        "-c",
        "--clean",
        type=str,
        nargs="+",
        default=[],
        help=f"path or glob expressions that match previously generated *{USER_HEADER_SUFFIX} headers to remove.",
    )

    parser.add_argument(
        "-p",
        "--paths",
        type=str,
        nargs="+",
        default=[f"**/*{DESCRIPTION_SUFFIX}"],
        help=f"path or glob expressions that match *{DESCRIPTION_SUFFIX} component descriptions.",
    )

    parser.add_argument(
        "-e",
        "--excludes",
        type=str,
        nargs="+",
        default=[],
        help="path or glob expressions to exclude from path matches.",
    )

    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default="",
        help="directory to write all generated headers; defaults to alongside each description if omitted.",
    )

    parser.add_argument(
        "-I",
        "--import-path",
        dest="import_paths",
        type=str,
        nargs="+",
        default=[],
        help="additional import paths for resolving absolute imports of *.capnp catalog schemas.",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        default=False,
        action="store_true",
        help="log every generated declaration block.",
    )

    _add_recursive_argument(parser)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the marshalling header generator.

    Args:
        argv (Sequence[str] | None, optional): Run arguments. Defaults to None.

    Returns:
        int: Error code.
    """
    parser = setup_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    root_directory = os.getcwd()
    logging.info("Working from root directory: %s", root_directory)

    try:
        run(args, root_directory)
    except GenerationError as e:
        logger.error("Generation failed: %s", e)
        return 1

    return 0
