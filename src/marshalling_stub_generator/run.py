"""Top-level module for marshalling header generation."""

from __future__ import annotations

import argparse
import glob
import logging
import os.path

from marshalling_stub_generator import helper
from marshalling_stub_generator.cxx_types import DESCRIPTION_SUFFIX, USER_HEADER_SUFFIX
from marshalling_stub_generator.description import Component, load_component
from marshalling_stub_generator.writer import Writer

logger = logging.getLogger(__name__)


def generate_marshalling_header(component: Component) -> str:
    """Render the marshalling header of a component.

    The header is rendered completely in memory. If any opaque type definition cannot be
    generated, the error propagates and no output exists.

    Args:
        component (Component): The component to generate the header for.

    Returns:
        str: The header content.
    """
    writer = Writer(component.name, component.registry, component.resolver)
    writer.generate_all()
    return writer.dumps_hpp()


def generate_header_file(component: Component, output_directory: str) -> str:
    """Entry-point for writing the marshalling header of a component.

    Args:
        component (Component): The component to generate the header for.
        output_directory (str): The directory to write the header to.

    Returns:
        str: Path of the written header.
    """
    output = generate_marshalling_header(component)

    output_file_path = os.path.join(output_directory, helper.user_header_name(component.name))
    with open(output_file_path, "w", encoding="utf8") as output_file:
        output_file.write(output)

    logger.info("Wrote marshalling header to '%s'.", output_file_path)
    return output_file_path


def _find_descriptions(path: str, recursive: bool) -> set[str]:
    """Find component descriptions at a path, a directory or a glob expression."""
    found: set[str] = set()

    if recursive and os.path.isdir(path):
        for root, _, files in os.walk(path):
            for file in files:
                if file.endswith(DESCRIPTION_SUFFIX):
                    found.add(os.path.join(root, file))
    elif os.path.isdir(path):
        for file in os.listdir(path):
            file_path = os.path.join(path, file)
            if os.path.isfile(file_path) and file.endswith(DESCRIPTION_SUFFIX):
                found.add(file_path)
    else:
        found = found.union(glob.glob(path, recursive=recursive))

    return found


def _clean_generated_headers(patterns: list[str], root_directory: str, recursive: bool) -> list[str]:
    """Remove previously generated marshalling headers that match glob expressions.

    Only regular files named `*ToolkitUser.hpp` are removed; directories and other files
    that match a pattern are left in place.

    Returns:
        list[str]: Paths of the removed headers.
    """
    matches: set[str] = set()
    for pattern in patterns:
        matches.update(glob.glob(os.path.join(root_directory, pattern), recursive=recursive))

    removed: list[str] = []
    for path in sorted(matches):
        if not os.path.isfile(path) or not path.endswith(USER_HEADER_SUFFIX):
            logger.debug("Not cleaning '%s': it is not a generated header.", path)
            continue
        logger.debug("Removing '%s'.", path)
        os.remove(path)
        removed.append(path)
    return removed


def _collect_descriptions(args: argparse.Namespace, root_directory: str) -> list[str]:
    """Sorted description paths that match `args.paths` and none of `args.excludes`."""
    excluded: set[str] = set()
    for exclude in args.excludes:
        exclude_path = os.path.join(root_directory, exclude)
        if os.path.isfile(exclude_path):
            excluded.add(exclude_path)
        else:
            excluded.update(glob.glob(exclude_path, recursive=args.recursive))

    found: set[str] = set()
    for path in args.paths:
        found.update(_find_descriptions(os.path.join(root_directory, path), args.recursive))

    return sorted(found - excluded)


def run(args: argparse.Namespace, root_directory: str) -> list[str]:
    """Run the generator on a set of paths that point to component descriptions.

    Uses `generate_header_file` on each description. Descriptions are processed in sorted
    order; the first one that fails aborts the run.

    Args:
        args (argparse.Namespace): The arguments that were passed when calling the generator.
        root_directory (str): The directory, from which the generator is executed.

    Returns:
        list[str]: Paths of the written headers.
    """
    output_dir: str = getattr(args, "output_dir", "")
    import_paths: list[str] = getattr(args, "import_paths", [])

    _clean_generated_headers(args.clean, root_directory, args.recursive)

    descriptions = _collect_descriptions(args, root_directory)
    if not descriptions:
        logger.warning("No component descriptions found.")

    absolute_import_paths = [os.path.join(root_directory, p) for p in import_paths]

    if output_dir:
        os.makedirs(os.path.join(root_directory, output_dir), exist_ok=True)

    written: list[str] = []
    for path in descriptions:
        logger.info("Generating marshalling header for '%s'.", path)
        component = load_component(path, absolute_import_paths)

        output_directory = os.path.join(root_directory, output_dir) if output_dir else os.path.dirname(path)
        written.append(generate_header_file(component, output_directory))

    return written
