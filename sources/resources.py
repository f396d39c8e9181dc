"""
Resolution and validation of the files backing a row source.

Functions:
    resolve_resource_path: Find a path on disk or under the resource roots
    validate_readable: Fail with a user-facing error if a file can't be read
"""

import logging
import os
import sys
from pathlib import Path

from models.errors import ResourceError
from .config import RESOURCE_ROOTS

logger = logging.getLogger(__name__)


def _candidate_roots(extra_roots=None):
    roots = list(extra_roots) if extra_roots is not None else list(RESOURCE_ROOTS)
    roots.extend(entry for entry in sys.path if entry)
    return roots


def resolve_resource_path(file_path, resource_roots=None):
    """
    Resolve a file path, falling back to bundled resources.

    The filesystem is checked first. If the path doesn't exist, the relative
    path is looked up under each resource root and then each sys.path entry.
    When nothing matches the original path is returned unchanged, so a later
    validation step can report it clearly.

    Args:
        file_path: Path as given by the caller (str or Path), or None
        resource_roots: Directories to search before sys.path (defaults to config)

    Returns:
        Path or None

    Examples:
        >>> resolve_resource_path('/tmp/exists.xlsx')
        PosixPath('/tmp/exists.xlsx')
        >>> resolve_resource_path('fixtures/sample.xlsx')  # found under tests/resources
        PosixPath('tests/resources/fixtures/sample.xlsx')
    """
    if file_path is None:
        return None
    fs_path = Path(file_path)
    if fs_path.exists():
        return fs_path
    if fs_path.is_absolute():
        return fs_path

    for root in _candidate_roots(resource_roots):
        candidate = Path(root) / fs_path
        if candidate.is_file():
            logger.debug(f"resolved resource {file_path} -> {candidate}")
            return candidate

    logger.debug(f"no resource found for {file_path}")
    return fs_path


def validate_readable(path):
    """Raise ResourceError unless path is an existing, readable file."""
    if path is None or not path.is_file() or not os.access(path, os.R_OK):
        raise ResourceError(f"can't read file [{path}]")
    logger.info(f"File: {path.absolute()}")
