"""
Fixture discovery: lazy recursive walk for *.md files, skipping VCS metadata.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)

FIXTURE_EXTENSION = ".md"

VCS_DIRECTORIES = frozenset(
    {".git", ".svn", ".hg", ".bzr", "CVS", "_darcs", ".arch-params", ".monotone", "_svn"}
)


def discover_fixtures(
    directory: Union[str, Path], extension: str = FIXTURE_EXTENSION
) -> Iterator[Path]:
    """
    Yield fixture files under `directory`, depth-first, sorted per directory.

    Each call starts a fresh walk. Raises FileNotFoundError (on first
    iteration) when the directory does not exist.
    """
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"Fixture directory not found: {root}")

    for dirpath, dirnames, filenames in os.walk(root):
        # Pruning in place stops os.walk from descending into VCS directories
        dirnames[:] = sorted(name for name in dirnames if name not in VCS_DIRECTORIES)
        for filename in sorted(filenames):
            if filename.endswith(extension):
                path = Path(dirpath) / filename
                logger.debug("Discovered fixture %s", path)
                yield path


def fixture_id(path: Union[str, Path]) -> str:
    """Identify a fixture by its path relative to the working directory."""
    resolved = Path(path).resolve()
    try:
        return resolved.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return resolved.as_posix()
