"""Ordered directory search for template files."""

import logging
import os
import threading
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import PathInvalidError

logger = logging.getLogger(__name__)


class SearchPath:
    """Thread-safe ordered list of absolute search directories.

    Directories are stored as resolved absolute paths. Lookups walk the list
    in insertion order and return the first existing file.
    """

    def __init__(self, *paths: Union[str, Path]) -> None:
        self._lock = threading.RLock()
        self._paths: List[str] = []
        for path in paths:
            self.add(path)

    @staticmethod
    def _normalize(path: Union[str, Path]) -> str:
        """Resolve ``path`` to an absolute existing directory.

        Raises:
            PathInvalidError: If the path does not exist or is not a directory
        """
        resolved = Path(path).expanduser()
        try:
            resolved = resolved.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise PathInvalidError(str(path), "does not exist") from e
        if not resolved.is_dir():
            raise PathInvalidError(str(path), "is not a directory")
        return str(resolved)

    def set(self, path: Union[str, Path]) -> str:
        """Replace all search directories with ``path``.

        Returns:
            The resolved absolute directory
        """
        normalized = self._normalize(path)
        with self._lock:
            self._paths = [normalized]
        logger.debug(f"Search path set to {normalized}")
        return normalized

    def add(self, path: Union[str, Path]) -> str:
        """Append ``path`` to the search directories.

        Adding a directory that is already present is a no-op.

        Returns:
            The resolved absolute directory
        """
        normalized = self._normalize(path)
        with self._lock:
            if normalized not in self._paths:
                self._paths.append(normalized)
                logger.debug(f"Search path added: {normalized}")
        return normalized

    def search(self, file: Union[str, Path]) -> Optional[str]:
        """Find ``file`` in the search directories.

        A leading separator is ignored, so ``"/a.html"`` means ``"a.html"``
        under each root. A name that resolves outside a root (through ``..``
        or a symlink) never matches in that root.

        Args:
            file: File name relative to a search directory

        Returns:
            Absolute path of the first match, or None if nothing matches
        """
        with self._lock:
            paths = list(self._paths)

        name = str(file).lstrip("/\\")
        for root in paths:
            candidate = os.path.realpath(os.path.join(root, name))
            if os.path.commonpath([root, candidate]) != root:
                logger.debug(f"Template {file} resolves outside {root}")
                continue
            if os.path.isfile(candidate):
                return candidate
        return None

    def paths(self) -> List[str]:
        """Return a copy of the current search directories."""
        with self._lock:
            return list(self._paths)

    def size(self) -> int:
        """Number of search directories."""
        with self._lock:
            return len(self._paths)
