"""Registry of views keyed by their root directory."""

import logging
import threading
from typing import Dict, List, Optional, Union

from .config.models import ViewConfig
from .view import Params, View

logger = logging.getLogger(__name__)


class ViewRegistry:
    """One View per root string, created on first request and kept for good."""

    def __init__(self, config: Optional[ViewConfig] = None) -> None:
        """Initialize view registry.

        Args:
            config: Configuration applied to every view the registry creates
        """
        self.config = config
        self._views: Dict[str, View] = {}
        self._lock = threading.Lock()

    def get(self, root: str) -> View:
        """Get the view rooted at ``root``, creating it if needed.

        Concurrent callers asking for the same unseen root always receive the
        same instance.

        Raises:
            PathInvalidError: If a new view cannot use ``root`` as a directory
        """
        view = self._views.get(root)
        if view is not None:
            return view

        with self._lock:
            view = self._views.get(root)
            if view is None:
                view = self._create(root)
                self._views[root] = view
                logger.info(f"Created view for root: {root}")
        return view

    def _create(self, root: str) -> View:
        if self.config is not None:
            return View.from_config(self.config, root)
        return View(root)

    def contains(self, root: str) -> bool:
        """Check whether a view exists for ``root``."""
        with self._lock:
            return root in self._views

    def roots(self) -> List[str]:
        """List the roots that have a view."""
        with self._lock:
            return list(self._views.keys())

    def clear(self) -> None:
        """Forget every view."""
        with self._lock:
            self._views.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._views)


# Global registry instance
_registry: Optional[ViewRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> ViewRegistry:
    """Get the default registry, creating it on first use."""
    global _registry

    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = ViewRegistry()

    return _registry


def set_registry(registry: Optional[ViewRegistry]) -> None:
    """Replace the default registry.

    Args:
        registry: Registry to use, or None to start a fresh empty one
    """
    global _registry

    with _registry_lock:
        _registry = registry if registry is not None else ViewRegistry()


def get_view(root: str) -> View:
    """Get a view from the default registry."""
    return get_registry().get(root)


def parse_content(
    content: Union[str, bytes],
    params: Optional[Params] = None,
    functions: Optional[dict] = None,
) -> bytes:
    """Render raw template text with the default view rooted at ".".

    Args:
        content: Template text
        params: Template variables
        functions: Extra functions for this render only

    Returns:
        Rendered bytes
    """
    return get_view(".").parse_content(content, params, functions)
