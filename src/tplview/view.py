"""The View: a configured template-rendering context."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .config.models import ViewConfig
from .content import ContentStore, get_global_store
from .engine import TemplateEngine, check_delimiters
from .exceptions import PathNotFoundError
from .hashing import bkdr_hash64
from .helpers import builtin_functions
from .locks import ReadWriteLock
from .paths import SearchPath

logger = logging.getLogger(__name__)

# Template variables
Params = Dict[str, Any]

# Function table
FuncMap = Dict[str, Callable[..., Any]]


def merge_variables(
    view_vars: Mapping[str, Any], params: Optional[Mapping[str, Any]]
) -> Mapping[str, Any]:
    """Merge view-bound variables with per-call parameters.

    Parameters win on key collision. When one side is empty the other is
    returned as-is; otherwise a new dict is built so that neither input is
    ever written to.
    """
    if not view_vars:
        return params if params is not None else {}
    if not params:
        return view_vars

    merged: Params = dict(view_vars)
    merged.update(params)
    return merged


class View:
    """Template-rendering context: search paths, variables, functions, delimiters.

    Variables, functions and delimiters are shared by every render and can be
    changed at any time from any thread. Changes take the exclusive side of a
    reader-writer lock; renders hold the shared side across compile and
    execute, so a render never sees a half-applied batch of bindings.

    Usage:
        view = View("templates")
        view.set_delimiters("<%", "%>")
        view.assign("Who", "World")
        view.parse("greet.tpl")  # b"Hello World!"
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        engine: Optional[TemplateEngine] = None,
        content_store: Optional[ContentStore] = None,
        include_errors: str = "inline",
    ) -> None:
        """Initialize the view.

        Args:
            path: Initial search directory
            engine: Template engine (creates a default one if None)
            content_store: File content store (uses the global store if None)
            include_errors: "inline" or "raise"; policy of the include function

        Raises:
            PathInvalidError: If ``path`` is not an existing directory
        """
        self._lock = ReadWriteLock()
        self._paths = SearchPath()
        self._data: Params = {}
        self._funcmap: FuncMap = {}
        self._delimiters: Tuple[str, str] = ("{{", "}}")

        self.engine = engine or TemplateEngine()
        self.content_store = content_store or get_global_store()
        self.include_errors = include_errors

        if path is not None:
            self._paths.set(path)

        self._funcmap.update(builtin_functions(self))

    @classmethod
    def from_config(
        cls, config: ViewConfig, path: Optional[Union[str, Path]] = None
    ) -> "View":
        """Build a view from configuration.

        Args:
            config: View configuration
            path: Root directory, searched before ``config.paths``

        Returns:
            Configured View
        """
        engine = TemplateEngine(
            enable_sandbox=config.sandbox,
            autoescape=config.autoescape,
            strict_undefined=config.strict_undefined,
            cache_size=config.compile_cache_size,
            trim_blocks=config.trim_blocks,
            lstrip_blocks=config.lstrip_blocks,
            keep_trailing_newline=config.keep_trailing_newline,
        )
        store = ContentStore(
            ttl_seconds=config.content_ttl_seconds,
            enable_hot_reload=config.hot_reload,
        )
        view = cls(
            path, engine=engine, content_store=store, include_errors=config.include_errors
        )
        for extra in config.paths:
            view.add_path(extra)
        view.set_delimiters(*config.delimiters)
        if config.variables:
            view.assigns(config.variables)
        return view

    # Paths

    def set_path(self, path: Union[str, Path]) -> str:
        """Replace the search directories with ``path``.

        Raises:
            PathInvalidError: If ``path`` is not an existing directory
        """
        with self._lock.write_locked():
            return self._paths.set(path)

    def add_path(self, path: Union[str, Path]) -> str:
        """Append ``path`` to the search directories.

        Raises:
            PathInvalidError: If ``path`` is not an existing directory
        """
        with self._lock.write_locked():
            return self._paths.add(path)

    @property
    def paths(self) -> List[str]:
        """Search directories in lookup order."""
        return self._paths.paths()

    # Bindings

    def assign(self, key: str, value: Any) -> None:
        """Bind a template variable for every subsequent render."""
        with self._lock.write_locked():
            self._data[key] = value

    def assigns(self, data: Mapping[str, Any]) -> None:
        """Bind several template variables in one atomic step."""
        with self._lock.write_locked():
            self._data.update(data)

    def bind_func(self, name: str, function: Callable[..., Any]) -> None:
        """Bind a function callable from templates.

        Built-in names (html, text, include) may be overridden.
        """
        with self._lock.write_locked():
            self._funcmap[name] = function

    def bind_funcs(self, functions: Mapping[str, Callable[..., Any]]) -> None:
        """Bind several functions in one atomic step."""
        with self._lock.write_locked():
            self._funcmap.update(functions)

    def set_delimiters(self, left: str, right: str) -> None:
        """Set the expression delimiters used by later compiles.

        Raises:
            ValueError: If either delimiter is empty, or ``left`` is a Jinja2
                block or comment start string ("{%", "{#")
        """
        check_delimiters(left, right)
        with self._lock.write_locked():
            self._delimiters = (left, right)

    @property
    def delimiters(self) -> Tuple[str, str]:
        """Current (left, right) expression delimiters."""
        with self._lock.read_locked():
            return self._delimiters

    @property
    def variables(self) -> Params:
        """Copy of the bound variables."""
        with self._lock.read_locked():
            return dict(self._data)

    @property
    def functions(self) -> FuncMap:
        """Copy of the bound function table, built-ins included."""
        with self._lock.read_locked():
            return dict(self._funcmap)

    # Rendering

    def parse(
        self,
        file: str,
        params: Optional[Mapping[str, Any]] = None,
        functions: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> bytes:
        """Render the template file ``file``.

        Args:
            file: File name relative to a search directory
            params: Per-call variables; they override bound variables
            functions: Per-call functions layered over the bound ones

        Returns:
            Rendered bytes

        Raises:
            PathNotFoundError: If no search directory contains ``file``
            ContentReadError: If the file cannot be read
            CompileError: If the template is malformed
            ExecutionError: If rendering fails
        """
        path = self._paths.search(file)
        if path is None:
            logger.debug(f"Template {file} not found in {self._paths.paths()}")
            raise PathNotFoundError(file, self._paths.paths())

        content = self.content_store.read(path)
        return self._render(path, content, params, functions)

    def parse_content(
        self,
        content: Union[str, bytes],
        params: Optional[Mapping[str, Any]] = None,
        functions: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> bytes:
        """Render raw template text.

        The compile unit is named after a hash of ``content`` so that
        rendering the same text again reuses the compiled template.

        Raises:
            CompileError: If the template is malformed
            ExecutionError: If rendering fails
        """
        name = str(bkdr_hash64(content))
        return self._render(name, content, params, functions)

    def _render(
        self,
        name: str,
        source: Union[str, bytes],
        params: Optional[Mapping[str, Any]],
        functions: Optional[Mapping[str, Callable[..., Any]]],
    ) -> bytes:
        with self._lock.read_locked():
            funcmap = self._funcmap
            if functions:
                funcmap = {**self._funcmap, **functions}

            left, right = self._delimiters
            template = self.engine.compile(name, source, left, right, funcmap)
            variables = merge_variables(self._data, params)
            return self.engine.execute(template, variables)
