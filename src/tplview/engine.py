"""Jinja2 compile/execute backend for tplview views."""

import logging
import threading
from collections import OrderedDict
from types import CodeType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from jinja2 import (
    Environment,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateSyntaxError,
    Undefined,
    sandbox,
)

from .exceptions import CompileError, ExecutionError, ViewError

logger = logging.getLogger(__name__)

# Jinja2 block and comment tags; expression delimiters must not start the same way
RESERVED_START_STRINGS = ("{%", "{#")


def check_delimiters(open: str, close: str) -> None:
    """Validate an expression delimiter pair.

    Raises:
        ValueError: If either string is empty or ``open`` is a block or
            comment start string
    """
    if not open or not close:
        raise ValueError("delimiters must be two non-empty strings")
    if open in RESERVED_START_STRINGS:
        raise ValueError(
            f"opening delimiter {open!r} collides with Jinja2 block or comment tags; "
            f"reserved: {', '.join(RESERVED_START_STRINGS)}"
        )


class TemplateEngine:
    """Compiles delimiter-demarcated source into Jinja2 templates and runs them.

    One Jinja2 environment is kept per delimiter pair. Compiled code is cached
    per ``(open, close, name)`` and reused only while the source is unchanged,
    so a template file edited on disk is recompiled on its next render.
    """

    def __init__(
        self,
        enable_sandbox: bool = True,
        autoescape: bool = True,
        strict_undefined: bool = True,
        cache_size: int = 128,
        trim_blocks: bool = True,
        lstrip_blocks: bool = True,
        keep_trailing_newline: bool = True,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the template engine.

        Args:
            enable_sandbox: Use Jinja2's sandboxed environment
            autoescape: HTML-escape expression output unless marked safe
            strict_undefined: Raise on undefined variables instead of rendering ""
            cache_size: Number of compiled templates kept in memory
            trim_blocks: Remove first newline after block
            lstrip_blocks: Remove leading spaces/tabs from line start
            keep_trailing_newline: Keep trailing newline in templates
            encoding: Encoding used to decode sources and encode output
        """
        self.enable_sandbox = enable_sandbox
        self.autoescape = autoescape
        self.strict_undefined = strict_undefined
        self.cache_size = cache_size
        self.trim_blocks = trim_blocks
        self.lstrip_blocks = lstrip_blocks
        self.keep_trailing_newline = keep_trailing_newline
        self.encoding = encoding

        self._lock = threading.Lock()
        self._environments: Dict[Tuple[str, str], Environment] = {}
        # (open, close, name) -> (source, code)
        self._code_cache: "OrderedDict[Tuple[str, str, str], Tuple[str, CodeType]]" = (
            OrderedDict()
        )

    def environment(self, open: str, close: str) -> Environment:
        """Return the environment configured for the given delimiters.

        Raises:
            CompileError: If no environment can be built for the pair
        """
        key = (open, close)
        with self._lock:
            env = self._environments.get(key)
            if env is None:
                env = self._create_environment(open, close)
                self._environments[key] = env
            return env

    def _create_environment(self, open: str, close: str) -> Environment:
        try:
            check_delimiters(open, close)
        except ValueError as e:
            raise CompileError(f"Invalid delimiters {open!r} {close!r}: {e}") from e

        env_class = sandbox.SandboxedEnvironment if self.enable_sandbox else Environment
        undefined = StrictUndefined if self.strict_undefined else Undefined
        try:
            return env_class(
                variable_start_string=open,
                variable_end_string=close,
                trim_blocks=self.trim_blocks,
                lstrip_blocks=self.lstrip_blocks,
                keep_trailing_newline=self.keep_trailing_newline,
                undefined=undefined,
                autoescape=self.autoescape,
            )
        except Exception as e:
            raise CompileError(f"Invalid delimiters {open!r} {close!r}: {e}") from e

    def compile(
        self,
        name: str,
        source: Union[bytes, str],
        open: str,
        close: str,
        functions: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> Template:
        """Compile template source with the given delimiters and functions.

        Args:
            name: Compile-unit name (file path or content hash)
            source: Template source
            open: Expression opening delimiter
            close: Expression closing delimiter
            functions: Callables exposed to the template by name

        Returns:
            Compiled Jinja2 template

        Raises:
            CompileError: If template syntax is invalid
        """
        if isinstance(source, bytes):
            source = source.decode(self.encoding)

        env = self.environment(open, close)
        code = self._compiled_code(env, name, source, open, close)
        return env.template_class.from_code(
            env, code, env.make_globals(dict(functions or {}))
        )

    def _compiled_code(
        self, env: Environment, name: str, source: str, open: str, close: str
    ) -> CodeType:
        key = (open, close, name)
        with self._lock:
            cached = self._code_cache.get(key)
            if cached is not None and cached[0] == source:
                self._code_cache.move_to_end(key)
                return cached[1]

        logger.debug(f"Compiling template {name}")
        try:
            code = env.compile(source, name=name, filename=name)
        except TemplateSyntaxError as e:
            raise CompileError(
                f"Invalid template syntax in {name} at line {e.lineno}: {e.message}",
                name=name,
                lineno=e.lineno,
            ) from e

        with self._lock:
            self._code_cache[key] = (source, code)
            self._code_cache.move_to_end(key)
            while len(self._code_cache) > self.cache_size:
                self._code_cache.popitem(last=False)
        return code

    def execute(self, template: Template, variables: Optional[Mapping[str, Any]]) -> bytes:
        """Render a compiled template against ``variables``.

        The mapping is only read; Jinja2 copies it into a fresh context.

        Raises:
            ExecutionError: If rendering fails
        """
        try:
            output = template.render(variables or {})
        except ViewError:
            # Errors from nested view renders (include) keep their own type
            raise
        except TemplateError as e:
            raise ExecutionError(
                f"Error rendering template {template.name}: {e.message or e}",
                name=template.name,
            ) from e
        except Exception as e:
            raise ExecutionError(
                f"Error rendering template {template.name}: {e}", name=template.name
            ) from e
        return output.encode(self.encoding)

    def clear_cache(self) -> None:
        """Drop all compiled code."""
        with self._lock:
            self._code_cache.clear()

    def cache_info(self) -> Dict[str, int]:
        """Get compile cache statistics."""
        with self._lock:
            return {
                "entries": len(self._code_cache),
                "environments": len(self._environments),
                "cache_size": self.cache_size,
            }
