"""tplview: template views with search paths, bound variables and functions."""

from .config import ViewConfig, load_view_config
from .content import ContentStore, get_global_store, set_global_store
from .engine import TemplateEngine
from .exceptions import (
    CompileError,
    ConfigError,
    ContentReadError,
    ExecutionError,
    PathInvalidError,
    PathNotFoundError,
    ViewError,
)
from .helpers import HTML
from .paths import SearchPath
from .registry import (
    ViewRegistry,
    get_registry,
    get_view,
    parse_content,
    set_registry,
)
from .view import FuncMap, Params, View, merge_variables

__version__ = "0.1.0"

__all__ = [
    # Core
    "View",
    "ViewRegistry",
    "get_view",
    "get_registry",
    "set_registry",
    "parse_content",
    "merge_variables",
    # Types
    "Params",
    "FuncMap",
    "HTML",
    # Collaborators
    "SearchPath",
    "ContentStore",
    "get_global_store",
    "set_global_store",
    "TemplateEngine",
    # Configuration
    "ViewConfig",
    "load_view_config",
    # Errors
    "ViewError",
    "PathNotFoundError",
    "PathInvalidError",
    "ContentReadError",
    "CompileError",
    "ExecutionError",
    "ConfigError",
]
