"""Exception hierarchy for tplview."""

from typing import Optional


class ViewError(Exception):
    """Base class for every error raised by a View and its collaborators."""

    pass


class PathNotFoundError(ViewError, FileNotFoundError):
    """Raised when a template file does not resolve against the search paths."""

    def __init__(self, file: str, search_paths: Optional[list] = None) -> None:
        self.file = file
        self.search_paths = list(search_paths or [])
        super().__init__(f'tpl "{file}" not found')


class PathInvalidError(ViewError, ValueError):
    """Raised when a search path is missing or is not a directory."""

    def __init__(self, path: str, reason: str = "does not exist") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f'path "{path}" {reason}')


class ContentReadError(ViewError, OSError):
    """Raised when the content store cannot read a resolved template file."""

    pass


class CompileError(ViewError):
    """Raised when template source is malformed under the current delimiters."""

    def __init__(
        self, message: str, name: Optional[str] = None, lineno: Optional[int] = None
    ) -> None:
        self.message = message
        self.name = name
        self.lineno = lineno
        super().__init__(message)


class ExecutionError(ViewError):
    """Raised when a compiled template fails while rendering."""

    def __init__(self, message: str, name: Optional[str] = None) -> None:
        self.message = message
        self.name = name
        super().__init__(message)


class ConfigError(ValueError):
    """Raised when a view configuration file cannot be loaded or validated."""

    pass
