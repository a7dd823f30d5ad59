"""Built-in template functions bound on every View."""

import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional

from markupsafe import Markup

from .exceptions import ViewError

if TYPE_CHECKING:
    from .view import View

logger = logging.getLogger(__name__)

# Output of this type is emitted verbatim, without autoescaping
HTML = Markup

_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG = re.compile(r"<[^<>]*>")


def html(value: Any) -> Markup:
    """Mark ``value`` as pre-escaped markup.

    Args:
        value: Anything with a string form

    Returns:
        The string form, emitted as-is by the engine
    """
    return Markup(str(value))


def text(value: Any) -> str:
    """Strip markup tags and comments from the string form of ``value``.

    Entities are left encoded and whitespace is kept, so ``&lt;b&gt;`` stays
    as text and never turns back into a tag.

    Args:
        value: Anything with a string form

    Returns:
        Plain text without tags
    """
    result = str(value)
    while True:
        stripped = _TAG.sub("", _COMMENT.sub("", result))
        # Removing one tag can join the pieces of another
        if stripped == result:
            return result
        result = stripped


def make_include(view: "View") -> Callable[..., Markup]:
    """Build the ``include`` function for ``view``.

    The function renders another template file of the same view and inlines
    the result. Whether a failed inclusion raises or shows its error message
    in place is decided by ``view.include_errors`` at call time.
    """

    def include(file: str, data: Optional[Mapping[str, Any]] = None) -> Markup:
        try:
            content = view.parse(file, data)
        except ViewError as e:
            if view.include_errors == "raise":
                raise
            logger.warning(f"Include of {file} failed: {e}")
            return Markup(str(e))
        return Markup(content.decode("utf-8"))

    return include


def builtin_functions(view: "View") -> Dict[str, Callable[..., Any]]:
    """Return the built-in function table for ``view``."""
    return {
        "text": text,
        "html": html,
        "include": make_include(view),
    }
