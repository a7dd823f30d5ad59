from typing import Any, Dict, List, Literal, Tuple

from pydantic import BaseModel, Field, field_validator

from ..engine import check_delimiters


class ViewConfig(BaseModel):
    """Configuration for a View and the collaborators it builds.

    Attributes:
        paths: Search directories, in lookup order. When empty the View uses
            the root it was created with.
        delimiters: Opening and closing strings of template expressions.
        variables: Variables bound on the View at construction.
        autoescape: HTML-escape expression output unless marked safe.
        sandbox: Render inside Jinja2's sandboxed environment.
        strict_undefined: Raise on undefined variables instead of rendering
            them as empty strings.
        trim_blocks: Remove the first newline after a block tag.
        lstrip_blocks: Strip whitespace before a block tag.
        keep_trailing_newline: Keep the final newline of template sources.
        compile_cache_size: Number of compiled templates kept per engine.
        content_ttl_seconds: How long file contents stay cached.
        hot_reload: Drop cached file contents when the file's mtime changes.
        include_errors: "inline" renders a failed include's error message in
            place; "raise" propagates it to the caller of the outer render.

    Example:
        ViewConfig(
            paths=["templates"],
            delimiters=("<%", "%>"),
            variables={"site": "example.org"},
        )
    """

    paths: List[str] = []
    delimiters: Tuple[str, str] = ("{{", "}}")
    variables: Dict[str, Any] = {}
    autoescape: bool = True
    sandbox: bool = True
    strict_undefined: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    keep_trailing_newline: bool = True
    compile_cache_size: int = Field(default=128, ge=1)
    content_ttl_seconds: float = Field(default=300, gt=0)
    hot_reload: bool = True
    include_errors: Literal["inline", "raise"] = "inline"

    @field_validator("delimiters")
    @classmethod
    def validate_delimiters(cls, v: Tuple[str, str]) -> Tuple[str, str]:
        check_delimiters(*v)
        return v
