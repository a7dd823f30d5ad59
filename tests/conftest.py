"""Shared pytest fixtures and configuration."""

from pathlib import Path

from pytest import fixture

from tplview import ContentStore, TemplateEngine, View, set_global_store, set_registry


@fixture(autouse=True)
def fresh_globals():
    """Give every test its own default content store and registry."""
    set_global_store(None)
    set_registry(None)
    yield
    set_global_store(None)
    set_registry(None)


@fixture
def template_dir(tmp_path: Path) -> Path:
    """Directory holding a small set of templates."""
    root = tmp_path / "templates"
    root.mkdir()
    (root / "greet.tpl").write_text("Hello <% Who %>!")
    (root / "hello.html").write_text("Hello {{ name }}!")
    (root / "header.html").write_text("<h1>{{ title }}</h1>")
    (root / "page.html").write_text(
        '{{ include("header.html", {"title": title}) }}<p>{{ body }}</p>'
    )
    (root / "broken.html").write_text("Hello {{ name")
    return root


@fixture
def other_dir(tmp_path: Path) -> Path:
    """A second search directory with templates absent from template_dir."""
    root = tmp_path / "other"
    root.mkdir()
    (root / "only_other.html").write_text("from other: {{ name }}")
    (root / "hello.html").write_text("shadowed {{ name }}")
    return root


@fixture
def view(template_dir: Path) -> View:
    """A view rooted at template_dir with its own engine and store."""
    return View(template_dir, engine=TemplateEngine(), content_store=ContentStore())
