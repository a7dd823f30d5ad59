"""Tests for the view registry."""

import threading

import pytest

from tplview import (
    PathInvalidError,
    View,
    ViewConfig,
    ViewRegistry,
    get_registry,
    get_view,
    parse_content,
    set_registry,
)


class TestViewRegistry:
    """Test ViewRegistry class."""

    def test_get_creates_once(self, template_dir):
        registry = ViewRegistry()
        view = registry.get(str(template_dir))
        assert isinstance(view, View)
        assert registry.get(str(template_dir)) is view
        assert len(registry) == 1
        assert registry.contains(str(template_dir))

    def test_distinct_roots(self, template_dir, other_dir):
        registry = ViewRegistry()
        assert registry.get(str(template_dir)) is not registry.get(str(other_dir))
        assert sorted(registry.roots()) == sorted([str(template_dir), str(other_dir)])

    def test_invalid_root_not_stored(self, tmp_path):
        registry = ViewRegistry()
        with pytest.raises(PathInvalidError):
            registry.get(str(tmp_path / "nope"))
        assert len(registry) == 0

    def test_config_applied(self, template_dir):
        config = ViewConfig(delimiters=("<%", "%>"), variables={"Who": "World"})
        view = ViewRegistry(config).get(str(template_dir))
        assert view.delimiters == ("<%", "%>")
        assert view.parse("greet.tpl") == b"Hello World!"

    def test_clear(self, template_dir):
        registry = ViewRegistry()
        registry.get(str(template_dir))
        registry.clear()
        assert len(registry) == 0

    def test_concurrent_get_same_root(self, template_dir):
        registry = ViewRegistry()
        n_threads = 16
        barrier = threading.Barrier(n_threads)
        seen = []
        lock = threading.Lock()

        def worker():
            barrier.wait()
            view = registry.get(str(template_dir))
            with lock:
                seen.append(view)

        threads = [threading.Thread(target=worker) for _ in range(n_threads)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(seen) == n_threads
        assert all(view is seen[0] for view in seen)
        assert len(registry) == 1


class TestDefaultRegistry:
    """Test module-level registry helpers."""

    def test_get_registry_singleton(self):
        assert get_registry() is get_registry()

    def test_set_registry(self):
        custom = ViewRegistry()
        set_registry(custom)
        assert get_registry() is custom

    def test_get_view(self, template_dir):
        assert get_view(str(template_dir)) is get_registry().get(str(template_dir))

    def test_parse_content_uses_default_view(self, template_dir, monkeypatch):
        monkeypatch.chdir(template_dir)
        assert parse_content("Hi {{ name }}", {"name": "x"}) == b"Hi x"
        assert parse_content('{{ include("hello.html", {"name": "y"}) }}') == b"Hello y!"
        assert get_registry().contains(".")


class TestRegistryReadsUnderLock:
    """Test that read accessors wait for an in-progress view creation."""

    def test_contains_and_len_block_while_locked(self, template_dir):
        registry = ViewRegistry()
        registry.get(str(template_dir))
        results = []

        def reader():
            results.append((registry.contains(str(template_dir)), len(registry)))

        with registry._lock:
            thread = threading.Thread(target=reader)
            thread.start()
            thread.join(timeout=0.1)
            assert thread.is_alive()
            assert results == []
        thread.join(timeout=5)

        assert results == [(True, 1)]
