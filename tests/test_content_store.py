"""Tests for the template content store."""

import os
import threading
import time

import pytest

from tplview import ContentReadError, ContentStore, get_global_store, set_global_store


def _bump_mtime(path, seconds=5):
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + seconds))


class TestContentStore:
    """Test ContentStore class."""

    def test_initialization(self):
        store = ContentStore()
        assert store.size() == 0
        stats = store.get_stats()
        assert stats["ttl_seconds"] == 300
        assert stats["hot_reload_enabled"] is True

    def test_read_caches(self, template_dir):
        store = ContentStore()
        path = template_dir / "hello.html"
        assert store.read(path) == b"Hello {{ name }}!"
        assert store.read(path) == b"Hello {{ name }}!"
        stats = store.get_stats()
        assert stats["total_entries"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1

    def test_read_missing_file(self, tmp_path):
        store = ContentStore()
        with pytest.raises(ContentReadError) as exc_info:
            store.read(tmp_path / "nope.html")
        assert isinstance(exc_info.value, OSError)

    def test_hot_reload(self, template_dir):
        store = ContentStore()
        path = template_dir / "hello.html"
        store.read(path)

        path.write_text("changed")
        _bump_mtime(path)
        assert store.read(path) == b"changed"

    def test_hot_reload_disabled(self, template_dir):
        store = ContentStore(enable_hot_reload=False)
        path = template_dir / "hello.html"
        store.read(path)

        path.write_text("changed")
        _bump_mtime(path)
        assert store.read(path) == b"Hello {{ name }}!"

    def test_deleted_file_drops_entry(self, template_dir):
        store = ContentStore()
        path = template_dir / "hello.html"
        store.read(path)
        path.unlink()
        assert store.get(path) is None
        with pytest.raises(ContentReadError):
            store.read(path)

    def test_ttl_expiry(self, template_dir):
        store = ContentStore(ttl_seconds=0.05)
        path = template_dir / "hello.html"
        store.read(path)
        time.sleep(0.1)
        assert store.get(path) is None
        assert store.size() == 0

    def test_cleanup_expired(self, template_dir):
        store = ContentStore(ttl_seconds=0.05)
        store.read(template_dir / "hello.html")
        store.read(template_dir / "header.html")
        time.sleep(0.1)
        assert store.cleanup_expired() == 2
        assert store.size() == 0

    def test_invalidate_and_clear(self, template_dir):
        store = ContentStore()
        store.read(template_dir / "hello.html")
        store.read(template_dir / "header.html")
        assert store.invalidate(template_dir / "hello.html") is True
        assert store.invalidate(template_dir / "hello.html") is False
        store.clear()
        assert store.size() == 0

    def test_concurrent_reads(self, template_dir):
        store = ContentStore()
        errors = []

        def worker():
            try:
                for _ in range(50):
                    assert store.read(template_dir / "hello.html") == b"Hello {{ name }}!"
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert store.size() == 1


class TestGlobalStore:
    """Test global store functions."""

    def test_get_global_store(self):
        store = get_global_store()
        assert isinstance(store, ContentStore)
        assert get_global_store() is store

    def test_set_global_store(self):
        custom = ContentStore(ttl_seconds=600)
        set_global_store(custom)
        assert get_global_store() is custom

    def test_reset_global_store(self):
        first = get_global_store()
        set_global_store(None)
        assert get_global_store() is not first
