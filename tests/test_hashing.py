"""Tests for content hashing."""

from tplview.hashing import bkdr_hash64


def test_known_values():
    assert bkdr_hash64(b"") == 0
    assert bkdr_hash64(b"a") == 97
    assert bkdr_hash64(b"ab") == 97 * 131 + 98


def test_str_and_bytes_agree():
    assert bkdr_hash64("héllo {{ x }}") == bkdr_hash64("héllo {{ x }}".encode("utf-8"))


def test_fits_in_63_bits():
    value = bkdr_hash64("x" * 1000)
    assert 0 <= value < 2**63


def test_deterministic_and_distinct():
    assert bkdr_hash64("Hello {{ a }}") == bkdr_hash64("Hello {{ a }}")
    assert bkdr_hash64("Hello {{ a }}") != bkdr_hash64("Hello {{ b }}")
