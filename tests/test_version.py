"""Test version information."""

import tplview


def test_version() -> None:
    """Test that version is accessible."""
    assert hasattr(tplview, "__version__")
    assert isinstance(tplview.__version__, str)
    assert tplview.__version__ == "0.1.0"
