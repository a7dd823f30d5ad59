"""Content hashing used to name compile units for raw template text."""

from typing import Union

_MASK64 = 0xFFFFFFFFFFFFFFFF
_SEED = 131


def bkdr_hash64(data: Union[bytes, str]) -> int:
    """Return the 64-bit BKDR hash of ``data``.

    Strings are hashed over their UTF-8 encoding, so the same text always
    maps to the same compile-unit name regardless of how it was passed in.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    value = 0
    for byte in data:
        value = (value * _SEED + byte) & _MASK64
    return value & 0x7FFFFFFFFFFFFFFF
