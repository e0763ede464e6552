"""
Byte coercion helpers shared by the digest and derivation modules
"""

from typing import Union

from .errors import ValidationError

BytesLike = Union[bytes, bytearray, memoryview, str]


def to_bytes(value: BytesLike, name: str = "value") -> bytes:
    """
    Coerce input to bytes; str is UTF-8 encoded.

    Raises:
        ValidationError: If value is neither bytes-like nor str
    """
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ValidationError(f"{name} must be bytes or str, got {type(value).__name__}")
