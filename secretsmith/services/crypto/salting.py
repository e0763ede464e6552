"""
Salting engine for message digestion

Combines a data string with a salt string according to one of nine fixed
modes before hashing. The engine performs no hashing itself.

Mode table (rev(x) is the byte-reversal of x):

    NONE                  data
    APPEND                data + salt
    PREPEND               salt + data
    INFIX_INPUT           salt + data + salt
    INFIX_SALT            data + salt + data
    REVERSE_APPEND        data + rev(salt)
    REVERSE_PREPEND       rev(salt) + data
    DUPLICATE_SUFFIX      data + salt + rev(salt)
    DUPLICATE_PREFIX      salt + rev(salt) + data
    PALINDROME_MIRRORING  salt + data + rev(data) + rev(salt)
"""

from enum import Enum
from typing import Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from .encoding import BytesLike, to_bytes
from .errors import ValidationError


class SaltingMode(Enum):
    """Closed set of salting strategies, keyed by their historical codes"""
    NONE = -1
    APPEND = 0
    PREPEND = 1
    INFIX_INPUT = 2
    INFIX_SALT = 3
    REVERSE_APPEND = 4
    REVERSE_PREPEND = 5
    DUPLICATE_SUFFIX = 6
    DUPLICATE_PREFIX = 7
    PALINDROME_MIRRORING = 8


_COMBINERS: Dict[SaltingMode, Callable[[bytes, bytes], bytes]] = {
    SaltingMode.NONE: lambda data, salt: data,
    SaltingMode.APPEND: lambda data, salt: data + salt,
    SaltingMode.PREPEND: lambda data, salt: salt + data,
    SaltingMode.INFIX_INPUT: lambda data, salt: salt + data + salt,
    SaltingMode.INFIX_SALT: lambda data, salt: data + salt + data,
    SaltingMode.REVERSE_APPEND: lambda data, salt: data + salt[::-1],
    SaltingMode.REVERSE_PREPEND: lambda data, salt: salt[::-1] + data,
    SaltingMode.DUPLICATE_SUFFIX: lambda data, salt: data + salt + salt[::-1],
    SaltingMode.DUPLICATE_PREFIX: lambda data, salt: salt + salt[::-1] + data,
    SaltingMode.PALINDROME_MIRRORING: lambda data, salt: salt + data + data[::-1] + salt[::-1],
}

_unhandled = set(SaltingMode) - set(_COMBINERS)
if _unhandled:
    raise RuntimeError(f"Salting modes without a combination rule: {sorted(m.name for m in _unhandled)}")


def _to_mode(mode: Union["SaltingMode", int]) -> SaltingMode:
    if isinstance(mode, SaltingMode):
        return mode
    if isinstance(mode, int) and not isinstance(mode, bool):
        try:
            return SaltingMode(mode)
        except ValueError:
            pass
    raise ValidationError(f"Unknown salting mode: {mode!r}")


def combine(
    mode: Union[SaltingMode, int],
    data: BytesLike,
    salt: BytesLike = b"",
) -> bytes:
    """
    Combine data and salt according to the given salting mode.

    Args:
        mode: Salting mode (enum member or its integer code)
        data: Input data; str is UTF-8 encoded
        salt: Salt value; str is UTF-8 encoded

    Returns:
        The combined byte sequence

    Raises:
        ValidationError: On an unknown mode, non-bytes input, or an empty
                         salt with any mode other than NONE
    """
    mode = _to_mode(mode)
    data = to_bytes(data, "data")
    salt = to_bytes(salt, "salt")

    if mode is not SaltingMode.NONE and not salt:
        raise ValidationError(f"Salt must not be empty for salting mode {mode.name}")

    return _COMBINERS[mode](data, salt)


class SaltingConfig(BaseModel):
    """
    Immutable salting configuration: a mode paired with its salt.

    Construction fails with ValidationError when the pair is unusable, so
    every existing instance can be applied without further checks.
    """
    model_config = ConfigDict(frozen=True)

    mode: SaltingMode = SaltingMode.NONE
    salt: bytes = b""

    @model_validator(mode="before")
    @classmethod
    def validate_pair(cls, values):
        if not isinstance(values, dict):
            return values
        values = dict(values)
        mode = _to_mode(values.get("mode", SaltingMode.NONE))
        salt = to_bytes(values.get("salt", b""), "salt")
        if mode is not SaltingMode.NONE and not salt:
            raise ValidationError(f"Salt must not be empty for salting mode {mode.name}")
        values["mode"] = mode
        values["salt"] = salt
        return values

    def apply(self, data: BytesLike) -> bytes:
        """Combine data with this configuration's salt"""
        return combine(self.mode, data, self.salt)


class SaltingEngine:
    """
    Holder of a salting configuration.

    The configuration is an immutable snapshot; reconfiguring returns a new
    engine and duplicates never share mutable state.
    """

    def __init__(self, config: SaltingConfig | None = None):
        self._config = config or SaltingConfig()

    @property
    def config(self) -> SaltingConfig:
        return self._config

    @property
    def mode(self) -> SaltingMode:
        return self._config.mode

    @property
    def salt(self) -> bytes:
        return self._config.salt

    @staticmethod
    def combine(
        mode: Union[SaltingMode, int],
        data: BytesLike,
        salt: BytesLike = b"",
    ) -> bytes:
        return combine(mode, data, salt)

    def apply(self, data: BytesLike) -> bytes:
        return self._config.apply(data)

    def with_config(
        self,
        mode: Union[SaltingMode, int, None] = None,
        salt: Optional[BytesLike] = None,
    ) -> "SaltingEngine":
        """Return a new engine with the given fields replaced"""
        return SaltingEngine(SaltingConfig(
            mode=self.mode if mode is None else mode,
            salt=self.salt if salt is None else salt,
        ))

    def copy(self) -> "SaltingEngine":
        return SaltingEngine(self._config)

    def __copy__(self) -> "SaltingEngine":
        return self.copy()

    def __deepcopy__(self, memo) -> "SaltingEngine":
        return self.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, SaltingEngine):
            return NotImplemented
        return self._config == other._config

    __hash__ = None

    def __repr__(self) -> str:
        return f"SaltingEngine(mode={self.mode.name}, salt_length={len(self.salt)})"
