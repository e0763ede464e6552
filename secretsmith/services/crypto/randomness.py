"""
Pluggable randomness sources

Every secret produced by the toolkit draws its entropy from one of these
sources. Two implementations are provided:
- CryptoRandom: the operating system CSPRNG (via the secrets module)
- PseudoRandom: a seedable, deterministic generator for reproducible output
"""

import copy
import random
import secrets
import sys
from abc import ABC, abstractmethod
from typing import Optional

from .errors import LengthError, ProviderError, RangeError


class RandomnessSource(ABC):
    """
    Capability contract for obtaining random integers and byte sequences.

    Duplicating a source (copy.copy, copy.deepcopy or .copy()) yields an
    independent instance; drawing from or reseeding the duplicate never
    affects the original.
    """

    @property
    def min_number(self) -> int:
        """The lowest integer get_int() can return"""
        return -sys.maxsize - 1

    @property
    def max_number(self) -> int:
        """The highest integer get_int() can return"""
        return sys.maxsize

    def get_int(self, from_: int = 0, to: Optional[int] = None) -> int:
        """
        Generate a random integer in the inclusive range [from_, to].

        Args:
            from_: Lowest value to be returned (default: 0)
            to: Highest value to be returned (default: max_number)

        Returns:
            Random integer

        Raises:
            RangeError: If the range is empty or outside the supported borders
        """
        to = self.max_number if to is None else to

        for value in (from_, to):
            if isinstance(value, bool) or not isinstance(value, int):
                raise RangeError("Integer range borders must be integers")

        if from_ < self.min_number or to > self.max_number:
            raise RangeError(
                f"Integer range must be within [{self.min_number}, {self.max_number}]"
            )
        if from_ > to:
            raise RangeError("The lower range border must not exceed the upper one")

        return self._random_int(from_, to)

    def get_bytes(self, length: int = 1) -> bytes:
        """
        Generate a random byte string.

        Args:
            length: Number of bytes to generate (default: 1)

        Returns:
            Exactly `length` random bytes

        Raises:
            LengthError: If length is not positive
            ProviderError: If the underlying provider returns a short read
        """
        if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
            raise LengthError("Byte length must be a positive integer")

        data = self._random_bytes(length)
        if len(data) != length:
            raise ProviderError(
                f"Randomness provider returned {len(data)} bytes, expected {length}"
            )
        return data

    @abstractmethod
    def _random_int(self, from_: int, to: int) -> int:
        """Draw an integer from the validated inclusive range"""

    @abstractmethod
    def _random_bytes(self, length: int) -> bytes:
        """Draw `length` bytes"""

    def copy(self) -> "RandomnessSource":
        """Return an independent duplicate of this source"""
        return copy.deepcopy(self)

    def __copy__(self) -> "RandomnessSource":
        return copy.deepcopy(self)


class CryptoRandom(RandomnessSource):
    """
    Cryptographically secure randomness from the operating system.

    Uses the secrets module, which is suitable for managing sensitive data
    like authentication tokens, passwords and keys.
    """

    def _random_int(self, from_: int, to: int) -> int:
        try:
            return from_ + secrets.randbelow(to - from_ + 1)
        except OSError as e:
            raise ProviderError(f"Operating system randomness unavailable: {e}") from e

    def _random_bytes(self, length: int) -> bytes:
        try:
            return secrets.token_bytes(length)
        except OSError as e:
            raise ProviderError(f"Operating system randomness unavailable: {e}") from e

    def __eq__(self, other) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return "CryptoRandom()"


class PseudoRandom(RandomnessSource):
    """
    Seedable pseudo-random source (Mersenne Twister).

    Not suitable for production secrets. Identical seeds produce identical
    streams, which makes it the source of choice for reproducible tests and
    fixtures.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize PseudoRandom.

        Args:
            seed: Optional integer seed. If not provided, one is drawn from
                  the operating system CSPRNG.
        """
        self._generator = random.Random()
        self._seed: int = 0
        self.seed(seed)

    @property
    def current_seed(self) -> int:
        """The seed the generator was last initialized with"""
        return self._seed

    def seed(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator state.

        Args:
            seed: Integer seed; a fresh random one is used when omitted

        Raises:
            RangeError: If the seed is not an integer
        """
        if seed is None:
            seed = secrets.randbits(64)
        elif isinstance(seed, bool) or not isinstance(seed, int):
            raise RangeError("Seed must be an integer")

        self._seed = seed
        self._generator.seed(seed)

    def _random_int(self, from_: int, to: int) -> int:
        return self._generator.randint(from_, to)

    def _random_bytes(self, length: int) -> bytes:
        return self._generator.randbytes(length)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PseudoRandom):
            return NotImplemented
        return self._generator.getstate() == other._generator.getstate()

    __hash__ = None

    def __repr__(self) -> str:
        return f"PseudoRandom(seed={self._seed})"
