"""
Iterative slow derivation (PBKDF2, RFC 2898)

Stretches a password through repeated keyed-hash iterations to produce
output of any requested length. Output is built from blocks the size of the
underlying digest:

    U1 = HMAC(password, salt || BE32(i))
    Uj = HMAC(password, U(j-1))              for j = 2..iterations
    Ti = U1 ^ U2 ^ ... ^ U(iterations)

Blocks are concatenated in index order and truncated to the target length.
The block computation itself runs in cryptography's PBKDF2HMAC.
"""

import time
from typing import Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from pydantic import BaseModel, ConfigDict, model_validator

from ...logging import get_logger
from .algorithms import get_digest_algorithm, normalize_algorithm_name
from .encoding import BytesLike, to_bytes
from .errors import LengthError, ProviderError, RangeError, ValidationError

logger = get_logger()

# BE32 block index encoding caps the number of blocks
MAX_BLOCK_COUNT = 2 ** 32 - 1


class DerivationParameters(BaseModel):
    """
    Immutable PBKDF2 parameters.

    Invalid combinations are rejected at construction:
    - iterations below 1 raise RangeError
    - output_length below 1 raises LengthError
    - unknown algorithm identifiers raise UnsupportedAlgorithmError
    """
    model_config = ConfigDict(frozen=True)

    iterations: int
    output_length: int
    algorithm: str = "sha256"

    @model_validator(mode="before")
    @classmethod
    def validate_parameters(cls, values):
        if not isinstance(values, dict):
            return values
        values = dict(values)

        iterations = values.get("iterations")
        if isinstance(iterations, bool) or not isinstance(iterations, int):
            raise RangeError("Iteration count must be an integer")
        if iterations < 1:
            raise RangeError("Iteration count must be at least 1")

        output_length = values.get("output_length")
        if isinstance(output_length, bool) or not isinstance(output_length, int):
            raise LengthError("Output length must be an integer")
        if output_length < 1:
            raise LengthError("Output length must be at least 1 byte")

        algorithm = get_digest_algorithm(values.get("algorithm", "sha256"))
        if -(-output_length // algorithm.digest_size) > MAX_BLOCK_COUNT:
            raise LengthError("Output length exceeds the PBKDF2 block limit")

        values["algorithm"] = normalize_algorithm_name(values.get("algorithm", "sha256"))
        return values

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> "DerivationParameters":
        """
        Build parameters from application settings.

        Args:
            settings: Settings instance (defaults to get_settings())
            **overrides: Fields taking precedence over the settings values
        """
        if settings is None:
            from ...config import get_settings
            settings = get_settings()

        values = {
            "iterations": settings.PBKDF2_ITERATIONS,
            "output_length": settings.PBKDF2_OUTPUT_LENGTH,
            "algorithm": settings.DEFAULT_DIGEST_ALGORITHM,
        }
        values.update(overrides)
        return cls(**values)


def derive(
    password: BytesLike,
    salt: BytesLike,
    params: DerivationParameters,
    metrics=None,
) -> bytes:
    """
    Derive exactly params.output_length bytes from a password.

    Args:
        password: Password or key material; str is UTF-8 encoded
        salt: PBKDF2 salt; str is UTF-8 encoded
        params: Validated derivation parameters
        metrics: Optional Metrics instance to record the derivation

    Returns:
        Derived key bytes

    Raises:
        ValidationError: If params is not a DerivationParameters instance
                         or the inputs are not bytes/str
        ProviderError: If the key derivation provider fails
    """
    if not isinstance(params, DerivationParameters):
        raise ValidationError("params must be a DerivationParameters instance")

    password = to_bytes(password, "password")
    salt = to_bytes(salt, "salt")
    algorithm = get_digest_algorithm(params.algorithm)
    started = time.perf_counter()

    try:
        kdf = PBKDF2HMAC(
            algorithm=algorithm.new(),
            length=params.output_length,
            salt=salt,
            iterations=params.iterations,
        )
        key = kdf.derive(password)
    except (UnsupportedAlgorithm, ValueError, TypeError) as e:
        raise ProviderError(f"Key derivation provider failed for {params.algorithm}: {e}") from e

    duration = time.perf_counter() - started
    if metrics is not None:
        metrics.record_derivation(params.algorithm, duration)

    logger.debug(
        "derivation.completed",
        algorithm=params.algorithm,
        iterations=params.iterations,
        output_length=params.output_length,
        duration_seconds=round(duration, 6),
    )

    return key


class IterativeDerivationEngine:
    """
    PBKDF2 engine bound to a parameter snapshot and salt.

    Parameters are immutable; with_parameters() returns a new engine, so a
    duplicate never observes changes made through another instance.
    """

    def __init__(
        self,
        params: Optional[DerivationParameters] = None,
        salt: BytesLike = b"",
        metrics=None,
    ):
        """
        Initialize the engine.

        Args:
            params: Derivation parameters (defaults come from settings)
            salt: PBKDF2 salt bound to this engine
            metrics: Optional Metrics instance
        """
        self._params = params or DerivationParameters.from_settings()
        self._salt = to_bytes(salt, "salt")
        self._metrics = metrics

    @property
    def parameters(self) -> DerivationParameters:
        return self._params

    @property
    def salt(self) -> bytes:
        return self._salt

    def derive(self, password: BytesLike, salt: Optional[BytesLike] = None) -> bytes:
        """Derive key material; an explicit salt overrides the bound one"""
        return derive(
            password,
            self._salt if salt is None else salt,
            self._params,
            metrics=self._metrics,
        )

    def with_parameters(self, salt: Optional[BytesLike] = None, **changes) -> "IterativeDerivationEngine":
        """Return a new engine with re-validated parameters"""
        values = self._params.model_dump()
        values.update(changes)
        return IterativeDerivationEngine(
            DerivationParameters(**values),
            salt=self._salt if salt is None else salt,
            metrics=self._metrics,
        )

    def copy(self) -> "IterativeDerivationEngine":
        return IterativeDerivationEngine(self._params, salt=self._salt, metrics=self._metrics)

    def __copy__(self) -> "IterativeDerivationEngine":
        return self.copy()

    def __deepcopy__(self, memo) -> "IterativeDerivationEngine":
        return self.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, IterativeDerivationEngine):
            return NotImplemented
        return self._params == other._params and self._salt == other._salt

    __hash__ = None
