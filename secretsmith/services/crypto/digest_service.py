"""
Salted digest service

Implements digestion wrappers on top of the salting engine:
- Unkeyed digests (SHA-2, SHA-3, SHA-1, MD5) of salted data
- Keyed digests (HMAC) of salted data
- PBKDF2 slow derivation of salted passwords
- Constant-time verification for each of the above
"""

import secrets
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from ...logging import get_logger
from .algorithms import get_digest_algorithm
from .derivation import DerivationParameters, derive
from .encoding import BytesLike, to_bytes
from .errors import ProviderError, ValidationError
from .salting import SaltingConfig, SaltingMode

logger = get_logger()


class DigestService:
    """
    Digest service bound to an algorithm and a salting configuration.

    The configuration is immutable: with_salting() and with_algorithm()
    return new services, and copies are fully independent.
    """

    def __init__(
        self,
        algorithm: Optional[str] = None,
        salting: Optional[SaltingConfig] = None,
        metrics=None,
    ):
        """
        Initialize DigestService.

        Args:
            algorithm: Digest algorithm identifier (defaults from settings)
            salting: Salting configuration (no salting if not provided)
            metrics: Optional Metrics instance passed to derivations
        """
        if algorithm is None:
            from ...config import get_settings
            algorithm = get_settings().DEFAULT_DIGEST_ALGORITHM

        if salting is not None and not isinstance(salting, SaltingConfig):
            raise ValidationError("salting must be a SaltingConfig instance")

        self._algorithm = get_digest_algorithm(algorithm)
        self._salting = salting or SaltingConfig()
        self._metrics = metrics

    @property
    def algorithm(self) -> str:
        return self._algorithm.name

    @property
    def digest_size(self) -> int:
        return self._algorithm.digest_size

    @property
    def salting(self) -> SaltingConfig:
        return self._salting

    def with_salting(
        self,
        mode: Union[SaltingMode, int],
        salt: BytesLike = b"",
    ) -> "DigestService":
        """Return a new service using the given salting mode and salt"""
        return DigestService(
            self._algorithm.name,
            SaltingConfig(mode=mode, salt=salt),
            metrics=self._metrics,
        )

    def with_algorithm(self, algorithm: str) -> "DigestService":
        """Return a new service using another digest algorithm"""
        return DigestService(algorithm, self._salting, metrics=self._metrics)

    # ------------------------------------------------------------------
    # Unkeyed digests
    # ------------------------------------------------------------------

    def hash_data(self, data: BytesLike) -> bytes:
        """
        Hash salted data with the configured algorithm.

        Raises:
            ValidationError: If data is not bytes or str
            ProviderError: If the hash provider rejects the algorithm
        """
        salted = self._salting.apply(data)
        try:
            hasher = hashes.Hash(self._algorithm.new())
            hasher.update(salted)
            return hasher.finalize()
        except UnsupportedAlgorithm as e:
            raise ProviderError(f"Hash provider rejected {self._algorithm.name}: {e}") from e

    def hash_hex(self, data: BytesLike) -> str:
        """Hash salted data and return a lowercase hex string"""
        return self.hash_data(data).hex()

    def verify_hash(self, data: BytesLike, expected_hash: bytes) -> bool:
        """
        Verify that data matches an expected digest.

        Uses constant-time comparison to prevent timing attacks.
        """
        return secrets.compare_digest(self.hash_data(data), to_bytes(expected_hash, "expected_hash"))

    # ------------------------------------------------------------------
    # Keyed digests
    # ------------------------------------------------------------------

    def keyed_hash(self, key: BytesLike, data: BytesLike) -> bytes:
        """
        Compute an HMAC of salted data.

        Raises:
            ValidationError: If the key is empty
            ProviderError: If the keyed-hash provider fails
        """
        key = to_bytes(key, "key")
        if not key:
            raise ValidationError("HMAC key must not be empty")

        salted = self._salting.apply(data)
        try:
            mac = hmac.HMAC(key, self._algorithm.new())
            mac.update(salted)
            return mac.finalize()
        except UnsupportedAlgorithm as e:
            raise ProviderError(f"Keyed hash provider rejected {self._algorithm.name}: {e}") from e

    def verify_keyed_hash(self, key: BytesLike, data: BytesLike, expected_mac: bytes) -> bool:
        """Verify an HMAC using constant-time comparison"""
        return secrets.compare_digest(self.keyed_hash(key, data), to_bytes(expected_mac, "expected_mac"))

    # ------------------------------------------------------------------
    # Slow derivation
    # ------------------------------------------------------------------

    def derive_key(
        self,
        password: BytesLike,
        salt: BytesLike,
        params: Optional[DerivationParameters] = None,
    ) -> bytes:
        """
        Derive key material from a salted password with PBKDF2.

        The salting configuration is applied to the password; `salt` is the
        PBKDF2 salt. Without explicit params, iterations and output length
        come from settings and the algorithm is this service's algorithm.

        Raises:
            ValidationError: If explicit params name a different algorithm
                             than this service
        """
        if params is None:
            params = DerivationParameters.from_settings(algorithm=self._algorithm.name)
        elif not isinstance(params, DerivationParameters):
            raise ValidationError("params must be a DerivationParameters instance")
        elif params.algorithm != self._algorithm.name:
            raise ValidationError(
                f"Derivation parameters use {params.algorithm} but this service digests with "
                f"{self._algorithm.name}; use with_algorithm() to switch"
            )

        salted = self._salting.apply(password)
        return derive(salted, salt, params, metrics=self._metrics)

    def verify_derived_key(
        self,
        password: BytesLike,
        salt: BytesLike,
        expected_key: bytes,
        params: Optional[DerivationParameters] = None,
    ) -> bool:
        """Verify a derived key using constant-time comparison"""
        derived = self.derive_key(password, salt, params)
        matches = secrets.compare_digest(derived, to_bytes(expected_key, "expected_key"))
        if not matches:
            logger.info("derivation.verify_failed", algorithm=self._algorithm.name)
        return matches

    # ------------------------------------------------------------------
    # Duplication
    # ------------------------------------------------------------------

    def copy(self) -> "DigestService":
        return DigestService(self._algorithm.name, self._salting, metrics=self._metrics)

    def __copy__(self) -> "DigestService":
        return self.copy()

    def __deepcopy__(self, memo) -> "DigestService":
        return self.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, DigestService):
            return NotImplemented
        return self._algorithm == other._algorithm and self._salting == other._salting

    __hash__ = None

    def __repr__(self) -> str:
        return f"DigestService(algorithm={self.algorithm!r}, salting_mode={self._salting.mode.name})"
