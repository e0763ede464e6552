"""
TokenGenerator for passwords, tokens, salts, keys and key pairs
"""

import copy
from typing import Optional, Union

from ...logging import get_logger
from .errors import LengthError, ProviderError, SecretsmithError, ValidationError
from .keypair import KeyPairProvisioner
from .randomness import CryptoRandom, PseudoRandom, RandomnessSource
from .secret_models import (
    Alphabet,
    KeyPairAlgorithm,
    KeyPairResult,
    KeyPairSpec,
    SecretKind,
    SecretRequest,
)

logger = get_logger()


def default_randomness_source(settings=None) -> RandomnessSource:
    """
    Build the randomness source selected by settings.

    Returns CryptoRandom unless RANDOMNESS_SOURCE is "pseudo".
    """
    if settings is None:
        from ...config import get_settings
        settings = get_settings()

    if settings.RANDOMNESS_SOURCE == "pseudo":
        return PseudoRandom(settings.PSEUDO_RANDOM_SEED)
    return CryptoRandom()


class TokenGenerator:
    """
    Generator of typed secret material

    Provides:
    - Password and token strings over fixed alphabets
    - Hashing salts and keys
    - Symmetric encryption keys and initialization vectors
    - Asymmetric key pairs (RSA, DSA)

    All length parameters are the requested output length in characters or
    bytes. Every request is validated before any randomness is consumed.
    """

    def __init__(
        self,
        randomness_source: Optional[RandomnessSource] = None,
        metrics=None,
        provisioner: Optional[KeyPairProvisioner] = None,
    ):
        """
        Initialize TokenGenerator

        Args:
            randomness_source: Source of entropy (defaults from settings)
            metrics: Optional Metrics instance
            provisioner: Key pair provisioner (creates new if not provided)
        """
        if randomness_source is None:
            randomness_source = default_randomness_source()
        elif not isinstance(randomness_source, RandomnessSource):
            raise ValidationError("randomness_source must be a RandomnessSource instance")

        self._randomness = randomness_source
        self._metrics = metrics
        self._provisioner = provisioner or KeyPairProvisioner()

    @property
    def randomness_source(self) -> RandomnessSource:
        return self._randomness

    def with_randomness_source(self, randomness_source: RandomnessSource) -> "TokenGenerator":
        """Return a new generator drawing from another randomness source"""
        if not isinstance(randomness_source, RandomnessSource):
            raise ValidationError("randomness_source must be a RandomnessSource instance")
        return TokenGenerator(
            randomness_source,
            metrics=self._metrics,
            provisioner=self._provisioner,
        )

    # ------------------------------------------------------------------
    # String secrets
    # ------------------------------------------------------------------

    def get_token_string(self, length: int, use_fast_alphabet: bool = False) -> str:
        """
        Generate an opaque token string.

        Args:
            length: Output length in characters
            use_fast_alphabet: Use the narrow alphanumeric alphabet instead
                               of the full printable ASCII set

        Raises:
            LengthError: If length is not positive
        """
        alphabet = Alphabet.ALPHANUMERIC if use_fast_alphabet else Alphabet.PRINTABLE
        return self._generate(SecretKind.TOKEN, length, alphabet)

    def get_password_string(self, length: int, use_fast_alphabet: bool = False) -> str:
        """
        Generate a password string.

        Args:
            length: Output length in characters
            use_fast_alphabet: Use letters and digits only, which is easier
                               to type by hand

        Raises:
            LengthError: If length is not positive
        """
        alphabet = Alphabet.ALPHANUMERIC if use_fast_alphabet else Alphabet.PRINTABLE
        return self._generate(SecretKind.PASSWORD, length, alphabet)

    # ------------------------------------------------------------------
    # Hashing and encryption material
    # ------------------------------------------------------------------

    def get_hashing_salt(self, length: int, printable: bool = True) -> Union[str, bytes]:
        """Generate a salt for digestion: printable ASCII or raw bytes"""
        alphabet = Alphabet.PRINTABLE if printable else Alphabet.BYTES
        return self._generate(SecretKind.HASHING_SALT, length, alphabet)

    def get_hashing_key(self, length: int, printable: bool = True) -> Union[str, bytes]:
        """Generate a key for keyed digestion: printable ASCII or raw bytes"""
        alphabet = Alphabet.PRINTABLE if printable else Alphabet.BYTES
        return self._generate(SecretKind.HASHING_KEY, length, alphabet)

    def get_encryption_key(self, length: int, printable: bool = False) -> Union[bytes, str]:
        """Generate a symmetric key: raw bytes or hexadecimal characters"""
        alphabet = Alphabet.HEXADECIMAL if printable else Alphabet.BYTES
        return self._generate(SecretKind.ENCRYPTION_KEY, length, alphabet)

    def get_encryption_initialization_vector(self, length: int, printable: bool = False) -> Union[bytes, str]:
        """Generate an initialization vector: raw bytes or hexadecimal characters"""
        alphabet = Alphabet.HEXADECIMAL if printable else Alphabet.BYTES
        return self._generate(SecretKind.INITIALIZATION_VECTOR, length, alphabet)

    # ------------------------------------------------------------------
    # Asymmetric key pairs
    # ------------------------------------------------------------------

    def get_asymmetric_key_pair(
        self,
        bit_length: Optional[int] = None,
        algorithm: Union[str, KeyPairAlgorithm] = KeyPairAlgorithm.RSA,
    ) -> KeyPairResult:
        """
        Generate an asymmetric key pair.

        Args:
            bit_length: Key size in bits (DEFAULT_KEY_PAIR_BITS setting if omitted)
            algorithm: Family tag ("rsa" or "dsa")

        Returns:
            KeyPairResult with base64 encoded private and public keys

        Raises:
            UnsupportedAlgorithmError: If the family tag is not recognized
            RangeError: If the size is not in the family's supported table
            ProviderError: If key generation fails
        """
        if bit_length is None:
            from ...config import get_settings
            bit_length = get_settings().DEFAULT_KEY_PAIR_BITS

        try:
            spec = KeyPairSpec(bit_length=bit_length, algorithm=algorithm)
            result = self._provisioner.provision(spec)
        except SecretsmithError as e:
            self._record_error(e)
            raise

        if self._metrics is not None:
            self._metrics.record_secret_generated(SecretKind.KEY_PAIR.value, spec.bit_length)
        return result

    # ------------------------------------------------------------------
    # Request dispatch
    # ------------------------------------------------------------------

    def generate(self, request: SecretRequest) -> Union[str, bytes, KeyPairResult]:
        """
        Generate the secret described by a SecretRequest.

        For salts, keys and IVs, request.printable overrides the per-kind
        default alphabet when set.
        """
        if not isinstance(request, SecretRequest):
            raise ValidationError("request must be a SecretRequest instance")

        kind = request.kind
        if kind is SecretKind.KEY_PAIR:
            return self.get_asymmetric_key_pair(request.bit_length, request.algorithm)
        if kind is SecretKind.TOKEN:
            return self.get_token_string(request.length, request.use_fast_alphabet)
        if kind is SecretKind.PASSWORD:
            return self.get_password_string(request.length, request.use_fast_alphabet)

        handlers = {
            SecretKind.HASHING_SALT: (self.get_hashing_salt, True),
            SecretKind.HASHING_KEY: (self.get_hashing_key, True),
            SecretKind.ENCRYPTION_KEY: (self.get_encryption_key, False),
            SecretKind.INITIALIZATION_VECTOR: (self.get_encryption_initialization_vector, False),
        }
        handler, default_printable = handlers[kind]
        printable = default_printable if request.printable is None else request.printable
        return handler(request.length, printable)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _generate(self, kind: SecretKind, length: int, alphabet: Alphabet) -> Union[str, bytes]:
        if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
            error = LengthError(f"Requested {kind.value} length must be a positive integer")
            self._record_error(error)
            raise error

        try:
            if alphabet is Alphabet.BYTES:
                secret = self._randomness.get_bytes(length)
            else:
                secret = self._map_to_alphabet(length, alphabet.characters)
        except SecretsmithError as e:
            self._record_error(e)
            raise

        if len(secret) != length:
            error = ProviderError(
                f"Randomness source produced {len(secret)} units for a {length} unit {kind.value}"
            )
            self._record_error(error)
            raise error

        if self._metrics is not None:
            self._metrics.record_secret_generated(kind.value, length)

        logger.debug(
            "secret.generated",
            kind=kind.value,
            alphabet=alphabet.value,
            length=length,
        )
        return secret

    def _map_to_alphabet(self, length: int, characters: str) -> str:
        upper = len(characters) - 1
        return "".join(
            characters[self._randomness.get_int(0, upper)]
            for _ in range(length)
        )

    def _record_error(self, error: Exception) -> None:
        if self._metrics is not None:
            self._metrics.record_error(type(error).__name__)
        logger.warning("secret.rejected", error_type=type(error).__name__, error=str(error))

    # ------------------------------------------------------------------
    # Duplication
    # ------------------------------------------------------------------

    def copy(self) -> "TokenGenerator":
        """
        Return an independent duplicate.

        The randomness source is deep-copied so that drawing from or
        reseeding the duplicate never changes the original's output.
        """
        return TokenGenerator(
            copy.deepcopy(self._randomness),
            metrics=self._metrics,
            provisioner=self._provisioner,
        )

    def __copy__(self) -> "TokenGenerator":
        return self.copy()

    def __deepcopy__(self, memo) -> "TokenGenerator":
        return self.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, TokenGenerator):
            return NotImplemented
        return self._randomness == other._randomness

    __hash__ = None
