"""
Secret models and schemas for token and key material generation
"""

import string
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import LengthError, RangeError, UnsupportedAlgorithmError, ValidationError


class Alphabet(str, Enum):
    """
    Character sets used to render random draws as output
    """
    ALPHANUMERIC = "alphanumeric"
    HEXADECIMAL = "hexadecimal"
    PRINTABLE = "printable"
    BYTES = "bytes"

    @property
    def characters(self) -> Optional[str]:
        """The character set, or None for raw bytes"""
        return _ALPHABET_CHARACTERS[self]


_ALPHABET_CHARACTERS = {
    Alphabet.ALPHANUMERIC: string.ascii_letters + string.digits,
    Alphabet.HEXADECIMAL: "0123456789abcdef",
    # ASCII 33..126: letters, digits and punctuation without whitespace
    Alphabet.PRINTABLE: "".join(chr(code) for code in range(33, 127)),
    Alphabet.BYTES: None,
}


class SecretKind(str, Enum):
    """
    Kinds of secret material the token generator can produce
    """
    PASSWORD = "password"
    TOKEN = "token"
    HASHING_SALT = "hashing_salt"
    HASHING_KEY = "hashing_key"
    ENCRYPTION_KEY = "encryption_key"
    INITIALIZATION_VECTOR = "initialization_vector"
    KEY_PAIR = "key_pair"


class KeyPairAlgorithm(str, Enum):
    """
    Supported asymmetric key pair families
    """
    RSA = "rsa"
    DSA = "dsa"


RSA_MIN_BITS = 1024
RSA_MAX_BITS = 15360
RSA_BITS_STEP = 128

KEY_PAIR_1024_BITS = 1024
KEY_PAIR_2048_BITS = 2048
KEY_PAIR_3072_BITS = 3072
KEY_PAIR_4096_BITS = 4096

DSA_BITS = (KEY_PAIR_1024_BITS, KEY_PAIR_2048_BITS, KEY_PAIR_3072_BITS, KEY_PAIR_4096_BITS)


def supported_key_sizes(algorithm: KeyPairAlgorithm) -> tuple:
    """
    Discrete table of supported key sizes for a family
    """
    if algorithm is KeyPairAlgorithm.RSA:
        return tuple(range(RSA_MIN_BITS, RSA_MAX_BITS + 1, RSA_BITS_STEP))
    return DSA_BITS


def normalize_key_pair_algorithm(algorithm) -> KeyPairAlgorithm:
    """
    Resolve an algorithm tag to its family.

    Raises:
        UnsupportedAlgorithmError: If the tag is not a recognized scalar
    """
    if isinstance(algorithm, KeyPairAlgorithm):
        return algorithm
    if not isinstance(algorithm, str):
        raise UnsupportedAlgorithmError(
            f"Key pair algorithm must be a string tag, got {type(algorithm).__name__}"
        )
    try:
        return KeyPairAlgorithm(algorithm.strip().lower())
    except ValueError:
        raise UnsupportedAlgorithmError(
            f"Unsupported key pair algorithm '{algorithm}'. "
            f"Supported: {', '.join(a.value for a in KeyPairAlgorithm)}"
        )


def validate_key_size(bit_length, algorithm: KeyPairAlgorithm) -> int:
    """
    Check a key size against the family's supported table.

    Raises:
        RangeError: If the size is not an integer, too small, too large or
                    not an allowed increment
    """
    if isinstance(bit_length, bool) or not isinstance(bit_length, int):
        raise RangeError(f"Key size must be an integer, got {type(bit_length).__name__}")

    sizes = supported_key_sizes(algorithm)
    if bit_length < sizes[0]:
        raise RangeError(
            f"Key size {bit_length} is too small for {algorithm.value.upper()} "
            f"(minimum {sizes[0]} bits)"
        )
    if bit_length > sizes[-1]:
        raise RangeError(
            f"Key size {bit_length} is too large for {algorithm.value.upper()} "
            f"(maximum {sizes[-1]} bits)"
        )
    if bit_length not in sizes:
        raise RangeError(
            f"Key size {bit_length} is not supported for {algorithm.value.upper()}"
        )
    return bit_length


class KeyPairSpec(BaseModel):
    """
    Validated asymmetric key pair request
    """
    model_config = ConfigDict(frozen=True)

    bit_length: int = KEY_PAIR_4096_BITS
    algorithm: KeyPairAlgorithm = KeyPairAlgorithm.RSA

    @model_validator(mode="before")
    @classmethod
    def validate_spec(cls, values):
        if not isinstance(values, dict):
            return values
        values = dict(values)
        # Family first: the size table depends on it
        algorithm = normalize_key_pair_algorithm(values.get("algorithm", KeyPairAlgorithm.RSA))
        values["bit_length"] = validate_key_size(
            values.get("bit_length", KEY_PAIR_4096_BITS), algorithm
        )
        values["algorithm"] = algorithm
        return values


class KeyPairResult(BaseModel):
    """
    Encoded asymmetric key pair; both halves are always present
    """
    model_config = ConfigDict(frozen=True)

    private: str = Field(..., description="Base64 PKCS8 DER private key")
    public: str = Field(..., description="Base64 SubjectPublicKeyInfo DER public key")
    algorithm: KeyPairAlgorithm
    bit_length: int

    @model_validator(mode="after")
    def validate_both_halves(self):
        if not self.private or not self.public:
            raise ValidationError("Key pair must carry both private and public key material")
        return self


class SecretRequest(BaseModel):
    """
    Request descriptor for a single secret
    """
    model_config = ConfigDict(frozen=True)

    kind: SecretKind
    length: int = 0
    use_fast_alphabet: bool = False
    printable: Optional[bool] = None
    bit_length: int = KEY_PAIR_4096_BITS
    algorithm: KeyPairAlgorithm = KeyPairAlgorithm.RSA

    @model_validator(mode="before")
    @classmethod
    def validate_request(cls, values):
        if not isinstance(values, dict):
            return values
        values = dict(values)

        kind = values.get("kind")
        try:
            kind = SecretKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown secret kind: {kind!r}")
        values["kind"] = kind

        if kind is SecretKind.KEY_PAIR:
            algorithm = normalize_key_pair_algorithm(values.get("algorithm", KeyPairAlgorithm.RSA))
            values["bit_length"] = validate_key_size(
                values.get("bit_length", KEY_PAIR_4096_BITS), algorithm
            )
            values["algorithm"] = algorithm
        else:
            length = values.get("length", 0)
            if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
                raise LengthError("Requested length must be a positive integer")
        return values
