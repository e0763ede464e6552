"""
Digest algorithm table

Maps an algorithm identifier to the cryptography hash class that implements
it. Digest wrappers and the iterative derivation loop look algorithms up
here instead of subclassing per algorithm.
"""

from typing import Dict, NamedTuple, Type

from cryptography.hazmat.primitives import hashes

from .errors import UnsupportedAlgorithmError


class DigestAlgorithm(NamedTuple):
    name: str
    hash_class: Type[hashes.HashAlgorithm]
    digest_size: int

    def new(self) -> hashes.HashAlgorithm:
        return self.hash_class()


DIGEST_ALGORITHMS: Dict[str, DigestAlgorithm] = {
    algorithm.name: algorithm
    for algorithm in (
        DigestAlgorithm("md5", hashes.MD5, 16),
        DigestAlgorithm("sha1", hashes.SHA1, 20),
        DigestAlgorithm("sha224", hashes.SHA224, 28),
        DigestAlgorithm("sha256", hashes.SHA256, 32),
        DigestAlgorithm("sha384", hashes.SHA384, 48),
        DigestAlgorithm("sha512", hashes.SHA512, 64),
        DigestAlgorithm("sha3-224", hashes.SHA3_224, 28),
        DigestAlgorithm("sha3-256", hashes.SHA3_256, 32),
        DigestAlgorithm("sha3-384", hashes.SHA3_384, 48),
        DigestAlgorithm("sha3-512", hashes.SHA3_512, 64),
    )
}

_ALIASES = {
    "sha-1": "sha1",
    "sha-224": "sha224",
    "sha-256": "sha256",
    "sha-384": "sha384",
    "sha-512": "sha512",
    "sha3_224": "sha3-224",
    "sha3_256": "sha3-256",
    "sha3_384": "sha3-384",
    "sha3_512": "sha3-512",
}


def normalize_algorithm_name(name) -> str:
    """
    Return the canonical identifier for an algorithm name.

    Raises:
        UnsupportedAlgorithmError: If the name is not a known string identifier
    """
    if not isinstance(name, str):
        raise UnsupportedAlgorithmError(
            f"Digest algorithm must be a string identifier, got {type(name).__name__}"
        )
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    if key not in DIGEST_ALGORITHMS:
        raise UnsupportedAlgorithmError(
            f"Unsupported digest algorithm '{name}'. "
            f"Supported: {', '.join(sorted(DIGEST_ALGORITHMS))}"
        )
    return key


def get_digest_algorithm(name) -> DigestAlgorithm:
    """Look up a digest algorithm by (case-insensitive) identifier"""
    return DIGEST_ALGORITHMS[normalize_algorithm_name(name)]
