"""
secretsmith Cryptographic Services Module

Provides composable utilities for secret material:
- Pluggable randomness sources
- Salted message digestion with nine salting modes
- PBKDF2 iterative key derivation
- Token, password, key and key pair generation
"""

from .algorithms import DIGEST_ALGORITHMS, DigestAlgorithm, get_digest_algorithm
from .derivation import DerivationParameters, IterativeDerivationEngine, derive
from .digest_service import DigestService
from .errors import (
    SecretsmithError,
    ValidationError,
    LengthError,
    RangeError,
    UnsupportedAlgorithmError,
    ProviderError,
)
from .keypair import KeyPairProvisioner
from .randomness import RandomnessSource, CryptoRandom, PseudoRandom
from .salting import SaltingConfig, SaltingEngine, SaltingMode, combine
from .secret_models import (
    Alphabet,
    SecretKind,
    SecretRequest,
    KeyPairAlgorithm,
    KeyPairSpec,
    KeyPairResult,
)
from .token_generator import TokenGenerator

__all__ = [
    "DIGEST_ALGORITHMS",
    "DigestAlgorithm",
    "get_digest_algorithm",
    "DerivationParameters",
    "IterativeDerivationEngine",
    "derive",
    "DigestService",
    "SecretsmithError",
    "ValidationError",
    "LengthError",
    "RangeError",
    "UnsupportedAlgorithmError",
    "ProviderError",
    "KeyPairProvisioner",
    "RandomnessSource",
    "CryptoRandom",
    "PseudoRandom",
    "SaltingConfig",
    "SaltingEngine",
    "SaltingMode",
    "combine",
    "Alphabet",
    "SecretKind",
    "SecretRequest",
    "KeyPairAlgorithm",
    "KeyPairSpec",
    "KeyPairResult",
    "TokenGenerator",
]
