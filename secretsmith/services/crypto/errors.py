"""
Exception taxonomy for secretsmith cryptographic services
"""


class SecretsmithError(Exception):
    """Base exception for cryptographic toolkit operations"""
    pass


class ValidationError(SecretsmithError):
    """Raised when malformed input is passed to a pure function"""
    pass


class LengthError(SecretsmithError):
    """Raised when a requested output length is not positive"""
    pass


class RangeError(SecretsmithError):
    """Raised when a numeric parameter is outside its supported set"""
    pass


class UnsupportedAlgorithmError(SecretsmithError):
    """Raised when an algorithm or family tag is not recognized"""
    pass


class ProviderError(SecretsmithError):
    """Raised when the randomness, hash or key pair provider fails"""
    pass
