"""
Asymmetric key pair provisioning

Delegates key generation to the cryptography provider and encodes both
halves as base64 DER (PKCS8 private key, SubjectPublicKeyInfo public key).
"""

from base64 import b64encode

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, rsa

from ...logging import get_logger
from .errors import ProviderError, ValidationError
from .secret_models import KeyPairAlgorithm, KeyPairResult, KeyPairSpec

logger = get_logger()

RSA_PUBLIC_EXPONENT = 65537


class KeyPairProvisioner:
    """
    Generates and encodes asymmetric key pairs for validated specs.

    Provider failures are surfaced as ProviderError and never retried.
    """

    def provision(self, spec: KeyPairSpec) -> KeyPairResult:
        """
        Generate a key pair.

        Args:
            spec: Validated key pair spec

        Returns:
            KeyPairResult with both halves populated

        Raises:
            ValidationError: If spec is not a KeyPairSpec
            ProviderError: If key generation or serialization fails
        """
        if not isinstance(spec, KeyPairSpec):
            raise ValidationError("spec must be a KeyPairSpec instance")

        try:
            private_key = self._generate(spec)
            private_der = private_key.private_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
            public_der = private_key.public_key().public_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        except (UnsupportedAlgorithm, ValueError, TypeError) as e:
            logger.error(
                "keypair.provider_failed",
                algorithm=spec.algorithm.value,
                bit_length=spec.bit_length,
                error=str(e),
            )
            raise ProviderError(
                f"Key pair provider failed for {spec.algorithm.value.upper()}-{spec.bit_length}: {e}"
            ) from e

        logger.info(
            "keypair.generated",
            algorithm=spec.algorithm.value,
            bit_length=spec.bit_length,
        )

        return KeyPairResult(
            private=b64encode(private_der).decode("ascii"),
            public=b64encode(public_der).decode("ascii"),
            algorithm=spec.algorithm,
            bit_length=spec.bit_length,
        )

    @staticmethod
    def _generate(spec: KeyPairSpec):
        if spec.algorithm is KeyPairAlgorithm.RSA:
            return rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=spec.bit_length,
            )
        return dsa.generate_private_key(key_size=spec.bit_length)
