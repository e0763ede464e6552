"""
Tests for PBKDF2 iterative derivation

Tests cover:
- RFC 6070 test vectors
- Agreement with hashlib.pbkdf2_hmac
- Output length across block boundaries
- Parameter validation before any hashing
- Engine reconfiguration and duplication
"""

import copy
import hashlib

import pytest
from cryptography.exceptions import UnsupportedAlgorithm

from secretsmith.config import Settings
from secretsmith.services.crypto import (
    DerivationParameters,
    IterativeDerivationEngine,
    LengthError,
    ProviderError,
    RangeError,
    UnsupportedAlgorithmError,
    ValidationError,
    derive,
)
from secretsmith.services.crypto import derivation as derivation_module


class TestRfc6070Vectors:
    """Test PBKDF2-HMAC-SHA1 against RFC 6070"""

    @pytest.mark.parametrize(
        "password, salt, iterations, length, expected",
        [
            (b"password", b"salt", 1, 20, "0c60c80f961f0e71f3a9b524af6012062fe037a6"),
            (b"password", b"salt", 2, 20, "ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957"),
            (b"password", b"salt", 4096, 20, "4b007901b765489abead49d926f721d065a429c1"),
            (
                b"passwordPASSWORDpassword",
                b"saltSALTsaltSALTsaltSALTsaltSALTsalt",
                4096,
                25,
                "3d2eec4fe41c849b80c8d83662c0e44a8b291a964cf2f07038",
            ),
            (b"pass\0word", b"sa\0lt", 4096, 16, "56fa6aa75548099dcc37d7f03425e0c3"),
        ],
    )
    def test_vector(self, password, salt, iterations, length, expected):
        """Test a published vector"""
        params = DerivationParameters(iterations=iterations, output_length=length, algorithm="sha1")

        assert derive(password, salt, params).hex() == expected


class TestDerivationOutput:
    """Test output length and determinism"""

    @pytest.mark.parametrize("algorithm", ["md5", "sha1", "sha256", "sha512"])
    @pytest.mark.parametrize("length", [1, 16, 32, 33, 64, 100])
    def test_matches_hashlib(self, algorithm, length):
        """Test agreement with the standard library implementation"""
        params = DerivationParameters(iterations=3, output_length=length, algorithm=algorithm)
        expected = hashlib.pbkdf2_hmac(algorithm, b"secret", b"pepper", 3, dklen=length)

        result = derive(b"secret", b"pepper", params)

        assert len(result) == length
        assert result == expected

    def test_str_inputs(self):
        """Test that str password and salt are UTF-8 encoded"""
        params = DerivationParameters(iterations=2, output_length=32)

        assert derive("pässword", "salt", params) == derive("pässword".encode(), b"salt", params)

    def test_deterministic(self):
        """Test that fixed inputs always derive the same key"""
        params = DerivationParameters(iterations=10, output_length=48, algorithm="sha256")

        assert derive(b"pw", b"salt", params) == derive(b"pw", b"salt", params)

    def test_iterations_change_output(self):
        """Test that the iteration count changes the output"""
        first = derive(b"pw", b"salt", DerivationParameters(iterations=10, output_length=32))
        second = derive(b"pw", b"salt", DerivationParameters(iterations=11, output_length=32))

        assert first != second

    def test_shorter_output_is_prefix(self):
        """Test that truncation keeps leading bytes"""
        long = derive(b"pw", b"salt", DerivationParameters(iterations=5, output_length=80))
        short = derive(b"pw", b"salt", DerivationParameters(iterations=5, output_length=20))

        assert long[:20] == short

    def test_sha3_output_length(self):
        """Test SHA-3 keyed derivation lengths"""
        params = DerivationParameters(iterations=2, output_length=70, algorithm="sha3-256")

        assert len(derive(b"pw", b"salt", params)) == 70

    def test_params_type_checked(self):
        """Test that raw dictionaries are not accepted as parameters"""
        with pytest.raises(ValidationError):
            derive(b"pw", b"salt", {"iterations": 1, "output_length": 1})

    def test_single_provider_call(self, monkeypatch):
        """Test that one derivation is one PBKDF2HMAC call with the validated parameters"""
        calls = []
        real_kdf = derivation_module.PBKDF2HMAC

        def recording_kdf(**kwargs):
            calls.append(kwargs)
            return real_kdf(**kwargs)

        monkeypatch.setattr(derivation_module, "PBKDF2HMAC", recording_kdf)
        params = DerivationParameters(iterations=1000, output_length=48, algorithm="sha512")

        key = derive(b"pw", b"salt", params)

        assert key == hashlib.pbkdf2_hmac("sha512", b"pw", b"salt", 1000, dklen=48)
        assert len(calls) == 1
        assert calls[0]["iterations"] == 1000
        assert calls[0]["length"] == 48
        assert calls[0]["salt"] == b"salt"
        assert calls[0]["algorithm"].name == "sha512"

    def test_provider_failure_wrapped(self, monkeypatch):
        """Test that provider rejections surface as ProviderError"""
        def failing_kdf(**kwargs):
            raise UnsupportedAlgorithm("digest disabled by provider")

        monkeypatch.setattr(derivation_module, "PBKDF2HMAC", failing_kdf)

        with pytest.raises(ProviderError, match="sha256") as exc_info:
            derive(b"pw", b"salt", DerivationParameters(iterations=1, output_length=16))

        assert isinstance(exc_info.value.__cause__, UnsupportedAlgorithm)


class TestDerivationParameters:
    """Test validated construction of parameters"""

    def test_iterations_below_one(self):
        """Test that zero or negative iterations raise RangeError"""
        with pytest.raises(RangeError, match="at least 1"):
            DerivationParameters(iterations=0, output_length=32)

        with pytest.raises(RangeError):
            DerivationParameters(iterations=-5, output_length=32)

        with pytest.raises(RangeError, match="must be an integer"):
            DerivationParameters(iterations="10", output_length=32)

    def test_output_length_below_one(self):
        """Test that zero or negative output length raise LengthError"""
        with pytest.raises(LengthError, match="at least 1"):
            DerivationParameters(iterations=1, output_length=0)

        with pytest.raises(LengthError):
            DerivationParameters(iterations=1, output_length=-1)

    def test_unknown_algorithm(self):
        """Test that unknown algorithm identifiers are rejected"""
        with pytest.raises(UnsupportedAlgorithmError, match="Unsupported digest algorithm"):
            DerivationParameters(iterations=1, output_length=16, algorithm="whirlpool")

    def test_algorithm_normalized(self):
        """Test case-insensitive algorithm aliases"""
        params = DerivationParameters(iterations=1, output_length=16, algorithm="SHA-512")

        assert params.algorithm == "sha512"

    def test_rejection_before_hashing(self, monkeypatch):
        """Test that invalid parameters never reach the key derivation provider"""
        calls = []
        monkeypatch.setattr(derivation_module, "PBKDF2HMAC", lambda *a, **k: calls.append(k))

        with pytest.raises(RangeError):
            derive(b"pw", b"salt", DerivationParameters(iterations=0, output_length=16))

        assert calls == []

    def test_from_settings(self):
        """Test building parameters from settings with overrides"""
        settings = Settings(PBKDF2_ITERATIONS=1000, PBKDF2_OUTPUT_LENGTH=24, DEFAULT_DIGEST_ALGORITHM="sha384")

        params = DerivationParameters.from_settings(settings)
        assert params.iterations == 1000
        assert params.output_length == 24
        assert params.algorithm == "sha384"

        params = DerivationParameters.from_settings(settings, iterations=5)
        assert params.iterations == 5


class TestIterativeDerivationEngine:
    """Test the engine bound to parameters and salt"""

    def test_derive_with_bound_salt(self):
        """Test that the engine uses its bound salt and parameters"""
        params = DerivationParameters(iterations=2, output_length=20, algorithm="sha1")
        engine = IterativeDerivationEngine(params, salt=b"salt")

        assert engine.derive(b"password") == derive(b"password", b"salt", params)
        assert engine.derive(b"password", salt=b"other") == derive(b"password", b"other", params)

    def test_with_parameters_revalidates(self):
        """Test that reconfiguration validates and returns a new engine"""
        engine = IterativeDerivationEngine(DerivationParameters(iterations=2, output_length=16), salt=b"s")

        changed = engine.with_parameters(iterations=3)
        assert changed.parameters.iterations == 3
        assert engine.parameters.iterations == 2

        with pytest.raises(LengthError):
            engine.with_parameters(output_length=0)

    def test_duplicate_isolation(self):
        """Test that duplicates start equal and stay independent"""
        engine = IterativeDerivationEngine(DerivationParameters(iterations=2, output_length=16), salt=b"s")
        before = engine.derive(b"pw")

        for duplicate in (engine.copy(), copy.copy(engine), copy.deepcopy(engine)):
            assert duplicate == engine
            assert duplicate.derive(b"pw") == before

            duplicate.with_parameters(iterations=9, salt=b"other")
            assert engine.derive(b"pw") == before
