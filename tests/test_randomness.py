"""
Tests for randomness sources

Tests cover:
- Integer range generation and validation
- Byte generation and short-read detection
- Seeded reproducibility
- Duplication isolation
"""

import copy

import pytest

from secretsmith.services.crypto import (
    CryptoRandom,
    LengthError,
    ProviderError,
    PseudoRandom,
    RandomnessSource,
    RangeError,
)


class ShortReadSource(RandomnessSource):
    """Source whose provider returns one byte too few"""

    def _random_int(self, from_, to):
        return from_

    def _random_bytes(self, length):
        return b"\0" * (length - 1)


class TestCryptoRandom:
    """Test the operating system backed source"""

    def test_get_int_within_range(self):
        """Test integers stay inside the inclusive range"""
        source = CryptoRandom()

        values = [source.get_int(3, 7) for _ in range(200)]
        assert all(3 <= v <= 7 for v in values)
        assert set(values) == {3, 4, 5, 6, 7}

    def test_get_int_single_value_range(self):
        """Test a degenerate range"""
        assert CryptoRandom().get_int(5, 5) == 5

    def test_get_int_default_upper_border(self):
        """Test the default range uses max_number"""
        source = CryptoRandom()

        assert 0 <= source.get_int() <= source.max_number

    def test_get_int_invalid_range(self):
        """Test invalid ranges raise RangeError"""
        source = CryptoRandom()

        with pytest.raises(RangeError, match="must not exceed"):
            source.get_int(10, 1)

        with pytest.raises(RangeError, match="must be integers"):
            source.get_int(0, 1.5)

        with pytest.raises(RangeError, match="within"):
            source.get_int(0, source.max_number + 1)

    def test_get_bytes_length(self):
        """Test exact byte lengths"""
        source = CryptoRandom()

        for length in [1, 16, 32, 64, 128]:
            assert len(source.get_bytes(length)) == length

    def test_get_bytes_randomness(self):
        """Test that outputs differ (highly probable)"""
        source = CryptoRandom()
        values = [source.get_bytes(32) for _ in range(10)]

        assert len(set(values)) == len(values)

    def test_get_bytes_invalid_length(self):
        """Test non-positive lengths raise LengthError"""
        source = CryptoRandom()

        with pytest.raises(LengthError):
            source.get_bytes(0)

        with pytest.raises(LengthError):
            source.get_bytes(-1)

    def test_copy_is_equal(self):
        """Test CryptoRandom duplicates compare equal"""
        source = CryptoRandom()

        assert source.copy() == source
        assert copy.copy(source) is not source


class TestPseudoRandom:
    """Test the seedable source"""

    def test_same_seed_same_stream(self):
        """Test reproducibility for identical seeds"""
        first = PseudoRandom(1234)
        second = PseudoRandom(1234)

        assert first.get_bytes(32) == second.get_bytes(32)
        assert [first.get_int(0, 100) for _ in range(10)] == [second.get_int(0, 100) for _ in range(10)]

    def test_different_seed_different_stream(self):
        """Test that different seeds diverge"""
        assert PseudoRandom(1).get_bytes(32) != PseudoRandom(2).get_bytes(32)

    def test_reseed_restarts_stream(self):
        """Test that reseeding restarts the sequence"""
        source = PseudoRandom(99)
        first = source.get_bytes(16)

        source.seed(99)
        assert source.get_bytes(16) == first
        assert source.current_seed == 99

    def test_invalid_seed(self):
        """Test non-integer seeds raise RangeError"""
        with pytest.raises(RangeError):
            PseudoRandom("seed")

    def test_unseeded_sources_differ(self):
        """Test that omitted seeds are drawn randomly"""
        assert PseudoRandom().current_seed != PseudoRandom().current_seed

    @pytest.mark.parametrize("duplicate", [lambda s: s.copy(), copy.copy, copy.deepcopy])
    def test_duplicate_isolation(self, duplicate):
        """Test that duplicates share state at first and never alias it"""
        source = PseudoRandom(42)
        source.get_bytes(8)
        clone = duplicate(source)

        assert clone == source
        assert clone.get_bytes(16) == source.get_bytes(16)

        clone.seed(7)
        clone.get_bytes(100)

        reference = PseudoRandom(42)
        reference.get_bytes(8)
        reference.get_bytes(16)
        assert source.get_bytes(16) == reference.get_bytes(16)


class TestProviderFailure:
    """Test detection of misbehaving providers"""

    def test_short_read(self):
        """Test that a short read raises ProviderError"""
        with pytest.raises(ProviderError, match="returned 3 bytes, expected 4"):
            ShortReadSource().get_bytes(4)
