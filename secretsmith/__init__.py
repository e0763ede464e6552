"""
secretsmith - randomness sources, salted digestion, key derivation and
secret generation on top of the cryptography provider.
"""

__version__ = "0.1.0"
