"""Cryptographic helpers."""

from . import codec
from .asymmetric import OAEP_SHA256, OAEP_SHA256_MGF1_SHA1, AsymmetricCipher, decrypt_text, encrypt_text
from .keys import KeyPair, load_private_key, load_public_key
from .symmetric import SymmetricCipher, SymmetricSecret

__all__ = [
    "codec",
    "AsymmetricCipher",
    "OAEP_SHA256",
    "OAEP_SHA256_MGF1_SHA1",
    "encrypt_text",
    "decrypt_text",
    "KeyPair",
    "load_public_key",
    "load_private_key",
    "SymmetricCipher",
    "SymmetricSecret",
]
