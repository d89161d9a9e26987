"""
Cipher Core Package

This package implements the cipher engine used by the envelope codec:
the block-cipher primitives, IV and key sizes for each cipher/mode pair,
zero-byte padding, and the random source for initialization vectors.
"""

from .block_cipher import (
    Cipher, Mode, CipherEngine, get_engine, encrypt, decrypt,
    iv_size, max_key_size, block_size, strip_padding,
)
from .entropy import generate_iv, random_source

__all__ = [
    'Cipher', 'Mode', 'CipherEngine', 'get_engine', 'encrypt', 'decrypt',
    'iv_size', 'max_key_size', 'block_size', 'strip_padding',
    'generate_iv', 'random_source',
]
