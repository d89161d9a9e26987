"""
Block Cipher Engine

This module wraps the pycryptodomex block-cipher primitives behind a small
engine bound to one (cipher, mode) pair. It knows the IV and key sizes for
each pair and applies the zero-byte padding used by the envelope format.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from Cryptodome.Cipher import AES, DES3, Blowfish, CAST

logger = logging.getLogger(__name__)


class Cipher(str, Enum):
    """Supported block ciphers."""
    AES = 'aes'
    DES3 = 'des3'
    BLOWFISH = 'blowfish'
    CAST = 'cast'


class Mode(str, Enum):
    """
    Supported block chaining modes.

    CFB uses 8-bit feedback segments, NCFB and NOFB feed back a full block.
    CTR treats the whole IV as the initial counter block.
    """
    ECB = 'ecb'
    CBC = 'cbc'
    CFB = 'cfb'
    NCFB = 'ncfb'
    NOFB = 'nofb'
    CTR = 'ctr'


_CIPHER_MODULES = {
    Cipher.AES: AES,
    Cipher.DES3: DES3,
    Cipher.BLOWFISH: Blowfish,
    Cipher.CAST: CAST,
}

def _module_for(cipher: Cipher):
    return _CIPHER_MODULES[Cipher(cipher)]


def block_size(cipher: Cipher) -> int:
    """Return the block size of the cipher in bytes."""
    return _module_for(cipher).block_size


def iv_size(cipher: Cipher, mode: Mode) -> int:
    """
    Return the IV size in bytes for a cipher/mode pair.

    Every mode uses a full block. ECB ignores the IV but one is still
    generated and carried so the envelope layout does not depend on the mode.

    Args:
        cipher: The block cipher
        mode: The chaining mode

    Returns:
        The IV length in bytes
    """
    Mode(mode)
    return block_size(cipher)


def max_key_size(cipher: Cipher, mode: Mode) -> int:
    """
    Return the largest key in bytes accepted for a cipher/mode pair.

    Args:
        cipher: The block cipher
        mode: The chaining mode

    Returns:
        The maximum key length in bytes
    """
    Mode(mode)
    return max(_module_for(cipher).key_size)


def pad_zero(data: bytes, size: int) -> bytes:
    """Pad data with NUL bytes up to the next multiple of size."""
    remainder = len(data) % size
    if remainder == 0:
        return data
    return data + b'\x00' * (size - remainder)


def strip_padding(data: bytes) -> bytes:
    """
    Remove the trailing NUL padding added on encryption.

    Plaintexts that legitimately end in NUL bytes lose them here.
    """
    return data.rstrip(b'\x00')


class CipherEngine:
    """
    Encrypt/decrypt primitive bound to one cipher and chaining mode.

    The engine holds no key material. A fresh primitive object is built for
    each call, so one engine can be shared between threads.
    """

    def __init__(self, cipher: Cipher = Cipher.AES, mode: Mode = Mode.CBC):
        """
        Initialize the engine for a cipher/mode pair.

        Args:
            cipher: The block cipher (default: AES)
            mode: The chaining mode (default: CBC)
        """
        self.cipher = Cipher(cipher)
        self.mode = Mode(mode)
        self._module = _module_for(self.cipher)

        self.block_size = self._module.block_size
        self.iv_size = iv_size(self.cipher, self.mode)
        self.max_key_size = max_key_size(self.cipher, self.mode)

    def __repr__(self) -> str:
        return f"CipherEngine(cipher={self.cipher.value!r}, mode={self.mode.value!r})"

    def _new(self, key: bytes, iv: Optional[bytes]):
        """
        Build a primitive object for one encryption or decryption.

        Args:
            key: The cipher key
            iv: The initialization vector (ignored for ECB)

        Returns:
            A pycryptodomex cipher object
        """
        module = self._module

        if self.mode is Mode.ECB:
            return module.new(key, module.MODE_ECB)

        if iv is None or len(iv) != self.iv_size:
            raise ValueError(f"IV must be exactly {self.iv_size} bytes")

        if self.mode is Mode.CBC:
            return module.new(key, module.MODE_CBC, iv=iv)
        if self.mode is Mode.CFB:
            return module.new(key, module.MODE_CFB, iv=iv, segment_size=8)
        if self.mode is Mode.NCFB:
            return module.new(key, module.MODE_CFB, iv=iv,
                              segment_size=self.block_size * 8)
        if self.mode is Mode.NOFB:
            return module.new(key, module.MODE_OFB, iv=iv)
        # CTR: the IV fills the whole counter block
        return module.new(key, module.MODE_CTR, nonce=b'', initial_value=iv)

    def check_key(self, key: bytes) -> None:
        """
        Verify that the primitive accepts the key.

        Args:
            key: The cipher key

        Raises:
            ValueError: If the key length or value is rejected
        """
        self._module.new(key, self._module.MODE_ECB)

    def encrypt(self, key: bytes, plaintext: bytes, iv: bytes) -> bytes:
        """
        Encrypt plaintext after zero-padding it to the block boundary.

        Args:
            key: The cipher key
            plaintext: The data to encrypt
            iv: The initialization vector

        Returns:
            Ciphertext whose length is a multiple of the block size
        """
        data = pad_zero(plaintext, self.block_size)
        return self._new(key, iv).encrypt(data)

    def decrypt(self, key: bytes, ciphertext: bytes, iv: bytes) -> bytes:
        """
        Decrypt ciphertext, leaving any zero padding in place.

        Args:
            key: The cipher key
            ciphertext: The encrypted data
            iv: The initialization vector

        Returns:
            The padded plaintext

        Raises:
            ValueError: If the ciphertext is not a whole number of blocks
                or the IV has the wrong length
        """
        if len(ciphertext) % self.block_size != 0:
            raise ValueError(
                f"Ciphertext length must be a multiple of {self.block_size} bytes")

        return self._new(key, iv).decrypt(ciphertext)


_ENGINES: Dict[tuple, CipherEngine] = {}


def get_engine(cipher: Cipher, mode: Mode) -> CipherEngine:
    """Return a shared engine for the cipher/mode pair."""
    pair = (Cipher(cipher), Mode(mode))
    engine = _ENGINES.get(pair)
    if engine is None:
        logger.debug("Creating cipher engine for %s/%s", pair[0].value, pair[1].value)
        engine = _ENGINES.setdefault(pair, CipherEngine(*pair))
    return engine


def encrypt(key: bytes, plaintext: bytes, iv: bytes,
            cipher: Cipher = Cipher.AES,
            mode: Mode = Mode.CBC) -> bytes:
    """
    Convenience function to encrypt with a cipher/mode pair.

    Args:
        key: The cipher key
        plaintext: The data to encrypt
        iv: The initialization vector
        cipher: The block cipher (default: AES)
        mode: The chaining mode (default: CBC)

    Returns:
        The ciphertext
    """
    return get_engine(cipher, mode).encrypt(key, plaintext, iv)


def decrypt(key: bytes, ciphertext: bytes, iv: bytes,
            cipher: Cipher = Cipher.AES,
            mode: Mode = Mode.CBC) -> bytes:
    """
    Convenience function to decrypt with a cipher/mode pair.

    Args:
        key: The cipher key
        ciphertext: The encrypted data
        iv: The initialization vector
        cipher: The block cipher (default: AES)
        mode: The chaining mode (default: CBC)

    Returns:
        The padded plaintext
    """
    return get_engine(cipher, mode).decrypt(key, ciphertext, iv)
