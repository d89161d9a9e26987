"""
Authenticated Envelope Codec

This module encrypts a payload and binds a tamper signature to it. The
result is a single ASCII string:

    base64(signature) <delimiter> base64(iv || ciphertext)

where the signature is a lowercase hex digest. Decoding verifies the
signature and returns None for any malformed, corrupted or tampered input.
"""

import base64
import binascii
import logging
from typing import Optional, Union

from ..cipher_core.block_cipher import get_engine, strip_padding
from ..cipher_core.entropy import generate_iv
from ..config import CipherConfig
from ..errors import DecodeError, InvalidEncoding, TamperedOrInvalid
from ..signing.auth import (
    SignatureScheme, sign_ciphertext, sign_plaintext, verify_signature,
)

logger = logging.getLogger(__name__)

_URLSAFE_ALTCHARS = b'-_'


class EnvelopeCodec:
    """
    Encrypts payloads into signed envelopes and decodes them back.

    An instance owns one CipherConfig for its whole lifetime and keeps no
    other state, so it can be shared between threads.
    """

    def __init__(self, config: CipherConfig):
        """
        Initialize the codec with a resolved configuration.

        Args:
            config: The configuration this codec will use
        """
        self.config = config
        self.engine = get_engine(config.cipher, config.mode)

        if config.scheme is SignatureScheme.SALTED_PLAINTEXT:
            logger.warning("Codec uses the salted-plaintext signature scheme; "
                           "prefer hmac-ciphertext for new data")

    def __repr__(self) -> str:
        return (f"EnvelopeCodec(cipher={self.config.cipher.value!r}, "
                f"mode={self.config.mode.value!r}, scheme={self.config.scheme.value!r})")

    def _b64encode(self, data: bytes) -> str:
        if self.config.urlsafe:
            return base64.urlsafe_b64encode(data).decode('ascii')
        return base64.b64encode(data).decode('ascii')

    def _b64decode(self, data: str) -> bytes:
        """Strictly decode base64, rejecting characters outside the alphabet."""
        raw = data.encode('ascii')
        altchars = None
        if self.config.urlsafe:
            if b'+' in raw or b'/' in raw:
                raise InvalidEncoding("Standard base64 characters in URL-safe data")
            altchars = _URLSAFE_ALTCHARS
        try:
            decoded = base64.b64decode(raw, altchars=altchars, validate=True)
        except binascii.Error as e:
            raise InvalidEncoding(f"Invalid base64 data: {e}") from e

        # Only the canonical encoding is accepted, unused trailing bits must be zero
        if self._b64encode(decoded) != data:
            raise InvalidEncoding("Non-canonical base64 data")
        return decoded

    def _sign(self, plaintext: bytes, iv: bytes, ciphertext: bytes) -> str:
        config = self.config
        if config.scheme is SignatureScheme.HMAC_CIPHERTEXT:
            return sign_ciphertext(iv, ciphertext, config.sign_salt, config.hash_algo)
        # Signed as decode will see it, without the trailing NULs
        return sign_plaintext(strip_padding(plaintext), config.sign_salt, config.hash_algo)

    def encode(self, data: Union[bytes, str]) -> str:
        """
        Encrypt data and return a signed envelope string.

        Each call uses a fresh IV, so encoding the same data twice gives
        different strings that both decode to the same data.

        Args:
            data: The payload to encrypt (str is encoded as UTF-8)

        Returns:
            The envelope as an ASCII string
        """
        if isinstance(data, str):
            data = data.encode('utf-8')

        config = self.config
        iv = generate_iv(config.iv_size)
        ciphertext = self.engine.encrypt(config.key, data, iv)
        signature = self._sign(data, iv, ciphertext)

        return (self._b64encode(signature.encode('ascii'))
                + config.delimiter
                + self._b64encode(iv + ciphertext))

    def _open(self, envelope: Union[str, bytes]) -> bytes:
        """
        Decode and verify an envelope.

        Args:
            envelope: The envelope string

        Returns:
            The plaintext

        Raises:
            InvalidEncoding: If the envelope is structurally malformed
            TamperedOrInvalid: If the signature does not match
        """
        config = self.config

        if isinstance(envelope, (bytes, bytearray)):
            try:
                envelope = bytes(envelope).decode('ascii')
            except UnicodeDecodeError:
                raise InvalidEncoding("Envelope is not ASCII") from None
        if not isinstance(envelope, str):
            raise InvalidEncoding(f"Envelope must be a string, not {type(envelope).__name__}")
        if not envelope.isascii():
            raise InvalidEncoding("Envelope is not ASCII")

        parts = envelope.split(config.delimiter)
        if len(parts) != 2:
            raise InvalidEncoding(f"Expected 2 envelope parts, got {len(parts)}")

        signature = self._b64decode(parts[0])
        blob = self._b64decode(parts[1])

        if len(blob) < config.iv_size:
            raise InvalidEncoding("Envelope is shorter than the IV")

        iv = blob[:config.iv_size]
        ciphertext = blob[config.iv_size:]

        if len(ciphertext) % self.engine.block_size != 0:
            raise InvalidEncoding("Ciphertext is not a whole number of blocks")

        if config.scheme is SignatureScheme.HMAC_CIPHERTEXT:
            expected = sign_ciphertext(iv, ciphertext, config.sign_salt, config.hash_algo)
            if not verify_signature(expected, signature):
                raise TamperedOrInvalid("Signature mismatch")

        # Trim the \0 padding bytes from the end of the data
        plaintext = strip_padding(self.engine.decrypt(config.key, ciphertext, iv))

        if config.scheme is SignatureScheme.SALTED_PLAINTEXT:
            expected = sign_plaintext(plaintext, config.sign_salt, config.hash_algo)
            if not verify_signature(expected, signature):
                raise TamperedOrInvalid("Signature mismatch")

        return plaintext

    def decode(self, envelope: Union[str, bytes]) -> Optional[bytes]:
        """
        Decrypt an envelope back to its original data.

        Malformed, corrupted and tampered envelopes all give the same
        result. Note that b'' is a valid result, so test with `is None`.

        Args:
            envelope: The envelope string

        Returns:
            The plaintext, or None if the envelope is invalid
        """
        try:
            return self._open(envelope)
        except DecodeError as e:
            logger.debug("Rejected envelope: %s", e)
            return None

    def decode_or_raise(self, envelope: Union[str, bytes]) -> bytes:
        """
        Decrypt an envelope, raising on any failure.

        Args:
            envelope: The envelope string

        Returns:
            The plaintext

        Raises:
            DecodeError: If the envelope is invalid or was tampered with
        """
        plaintext = self.decode(envelope)
        if plaintext is None:
            raise DecodeError("Invalid or tampered envelope")
        return plaintext

    def is_valid(self, envelope: Union[str, bytes]) -> bool:
        """Return True if the envelope decodes and verifies."""
        return self.decode(envelope) is not None


def encode(data: Union[bytes, str], config: CipherConfig) -> str:
    """
    Encode data using a one-off codec.

    Args:
        data: The payload to encrypt
        config: The codec configuration

    Returns:
        The envelope string
    """
    return EnvelopeCodec(config).encode(data)


def decode(envelope: Union[str, bytes], config: CipherConfig) -> Optional[bytes]:
    """
    Decode an envelope using a one-off codec.

    Args:
        envelope: The envelope string
        config: The codec configuration

    Returns:
        The plaintext, or None if the envelope is invalid
    """
    return EnvelopeCodec(config).decode(envelope)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    config = CipherConfig(key=generate_iv(32), sign_salt=b'pepper')
    codec = EnvelopeCodec(config)
    plaintext = b"This is a test message for the envelope codec."

    envelope = codec.encode(plaintext)
    print(f"Envelope: {envelope}")

    decoded = codec.decode(envelope)
    print(f"Decoded: {decoded}")
    assert decoded == plaintext

    # Tampered envelope
    tampered = envelope[:-2] + ('A' if envelope[-2] != 'A' else 'B') + envelope[-1]
    result = codec.decode(tampered)
    print(f"Tampered decode result: {result}")
    assert result is None

    print("Envelope codec tests completed successfully!")
