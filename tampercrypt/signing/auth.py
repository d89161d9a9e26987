"""
Tamper Signatures

This module computes and verifies the signatures that bind an envelope to
its content. Signatures are lowercase hex strings, as carried on the wire.
"""

import hmac
import hashlib
from enum import Enum


class SignatureScheme(str, Enum):
    """
    What the envelope signature covers.

    SALTED_PLAINTEXT hashes sign_salt followed by the plaintext and is checked
    after decryption. HMAC_CIPHERTEXT keys an HMAC with sign_salt over the IV
    and ciphertext and is checked before decryption.
    """
    SALTED_PLAINTEXT = 'salted-plaintext'
    HMAC_CIPHERTEXT = 'hmac-ciphertext'


def check_hash_algo(hash_algo: str) -> None:
    """
    Ensure a hash algorithm is available and has a fixed digest length.

    Args:
        hash_algo: hashlib algorithm name (e.g. 'sha256')

    Raises:
        ValueError: If the algorithm is unknown or variable-length
    """
    try:
        digest = hashlib.new(hash_algo)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Unsupported hash algorithm: {hash_algo!r}") from e

    if digest.digest_size == 0:
        raise ValueError(f"Hash algorithm {hash_algo!r} has no fixed digest size")


def sign_plaintext(plaintext: bytes, sign_salt: bytes, hash_algo: str = 'sha256') -> str:
    """
    Compute the salted plaintext signature.

    Args:
        plaintext: The unpadded plaintext
        sign_salt: Secret salt prepended to the plaintext
        hash_algo: hashlib algorithm name

    Returns:
        The lowercase hex digest of sign_salt || plaintext
    """
    return hashlib.new(hash_algo, sign_salt + plaintext).hexdigest().lower()


def sign_ciphertext(iv: bytes, ciphertext: bytes, sign_salt: bytes,
                    hash_algo: str = 'sha256') -> str:
    """
    Compute an HMAC signature over (iv || ciphertext).

    Args:
        iv: The initialization vector
        ciphertext: The encrypted data
        sign_salt: The HMAC key
        hash_algo: hashlib algorithm name

    Returns:
        The lowercase hex HMAC tag
    """
    return hmac.new(sign_salt, iv + ciphertext, hash_algo).hexdigest().lower()


def verify_signature(expected: str, carried: bytes) -> bool:
    """
    Compare a computed signature with the one carried in an envelope.

    Args:
        expected: The recomputed hex signature
        carried: The signature bytes taken from the envelope

    Returns:
        True if they match, False otherwise
    """
    # Use constant-time comparison to prevent timing attacks
    return hmac.compare_digest(expected.encode('ascii'), carried)
