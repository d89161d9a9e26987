"""
Signing Package

This package implements the tamper signatures carried in an envelope:
the salted plaintext digest kept for compatibility and the HMAC over the
IV and ciphertext used for new data.
"""

from .auth import (
    SignatureScheme, check_hash_algo, sign_plaintext, sign_ciphertext,
    verify_signature,
)

__all__ = [
    'SignatureScheme', 'check_hash_algo', 'sign_plaintext', 'sign_ciphertext',
    'verify_signature',
]
