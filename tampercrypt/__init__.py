"""
tampercrypt - Symmetric Encryption with Tamper Signatures

This library encrypts arbitrary payloads with a block cipher and binds a
keyed signature to the result, producing a single transport string that
can be stored in text columns, URLs or logs. Tampering with or corrupting
the string is detected when it is decoded.

Key Features:
- AES, Triple DES, Blowfish and CAST-128 in ECB, CBC, CFB, NCFB, NOFB or CTR mode
- Fresh random IV for every encoding
- Encrypt-then-MAC signatures over the IV and ciphertext
- Salted plaintext signatures for data written by older systems
- Constant-time signature checks
- Named codec registry with get-or-create semantics

"""

from .cipher_core import Cipher, Mode, CipherEngine
from .config import CipherConfig, DEFAULT_CONFIG
from .envelope import EnvelopeCodec, CodecRegistry, encode, decode
from .errors import (
    CryptError, ConfigurationError, DecodeError, InvalidEncoding, TamperedOrInvalid,
)
from .signing import SignatureScheme

__version__ = '0.1.0'

__all__ = [
    'Cipher', 'Mode', 'CipherEngine', 'CipherConfig', 'DEFAULT_CONFIG',
    'EnvelopeCodec', 'CodecRegistry', 'encode', 'decode', 'SignatureScheme',
    'CryptError', 'ConfigurationError', 'DecodeError', 'InvalidEncoding',
    'TamperedOrInvalid',
]
