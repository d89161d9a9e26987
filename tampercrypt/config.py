"""
Codec Configuration

This module defines the immutable configuration handed to a codec, the
defaults applied to a configuration group, and loaders that build a
configuration from a plain mapping or from environment variables.
"""

import base64
import binascii
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from .cipher_core.block_cipher import Cipher, Mode, CipherEngine, iv_size, max_key_size
from .errors import ConfigurationError
from .signing.auth import SignatureScheme, check_hash_algo

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'cipher': Cipher.AES,
    'mode': Mode.NOFB,
    'hash_algo': 'sha256',
    'delimiter': '.',
    'scheme': SignatureScheme.HMAC_CIPHERTEXT,
    'urlsafe': False,
}

ENV_PREFIX = 'TAMPERCRYPT_'

# Characters that may appear in either base64 alphabet, padding included
_BASE64_CHARS = frozenset(
    'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/-_=')

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off', '')


def _to_bytes(value: Union[str, bytes], name: str) -> bytes:
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ConfigurationError(
        f"{name} must be str or bytes, not {type(value).__name__}")


def _to_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        flag = value.strip().lower()
        if flag in _TRUE_VALUES:
            return True
        if flag in _FALSE_VALUES:
            return False
    raise ConfigurationError(f"Invalid {name} {value!r}, expected a boolean")


def _to_enum(enum_cls, value: Any, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ', '.join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Invalid {name} {value!r}, expected one of: {choices}") from None


@dataclass(frozen=True)
class CipherConfig:
    """
    Resolved settings for one codec instance.

    Keys longer than the cipher accepts are truncated on construction.
    Shorter keys are kept as given and must still be a length the
    cipher accepts.
    """
    key: bytes = field(repr=False)
    sign_salt: bytes = field(repr=False)
    cipher: Cipher = DEFAULT_CONFIG['cipher']
    mode: Mode = DEFAULT_CONFIG['mode']
    hash_algo: str = DEFAULT_CONFIG['hash_algo']
    delimiter: str = DEFAULT_CONFIG['delimiter']
    scheme: SignatureScheme = DEFAULT_CONFIG['scheme']
    urlsafe: bool = DEFAULT_CONFIG['urlsafe']
    iv_size: int = field(init=False)

    def __post_init__(self):
        # Frozen dataclass: normalized values go through object.__setattr__
        set_field = object.__setattr__

        cipher = _to_enum(Cipher, self.cipher, 'cipher')
        mode = _to_enum(Mode, self.mode, 'mode')
        scheme = _to_enum(SignatureScheme, self.scheme, 'signature scheme')
        set_field(self, 'cipher', cipher)
        set_field(self, 'mode', mode)
        set_field(self, 'scheme', scheme)

        if not self.key:
            raise ConfigurationError("No encryption key is defined")
        if not self.sign_salt:
            raise ConfigurationError("No signature salt is defined")

        key = _to_bytes(self.key, 'key')
        size = max_key_size(cipher, mode)
        if len(key) > size:
            logger.debug("Truncating %d-byte key to %d bytes for %s",
                         len(key), size, cipher.value)
            key = key[:size]
        elif len(key) < size:
            logger.warning("Key is %d bytes, shorter than the %d bytes %s supports",
                           len(key), size, cipher.value)

        try:
            CipherEngine(cipher, mode).check_key(key)
        except ValueError as e:
            raise ConfigurationError(f"Key rejected by {cipher.value}: {e}") from e

        set_field(self, 'key', key)
        set_field(self, 'sign_salt', _to_bytes(self.sign_salt, 'sign_salt'))

        try:
            check_hash_algo(self.hash_algo)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        if not isinstance(self.delimiter, str) or not self.delimiter:
            raise ConfigurationError("Delimiter must be a non-empty string")
        if _BASE64_CHARS.intersection(self.delimiter):
            raise ConfigurationError(
                f"Delimiter {self.delimiter!r} overlaps the base64 alphabet")

        set_field(self, 'urlsafe', _to_bool(self.urlsafe, 'urlsafe'))
        set_field(self, 'iv_size', iv_size(cipher, mode))

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any], name: str = 'default') -> 'CipherConfig':
        """
        Build a configuration from one configuration group.

        Missing optional settings take their value from DEFAULT_CONFIG.

        Args:
            config: Mapping with 'key', 'sign_salt' and optional settings
            name: Group name, used in error messages

        Returns:
            The resolved configuration

        Raises:
            ConfigurationError: If the key or signature salt is missing,
                or any setting is invalid
        """
        if config.get('key') is None:
            raise ConfigurationError(
                f"No encryption key is defined in the configuration group: {name}")
        if not config.get('sign_salt'):
            raise ConfigurationError(
                f"No signature salt is defined in the configuration group: {name}")

        settings: Dict[str, Any] = dict(DEFAULT_CONFIG)
        for option in DEFAULT_CONFIG:
            if config.get(option) is not None:
                settings[option] = config[option]

        try:
            return cls(key=config['key'], sign_salt=config['sign_salt'], **settings)
        except ConfigurationError as e:
            raise ConfigurationError(f"{e} (configuration group: {name})") from e

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX,
                 environ: Optional[Mapping[str, str]] = None) -> 'CipherConfig':
        """
        Build a configuration from environment variables.

        Reads <prefix>KEY and <prefix>SIGN_SALT, plus the optional
        <prefix>CIPHER, <prefix>MODE, <prefix>HASH_ALGO, <prefix>DELIMITER,
        <prefix>SCHEME and <prefix>URLSAFE. A key written as 'base64:<data>'
        is decoded to raw bytes.

        Args:
            prefix: Variable name prefix
            environ: Mapping to read instead of os.environ

        Returns:
            The resolved configuration
        """
        if environ is None:
            environ = os.environ

        config: Dict[str, Any] = {}
        for option in ('key', 'sign_salt') + tuple(DEFAULT_CONFIG):
            value = environ.get(prefix + option.upper())
            if value is not None:
                config[option] = value

        key = config.get('key')
        if key is not None and key.startswith('base64:'):
            try:
                config['key'] = base64.b64decode(key[len('base64:'):], validate=True)
            except binascii.Error as e:
                raise ConfigurationError(f"{prefix}KEY is not valid base64") from e

        return cls.from_mapping(config, name=prefix.rstrip('_') or 'environment')
