"""Tests for codec configuration."""

import base64
import dataclasses
import logging

import pytest

from tampercrypt import (
    Cipher, CipherConfig, ConfigurationError, DEFAULT_CONFIG, Mode, SignatureScheme,
)
from tampercrypt.cipher_core import encrypt, generate_iv


def test_defaults():
    config = CipherConfig(key=bytes(32), sign_salt=b'pepper')

    assert config.cipher is Cipher.AES
    assert config.mode is Mode.NOFB
    assert config.hash_algo == 'sha256'
    assert config.delimiter == '.'
    assert config.scheme is SignatureScheme.HMAC_CIPHERTEXT
    assert config.urlsafe is False
    assert config.iv_size == 16


def test_config_is_immutable():
    config = CipherConfig(key=bytes(32), sign_salt=b'pepper')

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.key = bytes(16)


def test_secrets_are_hidden_from_repr():
    config = CipherConfig(key=b'k' * 32, sign_salt=b'pepper')

    assert 'pepper' not in repr(config)
    assert 'kkkk' not in repr(config)


def test_string_values_are_normalized():
    config = CipherConfig(key='k' * 16, sign_salt='pepper', cipher='AES', mode='CBC',
                          scheme='salted-plaintext')

    assert config.key == b'k' * 16
    assert config.sign_salt == b'pepper'
    assert config.cipher is Cipher.AES
    assert config.mode is Mode.CBC
    assert config.scheme is SignatureScheme.SALTED_PLAINTEXT


def test_long_key_is_truncated():
    config = CipherConfig(key=b'A' * 40, sign_salt=b'pepper', cipher=Cipher.AES)

    assert config.key == b'A' * 32


def test_keys_differing_past_truncation_encrypt_identically():
    first = CipherConfig(key=b'K' * 32 + b'first', sign_salt=b'pepper', mode=Mode.CBC)
    second = CipherConfig(key=b'K' * 32 + b'second!', sign_salt=b'pepper', mode=Mode.CBC)
    iv = generate_iv(first.iv_size)

    assert first.key == second.key
    assert (encrypt(first.key, b'hello', iv, first.cipher, first.mode)
            == encrypt(second.key, b'hello', iv, second.cipher, second.mode))


def test_short_key_is_kept_and_warned(caplog):
    with caplog.at_level(logging.WARNING, logger='tampercrypt.config'):
        config = CipherConfig(key=bytes(16), sign_salt=b'pepper')

    assert config.key == bytes(16)
    assert 'shorter' in caplog.text


@pytest.mark.parametrize("key", [b'', None, bytes(10)])
def test_unusable_key_is_rejected(key):
    with pytest.raises(ConfigurationError):
        CipherConfig(key=key, sign_salt=b'pepper')


@pytest.mark.parametrize("salt", [b'', None, ''])
def test_missing_salt_is_rejected(salt):
    with pytest.raises(ConfigurationError):
        CipherConfig(key=bytes(16), sign_salt=salt)


@pytest.mark.parametrize("option", ['key', 'sign_salt'])
@pytest.mark.parametrize("value", [16, 7.5, [1, 2, 3], object()])
def test_non_bytes_secrets_are_rejected(option, value):
    settings = {'key': bytes(16), 'sign_salt': b'pepper', option: value}

    with pytest.raises(ConfigurationError, match=option):
        CipherConfig(**settings)


def test_bytearray_and_memoryview_secrets_are_accepted():
    config = CipherConfig(key=bytearray(16), sign_salt=memoryview(b'pepper'))

    assert config.key == bytes(16)
    assert config.sign_salt == b'pepper'


@pytest.mark.parametrize("value, expected", [
    (True, True), (False, False), ('true', True), ('Yes', True), ('1', True),
    ('false', False), ('off', False), ('0', False),
])
def test_urlsafe_flag_parsing(value, expected):
    config = CipherConfig.from_mapping({'key': bytes(16), 'sign_salt': 'x', 'urlsafe': value})

    assert config.urlsafe is expected


@pytest.mark.parametrize("value", ['maybe', 2, 1.0])
def test_invalid_urlsafe_flag_is_rejected(value):
    with pytest.raises(ConfigurationError, match='urlsafe'):
        CipherConfig(key=bytes(16), sign_salt=b'pepper', urlsafe=value)


@pytest.mark.parametrize("delimiter", ['', 'a', '+', '=', '.=', '-'])
def test_bad_delimiter_is_rejected(delimiter):
    with pytest.raises(ConfigurationError):
        CipherConfig(key=bytes(16), sign_salt=b'pepper', delimiter=delimiter)


@pytest.mark.parametrize("delimiter", ['|', '::', '.', '$'])
def test_delimiters_outside_base64_alphabet_are_accepted(delimiter):
    assert CipherConfig(key=bytes(16), sign_salt=b'pepper', delimiter=delimiter).delimiter == delimiter


@pytest.mark.parametrize("option, value", [
    ('cipher', 'rijndael-256'),
    ('mode', 'xts'),
    ('scheme', 'unsigned'),
    ('hash_algo', 'sha999'),
    ('hash_algo', 'shake_256'),
])
def test_invalid_settings_are_rejected(option, value):
    with pytest.raises(ConfigurationError):
        CipherConfig(key=bytes(16), sign_salt=b'pepper', **{option: value})


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        CipherConfig(key=bytes(16), sign_salt=b'')


def test_from_mapping_applies_defaults():
    config = CipherConfig.from_mapping({'key': bytes(32), 'sign_salt': 'pepper'})

    for option, value in DEFAULT_CONFIG.items():
        assert getattr(config, option) == value


def test_from_mapping_uses_given_settings():
    config = CipherConfig.from_mapping({
        'key': bytes(24),
        'sign_salt': 'pepper',
        'cipher': 'blowfish',
        'mode': 'cfb',
        'delimiter': '|',
        'hash_algo': 'sha512',
        'scheme': 'salted-plaintext',
        'urlsafe': True,
        'mode_unused': 'ignored',
    })

    assert config.cipher is Cipher.BLOWFISH
    assert config.mode is Mode.CFB
    assert config.delimiter == '|'
    assert config.hash_algo == 'sha512'
    assert config.scheme is SignatureScheme.SALTED_PLAINTEXT
    assert config.urlsafe is True
    assert config.iv_size == 8


def test_from_mapping_names_group_in_errors():
    with pytest.raises(ConfigurationError, match='sessions'):
        CipherConfig.from_mapping({'sign_salt': 'pepper'}, name='sessions')

    with pytest.raises(ConfigurationError, match='sessions'):
        CipherConfig.from_mapping({'key': bytes(16)}, name='sessions')

    with pytest.raises(ConfigurationError, match='sessions'):
        CipherConfig.from_mapping({'key': bytes(16), 'sign_salt': 'x', 'mode': 'xts'},
                                  name='sessions')


def test_from_env():
    environ = {
        'TAMPERCRYPT_KEY': 'base64:' + base64.b64encode(bytes(range(32))).decode('ascii'),
        'TAMPERCRYPT_SIGN_SALT': 'pepper',
        'TAMPERCRYPT_MODE': 'ctr',
        'TAMPERCRYPT_URLSAFE': 'yes',
        'UNRELATED': 'value',
    }

    config = CipherConfig.from_env(environ=environ)

    assert config.key == bytes(range(32))
    assert config.sign_salt == b'pepper'
    assert config.mode is Mode.CTR
    assert config.cipher is Cipher.AES
    assert config.urlsafe is True


def test_from_env_custom_prefix_and_plain_key(monkeypatch):
    monkeypatch.setenv('APP_CRYPT_KEY', 's' * 16)
    monkeypatch.setenv('APP_CRYPT_SIGN_SALT', 'pepper')
    monkeypatch.setenv('APP_CRYPT_URLSAFE', 'off')

    config = CipherConfig.from_env(prefix='APP_CRYPT_')

    assert config.key == b's' * 16
    assert config.urlsafe is False


def test_from_env_requires_key_and_salt():
    with pytest.raises(ConfigurationError, match='TAMPERCRYPT'):
        CipherConfig.from_env(environ={'TAMPERCRYPT_SIGN_SALT': 'pepper'})

    with pytest.raises(ConfigurationError):
        CipherConfig.from_env(environ={'TAMPERCRYPT_KEY': 'k' * 16})


def test_from_env_rejects_bad_base64_key():
    with pytest.raises(ConfigurationError):
        CipherConfig.from_env(environ={
            'TAMPERCRYPT_KEY': 'base64:not base64!',
            'TAMPERCRYPT_SIGN_SALT': 'pepper',
        })
