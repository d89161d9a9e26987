"""Shared fixtures for tampercrypt tests."""

import pytest

from tampercrypt import Cipher, CipherConfig, EnvelopeCodec, Mode, SignatureScheme


KEY_16 = bytes(range(16))
KEY_32 = bytes(range(32))


@pytest.fixture
def config():
    """AES-CBC configuration with the default signature scheme."""
    return CipherConfig(key=KEY_32, sign_salt=b'pepper', cipher=Cipher.AES, mode=Mode.CBC)


@pytest.fixture
def codec(config):
    return EnvelopeCodec(config)


@pytest.fixture
def legacy_codec():
    """AES-CBC codec using the salted-plaintext signature scheme."""
    return EnvelopeCodec(CipherConfig(
        key=KEY_16,
        sign_salt=b'pepper',
        cipher=Cipher.AES,
        mode=Mode.CBC,
        scheme=SignatureScheme.SALTED_PLAINTEXT,
    ))


@pytest.fixture(params=list(SignatureScheme), ids=lambda s: s.value)
def any_scheme_codec(request):
    return EnvelopeCodec(CipherConfig(
        key=KEY_16, sign_salt=b'pepper', mode=Mode.CBC, scheme=request.param))
