"""
Envelope Package

This package implements the authenticated envelope codec, which encrypts a
payload and binds a tamper signature to it in a single transport string,
and a registry of named codec instances.
"""

from .codec import EnvelopeCodec, encode, decode
from .registry import CodecRegistry

__all__ = ['EnvelopeCodec', 'encode', 'decode', 'CodecRegistry']
