"""
Exception types for tampercrypt.
"""


class CryptError(Exception):
    """Base exception for all tampercrypt errors."""
    pass


class ConfigurationError(CryptError, ValueError):
    """Raised when a codec configuration is missing or invalid."""
    pass


class DecodeError(CryptError):
    """Raised when an envelope cannot be decoded or fails verification."""
    pass


class InvalidEncoding(DecodeError):
    """Raised when envelope structure or base64 content is malformed."""
    pass


class TamperedOrInvalid(DecodeError):
    """Raised when the carried signature does not match the content."""
    pass
