"""
Codec Registry

This module keeps named codec instances. Each name maps to a configuration
group; the codec for a name is built on first request and reused after.
"""

import logging
import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from ..config import CipherConfig
from ..errors import ConfigurationError
from .codec import EnvelopeCodec

logger = logging.getLogger(__name__)

ConfigGroup = Union[CipherConfig, Mapping[str, Any]]


class CodecRegistry:
    """
    Map from configuration name to a shared EnvelopeCodec.

    Codecs for different names never share configuration or state.
    """

    def __init__(self, configs: Optional[Mapping[str, ConfigGroup]] = None,
                 default: str = 'default'):
        """
        Initialize the registry.

        Args:
            configs: Configuration groups keyed by name
            default: Name used when get() is called without one
        """
        self.default = default
        self._configs: Dict[str, ConfigGroup] = dict(configs or {})
        self._codecs: Dict[str, EnvelopeCodec] = {}
        self._lock = threading.Lock()

    def __contains__(self, name: str) -> bool:
        return name in self._codecs or name in self._configs

    def names(self) -> List[str]:
        """Return every name with a configuration group or a codec."""
        return sorted(set(self._configs) | set(self._codecs))

    def get(self, name: Optional[str] = None) -> EnvelopeCodec:
        """
        Return the codec for a name, creating it on first use.

        Args:
            name: Configuration group name (default: the registry default)

        Returns:
            The shared codec for the name

        Raises:
            ConfigurationError: If the name has no configuration group or
                the group is invalid
        """
        if name is None:
            name = self.default

        codec = self._codecs.get(name)
        if codec is not None:
            return codec

        with self._lock:
            codec = self._codecs.get(name)
            if codec is None:
                if name not in self._configs:
                    raise ConfigurationError(f"No configuration group named: {name}")

                group = self._configs[name]
                if not isinstance(group, CipherConfig):
                    group = CipherConfig.from_mapping(group, name=name)

                logger.info("Creating codec for configuration group %s", name)
                codec = self._codecs[name] = EnvelopeCodec(group)
        return codec

    def register(self, name: str, codec: Union[EnvelopeCodec, ConfigGroup]) -> EnvelopeCodec:
        """
        Install a codec, or a configuration to build one from, under a name.

        Args:
            name: The name to register
            codec: An EnvelopeCodec, CipherConfig or configuration mapping

        Returns:
            The registered codec

        Raises:
            ConfigurationError: If the name is already registered
        """
        if not isinstance(codec, EnvelopeCodec):
            if not isinstance(codec, CipherConfig):
                codec = CipherConfig.from_mapping(codec, name=name)
            codec = EnvelopeCodec(codec)

        with self._lock:
            if name in self._codecs or name in self._configs:
                raise ConfigurationError(f"Codec already registered: {name}")
            self._codecs[name] = codec
        return codec

    def clear(self) -> None:
        """Drop every codec. Configuration groups are kept and rebuilt by get()."""
        with self._lock:
            self._codecs.clear()
