"""
Random Source

This module selects the process-wide CSPRNG used for initialization
vectors. The choice is made lazily on first use, exactly once, and read by
every later call.
"""

import logging
import threading
from typing import Callable, Optional

from Cryptodome.Random import get_random_bytes

logger = logging.getLogger(__name__)

_rand: Optional[Callable[[int], bytes]] = None
_rand_lock = threading.Lock()


def random_source() -> Callable[[int], bytes]:
    """
    Return the process-wide random byte source, selecting it on first use.

    Returns:
        A callable taking a byte count and returning that many random bytes
    """
    global _rand

    if _rand is None:
        with _rand_lock:
            if _rand is None:
                logger.debug("Selected OS random source for IV generation")
                _rand = get_random_bytes
    return _rand


def generate_iv(size: int) -> bytes:
    """
    Generate a cryptographically secure random initialization vector.

    Args:
        size: Length of the IV in bytes

    Returns:
        Random IV as bytes
    """
    if size < 0:
        raise ValueError("IV size must be non-negative")
    if size == 0:
        return b''
    return random_source()(size)
