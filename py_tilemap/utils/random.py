"""
Random number generation utilities.

Map generation draws all randomness from an explicitly passed
:class:`AleaPRNG`. This module keeps a process-wide default instance for
callers that do not manage their own.
"""

from typing import Optional

from ..config import settings
from ..core.alea_prng import AleaPRNG

# Global PRNG instance
_prng: Optional[AleaPRNG] = None


def set_random_seed(seed: str) -> AleaPRNG:
    """
    Reset the default PRNG with a given seed.

    Args:
        seed: Seed string to use

    Returns:
        The new default PRNG
    """
    global _prng
    _prng = AleaPRNG(seed)
    return _prng


def get_prng() -> AleaPRNG:
    """
    Get the default PRNG, seeded from settings on first use.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        _prng = AleaPRNG(settings.random_seed)
    return _prng
