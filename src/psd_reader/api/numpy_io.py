"""
NumPy IO module.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def to_array(bitmap: bytes, width: int, height: int, normalize: bool = False) -> np.ndarray:
    """
    Reshapes an RGBA bitmap into a ``(height, width, 4)`` array.

    :param bitmap: ``width * height * 4`` bytes in R, G, B, A order.
    :param normalize: return ``float32`` values in [0.0, 1.0] instead of
        ``uint8``.
    """
    array = np.frombuffer(bitmap, np.uint8).reshape((height, width, 4))
    if normalize:
        return array.astype(np.float32) / 255.0
    return array
