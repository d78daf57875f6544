"""
Gamma look-up tables.
"""

import functools
import logging

import numpy as np

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=32)
def gamma_lut(gamma: float) -> np.ndarray:
    """
    Create a gamma look-up table (LUT) for the provided inverse gamma.

    ``lut[i] = round(255 * (i / 255) ** gamma)``. A gamma of 1 gives the
    identity table. The result is cached and read-only.

    :param gamma: inverse gamma (ie. 1/2.2, 1/1.8 etc.)
    :return: ``uint8`` array of 256 entries.
    """
    if gamma <= 0:
        raise ValueError("Gamma must be positive, got %r" % gamma)
    if gamma == 1:
        lut = np.arange(256, dtype=np.uint8)
    else:
        values = np.power(np.arange(256, dtype=np.float64) / 255.0, gamma)
        lut = np.clip(np.floor(values * 255.0 + 0.5), 0, 255).astype(np.uint8)
    lut.setflags(write=False)
    logger.debug("built gamma LUT for %g" % gamma)
    return lut


def float_to_component(value: float) -> int:
    """
    Converts a 32-bit float sample, assumed in [0.0, 1.0], to [0, 255] with
    rounding. Out of range values are clamped.
    """
    if value != value:
        return 0
    return min(255, max(0, int(np.floor(value * 255.0 + 0.5))))
