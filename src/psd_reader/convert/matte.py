"""
Matte removal.

The merged image of a document with transparency is stored composited onto
a matte color, white unless told otherwise. Removing the matte recovers the
straight color:

    unmatted = (color - matte * (255 - alpha) / 255) * 255 / alpha

Pixels with zero alpha have no recoverable color and come out as 0.
"""

from typing import Sequence

import numpy as np


def dematte(
    color: np.ndarray, alpha: np.ndarray, matte: Sequence[int] = (255, 255, 255)
) -> np.ndarray:
    """
    Removes ``matte`` from ``color``.

    :param color: ``(n, 3)`` samples in [0, 255].
    :param alpha: ``(n,)`` alpha in [0, 255].
    :param matte: ``(r, g, b)`` matte color.
    :return: ``(n, 3)`` float array rounded to integers in [0, 255].
    """
    color = np.asarray(color, dtype=np.float64)
    a = np.asarray(alpha, dtype=np.float64)[:, np.newaxis]
    m = np.asarray(matte, dtype=np.float64)[np.newaxis, :]
    with np.errstate(divide="ignore", invalid="ignore"):
        unmatted = (color - m * (255.0 - a) / 255.0) * 255.0 / a
        unmatted = np.clip(np.floor(unmatted + 0.5), 0, 255)
    return np.where(a > 0, unmatted, 0.0)


def rematte(
    color: np.ndarray, alpha: np.ndarray, matte: Sequence[int] = (255, 255, 255)
) -> np.ndarray:
    """
    Composites straight ``color`` onto ``matte``; the inverse of
    :py:func:`dematte`.
    """
    color = np.asarray(color, dtype=np.float64)
    a = np.asarray(alpha, dtype=np.float64)[:, np.newaxis]
    m = np.asarray(matte, dtype=np.float64)[np.newaxis, :]
    return np.clip(np.floor(color * a / 255.0 + m * (255.0 - a) / 255.0 + 0.5), 0, 255)
