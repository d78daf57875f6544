"""
Color conversion rules, one per color mode.

A rule receives the color samples of one run of pixels, one ``uint8`` array
per color channel in file order, and returns an ``(n, 3)`` float array of
R, G, B values in [0, 255]. Alpha is handled by the caller.

CMYK and duotone conversions are simple approximations without color
management.
"""

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np

from psd_reader.constants import ColorMode
from psd_reader.registry import new_registry

if TYPE_CHECKING:
    from psd_reader.convert.converter import RGBAConverter

logger = logging.getLogger(__name__)

RULES, register = new_registry(attribute="color_mode")

# D65 reference white.
_WHITE_XYZ = np.array([0.95047, 1.0, 1.08883])

_XYZ_TO_SRGB = np.array(
    [
        [3.2404542, -1.5371385, -0.4985314],
        [-0.9692660, 1.8760108, 0.0415560],
        [0.0556434, -0.2040259, 1.0572252],
    ]
)

_EPSILON = 6.0 / 29.0


def _gray(sample: np.ndarray) -> np.ndarray:
    return np.repeat(sample.astype(np.float64)[:, np.newaxis], 3, axis=1)


@register(ColorMode.BITMAP)
def convert_bitmap(samples: Sequence[np.ndarray], context: "RGBAConverter") -> np.ndarray:
    # Bits are unpacked to 0x00 (set) or 0xFF (clear) beforehand.
    return _gray(samples[0])


@register(ColorMode.GRAYSCALE)
def convert_grayscale(samples: Sequence[np.ndarray], context: "RGBAConverter") -> np.ndarray:
    return _gray(samples[0])


@register(ColorMode.INDEXED)
def convert_indexed(samples: Sequence[np.ndarray], context: "RGBAConverter") -> np.ndarray:
    return context.palette[samples[0]].astype(np.float64)


@register(ColorMode.DUOTONE)
def convert_duotone(samples: Sequence[np.ndarray], context: "RGBAConverter") -> np.ndarray:
    """Blend towards the duotone color, weighted by the gray value."""
    gray = _gray(samples[0])
    color = np.asarray(context.options.duotone_color, dtype=np.float64)[np.newaxis, :]
    return gray + (color - gray) * (1.0 - gray / 255.0)


@register(ColorMode.RGB)
def convert_rgb(samples: Sequence[np.ndarray], context: "RGBAConverter") -> np.ndarray:
    return np.stack(samples[:3], axis=1).astype(np.float64)


@register(ColorMode.CMYK)
def convert_cmyk(samples: Sequence[np.ndarray], context: "RGBAConverter") -> np.ndarray:
    cmy = np.stack(samples[:3], axis=1).astype(np.float64)
    k = samples[3].astype(np.float64)[:, np.newaxis]
    return 255.0 - np.minimum(255.0, cmy + k)


@register(ColorMode.LAB)
def convert_lab(samples: Sequence[np.ndarray], context: "RGBAConverter") -> np.ndarray:
    return lab_to_rgb(*(s.astype(np.float64) for s in samples[:3]))


def lab_to_rgb(l_: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Converts 8-bit encoded Lab to sRGB.

    ``l_`` maps [0, 255] to L* [0, 100]; ``a`` and ``b`` are offset by 128.
    """
    lightness = l_ * 100.0 / 255.0
    fy = (lightness + 16.0) / 116.0
    fx = fy + (a - 128.0) / 500.0
    fz = fy - (b - 128.0) / 200.0
    f = np.stack([fx, fy, fz], axis=1)
    xyz = np.where(
        f > _EPSILON, f**3, 3.0 * _EPSILON**2 * (f - 4.0 / 29.0)
    ) * _WHITE_XYZ[np.newaxis, :]
    linear = xyz @ _XYZ_TO_SRGB.T
    with np.errstate(invalid="ignore"):
        srgb = np.where(
            linear > 0.0031308,
            1.055 * np.power(np.maximum(linear, 0.0031308), 1.0 / 2.4) - 0.055,
            12.92 * linear,
        )
    return np.clip(srgb, 0.0, 1.0) * 255.0
