"""
Conversion of channel planes to RGBA bitmaps.
"""

from .converter import RGBAConverter as RGBAConverter, convert as convert
from .gamma import gamma_lut as gamma_lut

__all__ = ["RGBAConverter", "convert", "gamma_lut"]
