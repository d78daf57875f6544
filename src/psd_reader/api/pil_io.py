"""
PIL IO module.
"""

import logging

from PIL import Image

logger = logging.getLogger(__name__)


def to_pil(bitmap: bytes, width: int, height: int) -> Image.Image:
    """
    Wraps an RGBA bitmap in a PIL Image.

    :param bitmap: ``width * height * 4`` bytes in R, G, B, A order.
    :return: :py:class:`PIL.Image.Image` in ``RGBA`` mode.
    """
    expected = width * height * 4
    if len(bitmap) != expected:
        raise ValueError("Bitmap has %d bytes, expected %d" % (len(bitmap), expected))
    return Image.frombuffer("RGBA", (width, height), bitmap, "raw", "RGBA", 0, 1)
