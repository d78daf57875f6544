"""
Color mode data structure.
"""

import logging
from typing import Optional

import numpy as np
from attrs import define, field

from psd_reader.constants import ColorMode
from psd_reader.errors import MissingColorTable
from psd_reader.psd.bin_utils import Buffer
from psd_reader.psd.chunks import ChunkRef

logger = logging.getLogger(__name__)

TABLE_SIZE = 256 * 3


def index_to_int(table: Buffer, index: int, alpha: bool = False) -> int:
    """
    Packs a palette entry into a little-endian 32-bit integer, ``0xAABBGGRR``,
    fully opaque. Written to a little-endian ``uint32`` buffer the bytes come
    out as R, G, B, A.

    :param table: 768-byte planar color table.
    :param index: palette index in [0, 255].
    :param alpha: if true, masks out the alpha byte.
    """
    value = 0xFF000000 + (table[index + 512] << 16) + (table[index + 256] << 8) + table[index]
    return value & 0xFFFFFF if alpha else value


def index_to_rgba(table: Buffer, index: int) -> tuple[int, int, int, int]:
    """Resolves a palette index to an opaque ``(r, g, b, a)`` tuple."""
    return tuple(index_to_int(table, index).to_bytes(4, "little"))  # type: ignore[return-value]


@define(frozen=True)
class ColorTable:
    """
    Color table of an indexed image.

    The table holds 256 reds, then 256 greens, then 256 blues. It is not
    interleaved.

    .. py:attribute:: value

        The 768 planar bytes.
    """

    value: bytes = field(default=bytes(TABLE_SIZE), repr=False)

    @value.validator
    def _validate_value(self, attribute, value):
        if len(value) != TABLE_SIZE:
            raise ValueError("Color table must hold %d bytes" % TABLE_SIZE)

    def __getitem__(self, index: int) -> tuple[int, int, int]:
        return self.value[index], self.value[index + 256], self.value[index + 512]

    def to_int(self, index: int, alpha: bool = False) -> int:
        return index_to_int(self.value, index, alpha)

    def interleave(self) -> bytes:
        """
        Returns interleaved color table in bytes.
        """
        return self.lut().tobytes()

    def lut(self) -> np.ndarray:
        """Returns a ``(256, 3)`` uint8 array for vectorized lookups."""
        return np.frombuffer(self.value, np.uint8).reshape((3, 256)).transpose()


def read_color_table(
    data: Buffer, chunk: ChunkRef, color_mode: int
) -> Optional[ColorTable]:
    """
    Reads the color table of an indexed document.

    :return: :py:class:`.ColorTable`, or `None` for other color modes.
    """
    if color_mode != ColorMode.INDEXED:
        return None
    logger.debug("reading color mode data, len=%d" % chunk.length)
    if chunk.length == 0:
        raise MissingColorTable("Indexed image without a color table")
    value = bytes(chunk.view(data)[:TABLE_SIZE])
    if len(value) < TABLE_SIZE:
        logger.warning(
            "Color table has %d bytes, padding to %d" % (len(value), TABLE_SIZE)
        )
        value = value.ljust(TABLE_SIZE, b"\x00")
    return ColorTable(value)
