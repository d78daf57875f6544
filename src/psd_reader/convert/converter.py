"""
Conversion of decompressed channel planes to an RGBA bitmap.

The output is ``width * height * 4`` bytes, rows top to bottom, each pixel
stored as R, G, B, A whatever the host byte order is.

Samples are brought to 8 bits first: 16-bit samples are scaled by
``255 / 65535``, 32-bit float samples in [0.0, 1.0] are rounded from
``value * 255`` and clamped. The color mode rule then produces RGB, the
matte is removed when the image has transparency, and the gamma table is
applied last. Indexed and bitmap images skip alpha and gamma processing.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from psd_reader.config import ConversionOptions
from psd_reader.constants import ColorMode
from psd_reader.convert.gamma import gamma_lut
from psd_reader.convert.matte import dematte
from psd_reader.convert.rules import RULES
from psd_reader.errors import (
    FormatError,
    InvalidStateError,
    MissingColorTable,
    UnsupportedColorMode,
)
from psd_reader.psd.bin_utils import Buffer
from psd_reader.psd.color_mode_data import ColorTable
from psd_reader.psd.header import DocumentInfo

logger = logging.getLogger(__name__)

_RAW_MODES = (ColorMode.INDEXED, ColorMode.BITMAP)


def to_uint8(row: Buffer, depth: int, width: int) -> np.ndarray:
    """
    Reads one row of samples as ``uint8`` values.

    Bitmap rows unpack set bits to 0x00 (black) and clear bits to 0xFF.
    """
    if depth == 8:
        return np.frombuffer(row, np.uint8)
    elif depth == 16:
        values = np.frombuffer(row, ">u2").astype(np.float64)
        return np.floor(values * 255.0 / 65535.0 + 0.5).astype(np.uint8)
    elif depth == 32:
        values = np.nan_to_num(np.frombuffer(row, ">f4").astype(np.float64), nan=0.0)
        return np.clip(np.floor(values * 255.0 + 0.5), 0, 255).astype(np.uint8)
    elif depth == 1:
        bits = np.unpackbits(np.frombuffer(row, np.uint8))[:width]
        return np.where(bits, 0, 255).astype(np.uint8)
    raise ValueError("Unsupported depth: %g" % depth)


class RGBAConverter:
    """
    Converts channel planes to RGBA, one output row per :py:meth:`step`.

    Example::

        converter = RGBAConverter(planes, info, ConversionOptions(gamma=1))
        bitmap = converter.run()

    :param planes: decompressed planes in file order.
    :param info: :py:class:`~psd_reader.psd.header.DocumentInfo`.
    :param options: :py:class:`~psd_reader.config.ConversionOptions`.
    :param color_table: :py:class:`~psd_reader.psd.color_mode_data.ColorTable`,
        required for indexed images.
    """

    def __init__(
        self,
        planes: Sequence[Buffer],
        info: DocumentInfo,
        options: Optional[ConversionOptions] = None,
        color_table: Optional[ColorTable] = None,
    ):
        self.info = info
        self.options = options or ConversionOptions()
        self.color_mode = info.color_mode

        self.rule = RULES.get(self.color_mode)
        if self.rule is None:
            raise UnsupportedColorMode(
                "No RGBA conversion for color mode %s" % info.color_desc
            )

        self.palette = None
        if self.color_mode == ColorMode.INDEXED:
            if color_table is None:
                raise MissingColorTable("Indexed image without a color table")
            self.palette = color_table.lut()

        if len(planes) < info.expected_channels:
            raise FormatError(
                "%s image needs %d channels, got %d"
                % (info.color_desc, info.expected_channels, len(planes)),
                "convert",
            )
        self._planes = [
            np.frombuffer(plane, np.uint8, count=info.channel_size).reshape(
                (info.height, info.row_size)
            )
            for plane in planes
        ]
        self.alpha_index: Optional[int] = None
        if info.has_alpha and self.color_mode not in _RAW_MODES:
            self.alpha_index = len(planes) - 1

        gamma = self.options.gamma32 if info.depth == 32 else self.options.gamma
        self.lut = None if gamma == 1 or self.color_mode in _RAW_MODES else gamma_lut(gamma)

        self._output = np.empty((info.height, info.width, 4), dtype=np.uint8)
        self._row = 0
        logger.debug(
            "converting %s %dx%d depth=%d alpha=%s"
            % (info.color_desc, info.width, info.height, info.depth, self.alpha_index)
        )

    @property
    def done(self) -> bool:
        return self._row >= self.info.height

    def __len__(self) -> int:
        return self.info.height

    def _samples(self, index: int, y: int) -> np.ndarray:
        return to_uint8(self._planes[index][y], self.info.depth, self.info.width)

    def step(self) -> bool:
        """
        Converts the next row.

        :return: `True` when the whole bitmap is converted.
        """
        if self.done:
            return True
        y = self._row
        samples = [self._samples(i, y) for i in range(self.info.expected_channels)]
        rgb = self.rule(samples, self)

        alpha = None
        if self.alpha_index is not None and not self.options.ignore_alpha:
            alpha = self._samples(self.alpha_index, y)
            if self.options.dematte:
                rgb = dematte(rgb, alpha, self.options.matte_color)

        rgb = np.clip(np.floor(rgb + 0.5), 0, 255).astype(np.uint8)
        if self.lut is not None:
            rgb = self.lut[rgb]

        out = self._output[y]
        out[:, :3] = rgb
        out[:, 3] = 255 if alpha is None else alpha
        self._row += 1
        return self.done

    @property
    def array(self) -> np.ndarray:
        """The bitmap as a ``(height, width, 4)`` ``uint8`` array."""
        if not self.done:
            raise InvalidStateError("Conversion is not finished")
        return self._output

    @property
    def bitmap(self) -> bytes:
        return self.array.tobytes()

    def run(self) -> bytes:
        """Converts everything without yielding."""
        while not self.step():
            pass
        return self.bitmap


def convert(
    planes: Sequence[Buffer],
    info: DocumentInfo,
    options: Optional[ConversionOptions] = None,
    color_table: Optional[ColorTable] = None,
) -> bytes:
    """
    Converts channel planes to an RGBA bitmap in one go.

    :return: ``width * height * 4`` bytes in R, G, B, A order.
    """
    return RGBAConverter(planes, info, options, color_table).run()
