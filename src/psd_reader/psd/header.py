"""
File header structure.
"""

import logging
from typing import Any, Union

from attrs import define, field

from psd_reader.constants import HEADER_SIZE, SIGNATURE, ColorMode, Compression
from psd_reader.errors import (
    BadSignature,
    BadVersion,
    DimensionOutOfRange,
    TruncatedHeader,
    UnsupportedDepth,
)
from psd_reader.psd.bin_utils import Buffer, ByteCursor
from psd_reader.validators import in_, range_

logger = logging.getLogger(__name__)


def _to_color_mode(value: int) -> Union[ColorMode, int]:
    try:
        return ColorMode(value)
    except ValueError:
        return value


@define(frozen=True)
class FileHeader:
    """
    Header section of the document.

    Example::

        from psd_reader.psd.header import FileHeader

        header = FileHeader.frombytes(data)
        print(header.width, header.height)

    .. py:attribute:: signature

        Signature: always equal to ``b'8BPS'``.

    .. py:attribute:: version

        Version number, always 1.

    .. py:attribute:: channels

        The number of channels in the image, including any alpha channel.

    .. py:attribute:: height

        The height of the image in pixels.

    .. py:attribute:: width

        The width of the image in pixels.

    .. py:attribute:: depth

        The number of bits per channel.

    .. py:attribute:: color_mode

        The color mode of the file. See
        :py:class:`~psd_reader.constants.ColorMode`. Unknown modes are kept
        as plain integers.
    """

    _FORMAT = "4sH6xHIIHH"

    signature: bytes = field(default=SIGNATURE, repr=False)
    version: int = field(default=1, validator=in_((1,), BadVersion))
    channels: int = field(default=3, validator=range_(1, 56, DimensionOutOfRange))
    height: int = field(default=64, validator=range_(1, 30000, DimensionOutOfRange))
    width: int = field(default=64, validator=range_(1, 30000, DimensionOutOfRange))
    depth: int = field(default=8, validator=in_((1, 8, 16, 32), UnsupportedDepth))
    color_mode: Union[ColorMode, int] = field(
        default=ColorMode.RGB, converter=_to_color_mode
    )

    @signature.validator
    def _validate_signature(self, attribute: Any, value: bytes) -> None:
        if value != SIGNATURE:
            raise BadSignature("This is not a PSD file (signature %r)" % (value,))

    @classmethod
    def read(cls, cursor: ByteCursor) -> "FileHeader":
        if cursor.remaining() < HEADER_SIZE:
            raise TruncatedHeader(
                "Header needs %d bytes, buffer holds %d" % (HEADER_SIZE, cursor.remaining())
            )
        return cls(*cursor.read_fmt(cls._FORMAT))

    @classmethod
    def frombytes(cls, data: Buffer) -> "FileHeader":
        return cls.read(ByteCursor(data))

    @property
    def is_known_color_mode(self) -> bool:
        return isinstance(self.color_mode, ColorMode)


def parse_header(data: Buffer) -> FileHeader:
    """
    Validates the fixed 26-byte header at the start of ``data``.
    """
    header = FileHeader.frombytes(data)
    if not header.is_known_color_mode:
        logger.warning("Unknown color mode: %s" % header.color_mode)
    logger.debug("read %s" % (header,))
    return header


@define(frozen=True)
class DocumentInfo:
    """
    Decoded description of a document, derived from the header.

    .. py:attribute:: header

        See :py:class:`.FileHeader`.

    .. py:attribute:: compression

        Compression of the merged image data, see
        :py:class:`~psd_reader.constants.Compression`. Values outside the enum
        are kept as integers.

    .. py:attribute:: indexes

        Number of palette entries in use for indexed images.
    """

    header: FileHeader
    compression: Union[Compression, int] = Compression.RAW
    indexes: int = 256

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def channels(self) -> int:
        return self.header.channels

    @property
    def depth(self) -> int:
        return self.header.depth

    @property
    def color_mode(self) -> Union[ColorMode, int]:
        return self.header.color_mode

    @property
    def expected_channels(self) -> int:
        """Number of color channels the color mode needs."""
        return ColorMode.channels(self.color_mode)

    @property
    def has_alpha(self) -> bool:
        """Whether the last channel is transparency."""
        return (
            ColorMode.supports_alpha(self.color_mode)
            and self.channels > self.expected_channels
        )

    @property
    def byte_width(self) -> int:
        """Bytes per sample. Bitmap images still step one byte at a time."""
        return max(1, self.depth // 8)

    @property
    def row_size(self) -> int:
        """Bytes per scanline of one channel."""
        return (self.width * self.depth + 7) // 8

    @property
    def channel_size(self) -> int:
        """Bytes per decompressed channel plane."""
        return self.row_size * self.height

    @property
    def color_desc(self) -> str:
        return ColorMode.describe(self.color_mode)

    @property
    def compression_desc(self) -> str:
        return Compression.describe(self.compression)
