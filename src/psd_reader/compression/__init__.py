"""
Image compression utilities for channel data.

Supported compression methods:

- **RAW** (``Compression.RAW``): Uncompressed raw pixel data
- **RLE** (``Compression.RLE``): Apple PackBits run-length encoding

ZIP variants (``Compression.ZIP`` and ``Compression.ZIP_WITH_PREDICTION``)
are rejected with :py:class:`~psd_reader.errors.UnsupportedCompression`.

Key functions:

- :py:func:`check_compression`: Validate a compression method
- :py:func:`row_size`: Bytes per scanline for a width and depth
- :py:func:`decode_row`: RLE decoding of a single scanline

The byte-count table of RLE image data lists every row of every channel
before the first compressed row; walking it is the job of
:py:class:`~psd_reader.psd.image_data.ChannelDecompressor`.

Example usage::

    from psd_reader.compression import decode_row, row_size

    row = decode_row(data[offset : offset + count], row_size(width, depth))
"""

import logging

from psd_reader.compression import rle as rle_impl
from psd_reader.constants import Compression
from psd_reader.errors import CorruptRLE, UnsupportedCompression
from psd_reader.psd.bin_utils import Buffer

logger = logging.getLogger(__name__)


def row_size(width: int, depth: int) -> int:
    return (width * depth + 7) // 8


def check_compression(compression: int) -> Compression:
    """
    Returns the :py:class:`~psd_reader.constants.Compression` for a supported
    method, raises :py:class:`~psd_reader.errors.UnsupportedCompression`
    otherwise.
    """
    if compression not in (Compression.RAW, Compression.RLE):
        try:
            desc = Compression(compression).name
        except ValueError:
            desc = str(compression)
        raise UnsupportedCompression("Unsupported compression method: %s" % desc)
    return Compression(compression)


def decode_row(data: Buffer, size: int) -> bytes:
    """Decode one PackBits scanline.

    :param data: compressed bytes of the row.
    :param size: exact size of the decoded row.
    :return: decompressed row bytes.
    """
    try:
        return rle_impl.decode(data, size)
    except CorruptRLE as e:
        logger.error(f"An error occurred during RLE decoding: {e}")
        logger.info(f"Decompression of RLE row failed: {size=} length={len(data)}")
        raise
