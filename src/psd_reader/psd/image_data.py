"""
Image data section structure.

The image data section is the last section of the file. It stores the merged
image as one plane per channel, either raw or PackBits compressed. For RLE the
byte counts of every scanline of every channel come first, followed by the
compressed rows of channel 0, channel 1, and so on.

:py:class:`ChannelDecompressor` rebuilds the planes one unit of work at a time
so that :py:class:`~psd_reader.scheduler.CooperativeScheduler` can interleave
it with other work.
"""

import logging
from typing import Optional

from psd_reader.compression import check_compression, decode_row
from psd_reader.constants import Compression
from psd_reader.errors import InvalidStateError, TruncatedChunk
from psd_reader.psd.bin_utils import Buffer
from psd_reader.psd.chunks import ChunkRef
from psd_reader.psd.header import DocumentInfo

logger = logging.getLogger(__name__)


def read_compression(data: Buffer, chunk: ChunkRef) -> int:
    """Reads the compression method at the start of the image data section."""
    if chunk.length < 2:
        raise TruncatedChunk("Image data section is missing its compression method")
    return chunk.cursor(data).read_u16()


class ChannelDecompressor:
    """
    Decompresses the merged image into channel planes.

    One call to :py:meth:`step` handles one scanline of one channel for RLE
    data, or one whole channel for raw data, where a plane is a view into the
    source buffer.

    Example::

        stage = ChannelDecompressor(buffer, chunks.image_data, info)
        while not stage.step():
            pass
        planes = stage.planes

    .. py:attribute:: planes

        Decompressed planes in file order, available once done.
    """

    def __init__(self, data: Buffer, chunk: ChunkRef, info: DocumentInfo):
        self.info = info
        self.compression = check_compression(info.compression)
        self._data = memoryview(data).cast("B")
        self._planes: list[Buffer] = []
        self._channel = 0
        self._row = 0
        self._current: Optional[bytearray] = None

        start = chunk.offset + 2
        remaining = chunk.length - 2
        if self.compression == Compression.RAW:
            needed = info.channel_size * info.channels
            if needed > remaining:
                raise TruncatedChunk(
                    "Raw image data needs %d bytes, only %d present" % (needed, remaining)
                )
            self._pos = start
            self._counts = None
        else:
            cursor = chunk.cursor(data)
            cursor.skip(2)
            self._counts = cursor.read_be_array("H", info.height * info.channels)
            total = sum(self._counts)
            if total > cursor.remaining():
                raise TruncatedChunk(
                    "RLE rows need %d bytes, only %d present" % (total, cursor.remaining())
                )
            self._pos = cursor.tell()
        logger.debug(
            "decompressing %d channels, compression=%s, plane=%d bytes"
            % (info.channels, self.compression.name, info.channel_size)
        )

    @property
    def done(self) -> bool:
        return self._channel >= self.info.channels

    @property
    def planes(self) -> list[Buffer]:
        if not self.done:
            raise InvalidStateError("Channels are still being decompressed")
        return self._planes

    def __len__(self) -> int:
        """Total units of work."""
        if self.compression == Compression.RAW:
            return self.info.channels
        return self.info.channels * self.info.height

    def step(self) -> bool:
        """
        Runs one unit of work.

        :return: `True` when every channel has been decompressed.
        """
        if self.done:
            return True
        if self.compression == Compression.RAW:
            size = self.info.channel_size
            self._planes.append(self._data[self._pos : self._pos + size])
            self._pos += size
            self._channel += 1
            return self.done

        assert self._counts is not None
        if self._current is None:
            self._current = bytearray()
        count = self._counts[self._channel * self.info.height + self._row]
        row = decode_row(self._data[self._pos : self._pos + count], self.info.row_size)
        self._current += row
        self._pos += count
        self._row += 1
        if self._row == self.info.height:
            self._planes.append(bytes(self._current))
            self._current = None
            self._row = 0
            self._channel += 1
        return self.done

    def run(self) -> list[Buffer]:
        """Decompresses everything without yielding."""
        while not self.step():
            pass
        return self.planes
