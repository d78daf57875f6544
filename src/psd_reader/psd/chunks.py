"""
Top-level section layout.

The header is followed by three length-prefixed sections (color mode data,
image resources, layer and mask information). Whatever follows them is the
image data section. :py:func:`locate_chunks` records where each one lives
without copying anything.
"""

import logging
from typing import Iterator

from attrs import define, field

from psd_reader.constants import HEADER_SIZE
from psd_reader.errors import TruncatedChunk
from psd_reader.psd.bin_utils import Buffer, ByteCursor

logger = logging.getLogger(__name__)


@define(frozen=True)
class ChunkRef:
    """
    Byte range of a section inside the source buffer.

    .. py:attribute:: offset

        Position of the first byte of the section body.

    .. py:attribute:: length

        Size of the section body, length prefix excluded.
    """

    offset: int = field(default=0)
    length: int = field(default=0)

    @property
    def end(self) -> int:
        return self.offset + self.length

    def view(self, data: Buffer) -> memoryview:
        """Returns the bytes of this chunk as a view into ``data``."""
        return memoryview(data).cast("B")[self.offset : self.end]

    def cursor(self, data: Buffer) -> ByteCursor:
        return ByteCursor(data, self.offset, self.end)


@define(frozen=True)
class Chunks:
    """
    Locations of the five sections of a document.
    """

    header: ChunkRef
    color_mode_data: ChunkRef
    image_resources: ChunkRef
    layer_and_mask: ChunkRef
    image_data: ChunkRef

    def __iter__(self) -> Iterator[ChunkRef]:
        yield self.header
        yield self.color_mode_data
        yield self.image_resources
        yield self.layer_and_mask
        yield self.image_data

    def __len__(self) -> int:
        return 5

    def __getitem__(self, index: int) -> ChunkRef:
        return list(self)[index]


def _read_section(cursor: ByteCursor, name: str) -> ChunkRef:
    if cursor.remaining() < 4:
        raise TruncatedChunk(
            "Missing length of %s section at offset %d" % (name, cursor.tell())
        )
    length = cursor.read_u32()
    offset = cursor.tell()
    if length > cursor.remaining():
        raise TruncatedChunk(
            "%s section declares %d bytes, only %d left"
            % (name, length, cursor.remaining())
        )
    cursor.skip(length)
    logger.debug("located %s, offset=%d, len=%d" % (name, offset, length))
    return ChunkRef(offset, length)


def locate_chunks(data: Buffer) -> Chunks:
    """
    Walks the sections following the header.

    :param data: the whole document.
    :return: :py:class:`.Chunks`.
    """
    cursor = ByteCursor(data)
    cursor.seek(min(HEADER_SIZE, cursor.end))
    color_mode_data = _read_section(cursor, "color mode data")
    image_resources = _read_section(cursor, "image resources")
    layer_and_mask = _read_section(cursor, "layer and mask information")
    image_data = ChunkRef(cursor.tell(), cursor.remaining())
    logger.debug(
        "located image data, offset=%d, len=%d" % (image_data.offset, image_data.length)
    )
    return Chunks(
        ChunkRef(0, HEADER_SIZE),
        color_mode_data,
        image_resources,
        layer_and_mask,
        image_data,
    )
