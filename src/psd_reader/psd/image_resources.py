"""
Image resources section structure. Image resources store non-pixel data
associated with the document, such as the resolution or the number of
colors used by an indexed palette.

The reader only records where each resource lives. See
:py:class:`~psd_reader.constants.Resource` for the ids it knows by name.

Example::

    from psd_reader.constants import Resource

    for entry in find_resource(resources, Resource.INDEXED_COLOR_TABLE_COUNT):
        print(entry.name, bytes(entry.get_data(buffer)))
"""

import logging
import warnings
from typing import Iterable, Union

from attrs import define

from psd_reader.constants import RESOURCE_SIGNATURE, Resource
from psd_reader.errors import ResourceScanWarning, TruncatedChunk
from psd_reader.psd.bin_utils import Buffer, ByteCursor, pad, trimmed_repr, unpack
from psd_reader.psd.chunks import ChunkRef

logger = logging.getLogger(__name__)


@define(frozen=True)
class ResourceEntry:
    """
    Location of a single image resource record.

    .. py:attribute:: id

        Resource id, see :py:class:`~psd_reader.constants.Resource`.

    .. py:attribute:: name

        Pascal name of the resource, usually empty.

    .. py:attribute:: range

        :py:class:`~psd_reader.psd.chunks.ChunkRef` of the data, padding
        excluded.
    """

    id: int
    name: str
    range: ChunkRef

    def get_data(self, data: Buffer) -> memoryview:
        return self.range.view(data)

    def __repr__(self) -> str:
        try:
            key = Resource(self.id).name
        except ValueError:
            key = str(self.id)
        return "ResourceEntry(%s, %r, offset=%d, len=%d)" % (
            key,
            self.name,
            self.range.offset,
            self.range.length,
        )


def _stop(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, ResourceScanWarning, stacklevel=3)


def scan_resources(
    data: Buffer, chunk: ChunkRef, encoding: str = "macroman"
) -> list[ResourceEntry]:
    """
    Walks the records of the image resources section.

    A record that does not start with ``8BIM`` or that overruns the section
    stops the scan with a :py:class:`~psd_reader.errors.ResourceScanWarning`;
    the records read so far are returned.

    :param data: the whole document.
    :param chunk: location of the image resources section.
    :param encoding: encoding of the Pascal names.
    :return: `list` of :py:class:`.ResourceEntry` in file order.
    """
    cursor = chunk.cursor(data)
    entries: list[ResourceEntry] = []
    while cursor.remaining() > 0:
        start = cursor.tell()
        try:
            signature = bytes(cursor.read(4))
            if signature != RESOURCE_SIGNATURE:
                _stop(
                    "Invalid resource signature %s at offset %d"
                    % (trimmed_repr(signature), start)
                )
                break
            resource_id = cursor.read_u16()
            name = cursor.read_pascal_string(encoding, padding=2)
            length = cursor.read_u32()
        except TruncatedChunk as e:
            _stop("Resource record at offset %d is truncated: %s" % (start, e))
            break

        offset = cursor.tell()
        if length > cursor.remaining():
            _stop(
                "Resource %d declares %d bytes, only %d left in section"
                % (resource_id, length, cursor.remaining())
            )
            break
        cursor.skip(min(pad(length, 2), cursor.remaining()))
        entry = ResourceEntry(resource_id, name, ChunkRef(offset, length))
        logger.debug("%r", entry)
        entries.append(entry)

    logger.debug("read image resources, count=%d" % len(entries))
    return entries


def find_resource(
    entries: Iterable[ResourceEntry], resource_id: Union[Resource, int]
) -> list[ResourceEntry]:
    """Returns every entry with ``resource_id``, in file order."""
    return [entry for entry in entries if entry.id == resource_id]


def read_indexes(data: Buffer, entries: Iterable[ResourceEntry]) -> int:
    """
    Number of palette colors in use, from the indexed color table count
    resource. Defaults to the full 256 entries.
    """
    for entry in find_resource(entries, Resource.INDEXED_COLOR_TABLE_COUNT):
        if entry.range.length >= 2:
            count = unpack("H", entry.get_data(data)[:2])[0]
            if 0 < count <= 256:
                return count
    return 256
