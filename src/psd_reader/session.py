"""
Decode session.

A :py:class:`DecodeSession` owns everything decoded from one byte buffer and
moves through these states::

    CREATED -> HEADER_PARSED -> CHUNKS_LOCATED -> DECOMPRESSING
            -> CONVERTING -> READY

A fatal error moves it to ``FAILED`` and a cancelled run to ``CANCELLED``;
neither can be resumed, start a new session instead. The failure record names
the stage that was running. Once ``READY`` the session can be converted again
with different options without decompressing the channels a second time; a
cancelled conversion returns to ``DECOMPRESSING`` with the planes intact.

Example::

    session = DecodeSession(data)
    session.parse()
    bitmap = session.decode(ConversionOptions(gamma=1 / 2.2))
"""

import contextlib
import logging
from enum import Enum
from typing import Iterator, Optional

from psd_reader.config import ConversionOptions
from psd_reader.convert.converter import RGBAConverter
from psd_reader.errors import (
    DecodeCancelled,
    DecodeError,
    InvalidStateError,
    PSDReaderError,
)
from psd_reader.psd.bin_utils import Buffer
from psd_reader.psd.chunks import Chunks, locate_chunks
from psd_reader.psd.color_mode_data import TABLE_SIZE, ColorTable, read_color_table
from psd_reader.psd.header import DocumentInfo, FileHeader, parse_header
from psd_reader.psd.image_data import ChannelDecompressor, read_compression
from psd_reader.psd.image_resources import (
    ResourceEntry,
    find_resource,
    read_indexes,
    scan_resources,
)
from psd_reader.scheduler import CancelToken, CooperativeScheduler

logger = logging.getLogger(__name__)


class SessionState(Enum):
    CREATED = "created"
    HEADER_PARSED = "header_parsed"
    CHUNKS_LOCATED = "chunks_located"
    DECOMPRESSING = "decompressing"
    CONVERTING = "converting"
    READY = "ready"
    FAILED = "failed"
    CANCELLED = "cancelled"


class DecodeSession:
    """
    Decodes one document buffer into RGBA.

    :param data: the whole document. It is never modified.
    :param scheduler: :py:class:`~psd_reader.scheduler.CooperativeScheduler`
        driving the decompression and conversion stages.
    :param encoding: encoding of the resource names.
    """

    def __init__(
        self,
        data: Buffer,
        scheduler: Optional[CooperativeScheduler] = None,
        encoding: str = "macroman",
    ):
        self.buffer = data
        self.scheduler = scheduler or CooperativeScheduler()
        self.encoding = encoding
        self.state = SessionState.CREATED
        self.header: Optional[FileHeader] = None
        self.chunks: Optional[Chunks] = None
        self.resources: list[ResourceEntry] = []
        self.info: Optional[DocumentInfo] = None
        self.color_table: Optional[ColorTable] = None
        self.planes: Optional[list[Buffer]] = None
        self.bitmap: Optional[bytes] = None
        self.error: Optional[DecodeError] = None

    def __repr__(self) -> str:
        return "<%s state=%s info=%r>" % (
            self.__class__.__name__,
            self.state.value,
            self.info,
        )

    @property
    def is_ready(self) -> bool:
        return self.state == SessionState.READY

    @property
    def failed(self) -> bool:
        return self.state in (SessionState.FAILED, SessionState.CANCELLED)

    def _expect(self, *states: SessionState) -> None:
        if self.state not in states:
            raise InvalidStateError(
                "Session is %s, expected one of %s"
                % (self.state.value, ", ".join(s.value for s in states))
            )

    @contextlib.contextmanager
    def _guard(self, source: str) -> Iterator[None]:
        """
        Records failures of the ``source`` stage.

        A cancelled conversion keeps the decompressed planes and goes back to
        ``DECOMPRESSING`` so it can be converted again.
        """
        try:
            yield
        except DecodeCancelled as e:
            self.error = DecodeError(str(e), source)
            self.bitmap = None
            if source == "convert" and self.planes is not None:
                self.state = SessionState.DECOMPRESSING
            else:
                self.state = SessionState.CANCELLED
            logger.info("%s cancelled" % source)
            raise
        except PSDReaderError as e:
            if isinstance(e, InvalidStateError):
                raise
            self.state = SessionState.FAILED
            self.error = DecodeError(str(e), source)
            self.bitmap = None
            logger.error("%s failed: %s" % (self.error.source, e))
            raise

    def parse(self) -> DocumentInfo:
        """
        Parses the header and locates the sections. Cheap, runs at once.

        :return: :py:class:`~psd_reader.psd.header.DocumentInfo`.
        """
        self._expect(SessionState.CREATED)
        with self._guard("header"):
            self.header = parse_header(self.buffer)
            self.state = SessionState.HEADER_PARSED
        with self._guard("chunks"):
            self.chunks = locate_chunks(self.buffer)
            self.resources = scan_resources(
                self.buffer, self.chunks.image_resources, self.encoding
            )
            compression = read_compression(self.buffer, self.chunks.image_data)
            self.info = DocumentInfo(
                self.header, compression, read_indexes(self.buffer, self.resources)
            )
            self.color_table = read_color_table(
                self.buffer, self.chunks.color_mode_data, self.header.color_mode
            )
            self.state = SessionState.CHUNKS_LOCATED
        logger.debug("parsed %r" % (self.info,))
        return self.info

    def decompressor(self) -> ChannelDecompressor:
        """Returns the decompression stage and enters ``DECOMPRESSING``."""
        if self.state == SessionState.CREATED:
            self.parse()
        self._expect(SessionState.CHUNKS_LOCATED)
        assert self.info is not None and self.chunks is not None
        with self._guard("decompress"):
            stage = ChannelDecompressor(self.buffer, self.chunks.image_data, self.info)
        self.state = SessionState.DECOMPRESSING
        return stage

    def converter(self, options: Optional[ConversionOptions] = None) -> RGBAConverter:
        """Returns the conversion stage and enters ``CONVERTING``."""
        self._expect(SessionState.DECOMPRESSING, SessionState.READY)
        if self.planes is None:
            raise InvalidStateError("Channels have not been decompressed")
        assert self.info is not None
        with self._guard("convert"):
            stage = RGBAConverter(self.planes, self.info, options, self.color_table)
        self.state = SessionState.CONVERTING
        return stage

    def decompress(self, cancel: Optional[CancelToken] = None) -> list[Buffer]:
        """Decompresses every channel, driven by the scheduler."""
        stage = self.decompressor()
        with self._guard("decompress"):
            self.scheduler.run(stage, cancel)
        self.planes = stage.planes
        return self.planes

    async def decompress_async(self, cancel: Optional[CancelToken] = None) -> list[Buffer]:
        stage = self.decompressor()
        with self._guard("decompress"):
            await self.scheduler.run_async(stage, cancel)
        self.planes = stage.planes
        return self.planes

    def to_rgba(
        self, options: Optional[ConversionOptions] = None, cancel: Optional[CancelToken] = None
    ) -> bytes:
        """
        Converts the decompressed channels to RGBA.

        :return: ``width * height * 4`` bytes in R, G, B, A order.
        """
        stage = self.converter(options)
        with self._guard("convert"):
            self.scheduler.run(stage, cancel)
        return self._publish(stage)

    async def to_rgba_async(
        self, options: Optional[ConversionOptions] = None, cancel: Optional[CancelToken] = None
    ) -> bytes:
        stage = self.converter(options)
        with self._guard("convert"):
            await self.scheduler.run_async(stage, cancel)
        return self._publish(stage)

    def _publish(self, stage: RGBAConverter) -> bytes:
        self.bitmap = stage.bitmap
        self.error = None
        self.state = SessionState.READY
        return self.bitmap

    def decode(
        self, options: Optional[ConversionOptions] = None, cancel: Optional[CancelToken] = None
    ) -> bytes:
        """Runs the whole pipeline and returns the RGBA bitmap."""
        self.decompress(cancel)
        return self.to_rgba(options, cancel)

    async def decode_async(
        self, options: Optional[ConversionOptions] = None, cancel: Optional[CancelToken] = None
    ) -> bytes:
        await self.decompress_async(cancel)
        return await self.to_rgba_async(options, cancel)

    def get_index_table(self) -> Optional[memoryview]:
        """
        Returns the 256-entry planar color table, or `None`.

        The values are not interleaved: first the reds, then the greens, then
        the blues.
        """
        if self.color_table is None or self.chunks is None:
            return None
        return self.chunks.color_mode_data.view(self.buffer)[:TABLE_SIZE]

    def find_resource(self, resource_id: int) -> list[ResourceEntry]:
        return find_resource(self.resources, resource_id)
