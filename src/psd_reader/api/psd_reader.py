"""
PSD reader module.

:py:class:`PSDReader` is the entry point for users of psd_reader. It loads a
document, decodes the merged image and keeps the resulting RGBA bitmap.

Example usage::

    from psd_reader import PSDReader

    psd = PSDReader.open('document.psd', gamma=1 / 2.2)
    print(psd.width, psd.height, psd.info.color_desc)

    # 8-bit RGBA bytes, ready for a raster surface
    bitmap = psd.rgba

    # Convert again with other settings, channels are not decoded twice
    psd.to_rgba(ConversionOptions(ignore_alpha=True))
    psd.topil().save('output.png')

Passive mode loads the file without decoding it::

    psd = PSDReader.open('document.psd', passive=True)
    print(psd.read_info().color_desc)  # header and sections only
    psd.parse()
"""

import logging
import os
from typing import Any, BinaryIO, Optional, Union

import numpy as np
from PIL import Image

from psd_reader.api import numpy_io, pil_io
from psd_reader.config import ConversionOptions, ReaderConfig
from psd_reader.convert.gamma import float_to_component, gamma_lut
from psd_reader.errors import DecodeError, InvalidStateError
from psd_reader.psd.bin_utils import Buffer
from psd_reader.psd.chunks import Chunks
from psd_reader.psd.color_mode_data import index_to_int
from psd_reader.psd.header import DocumentInfo
from psd_reader.psd.image_resources import ResourceEntry
from psd_reader.scheduler import CancelToken, CooperativeScheduler
from psd_reader.session import DecodeSession, SessionState

logger = logging.getLogger(__name__)

_PARSEABLE = (SessionState.CREATED, SessionState.CHUNKS_LOCATED)


class PSDReader:
    """
    Photoshop PSD document reader.

    The low-level session is accessible at :py:attr:`PSDReader.session`.

    :param data: the whole document.
    :param config: :py:class:`~psd_reader.config.ReaderConfig`.
    :param scheduler: :py:class:`~psd_reader.scheduler.CooperativeScheduler`.
    """

    index_to_int = staticmethod(index_to_int)
    get_gamma_lut = staticmethod(gamma_lut)
    float_to_component = staticmethod(float_to_component)

    def __init__(
        self,
        data: Buffer,
        config: Optional[ReaderConfig] = None,
        scheduler: Optional[CooperativeScheduler] = None,
    ):
        self.config = config or ReaderConfig()
        self.buffer = data
        self.session = DecodeSession(data, scheduler, self.config.encoding)
        self.rgba: Optional[bytes] = None
        if not self.config.passive:
            self.parse()

    @classmethod
    def open(cls, fp: Union[BinaryIO, str, bytes, os.PathLike], **kwargs: Any) -> "PSDReader":
        """
        Open a PSD document.

        :param fp: filename or file-like object.
        :param kwargs: options of :py:class:`~psd_reader.config.ReaderConfig`.
        :return: A :py:class:`~psd_reader.api.psd_reader.PSDReader` object.
        """
        if isinstance(fp, (str, bytes, os.PathLike)):
            with open(fp, "rb") as f:
                data = f.read()
        else:
            data = fp.read()
        logger.debug("loaded %d bytes" % len(data))
        return cls.frombytes(data, **kwargs)

    @classmethod
    def frombytes(cls, data: Buffer, **kwargs: Any) -> "PSDReader":
        scheduler = kwargs.pop("scheduler", None)
        return cls(data, ReaderConfig(**kwargs), scheduler)

    def __repr__(self) -> str:
        if self.session.info is None:
            return "%s(state=%s)" % (self.__class__.__name__, self.state.value)
        return "%s(mode=%s size=%dx%d depth=%d channels=%d)" % (
            self.__class__.__name__,
            self.info.color_desc,
            self.width,
            self.height,
            self.depth,
            self.channels,
        )

    def parse(self, cancel: Optional[CancelToken] = None) -> None:
        """
        Decode the document. Does nothing if it is already parsed.

        Channels are decompressed, then converted to RGBA when
        ``config.to_rgba`` is set.
        """
        if self.session.state not in _PARSEABLE:
            logger.debug("already parsed, state=%s" % self.state.value)
            return
        self.read_info()
        self.session.decompress(cancel)
        if self.config.to_rgba:
            self.rgba = self.session.to_rgba(self.config.conversion_options(), cancel)

    def read_info(self) -> DocumentInfo:
        """
        Parse the header and locate the sections without decoding any pixel.
        Does nothing more once done; :py:meth:`parse` can still follow.

        :return: :py:class:`~psd_reader.psd.header.DocumentInfo`.
        """
        if self.session.state == SessionState.CREATED:
            self.session.parse()
        return self.info

    async def parse_async(self, cancel: Optional[CancelToken] = None) -> None:
        """Same as :py:meth:`parse`, yielding to the event loop between slices."""
        if self.session.state not in _PARSEABLE:
            return
        self.read_info()
        await self.session.decompress_async(cancel)
        if self.config.to_rgba:
            self.rgba = await self.session.to_rgba_async(
                self.config.conversion_options(), cancel
            )

    def to_rgba(
        self, options: Optional[ConversionOptions] = None, cancel: Optional[CancelToken] = None
    ) -> bytes:
        """
        Convert the decoded channels to RGBA and store the result in
        :py:attr:`rgba`. Can be called again to convert with new settings.

        :param options: defaults to the options of :py:attr:`config`.
        :return: ``width * height * 4`` bytes in R, G, B, A order.
        """
        if self.session.state == SessionState.CREATED:
            raise InvalidStateError("Document is not parsed yet, call parse() first")
        self.rgba = None
        self.rgba = self.session.to_rgba(options or self.config.conversion_options(), cancel)
        return self.rgba

    async def to_rgba_async(
        self, options: Optional[ConversionOptions] = None, cancel: Optional[CancelToken] = None
    ) -> bytes:
        if self.session.state == SessionState.CREATED:
            raise InvalidStateError("Document is not parsed yet, call parse() first")
        self.rgba = None
        self.rgba = await self.session.to_rgba_async(
            options or self.config.conversion_options(), cancel
        )
        return self.rgba

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def is_parsed(self) -> bool:
        return self.session.planes is not None and not self.session.failed

    @property
    def error(self) -> Optional[DecodeError]:
        return self.session.error

    @property
    def info(self) -> DocumentInfo:
        if self.session.info is None:
            raise InvalidStateError("Document is not parsed yet")
        return self.session.info

    @property
    def width(self) -> int:
        return self.info.width

    @property
    def height(self) -> int:
        return self.info.height

    @property
    def depth(self) -> int:
        return self.info.depth

    @property
    def channels(self) -> int:
        return self.info.channels

    @property
    def color_mode(self) -> int:
        return self.info.color_mode

    @property
    def chunks(self) -> Chunks:
        """Locations of the five sections."""
        if self.session.chunks is None:
            raise InvalidStateError("Document is not parsed yet")
        return self.session.chunks

    @property
    def resources(self) -> list[ResourceEntry]:
        return self.session.resources

    @property
    def bitmaps(self) -> list[Buffer]:
        """Decompressed channel planes in file order."""
        if self.session.planes is None:
            raise InvalidStateError("Channels have not been decompressed")
        return self.session.planes

    def find_resource(self, resource_id: int) -> list[ResourceEntry]:
        """Returns the resources with ``resource_id`` in file order."""
        return self.session.find_resource(resource_id)

    def get_index_table(self) -> Optional[memoryview]:
        """
        Returns the indexed color table if present, or `None`. The table has
        256 entries and is not interleaved: reds, then greens, then blues. The
        number of colors in use is :py:attr:`info.indexes`.
        """
        return self.session.get_index_table()

    def _require_rgba(self) -> bytes:
        if self.rgba is None:
            raise InvalidStateError("No RGBA bitmap, call to_rgba() first")
        return self.rgba

    def topil(self) -> Image.Image:
        """
        Get PIL Image of the converted bitmap.

        :return: :py:class:`PIL.Image.Image` in ``RGBA`` mode.
        """
        return pil_io.to_pil(self._require_rgba(), self.width, self.height)

    def numpy(self, normalize: bool = False) -> np.ndarray:
        """
        Get the converted bitmap as a ``(height, width, 4)`` array.
        """
        return numpy_io.to_array(self._require_rgba(), self.width, self.height, normalize)
