"""
psd-reader: decode Photoshop PSD documents into RGBA bitmaps.

Basic usage::

    from psd_reader import PSDReader

    psd = PSDReader.open('example.psd')
    bitmap = psd.rgba          # width * height * 4 bytes, R, G, B, A
    psd.topil().save('output.png')

Architecture:

- :py:mod:`psd_reader.psd`: Header, section and resource parsing
- :py:mod:`psd_reader.compression`: Raw and PackBits channel data
- :py:mod:`psd_reader.convert`: Color mode conversion to RGBA
- :py:mod:`psd_reader.scheduler`: Cooperative time-slicing of long stages
- :py:mod:`psd_reader.session`: Decode state machine
- :py:mod:`psd_reader.api`: High-level reader (primary interface)
"""

from psd_reader.api.psd_reader import PSDReader
from psd_reader.config import ConversionOptions, ReaderConfig, SchedulerConfig
from psd_reader.session import DecodeSession, SessionState
from psd_reader.version import __version__

__all__ = [
    "PSDReader",
    "ConversionOptions",
    "ReaderConfig",
    "SchedulerConfig",
    "DecodeSession",
    "SessionState",
    "__version__",
]
