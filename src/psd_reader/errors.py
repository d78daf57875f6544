"""
Exceptions and warnings raised while reading a document.

Every malformed-input condition is a :py:class:`FormatError`. Format errors
are fatal for the decode session that hit them: nothing is retried and no
partial bitmap is published. A failed session keeps a
:py:class:`DecodeError` record describing the failure.
"""

import time
from typing import Optional

from attrs import define, field


class PSDReaderError(Exception):
    """Base class of all the errors raised by psd_reader."""


class FormatError(PSDReaderError, ValueError):
    """
    The byte buffer is not a document the reader can decode.

    .. py:attribute:: source

        Name of the pipeline stage that detected the problem.
    """

    source = "core"

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        if source is not None:
            self.source = source


class BadSignature(FormatError):
    source = "header"


class TruncatedHeader(BadSignature):
    """The buffer is too short to hold the fixed header."""


class BadVersion(FormatError):
    source = "header"


class UnsupportedDepth(FormatError):
    source = "header"


class DimensionOutOfRange(FormatError):
    source = "header"


class TruncatedChunk(FormatError):
    source = "chunks"


class MissingColorTable(FormatError):
    source = "convert"


class CorruptRLE(FormatError):
    source = "decompress"


class UnsupportedCompression(FormatError):
    source = "decompress"


class UnsupportedColorMode(FormatError):
    source = "convert"


class ConfigurationError(PSDReaderError, ValueError):
    """An option is out of its accepted range."""


class InvalidStateError(PSDReaderError):
    """An operation was requested in a session state that does not allow it."""


class DecodeCancelled(PSDReaderError):
    """The caller cancelled the session at a slice boundary."""


class ResourceScanWarning(UserWarning):
    """An image resource record overruns its section; the scan stopped early."""


@define(frozen=True)
class DecodeError:
    """
    Structured description of a failed session.

    .. py:attribute:: message

        Human readable message.

    .. py:attribute:: source

        Stage that failed, e.g. ``"header"`` or ``"decompress"``.

    .. py:attribute:: timestamp

        Wall-clock time of the failure, seconds since the epoch.
    """

    message: str
    source: str
    timestamp: float = field(factory=time.time)

    @classmethod
    def from_exception(cls, error: BaseException, source: str = "core") -> "DecodeError":
        return cls(str(error), getattr(error, "source", source))
