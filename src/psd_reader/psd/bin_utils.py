"""
Binary processing utilities.

:py:class:`ByteCursor` gives read-only, big-endian typed access over a fixed
byte buffer. Every section reader goes through it; slices it hands out are
``memoryview`` objects that share memory with the source buffer.
"""

import array
import struct
import sys
from typing import Any, Union

from psd_reader.errors import TruncatedChunk

Buffer = Union[bytes, bytearray, memoryview]


def pad(number: int, divisor: int) -> int:
    if number % divisor:
        number = (number // divisor + 1) * divisor
    return number


def unpack(fmt: str, data: Buffer) -> tuple:
    fmt = str(">" + fmt)
    return struct.unpack(fmt, data)


def be_array_from_bytes(fmt: str, data: Buffer) -> array.array:
    """
    Reads an array from bytestring with big-endian data.
    """
    arr = array.array(str(fmt), bytes(data))
    if sys.byteorder == "little":
        arr.byteswap()
    return arr


def be_array_to_bytes(arr: array.array) -> bytes:
    """
    Writes an array to bytestring with big-endian data.
    """
    data = arr[:]
    if sys.byteorder == "little":
        data.byteswap()
    return data.tobytes()


def trimmed_repr(data: Any, trim_length: int = 16) -> str:
    if isinstance(data, (bytes, bytearray, memoryview)):
        data = bytes(data)
        if len(data) > trim_length:
            return repr(data[:trim_length] + b" ... =" + str(len(data)).encode("ascii"))
    return repr(data)


class ByteCursor:
    """
    Read-only cursor over a byte buffer.

    Example::

        cursor = ByteCursor(data)
        signature, version = cursor.read_fmt("4sH")
        block = cursor.read_length_block()

    Reading past the end raises :py:class:`~psd_reader.errors.TruncatedChunk`.
    """

    __slots__ = ("buffer", "pos", "end")

    def __init__(self, data: Buffer, start: int = 0, end: Union[int, None] = None):
        self.buffer = memoryview(data).cast("B")
        self.end = len(self.buffer) if end is None else end
        if not 0 <= start <= self.end <= len(self.buffer):
            raise TruncatedChunk(
                "cursor range [%d, %d) outside buffer of %d bytes"
                % (start, self.end, len(self.buffer))
            )
        self.pos = start

    def __repr__(self) -> str:
        return "ByteCursor(pos=%d, end=%d)" % (self.pos, self.end)

    def tell(self) -> int:
        return self.pos

    def remaining(self) -> int:
        return self.end - self.pos

    def seek(self, pos: int) -> None:
        if not 0 <= pos <= self.end:
            raise TruncatedChunk("seek to %d outside [0, %d]" % (pos, self.end))
        self.pos = pos

    def skip(self, size: int) -> None:
        self.seek(self.pos + size)

    def read(self, size: int) -> memoryview:
        """Returns the next ``size`` bytes as a view without copying."""
        if size < 0 or self.pos + size > self.end:
            raise TruncatedChunk(
                "need %d bytes at offset %d, only %d left"
                % (size, self.pos, self.remaining())
            )
        view = self.buffer[self.pos : self.pos + size]
        self.pos += size
        return view

    def peek(self, size: int) -> memoryview:
        start = self.pos
        view = self.read(size)
        self.pos = start
        return view

    def read_fmt(self, fmt: str) -> tuple:
        """
        Reads data according to big-endian ``fmt``.
        """
        fmt = str(">" + fmt)
        return struct.unpack(fmt, self.read(struct.calcsize(fmt)))

    def read_u8(self) -> int:
        return self.read_fmt("B")[0]

    def read_u16(self) -> int:
        return self.read_fmt("H")[0]

    def read_u32(self) -> int:
        return self.read_fmt("I")[0]

    def read_f32(self) -> float:
        return self.read_fmt("f")[0]

    def read_be_array(self, fmt: str, count: int) -> array.array:
        """
        Reads an array of ``count`` big-endian items.
        """
        itemsize = array.array(fmt).itemsize
        return be_array_from_bytes(fmt, self.read(itemsize * count))

    def read_length_block(self, fmt: str = "I", padding: int = 1) -> memoryview:
        """
        Reads a length-prefixed block, skipping padding after the data.
        """
        length = self.read_fmt(fmt)[0]
        data = self.read(length)
        self.skip(min(pad(length, padding) - length, self.remaining()))
        return data

    def read_pascal_string(self, encoding: str = "macroman", padding: int = 1) -> str:
        """
        Reads a Pascal string whose total size, length byte included, is
        padded to a multiple of ``padding``.
        """
        length = self.read_u8()
        data = bytes(self.read(length))
        self.skip(pad(length + 1, padding) - length - 1)
        return data.decode(encoding, "replace")
