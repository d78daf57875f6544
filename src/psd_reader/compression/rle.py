"""
Pure Python RLE (Run-Length Encoding) codec implementation.

PackBits is a simple byte-oriented run-length compression scheme used for
channel data. It works on bytes, whatever the sample depth is.

The header byte ``n``, read as a signed value, means:

- 0 to 127: copy the next ``n + 1`` literal bytes
- -127 to -1: repeat the next byte ``1 - n`` times
- -128: no-op

Example::

    from psd_reader.compression.rle import decode, encode

    raw_data = b'\\x00' * 100 + b'\\xff' * 50
    assert decode(encode(raw_data), len(raw_data)) == raw_data
"""

from psd_reader.errors import CorruptRLE
from psd_reader.psd.bin_utils import Buffer

MAX_RUN = 128


def decode(data: Buffer, size: int) -> bytes:
    """decode(data, size) -> bytes

    Apple PackBits RLE decoder. ``size`` is the exact number of bytes the
    encoded row must expand to.
    """

    i = 0
    length = len(data)
    data = bytes(data)
    result = bytearray()

    while i < length:
        i, bit = i + 1, data[i]
        if bit > 128:
            count = 257 - bit
            if i >= length or len(result) + count > size:
                raise CorruptRLE("Invalid RLE compression")
            result.extend(data[i : i + 1] * count)
            i += 1
        elif bit < 128:
            count = bit + 1
            if i + count > length or len(result) + count > size:
                raise CorruptRLE("Invalid RLE compression")
            result.extend(data[i : i + count])
            i += count

    if len(result) != size:
        raise CorruptRLE("Expected %d bytes but decoded %d bytes" % (size, len(result)))

    return bytes(result)


def encode(data: Buffer) -> bytes:
    """encode(data) -> bytes

    Apple PackBits RLE encoder. Runs of two equal bytes stay in literals,
    there is no space saved by encoding them.
    """

    data = bytes(data)
    length = len(data)
    result = bytearray()
    i = 0

    while i < length:
        j = i + 1
        while j < length and j - i < MAX_RUN and data[j] == data[i]:
            j += 1
        if j - i >= 3 or (j - i == 2 and j == length):
            result.extend((257 - (j - i), data[i]))
            i = j
            continue

        # Literal run ends where a run of 3 starts.
        j = i
        while j < length and j - i < MAX_RUN:
            if j + 2 < length and data[j] == data[j + 1] == data[j + 2]:
                break
            j += 1
        result.append(j - i - 1)
        result.extend(data[i:j])
        i = j

    return bytes(result)
