"""Helpers building synthetic documents in memory."""

import logging
import struct
from typing import Sequence

from psd_reader.compression import rle
from psd_reader.constants import ColorMode, Compression

logging.basicConfig(level=logging.DEBUG)

RGB_2x2 = [bytes([10, 20, 30, 40]), bytes([1, 2, 3, 4]), bytes([5, 6, 7, 8])]
RGBA_2x2_EXPECTED = bytes(
    [10, 1, 5, 255, 20, 2, 6, 255, 30, 3, 7, 255, 40, 4, 8, 255]
)


def make_header(
    channels: int = 3,
    height: int = 2,
    width: int = 2,
    depth: int = 8,
    color_mode: int = ColorMode.RGB,
    signature: bytes = b"8BPS",
    version: int = 1,
) -> bytes:
    return struct.pack(
        ">4sH6xHIIHH", signature, version, channels, height, width, depth, color_mode
    )


def make_resource(resource_id: int, data: bytes, name: bytes = b"") -> bytes:
    name_block = bytes([len(name)]) + name
    if len(name_block) % 2:
        name_block += b"\x00"
    padding = b"\x00" if len(data) % 2 else b""
    return (
        b"8BIM"
        + struct.pack(">H", resource_id)
        + name_block
        + struct.pack(">I", len(data))
        + data
        + padding
    )


def make_section(data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + data


def make_rle(planes: Sequence[bytes], row_size: int, height: int) -> bytes:
    counts = []
    rows = []
    for plane in planes:
        for y in range(height):
            row = rle.encode(plane[y * row_size : (y + 1) * row_size])
            counts.append(len(row))
            rows.append(row)
    return struct.pack(">%dH" % len(counts), *counts) + b"".join(rows)


def make_psd(
    planes: Sequence[bytes],
    width: int,
    height: int,
    depth: int = 8,
    color_mode: int = ColorMode.RGB,
    compression: int = Compression.RAW,
    color_mode_data: bytes = b"",
    resources: bytes = b"",
    layer_and_mask: bytes = b"",
    channels: int = 0,
) -> bytes:
    """Assembles a document whose merged image holds ``planes``."""
    header = make_header(channels or len(planes), height, width, depth, color_mode)
    if compression == Compression.RLE:
        image_data = make_rle(planes, (width * depth + 7) // 8, height)
    else:
        image_data = b"".join(planes)
    return (
        header
        + make_section(color_mode_data)
        + make_section(resources)
        + make_section(layer_and_mask)
        + struct.pack(">H", compression)
        + image_data
    )


def planar_table() -> bytes:
    """Color table with R=i, G=255-i, B=2*i mod 256."""
    return (
        bytes(range(256))
        + bytes(255 - i for i in range(256))
        + bytes((i * 2) % 256 for i in range(256))
    )
