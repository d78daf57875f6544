import asyncio
import struct

import pytest

from psd_reader.config import ConversionOptions
from psd_reader.constants import ColorMode, Compression, Resource
from psd_reader.errors import (
    BadSignature,
    CorruptRLE,
    DecodeCancelled,
    InvalidStateError,
    MissingColorTable,
    TruncatedChunk,
    UnsupportedColorMode,
)
from psd_reader.scheduler import CancelToken
from psd_reader.session import DecodeSession, SessionState

from .utils import (
    RGB_2x2,
    RGBA_2x2_EXPECTED,
    make_psd,
    make_resource,
    planar_table,
)


def test_states(rgb_document) -> None:
    session = DecodeSession(rgb_document)
    assert session.state == SessionState.CREATED
    info = session.parse()
    assert session.state == SessionState.CHUNKS_LOCATED
    assert (info.width, info.height, info.channels) == (2, 2, 3)

    stage = session.decompressor()
    assert session.state == SessionState.DECOMPRESSING
    session.scheduler.run(stage)
    session.planes = stage.planes

    converter = session.converter()
    assert session.state == SessionState.CONVERTING
    converter.run()
    assert session._publish(converter) == RGBA_2x2_EXPECTED
    assert session.is_ready
    assert not session.failed


def test_decode(rgb_document) -> None:
    session = DecodeSession(rgb_document)
    assert session.decode() == RGBA_2x2_EXPECTED
    assert session.bitmap == RGBA_2x2_EXPECTED
    assert session.state == SessionState.READY
    assert session.error is None


def test_decode_async(rgb_document) -> None:
    session = DecodeSession(rgb_document)
    assert asyncio.run(session.decode_async()) == RGBA_2x2_EXPECTED
    assert session.is_ready


def test_reconvert() -> None:
    planes = [bytes([100, 200]), bytes([255, 0])]
    data = make_psd(planes, width=2, height=1, color_mode=ColorMode.GRAYSCALE)
    session = DecodeSession(data)
    assert list(session.decode()) == [100, 100, 100, 255, 0, 0, 0, 0]
    decoded = session.planes

    bitmap = session.to_rgba(ConversionOptions(ignore_alpha=True))
    assert list(bitmap) == [100, 100, 100, 255, 200, 200, 200, 255]
    assert session.planes is decoded
    assert session.is_ready


def test_parse_twice(rgb_document) -> None:
    session = DecodeSession(rgb_document)
    session.parse()
    with pytest.raises(InvalidStateError):
        session.parse()
    assert not session.failed


def test_convert_before_decompress(rgb_document) -> None:
    session = DecodeSession(rgb_document)
    session.parse()
    with pytest.raises(InvalidStateError):
        session.to_rgba()
    assert session.state == SessionState.CHUNKS_LOCATED


def test_bad_signature(rgb_document) -> None:
    session = DecodeSession(b"8BPX" + rgb_document[4:])
    with pytest.raises(BadSignature):
        session.decode()
    assert session.state == SessionState.FAILED
    assert session.error.source == "header"
    assert session.error.message
    assert session.error.timestamp > 0
    assert session.bitmap is None
    with pytest.raises(InvalidStateError):
        session.parse()


def test_truncated_chunk(rgb_document) -> None:
    session = DecodeSession(rgb_document[:30])
    with pytest.raises(TruncatedChunk):
        session.parse()
    assert session.state == SessionState.FAILED
    assert session.error.source == "chunks"
    assert session.header is not None


def test_corrupt_rle() -> None:
    data = bytearray(make_psd(RGB_2x2, width=2, height=2, compression=Compression.RLE))
    # First row of the first channel: literal header asks for too many bytes.
    first_row = len(data) - sum(struct.unpack(">6H", data[-6 * 2 - 18 : -18]))
    data[first_row] = 0x05
    session = DecodeSession(bytes(data))
    with pytest.raises(CorruptRLE):
        session.decode()
    assert session.state == SessionState.FAILED
    assert session.error.source == "decompress"
    assert session.planes is None


def test_unsupported_color_mode() -> None:
    data = make_psd(RGB_2x2, width=2, height=2, color_mode=ColorMode.MULTICHANNEL)
    session = DecodeSession(data)
    session.parse()
    with pytest.raises(UnsupportedColorMode):
        session.decode()
    assert session.state == SessionState.FAILED
    assert session.error.source == "convert"
    assert session.planes is not None


def test_cancelled(rgb_document) -> None:
    token = CancelToken()
    token.cancel()
    session = DecodeSession(rgb_document)
    with pytest.raises(DecodeCancelled):
        session.decode(cancel=token)
    assert session.state == SessionState.CANCELLED
    assert session.error.source == "decompress"
    assert session.failed
    with pytest.raises(InvalidStateError):
        session.decompress()


def test_cancelled_conversion(rgb_document) -> None:
    session = DecodeSession(rgb_document)
    session.decode()
    token = CancelToken()
    token.cancel()
    with pytest.raises(DecodeCancelled):
        session.to_rgba(cancel=token)
    assert session.state == SessionState.DECOMPRESSING
    assert session.error.source == "convert"
    assert session.bitmap is None
    assert not session.failed

    assert session.to_rgba(ConversionOptions(ignore_alpha=True)) == RGBA_2x2_EXPECTED
    assert session.is_ready
    assert session.error is None


def test_index_table() -> None:
    data = make_psd(
        [bytes([0, 1, 2, 3])],
        width=2,
        height=2,
        color_mode=ColorMode.INDEXED,
        color_mode_data=planar_table(),
    )
    session = DecodeSession(data)
    session.parse()
    assert bytes(session.get_index_table()) == planar_table()
    assert session.info.indexes == 256


def test_no_index_table(rgb_document) -> None:
    session = DecodeSession(rgb_document)
    assert session.get_index_table() is None
    session.parse()
    assert session.get_index_table() is None


def test_resources() -> None:
    resources = (
        make_resource(Resource.INDEXED_COLOR_TABLE_COUNT, struct.pack(">H", 16))
        + make_resource(1005, b"\x00" * 16, b"res")
        + make_resource(1005, b"\x01")
    )
    data = make_psd(
        [bytes([0, 1, 2, 3])],
        width=2,
        height=2,
        color_mode=ColorMode.INDEXED,
        color_mode_data=planar_table(),
        resources=resources,
    )
    session = DecodeSession(data)
    session.parse()
    assert [entry.id for entry in session.resources] == [1046, 1005, 1005]
    found = session.find_resource(1005)
    assert [entry.name for entry in found] == ["res", ""]
    assert bytes(found[1].get_data(data)) == b"\x01"
    assert session.find_resource(9999) == []
    assert session.info.indexes == 16


def test_truncated_raw_data(rgb_document) -> None:
    session = DecodeSession(rgb_document[:-1])
    session.parse()
    with pytest.raises(TruncatedChunk):
        session.decompress()
    assert session.state == SessionState.FAILED
    assert session.error.source == "decompress"


def test_missing_color_table() -> None:
    data = make_psd([bytes([0, 1, 2, 3])], width=2, height=2, color_mode=ColorMode.INDEXED)
    session = DecodeSession(data)
    with pytest.raises(MissingColorTable):
        session.parse()
    assert session.state == SessionState.FAILED
    assert session.error.source == "chunks"
