import asyncio
import io
import struct

import numpy as np
import pytest

from psd_reader import ConversionOptions, PSDReader, SchedulerConfig, SessionState
from psd_reader.api import numpy_io, pil_io
from psd_reader.constants import ColorMode, Compression, Resource
from psd_reader.errors import BadSignature, InvalidStateError
from psd_reader.scheduler import CooperativeScheduler

from ..utils import RGB_2x2, RGBA_2x2_EXPECTED, make_psd, make_resource, planar_table


def test_open_path(tmp_path, rgb_document) -> None:
    path = tmp_path / "document.psd"
    path.write_bytes(rgb_document)
    psd = PSDReader.open(path)
    assert psd.rgba == RGBA_2x2_EXPECTED
    assert PSDReader.open(str(path)).rgba == RGBA_2x2_EXPECTED


def test_open_file(rgb_document) -> None:
    psd = PSDReader.open(io.BytesIO(rgb_document))
    assert psd.is_parsed
    assert psd.state == SessionState.READY
    assert (psd.width, psd.height, psd.depth, psd.channels) == (2, 2, 8, 3)
    assert psd.color_mode == ColorMode.RGB
    assert psd.error is None
    assert "size=2x2" in repr(psd)


def test_frombytes_scheduler(rgb_document) -> None:
    scheduler = CooperativeScheduler(SchedulerConfig(block_size=1))
    psd = PSDReader.frombytes(rgb_document, scheduler=scheduler)
    assert psd.session.scheduler is scheduler
    assert psd.rgba == RGBA_2x2_EXPECTED
    assert scheduler.slices == 3 + 2


def test_passive(rgb_document) -> None:
    psd = PSDReader.frombytes(rgb_document, passive=True)
    assert psd.state == SessionState.CREATED
    assert psd.rgba is None
    assert not psd.is_parsed
    assert "state=created" in repr(psd)
    with pytest.raises(InvalidStateError):
        psd.info
    with pytest.raises(InvalidStateError):
        psd.to_rgba()

    psd.parse()
    assert psd.rgba == RGBA_2x2_EXPECTED
    psd.parse()
    assert psd.state == SessionState.READY


def test_no_rgba(rgb_document) -> None:
    psd = PSDReader.frombytes(rgb_document, to_rgba=False)
    assert psd.is_parsed
    assert psd.rgba is None
    assert [bytes(plane) for plane in psd.bitmaps] == RGB_2x2
    with pytest.raises(InvalidStateError):
        psd.topil()
    assert psd.to_rgba() == RGBA_2x2_EXPECTED
    assert psd.state == SessionState.READY


def test_parse_async(rgb_document) -> None:
    psd = PSDReader.frombytes(rgb_document, passive=True)
    asyncio.run(psd.parse_async())
    assert psd.rgba == RGBA_2x2_EXPECTED
    bitmap = asyncio.run(psd.to_rgba_async(ConversionOptions(gamma=0.5)))
    assert bitmap == psd.rgba
    assert bitmap != RGBA_2x2_EXPECTED


def test_reconvert() -> None:
    data = make_psd(
        [bytes([100, 200]), bytes([255, 0])], width=2, height=1, color_mode=ColorMode.GRAYSCALE
    )
    psd = PSDReader.frombytes(data)
    assert list(psd.rgba) == [100, 100, 100, 255, 0, 0, 0, 0]
    psd.to_rgba(ConversionOptions(ignore_alpha=True))
    assert list(psd.rgba) == [100, 100, 100, 255, 200, 200, 200, 255]


def test_bad_document(rgb_document) -> None:
    with pytest.raises(BadSignature):
        PSDReader.frombytes(b"8BPX" + rgb_document[4:])

    psd = PSDReader.frombytes(b"8BPX" + rgb_document[4:], passive=True)
    with pytest.raises(BadSignature):
        psd.parse()
    assert psd.state == SessionState.FAILED
    assert psd.error.source == "header"
    assert not psd.is_parsed


def test_topil(rgb_document) -> None:
    image = PSDReader.frombytes(rgb_document).topil()
    assert image.mode == "RGBA"
    assert image.size == (2, 2)
    assert image.getpixel((0, 1)) == (30, 3, 7, 255)


def test_numpy(rgb_document) -> None:
    psd = PSDReader.frombytes(rgb_document)
    array = psd.numpy()
    assert array.shape == (2, 2, 4)
    assert array.dtype == np.uint8
    assert array[1, 1].tolist() == [40, 4, 8, 255]
    normalized = psd.numpy(normalize=True)
    assert normalized.dtype == np.float32
    assert normalized[0, 0, 3] == 1.0


def test_pil_io_size_mismatch() -> None:
    with pytest.raises(ValueError):
        pil_io.to_pil(b"\x00" * 15, 2, 2)


def test_numpy_io() -> None:
    array = numpy_io.to_array(RGBA_2x2_EXPECTED, 2, 2)
    assert array[0, 1].tolist() == [20, 2, 6, 255]


def test_indexed() -> None:
    resources = make_resource(Resource.INDEXED_COLOR_TABLE_COUNT, struct.pack(">H", 4))
    data = make_psd(
        [bytes([0, 1, 2, 3])],
        width=2,
        height=2,
        color_mode=ColorMode.INDEXED,
        compression=Compression.RLE,
        color_mode_data=planar_table(),
        resources=resources,
    )
    psd = PSDReader.frombytes(data)
    assert psd.info.indexes == 4
    table = psd.get_index_table()
    assert len(table) == 768
    assert PSDReader.index_to_int(table, 1) == 0xFF02FE01
    assert psd.find_resource(Resource.INDEXED_COLOR_TABLE_COUNT)[0].range.length == 2
    assert list(psd.rgba[4:8]) == [1, 254, 2, 255]


def test_helpers() -> None:
    assert PSDReader.get_gamma_lut(1)[10] == 10
    assert PSDReader.float_to_component(0.5) == 128


def test_read_info(rgb_document) -> None:
    psd = PSDReader.frombytes(rgb_document, passive=True)
    with pytest.raises(InvalidStateError):
        psd.chunks
    info = psd.read_info()
    assert (info.width, info.height) == (2, 2)
    assert psd.state == SessionState.CHUNKS_LOCATED
    assert psd.rgba is None
    assert psd.chunks.image_data.length == 2 + 12
    assert psd.read_info() is info

    psd.parse()
    assert psd.rgba == RGBA_2x2_EXPECTED
