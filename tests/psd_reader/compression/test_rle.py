import pytest

from psd_reader.compression import rle
from psd_reader.errors import CorruptRLE


@pytest.mark.parametrize(
    "data, size, expected",
    [
        (b"\x03abcd", 4, b"abcd"),
        (b"\xfdX", 4, b"XXXX"),
        (b"\x00a", 1, b"a"),
        (b"\xffa", 2, b"aa"),
        (b"\x01ab\xfeZ", 5, b"abZZZ"),
        (b"\x80\x00a", 1, b"a"),
        (b"\x81\x00", 128, b"\x00" * 128),
        (b"", 0, b""),
    ],
)
def test_decode(data, size, expected) -> None:
    assert rle.decode(data, size) == expected


def test_decode_memoryview() -> None:
    data = memoryview(b"..\x03abcd..")[2:7]
    assert rle.decode(data, 4) == b"abcd"


@pytest.mark.parametrize(
    "data, size",
    [
        (b"\x05ab", 6),
        (b"\xfd", 4),
        (b"\xfdX", 3),
        (b"\x03abcd", 3),
        (b"\x00a", 2),
        (b"\x80", 1),
        (b"\x7f" + b"x" * 128 + b"\xfdX", 128),
    ],
)
def test_decode_corrupt(data, size) -> None:
    with pytest.raises(CorruptRLE):
        rle.decode(data, size)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"a", b"\x00a"),
        (b"abc", b"\x02abc"),
        (b"aaaa", b"\xfda"),
        (b"aa", b"\xffa"),
        (b"abcaaa", b"\x02abc\xfea"),
    ],
)
def test_encode(data, expected) -> None:
    assert rle.encode(data) == expected


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"x",
        b"\x00" * 128,
        b"\x00" * 129,
        b"\xff" * 300,
        bytes(range(128)),
        bytes(range(256)) * 2,
        b"aab" * 50,
        b"\x00\x00\x01\x02\x02\x02\x03" * 40,
    ],
)
def test_encode_decode(data) -> None:
    encoded = rle.encode(data)
    assert rle.decode(encoded, len(data)) == data


def test_encode_run_limit() -> None:
    encoded = rle.encode(b"\x07" * 300)
    assert encoded == b"\x81\x07\x81\x07\xd5\x07"


def test_encode_literal_limit() -> None:
    data = bytes(range(200))
    encoded = rle.encode(data)
    assert encoded[0] == 127
    assert encoded[129] == 71
    assert len(encoded) == 202
