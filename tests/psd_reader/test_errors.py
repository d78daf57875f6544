import pytest

from psd_reader.errors import (
    BadSignature,
    CorruptRLE,
    DecodeCancelled,
    DecodeError,
    FormatError,
    MissingColorTable,
    PSDReaderError,
    TruncatedChunk,
    TruncatedHeader,
    UnsupportedCompression,
)


@pytest.mark.parametrize(
    "kind, source",
    [
        (BadSignature, "header"),
        (TruncatedHeader, "header"),
        (TruncatedChunk, "chunks"),
        (CorruptRLE, "decompress"),
        (UnsupportedCompression, "decompress"),
        (MissingColorTable, "convert"),
    ],
)
def test_sources(kind, source) -> None:
    error = kind("boom")
    assert isinstance(error, FormatError)
    assert isinstance(error, ValueError)
    assert error.source == source
    assert kind("boom", "core").source == "core"


def test_truncated_header_is_bad_signature() -> None:
    with pytest.raises(BadSignature):
        raise TruncatedHeader("short")


def test_decode_error() -> None:
    record = DecodeError.from_exception(CorruptRLE("bad row"))
    assert record.message == "bad row"
    assert record.source == "decompress"
    assert record.timestamp > 0


def test_decode_error_default_source() -> None:
    record = DecodeError.from_exception(DecodeCancelled("stop"), "convert")
    assert record.source == "convert"
    assert isinstance(DecodeCancelled("stop"), PSDReaderError)
