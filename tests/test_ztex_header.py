import io
import struct

import pytest

from conftest import CountingStream, build_ztex
from ZTEX.ztex_errors import (
    InvalidFormatError,
    InvalidSignatureError,
    IoFailureError,
    MalformedPayloadError,
    UnsupportedVersionError,
)
from ZTEX.ztex_formats import ZTEXFormat
from ZTEX.ztex_header import (
    HEADER_SIZE,
    READ_CHUNK_SIZE,
    argb_to_hex,
    describe_header,
    parse_ztex_header,
    read_exact,
    read_ztex_header,
)


def test_read_little_endian_header():
    data = build_ztex(ZTEXFormat.R5G6B5, 64, 32, b"\x00" * 16, mipmaps=3,
                      ref_size=(128, 64), avg_color=0xFF102030)
    stream = io.BytesIO(data)
    header = read_ztex_header(stream)

    assert stream.tell() == HEADER_SIZE
    assert header.signature == b"ZTEX"
    assert header.version == 0
    assert header.little_endian
    assert header.info.format is ZTEXFormat.R5G6B5
    assert (header.info.width, header.info.height, header.info.mipmaps) == (64, 32, 3)
    assert (header.info.ref_width, header.info.ref_height) == (128, 64)
    assert header.info.avg_color == 0xFF102030


def test_read_big_endian_header():
    little = parse_ztex_header(build_ztex(ZTEXFormat.P8, 256, 128, mipmaps=9))
    big = parse_ztex_header(build_ztex(ZTEXFormat.P8, 256, 128, mipmaps=9, signature=b"XETZ"))

    assert not big.little_endian
    assert big.info == little.info


def test_invalid_signature_stops_reading():
    stream = CountingStream(b"DDS " + b"\x00" * 64)
    with pytest.raises(InvalidSignatureError):
        read_ztex_header(stream)
    assert stream.reads == 1
    assert stream.tell() == 4


def test_empty_stream_is_not_a_ztex_file():
    with pytest.raises(InvalidSignatureError):
        read_ztex_header(io.BytesIO(b""))


def test_unsupported_version():
    with pytest.raises(UnsupportedVersionError):
        parse_ztex_header(build_ztex(ZTEXFormat.A8R8G8B8, 1, 1, version=1))


@pytest.mark.parametrize("fmt", [15, 16, 0xFFFFFFFF])
def test_format_out_of_range(fmt):
    data = b"ZTEX" + struct.pack("<8I", 0, fmt, 1, 1, 1, 0, 0, 0)
    with pytest.raises(InvalidFormatError):
        parse_ztex_header(data)


def test_truncated_header():
    data = build_ztex(ZTEXFormat.A8R8G8B8, 1, 1)[:20]
    with pytest.raises(MalformedPayloadError):
        parse_ztex_header(data)


def test_zero_dimensions_are_accepted():
    header = parse_ztex_header(build_ztex(ZTEXFormat.A8R8G8B8, 0, 0, mipmaps=0))
    assert (header.info.width, header.info.height, header.info.mipmaps) == (0, 0, 0)


def test_closed_stream_is_an_io_failure():
    stream = io.BytesIO(build_ztex(ZTEXFormat.A8R8G8B8, 1, 1))
    stream.close()
    with pytest.raises(IoFailureError):
        read_ztex_header(stream)


def test_describe_header():
    header = parse_ztex_header(build_ztex(ZTEXFormat.DXT3, 512, 256, mipmaps=10,
                                          ref_size=(512, 256), avg_color=0x80FF0001))
    lines = describe_header(header)
    assert "Signature: ZTEX (little-endian)" in lines
    assert "Format: DXT3" in lines
    assert "Dimensions: 512x256" in lines
    assert "Mipmaps: 10" in lines
    assert "Average Color: #80FF0001" in lines


def test_argb_to_hex():
    assert argb_to_hex(0xFF00FF00) == "#FF00FF00"
    assert argb_to_hex(0x1) == "#00000001"


def test_read_exact_reads_in_bounded_chunks():
    stream = CountingStream(bytes(3 * READ_CHUNK_SIZE + 5))
    assert len(read_exact(stream, 3 * READ_CHUNK_SIZE + 5)) == 3 * READ_CHUNK_SIZE + 5
    assert stream.reads == 4


def test_read_exact_short_stream_with_huge_request():
    with pytest.raises(MalformedPayloadError, match="got 16"):
        read_exact(io.BytesIO(bytes(16)), 0xFFFFFFFF * 0xFFFFFFFF * 4)
