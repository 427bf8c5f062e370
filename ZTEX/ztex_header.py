# ZTEX/ztex_header.py
import io
import struct
from collections import namedtuple

from ZTEX.ztex_errors import (
    InvalidFormatError,
    InvalidSignatureError,
    IoFailureError,
    MalformedPayloadError,
    UnsupportedVersionError,
)
from ZTEX.ztex_formats import ZTEXFormat

# 'ZTEX' on disk means the integer fields are little-endian, the byte-reversed
# magic means big-endian.
SIGNATURE_LITTLE_ENDIAN = b"ZTEX"
SIGNATURE_BIG_ENDIAN = b"XETZ"
SUPPORTED_VERSION = 0
HEADER_SIZE = 36
READ_CHUNK_SIZE = 1 << 20

TextureInfo = namedtuple(
    "TextureInfo",
    "format width height mipmaps ref_width ref_height avg_color",
)

FileHeader = namedtuple("FileHeader", "signature version info little_endian")


def read_exact(stream, size, what="data"):
    """Read exactly size bytes or raise MalformedPayloadError."""
    if size < 0:
        raise MalformedPayloadError(f"Negative size {size} requested for {what}.")
    chunks = []
    remaining = size
    try:
        # bounded reads, a corrupt header can declare terabytes
        while remaining:
            chunk = stream.read(min(remaining, READ_CHUNK_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
    except (OSError, ValueError) as e:
        raise IoFailureError(f"Failed to read {what}: {e}") from e
    if remaining:
        raise MalformedPayloadError(
            f"Unexpected end of stream in {what}: expected {size} bytes, got {size - remaining}."
        )
    return b"".join(chunks)


def read_ztex_header(stream):
    """Read the 36-byte ZTEX header from a stream positioned at offset 0.

    The stream is left right after the header.
    """
    try:
        signature = stream.read(4)
    except (OSError, ValueError) as e:
        raise IoFailureError(f"Failed to read signature: {e}") from e

    if signature == SIGNATURE_LITTLE_ENDIAN:
        order = "<"
    elif signature == SIGNATURE_BIG_ENDIAN:
        order = ">"
    else:
        raise InvalidSignatureError(f"Invalid signature 0x{signature.hex().upper()}.")

    fields = struct.unpack(order + "8I", read_exact(stream, HEADER_SIZE - 4, "ZTEX header"))
    version, fmt, width, height, mipmaps, ref_width, ref_height, avg_color = fields

    if version != SUPPORTED_VERSION:
        raise UnsupportedVersionError(f"Unsupported version {version}.")
    if fmt >= ZTEXFormat.COUNT:
        raise InvalidFormatError(f"Invalid format 0x{fmt:X}.")

    info = TextureInfo(ZTEXFormat(fmt), width, height, mipmaps, ref_width, ref_height, avg_color)
    return FileHeader(signature, version, info, order == "<")


def parse_ztex_header(data):
    with io.BytesIO(data) as stream:
        return read_ztex_header(stream)


def argb_to_hex(color):
    return f"#{color & 0xFFFFFFFF:08X}"


def describe_header(header):
    """Human readable header fields, one per line."""
    info = header.info
    return [
        f"Signature: {header.signature.decode('ascii')} ({'little' if header.little_endian else 'big'}-endian)",
        f"Version: {header.version}",
        f"Format: {info.format.name}",
        f"Dimensions: {info.width}x{info.height}",
        f"Mipmaps: {info.mipmaps}",
        f"Reference Size: {info.ref_width}x{info.ref_height}",
        f"Average Color: {argb_to_hex(info.avg_color)}",
    ]
