# ZTEX/ztex_formats.py
from collections import namedtuple
from enum import Enum, IntEnum


class ZTEXFormat(IntEnum):
    """ZenGin texture render formats, in file order.

    Every block-compressed format sits at or after DXT1.
    """
    B8G8R8A8 = 0
    R8G8B8A8 = 1
    A8B8G8R8 = 2
    A8R8G8B8 = 3
    B8G8R8 = 4
    R8G8B8 = 5
    A4R4G4B4 = 6
    A1R5G5B5 = 7
    R5G6B5 = 8
    P8 = 9
    DXT1 = 10
    DXT2 = 11
    DXT3 = 12
    DXT4 = 13
    DXT5 = 14
    COUNT = 15


class ChannelLayout(Enum):
    ARGB32 = "ARGB32"
    RGB24 = "RGB24"
    ARGB1555 = "ARGB1555"
    RGB565 = "RGB565"


LAYOUT_BYTES_PER_PIXEL = {
    ChannelLayout.ARGB32: 4,
    ChannelLayout.RGB24: 3,
    ChannelLayout.ARGB1555: 2,
    ChannelLayout.RGB565: 2,
}

PixelFormatDescriptor = namedtuple("PixelFormatDescriptor", "bytes_per_pixel indexed compressed")

PALETTE_ENTRIES = 0x100
PALETTE_SIZE = 3 * PALETTE_ENTRIES

_BYTES_PER_PIXEL = {
    ZTEXFormat.B8G8R8A8: 4,
    ZTEXFormat.R8G8B8A8: 4,
    ZTEXFormat.A8B8G8R8: 4,
    ZTEXFormat.A8R8G8B8: 4,
    ZTEXFormat.B8G8R8: 3,
    ZTEXFormat.R8G8B8: 3,
    ZTEXFormat.A4R4G4B4: 2,
    ZTEXFormat.A1R5G5B5: 2,
    ZTEXFormat.R5G6B5: 2,
    ZTEXFormat.P8: 1,
}


def is_compressed(fmt):
    return ZTEXFormat.DXT1 <= fmt < ZTEXFormat.COUNT


def is_indexed(fmt):
    return fmt == ZTEXFormat.P8


def bytes_per_pixel(fmt):
    """Bytes per pixel of an uncompressed format, 0 for DXTn."""
    return _BYTES_PER_PIXEL.get(fmt, 0)


def format_descriptor(fmt):
    fmt = ZTEXFormat(fmt)
    if fmt == ZTEXFormat.COUNT:
        raise ValueError("COUNT is not a texture format")
    return PixelFormatDescriptor(bytes_per_pixel(fmt), is_indexed(fmt), is_compressed(fmt))


def format_name(fmt):
    try:
        return ZTEXFormat(fmt).name
    except ValueError:
        return f"Unknown (0x{fmt:X})"
