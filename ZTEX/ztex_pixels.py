# ZTEX/ztex_pixels.py
import numpy as np

from ZTEX.ztex_errors import InvalidFormatError, MalformedPayloadError, PaletteIndexOutOfRangeError
from ZTEX.ztex_formats import ChannelLayout, ZTEXFormat, format_name


def _blocks(data, block_size):
    if len(data) % block_size:
        raise MalformedPayloadError(f"Payload of {len(data)} bytes is not a multiple of {block_size}.")
    return np.frombuffer(data, dtype=np.uint8).reshape(-1, block_size)


def reverse_blocks(data, block_size):
    """[1, 2, 3, 4, 5, 6] with block_size 3 -> [3, 2, 1, 6, 5, 4]"""
    return _blocks(data, block_size)[:, ::-1].tobytes()


def rotate_blocks(data, block_size, shift=1):
    """Rotate every block right by shift bytes, so the last byte moves to the front."""
    return np.roll(_blocks(data, block_size), shift, axis=1).tobytes()


def swap_block_bytes(data, block_size, i, j):
    blocks = _blocks(data, block_size).copy()
    blocks[:, [i, j]] = blocks[:, [j, i]]
    return blocks.tobytes()


def unpack_nibbles(data):
    """Spread each byte over two: high nibble, then low nibble shifted up."""
    packed = _blocks(data, 2).reshape(-1)
    out = np.empty(packed.size * 2, dtype=np.uint8)
    out[0::2] = packed & 0xF0
    out[1::2] = (packed & 0x0F) << 4
    return out.tobytes()


def expand_palette(data, palette):
    """Look up every index byte in an RGB palette and return the RGB triples."""
    if palette is None:
        raise MalformedPayloadError("Indexed texture without a palette.")
    colors = _blocks(palette, 3)
    indices = np.frombuffer(data, dtype=np.uint8)
    # a full 256-entry palette covers every possible index byte
    if indices.size and int(indices.max()) >= len(colors):
        raise PaletteIndexOutOfRangeError(
            f"Palette index {int(indices.max())} out of range for {len(colors)} entries."
        )
    return colors[indices].tobytes()


def _identity(block_size):
    def transform(data, palette):
        _blocks(data, block_size)
        return bytes(data)
    return transform


_TRANSCODERS = {
    ZTEXFormat.B8G8R8A8: (ChannelLayout.ARGB32, lambda data, palette: reverse_blocks(data, 4)),
    ZTEXFormat.R8G8B8A8: (ChannelLayout.ARGB32, lambda data, palette: rotate_blocks(data, 4)),
    ZTEXFormat.A8B8G8R8: (ChannelLayout.ARGB32, lambda data, palette: swap_block_bytes(data, 4, 1, 3)),
    ZTEXFormat.A8R8G8B8: (ChannelLayout.ARGB32, _identity(4)),
    ZTEXFormat.B8G8R8: (ChannelLayout.RGB24, lambda data, palette: reverse_blocks(data, 3)),
    ZTEXFormat.R8G8B8: (ChannelLayout.RGB24, _identity(3)),
    # Nibbles are spread byte by byte, not regrouped into A, R, G, B.
    ZTEXFormat.A4R4G4B4: (ChannelLayout.ARGB32, lambda data, palette: unpack_nibbles(data)),
    ZTEXFormat.A1R5G5B5: (ChannelLayout.ARGB1555, _identity(2)),
    ZTEXFormat.R5G6B5: (ChannelLayout.RGB565, _identity(2)),
    ZTEXFormat.P8: (ChannelLayout.RGB24, expand_palette),
}

_uncovered = [fmt.name for fmt in ZTEXFormat if fmt < ZTEXFormat.DXT1 and fmt not in _TRANSCODERS]
if _uncovered:
    raise ImportError(f"No transcoder for {', '.join(_uncovered)}")


def transcode(fmt, data, palette=None):
    """Convert a level-0 payload into a canonical layout. Returns (layout, bytes)."""
    try:
        layout, transform = _TRANSCODERS[fmt]
    except KeyError:
        raise InvalidFormatError(f"Format {format_name(fmt)} has no pixel transcoder.") from None
    return layout, transform(data, palette)
