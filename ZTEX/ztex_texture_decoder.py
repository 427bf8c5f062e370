# ZTEX/ztex_texture_decoder.py
import numpy as np
from PIL import Image

from texture_decoder import TextureDecoder
from ZTEX.dds_codec import decompress_dds
from ZTEX.ztex_errors import InvalidFormatError, IoFailureError, MalformedPayloadError
from ZTEX.ztex_formats import (
    LAYOUT_BYTES_PER_PIXEL,
    PALETTE_SIZE,
    ChannelLayout,
    ZTEXFormat,
    bytes_per_pixel,
    is_indexed,
)
from ZTEX.ztex_header import parse_ztex_header, read_exact, read_ztex_header
from ZTEX.ztex_mipmaps import MipSkipMode, skip_mipmaps
from ZTEX.ztex_pixels import transcode


def _expand_bits(channel, bits):
    return (channel * 255 // ((1 << bits) - 1)).astype(np.uint8)


class DecodedTexture:
    """Uncompressed level-0 pixels in one of the canonical channel layouts."""

    def __init__(self, width, height, layout, data):
        self.width = width
        self.height = height
        self.layout = ChannelLayout(layout)
        self.data = bytes(data)
        expected = width * height * LAYOUT_BYTES_PER_PIXEL[self.layout]
        if len(self.data) != expected:
            raise MalformedPayloadError(
                f"{self.layout.value} buffer for {width}x{height} needs {expected} bytes, got {len(self.data)}."
            )

    def __repr__(self):
        return f"DecodedTexture({self.width}x{self.height}, {self.layout.value}, {len(self.data)} bytes)"

    def __eq__(self, other):
        if not isinstance(other, DecodedTexture):
            return NotImplemented
        return (self.width, self.height, self.layout, self.data) == (other.width, other.height, other.layout, other.data)

    @classmethod
    def from_image(cls, img):
        rgba = np.asarray(img.convert("RGBA"), dtype=np.uint8)
        argb = np.roll(rgba, 1, axis=2)
        return cls(img.width, img.height, ChannelLayout.ARGB32, argb.tobytes())

    def to_image(self):
        """Convert to a PIL Image, RGBA for layouts with alpha and RGB otherwise."""
        h, w = self.height, self.width
        if self.layout == ChannelLayout.ARGB32:
            argb = np.frombuffer(self.data, dtype=np.uint8).reshape(h, w, 4)
            return Image.fromarray(np.roll(argb, -1, axis=2))
        if self.layout == ChannelLayout.RGB24:
            return Image.fromarray(np.frombuffer(self.data, dtype=np.uint8).reshape(h, w, 3).copy())

        words = np.frombuffer(self.data, dtype="<u2").reshape(h, w)
        if self.layout == ChannelLayout.ARGB1555:
            channels = [
                _expand_bits((words >> 10) & 0x1F, 5),
                _expand_bits((words >> 5) & 0x1F, 5),
                _expand_bits(words & 0x1F, 5),
                _expand_bits(words >> 15, 1),
            ]
        else:
            channels = [
                _expand_bits((words >> 11) & 0x1F, 5),
                _expand_bits((words >> 5) & 0x3F, 6),
                _expand_bits(words & 0x1F, 5),
            ]
        return Image.fromarray(np.dstack(channels))


class ZTEXTextureDecoder(TextureDecoder):
    """Decodes ZenGin .TEX files.

    codec is called as codec(mip_count, height, width, fmt, data) for DXTn
    textures and must return a PIL Image.
    """

    def __init__(self, mip_skip_mode=MipSkipMode.EXACT, codec=decompress_dds):
        self.mip_skip_mode = MipSkipMode(mip_skip_mode)
        self.codec = codec

    def parse_texture_header(self, data):
        info = parse_ztex_header(data).info
        return info.width, info.height, info.format.name

    def decode(self, stream):
        header = read_ztex_header(stream)
        info = header.info

        if info.format >= ZTEXFormat.DXT1:
            try:
                remaining = stream.read()
            except (OSError, ValueError) as e:
                raise IoFailureError(f"Failed to read compressed data: {e}") from e
            img = self.codec(info.mipmaps, info.height, info.width, info.format, remaining)
            return DecodedTexture.from_image(img)

        palette = None
        if is_indexed(info.format):
            palette = read_exact(stream, PALETTE_SIZE, "palette")

        skip_mipmaps(stream, header, self.mip_skip_mode)

        size = info.width * info.height * bytes_per_pixel(info.format)
        data = read_exact(stream, size, "pixel data")
        layout, pixels = transcode(info.format, data, palette)
        return DecodedTexture(info.width, info.height, layout, pixels)

    def decode_texture(self, texture_data, width, height, texture_format):
        if width == 0 or height == 0:
            return None
        fmt = _as_format(texture_format)
        if fmt >= ZTEXFormat.DXT1:
            return self.codec(1, height, width, fmt, texture_data)
        palette = None
        if is_indexed(fmt):
            palette, texture_data = texture_data[:PALETTE_SIZE], texture_data[PALETTE_SIZE:]
            if len(palette) < PALETTE_SIZE:
                raise MalformedPayloadError(f"Palette needs {PALETTE_SIZE} bytes, got {len(palette)}.")
        size = width * height * bytes_per_pixel(fmt)
        if len(texture_data) < size:
            raise MalformedPayloadError(f"Expected {size} bytes of pixel data, got {len(texture_data)}.")
        layout, pixels = transcode(fmt, texture_data[:size], palette)
        return DecodedTexture(width, height, layout, pixels).to_image()


def _as_format(texture_format):
    try:
        if isinstance(texture_format, str):
            fmt = ZTEXFormat[texture_format.upper()]
        else:
            fmt = ZTEXFormat(texture_format)
    except (KeyError, ValueError):
        raise InvalidFormatError(f"Unknown texture format {texture_format!r}.") from None
    if fmt == ZTEXFormat.COUNT:
        raise InvalidFormatError("COUNT is not a texture format.")
    return fmt
