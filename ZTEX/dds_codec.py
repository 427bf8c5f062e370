# ZTEX/dds_codec.py
import io

from PIL import Image

from ZTEX.ztex_errors import CodecError, InvalidFormatError, MalformedPayloadError
from ZTEX.ztex_formats import ZTEXFormat, format_name

DDS_HEADER_SIZE = 128

DDSD_CAPS = 0x1
DDSD_HEIGHT = 0x2
DDSD_WIDTH = 0x4
DDSD_PIXELFORMAT = 0x1000
DDSD_MIPMAPCOUNT = 0x20000
DDSD_LINEARSIZE = 0x80000
DDPF_FOURCC = 0x4
DDSCAPS_COMPLEX = 0x8
DDSCAPS_TEXTURE = 0x1000
DDSCAPS_MIPMAP = 0x400000

_FOURCC = {
    ZTEXFormat.DXT1: b"DXT1",
    ZTEXFormat.DXT2: b"DXT2",
    ZTEXFormat.DXT3: b"DXT3",
    ZTEXFormat.DXT4: b"DXT4",
    ZTEXFormat.DXT5: b"DXT5",
}


def fourcc(fmt):
    try:
        return _FOURCC[fmt]
    except KeyError:
        raise InvalidFormatError(f"{format_name(fmt)} is not a block-compressed format.") from None


def calculate_compressed_size(width, height, fmt):
    block_size = 8 if fmt == ZTEXFormat.DXT1 else 16
    num_blocks_wide = max(1, (width + 3) // 4)
    num_blocks_high = max(1, (height + 3) // 4)
    return num_blocks_wide * num_blocks_high * block_size


def create_dds_header(mip_count, height, width, fmt):
    header = bytearray(DDS_HEADER_SIZE)
    header[0:4] = b"DDS "
    header[4:8] = (124).to_bytes(4, "little")
    flags = DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PIXELFORMAT | DDSD_LINEARSIZE
    if mip_count > 1:
        flags |= DDSD_MIPMAPCOUNT
    header[8:12] = flags.to_bytes(4, "little")
    header[12:16] = height.to_bytes(4, "little")
    header[16:20] = width.to_bytes(4, "little")
    header[20:24] = calculate_compressed_size(width, height, fmt).to_bytes(4, "little")
    header[24:28] = (0).to_bytes(4, "little")
    header[28:32] = mip_count.to_bytes(4, "little")
    header[76:80] = (32).to_bytes(4, "little")
    header[80:84] = DDPF_FOURCC.to_bytes(4, "little")
    header[84:88] = fourcc(fmt)
    caps1 = DDSCAPS_TEXTURE
    if mip_count > 1:
        caps1 |= DDSCAPS_MIPMAP | DDSCAPS_COMPLEX
    header[108:112] = caps1.to_bytes(4, "little")
    return bytes(header)


def mip_level_sizes(width, height, mip_count, fmt):
    """Compressed size of each level, largest first."""
    return [
        calculate_compressed_size(max(1, width >> level), max(1, height >> level), fmt)
        for level in range(max(1, mip_count))
    ]


def mip_chain_size(width, height, mip_count, fmt):
    """Total compressed size of the chain without walking every 1x1 level."""
    mip_count = max(1, mip_count)
    total = 0
    level = 0
    while level < mip_count and (width >> level > 1 or height >> level > 1):
        total += calculate_compressed_size(width >> level, height >> level, fmt)
        level += 1
    return total + (mip_count - level) * calculate_compressed_size(1, 1, fmt)


def reorder_mip_chain(data, width, height, mip_count, fmt):
    """ZTEX stores the smallest level first, DDS expects level 0 first."""
    total = mip_chain_size(width, height, mip_count, fmt)
    if len(data) < total:
        raise MalformedPayloadError(
            f"Compressed payload of {len(data)} bytes is shorter than the {total} byte mip chain."
        )
    sizes = mip_level_sizes(width, height, mip_count, fmt)
    levels = []
    offset = 0
    for size in reversed(sizes):
        levels.append(data[offset:offset + size])
        offset += size
    return b"".join(reversed(levels))


def decompress_dds(mip_count, height, width, fmt, data):
    """Wrap a DXTn payload in a DDS header and let Pillow decode it."""
    if width == 0 or height == 0:
        raise MalformedPayloadError(f"Invalid texture dimensions ({width}x{height}).")
    chain = reorder_mip_chain(data, width, height, mip_count, fmt)
    dds_data = create_dds_header(mip_count, height, width, fmt) + chain
    try:
        with io.BytesIO(dds_data) as dds_file:
            img = Image.open(dds_file)
            img.load()
            return img.convert("RGBA")
    except (OSError, ValueError, NotImplementedError) as e:
        raise CodecError(f"Failed to decode {format_name(fmt)} texture: {e}") from e
