# ZTEX/ztex_mipmaps.py
from enum import Enum

from ZTEX.ztex_formats import bytes_per_pixel
from ZTEX.ztex_header import read_exact


class MipSkipMode(Enum):
    EXACT = "exact"
    GEOMETRIC = "geometric"


def exact_mip_pixel_count(width, height, mipmaps):
    """Pixels in levels 1..n-1 of a chain that halves each level, clamped at 1."""
    pixels = 0
    level = 1
    while level < mipmaps and (width >> level or height >> level):
        pixels += max(1, width >> level) * max(1, height >> level)
        level += 1
    # every level past the first 1x1 one is a single pixel
    return pixels + max(0, mipmaps - level)


def geometric_mip_pixel_count(width, height, mipmaps):
    """Approximate the smaller levels as a geometric series of (h*w)^i, i = 1..n-1.

    w and h are the integer n-th roots of the level-0 edges. Only holds for
    chains that shrink by the same integer ratio at every level.
    """
    if mipmaps <= 1:
        return 0
    w = int(width ** (1.0 / mipmaps))
    h = int(height ** (1.0 / mipmaps))
    ratio = h * w
    if ratio == 0:
        return 0
    if ratio == 1:
        return mipmaps - 1
    return (ratio ** mipmaps - ratio) // (ratio - 1)


_PIXEL_COUNTERS = {
    MipSkipMode.EXACT: exact_mip_pixel_count,
    MipSkipMode.GEOMETRIC: geometric_mip_pixel_count,
}


def mip_skip_size(info, mode=MipSkipMode.EXACT):
    """Bytes taken by every mip level smaller than level 0."""
    if info.mipmaps <= 1:
        return 0
    pixels = _PIXEL_COUNTERS[MipSkipMode(mode)](info.width, info.height, info.mipmaps)
    return pixels * bytes_per_pixel(info.format)


def skip_mipmaps(stream, header, mode=MipSkipMode.EXACT):
    """Consume the smaller mip levels stored ahead of level 0. Returns the bytes skipped."""
    size = mip_skip_size(header.info, mode)
    if size:
        read_exact(stream, size, "mipmap chain")
    return size
