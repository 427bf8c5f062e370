import io
import logging
import struct

import pytest

from ZTEX.ztex_formats import ZTEXFormat


def build_ztex(fmt, width, height, payload=b"", mipmaps=1, palette=b"", mip_data=b"",
               signature=b"ZTEX", version=0, ref_size=(0, 0), avg_color=0):
    """Assemble a ZTEX file: header, optional palette, smaller mips, level 0."""
    order = ">" if signature == b"XETZ" else "<"
    header = signature + struct.pack(
        order + "8I", version, int(fmt), width, height, mipmaps, ref_size[0], ref_size[1], avg_color
    )
    return header + palette + mip_data + payload


def red_ramp_palette():
    """Palette where index i maps to (i, 0, 0)."""
    return b"".join(bytes((i, 0, 0)) for i in range(256))


class CountingStream(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        return super().read(size)


@pytest.fixture
def ztex():
    return build_ztex


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def argb_2x1():
    return build_ztex(ZTEXFormat.A8R8G8B8, 2, 1, bytes([0, 0, 255, 255, 0, 255, 0, 255]))
