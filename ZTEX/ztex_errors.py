# ZTEX/ztex_errors.py


class ZTEXError(Exception):
    """Base class for everything that can go wrong while decoding a ZTEX file."""


class InvalidSignatureError(ZTEXError):
    pass


class UnsupportedVersionError(ZTEXError):
    pass


class InvalidFormatError(ZTEXError):
    pass


class MalformedPayloadError(ZTEXError):
    """Payload length does not fit the format, or the stream ended early."""


class PaletteIndexOutOfRangeError(ZTEXError):
    pass


class IoFailureError(ZTEXError):
    """The underlying stream failed to read."""


class CodecError(ZTEXError):
    """The block-compression codec rejected the payload."""
