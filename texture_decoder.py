# texture_decoder.py
from abc import ABC, abstractmethod


class TextureDecoder(ABC):
    @abstractmethod
    def decode(self, stream):
        """Decode a whole texture file from a binary stream and return a DecodedTexture."""
        pass

    @abstractmethod
    def decode_texture(self, texture_data, width, height, texture_format):
        """Decode bare level-0 texture data and return a PIL Image."""
        pass

    @abstractmethod
    def parse_texture_header(self, data):
        """Parse texture header and return (width, height, texture_format)."""
        pass

    def decode_file(self, path):
        with open(path, "rb") as fp:
            return self.decode(fp)
