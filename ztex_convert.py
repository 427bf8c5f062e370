# ztex_convert.py
import argparse
import logging
import sys
from pathlib import Path

from ztex_log import setup_logging
from ztex_settings import Settings
from ZTEX.ztex_errors import MalformedPayloadError, ZTEXError
from ZTEX.ztex_header import describe_header, read_ztex_header
from ZTEX.ztex_mipmaps import MipSkipMode
from ZTEX.ztex_texture_decoder import ZTEXTextureDecoder

logger = logging.getLogger(__name__)

TEXTURE_EXTENSIONS = (".tex", ".ztex")


def find_textures(path):
    path = Path(path)
    if path.is_file():
        return [path]
    return sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() in TEXTURE_EXTENSIONS)


def convert_file(decoder, src, output_dir):
    """Decode one ZTEX file and save it as PNG in output_dir. Returns the PNG path."""
    decoded = decoder.decode_file(src)
    if decoded.width == 0 or decoded.height == 0:
        raise MalformedPayloadError(f"Invalid texture dimensions ({decoded.width}x{decoded.height}).")
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / f"{Path(src).stem}.png"
    decoded.to_image().save(out_path)
    logger.debug(f"{src} -> {out_path} ({decoded.layout.value})")
    return out_path


def print_info(src):
    with open(src, "rb") as fp:
        header = read_ztex_header(fp)
    print(f"{src}:")
    for line in describe_header(header):
        print(f"  {line}")


def build_parser():
    parser = argparse.ArgumentParser(description="Convert ZenGin ZTEX textures to PNG")
    parser.add_argument("input", help="ZTEX file or directory containing .tex files")
    parser.add_argument("-o", "--output-dir", help="Output directory (default: next to the input)")
    parser.add_argument("--mip-skip", choices=[m.value for m in MipSkipMode],
                        help="How to size the smaller mipmaps that precede level 0")
    parser.add_argument("--info", action="store_true", help="Only print header information")
    parser.add_argument("--settings", help="Path to the INI settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = Settings(args.settings).load()
    setup_logging(settings.log_directory, logging.DEBUG if args.verbose else settings.log_level)

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input not found: {input_path}")
        return 1

    files = find_textures(input_path)
    if not files:
        logger.error(f"No ZTEX files found in {input_path}")
        return 1

    mode = MipSkipMode(args.mip_skip) if args.mip_skip else settings.mip_skip_mode
    decoder = ZTEXTextureDecoder(mip_skip_mode=mode)
    output_dir = Path(args.output_dir) if args.output_dir else None

    failures = 0
    for src in files:
        try:
            if args.info:
                print_info(src)
            else:
                convert_file(decoder, src, output_dir or src.parent)
        except (ZTEXError, OSError) as e:
            logger.error(f"{src.name}: {e}")
            failures += 1

    if not args.info:
        logger.info(f"Converted {len(files) - failures} of {len(files)} file(s)")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
