#!/usr/bin/env python3
"""Convert an image to brightness-matched ASCII art in one shot."""

import argparse
import logging
import sys

from .ascii_art import ConversionCache, convert_image
from .char_matcher import GlyphBrightnessCache, InvalidCharsetError
from .glyphs import glyph_coverage, load_font
from .image_processing import InvalidResolutionError, load_image
from .output import HtmlOptions, render_console, render_html

DEFAULT_CHARSET = "0123456789"
DEFAULT_RESOLUTION = 64


def configure_logging(level_name: str) -> None:
    numeric_level = getattr(logging, level_name.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(
        stream=sys.stderr, level=numeric_level, format="%(levelname)s: %(message)s"
    )


def unique_chars(text: str) -> str:
    # Remove newlines etc, keep unique order
    seen = set()
    return "".join(
        ch for ch in text if ch not in "\r\n" and not (ch in seen or seen.add(ch))
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Convert an image to ASCII art by matching tile brightness to glyph density"
    )
    ap.add_argument("input", help="Input image path")
    ap.add_argument(
        "-o", "--output", default=None, help="Output file (default: stdout)"
    )
    ap.add_argument(
        "-r",
        "--resolution",
        type=int,
        default=DEFAULT_RESOLUTION,
        help="Characters per row; must divide the padded (power-of-two) image width",
    )
    ap.add_argument(
        "--chars",
        default=DEFAULT_CHARSET,
        help="Characters to draw with (default: %(default)s)",
    )
    ap.add_argument(
        "--reverse",
        action="store_true",
        help="Invert the brightness mapping (useful for dark-on-light output)",
    )
    ap.add_argument(
        "--format",
        choices=["console", "html"],
        default="console",
        help="Output format",
    )
    ap.add_argument(
        "--font", default=None, help="Path to .ttf font used to measure glyph density"
    )
    ap.add_argument(
        "--font-name", default="Courier New", help="HTML output: CSS font family"
    )
    ap.add_argument(
        "--font-size", type=int, default=12, help="HTML output: font size in px"
    )
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: WARNING)",
    )
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.font:
        glyphs = GlyphBrightnessCache(lambda ch: glyph_coverage(ch, args.font))
    else:
        glyphs = GlyphBrightnessCache()
    cache = ConversionCache(glyphs)

    try:
        image = load_image(args.input)
    except OSError as e:
        print(f"\033[31mError: could not read input image file {args.input} ({e})\033[0m", file=sys.stderr)
        return 1

    if args.font:
        try:
            load_font(args.font)
        except OSError as e:
            print(f"\033[31mError: could not load font file {args.font} ({e})\033[0m", file=sys.stderr)
            return 1

    try:
        grid = convert_image(
            image,
            unique_chars(args.chars),
            args.resolution,
            reverse=args.reverse,
            cache=cache,
        )
    except (InvalidResolutionError, InvalidCharsetError) as e:
        print(f"\033[31mError: {e}\033[0m", file=sys.stderr)
        return 1

    if args.format == "html":
        text = render_html(
            grid, HtmlOptions(font_name=args.font_name, font_size_px=args.font_size)
        )
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(text)
        else:
            sys.stdout.write(text)
    elif args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            render_console(grid, f)
    else:
        render_console(grid)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
