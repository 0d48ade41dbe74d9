#!/usr/bin/env python3
"""Interactive shell for tuning charset, resolution and output of ASCII art."""

import argparse
import logging
from dataclasses import dataclass

from .ascii_art import AsciiArtAlgorithm, ConversionCache
from .convert import configure_logging
from .image_processing import load_image
from .output import ConsoleOutput, HtmlFileOutput, HtmlOptions

logger = logging.getLogger(__name__)

MIN_ASCII = 32
MAX_ASCII = 126
MINIMAL_CHARSET_SIZE = 2
PROMPT = ">>> "

INPUT_IMAGE_ERROR = "Error: could not read input image file "
INCORRECT_COMMAND = "Did not execute due to incorrect command."
ADD_FORMAT_ERROR = "Did not add due to incorrect format."
REMOVE_FORMAT_ERROR = "Did not remove due to incorrect format."
RES_BOUNDARY_ERROR = "Did not change resolution due to exceeding boundaries."
RES_FORMAT_ERROR = "Did not change resolution due to incorrect format."
OUTPUT_FORMAT_ERROR = "Did not change output method due to incorrect format."
CHARSET_TOO_SMALL = "Did not execute. Charset is too small."
UNEXPECTED_ERROR = "An unexpected error occurred: "


class UsageError(Exception):
    """A shell command was malformed or out of bounds."""


@dataclass
class ShellSettings:
    charset: str = "0123456789"
    resolution: int = 2
    html_path: str = "out.html"
    html_font: str = "Courier New"


class Shell:
    def __init__(self, settings: ShellSettings | None = None, cache: ConversionCache | None = None):
        self.settings = settings or ShellSettings()
        self.cache = cache if cache is not None else ConversionCache()
        self.charset = set(self.settings.charset)
        self.resolution = self.settings.resolution
        self.reversed = False
        self.output = ConsoleOutput()
        self.image = None
        self.min_resolution = 1
        self.max_resolution = 1

    # -----------------------------
    # Loop
    # -----------------------------
    def run(self, image_path: str, read=None) -> int:
        read = read or input
        try:
            self.image = load_image(image_path)
        except OSError:
            print(INPUT_IMAGE_ERROR + image_path)
            return 1

        height, width = self.image.shape[:2]
        self.max_resolution = width
        self.min_resolution = max(1, width // max(1, height))
        logger.debug(
            "Shell ready: %dx%d image, resolution bounds [%d, %d]",
            width,
            height,
            self.min_resolution,
            self.max_resolution,
        )

        while True:
            try:
                line = read(PROMPT)
            except EOFError:
                return 0

            args = line.split()
            if not args:
                continue
            if args[0] == "exit":
                return 0

            try:
                self.execute(args)
            except UsageError as ue:
                print(ue)
            except Exception as e:
                logger.debug("Command %r failed", line, exc_info=True)
                print(UNEXPECTED_ERROR + str(e))
                return 1

    def execute(self, args: list[str]) -> None:
        command, params = args[0], args[1:]
        if command == "add":
            self._update_chars(params, ADD_FORMAT_ERROR, add=True)
        elif command == "remove":
            self._update_chars(params, REMOVE_FORMAT_ERROR, add=False)
        elif command == "chars":
            print(" ".join(sorted(self.charset)))
        elif command == "res":
            self._set_resolution(params)
        elif command == "reverse":
            self.reversed = not self.reversed
        elif command == "output":
            self._set_output(params)
        elif command == "asciiArt":
            self._run_ascii_art()
        else:
            raise UsageError(INCORRECT_COMMAND)

    # -----------------------------
    # Commands
    # -----------------------------
    def _update_chars(self, params, error: str, add: bool) -> None:
        if not params:
            raise UsageError(error)

        chars = parse_char_spec(params[0])
        if chars is None:
            raise UsageError(error)
        if add:
            self.charset.update(chars)
        else:
            self.charset.difference_update(chars)

    def _set_resolution(self, params) -> None:
        if not params:
            print(f"Resolution set to {self.resolution}.")
            return

        if params[0] == "up":
            if self.resolution * 2 > self.max_resolution:
                raise UsageError(RES_BOUNDARY_ERROR)
            self.resolution *= 2
        elif params[0] == "down":
            if self.resolution // 2 < self.min_resolution:
                raise UsageError(RES_BOUNDARY_ERROR)
            self.resolution //= 2
        else:
            raise UsageError(RES_FORMAT_ERROR)
        print(f"Resolution set to {self.resolution}.")

    def _set_output(self, params) -> None:
        if not params:
            raise UsageError(OUTPUT_FORMAT_ERROR)
        if params[0] == "console":
            self.output = ConsoleOutput()
        elif params[0] == "html":
            self.output = HtmlFileOutput(
                self.settings.html_path, HtmlOptions(font_name=self.settings.html_font)
            )
        else:
            raise UsageError(OUTPUT_FORMAT_ERROR)

    def _run_ascii_art(self) -> None:
        if len(self.charset) < MINIMAL_CHARSET_SIZE or self.image is None:
            raise UsageError(CHARSET_TOO_SMALL)

        algorithm = AsciiArtAlgorithm(
            self.image,
            self.charset,
            self.resolution,
            reverse=self.reversed,
            cache=self.cache,
        )
        self.output.out(algorithm.run())


def parse_char_spec(param: str):
    """
    Expand an add/remove argument into the characters it names.

    Accepts "all", "space", a single printable ASCII character, or a range
    such as "a-z" (either order). Returns None when the format is invalid.
    """
    if param == "all":
        return [chr(c) for c in range(MIN_ASCII, MAX_ASCII + 1)]
    if param == "space":
        return [" "]
    if len(param) == 1:
        if not MIN_ASCII <= ord(param) <= MAX_ASCII:
            return None
        return [param]
    if len(param) == 3 and param[1] == "-":
        start, end = sorted((ord(param[0]), ord(param[2])))
        return [chr(c) for c in range(start, end + 1)]
    return None


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Interactive ASCII art shell")
    parser.add_argument("image", help="Input image path")
    parser.add_argument(
        "--html-path",
        default=ShellSettings.html_path,
        help="File written by 'output html' (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    return Shell(ShellSettings(html_path=args.html_path)).run(args.image)


if __name__ == "__main__":
    raise SystemExit(main())
