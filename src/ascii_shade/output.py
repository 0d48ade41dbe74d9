"""Write finished character grids to the console or to an HTML page."""

import html
import logging
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class HtmlOptions:
    font_name: str = "Courier New"
    font_size_px: int = 12
    line_height_px: Optional[int] = None  # None => match font-size
    title: str = "ASCII Art"


def render_console(grid: Sequence[Sequence[str]], stream=None) -> None:
    stream = stream or sys.stdout
    for row in grid:
        stream.write("".join(row) + "\n")
    stream.flush()


def render_html(grid: Sequence[Sequence[str]], options: Optional[HtmlOptions] = None) -> str:
    opt = options or HtmlOptions()
    # Browsers can drift if line-height is not locked; keep px values.
    line_height_px = opt.line_height_px or opt.font_size_px
    pre_lines = [html.escape("".join(row)) for row in grid]

    return (
        "<!doctype html>\n"
        "<html>\n<head>\n"
        '  <meta charset="utf-8">\n'
        f"  <title>{html.escape(opt.title)}</title>\n"
        "  <style>\n"
        "    html, body { margin: 0; background: #fff; }\n"
        "    .wrap { padding: 16px; }\n"
        "    pre {\n"
        "      margin: 0;\n"
        "      white-space: pre;\n"
        f"      font-family: \"{html.escape(opt.font_name)}\", monospace;\n"
        "      font-variant-ligatures: none;\n"
        f"      font-size: {opt.font_size_px}px;\n"
        f"      line-height: {line_height_px}px;\n"
        "      letter-spacing: 0;\n"
        "    }\n"
        "  </style>\n"
        "</head>\n<body>\n"
        '  <div class="wrap">\n'
        "    <pre>\n" + "\n".join(pre_lines) + "\n    </pre>\n"
        "  </div>\n"
        "</body>\n</html>\n"
    )


def write_html(grid: Sequence[Sequence[str]], path: str, options: Optional[HtmlOptions] = None) -> None:
    doc = render_html(grid, options)
    with open(path, "w", encoding="utf-8") as out:
        out.write(doc)
    logger.debug("Wrote %d rows of HTML to %s", len(grid), path)


class ConsoleOutput:
    def __init__(self, stream=None):
        self.stream = stream

    def out(self, grid) -> None:
        render_console(grid, self.stream)


class HtmlFileOutput:
    def __init__(self, path: str, options: Optional[HtmlOptions] = None):
        self.path = path
        self.options = options or HtmlOptions()

    def out(self, grid) -> None:
        write_html(grid, self.path, self.options)
