# unified_cli.py
"""`ascii-shade <command> [args...]`: dispatch to a command module's main()."""

import sys
import importlib
from typing import Sequence, List, Optional

from . import __version__

PROG = "ascii-shade"

COMMANDS = {
    "convert": ("ascii_shade.convert", "Convert an image to ASCII art in one shot"),
    "shell": ("ascii_shade.shell", "Interactive shell: edit charset, resolution, output"),
}


def usage(prog: Optional[str] = None) -> None:
    width = max(len(name) for name in COMMANDS)
    print(f"Usage: {PROG} <command> [args...]")
    print("Commands:")
    for name in sorted(COMMANDS):
        print(f"  {name.ljust(width)}  {COMMANDS[name][1]}")


def _call_entry(entry, argv: List[str]) -> int:
    try:
        rc = entry(argv)
    except SystemExit as se:
        return se.code if isinstance(se.code, int) else 0
    except Exception as e:
        print(f"Error running command: {e}", file=sys.stderr)
        return 1
    return 0 if rc is None else rc


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv or argv[0] in ("-h", "--help"):
        usage()
        return 0
    if argv[0] == "--version":
        print(f"{PROG} {__version__}")
        return 0

    cmd, *args = argv
    if cmd not in COMMANDS:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        usage()
        return 2
    module_path = COMMANDS[cmd][0]

    try:
        module = importlib.import_module(module_path)
    except Exception as e:
        print(f"Failed to import command '{cmd}' ({module_path}): {e}", file=sys.stderr)
        return 3

    entry = getattr(module, "main", None)
    if not callable(entry):
        print(f"Command module '{module_path}' has no callable 'main'", file=sys.stderr)
        return 4

    return _call_entry(entry, args)


if __name__ == "__main__":
    raise SystemExit(main())
