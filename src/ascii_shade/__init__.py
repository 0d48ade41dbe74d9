"""ASCII Shade - Convert images to brightness-matched ASCII art."""

__version__ = "0.1.0"

"""
Expose lightweight lazy wrappers to avoid importing submodules at package
import time. Importing submodules in `__init__` causes `runpy` to warn when
executing a module with `-m` because the submodule may already appear in
`sys.modules` before execution. Wrappers import on-demand.
"""


def convert_main(*args, **kwargs):
    from .convert import main as _m

    return _m(*args, **kwargs)


def shell_main(*args, **kwargs):
    from .shell import main as _m

    return _m(*args, **kwargs)


__all__ = [
    "convert_main",
    "shell_main",
]
