"""Core utilities shared across the inheritance, runtime and coverage layers.

By isolating these utilities here, we maintain a clean dependency graph:

    core <- syntax <- inheritance <- runtime
                   <- coverage

Exports:
    HopCounter: Explicit bound for iterative chain walks
    BabelImportError: Raised when an optional Babel feature is used without Babel
    is_babel_available / require_babel: Optional dependency checks

Python 3.13+.
"""

from .babel_compat import BabelImportError, is_babel_available, require_babel
from .hop_guard import HopCounter

__all__ = ["BabelImportError", "HopCounter", "is_babel_available", "require_babel"]
