"""Optional Babel access for CLDR supplemental data.

The engine itself never needs Babel: locale trees, aliases, stores and rules
are all built from caller data. Babel only supplies defaults, namely the
per-language context sets a coverage classifier checks captures against
(territories, currencies, time zones, plural categories).

Installation modes:
    - Engine only: ``pip install ldmlengine``
    - With CLDR defaults: ``pip install ldmlengine[babel]``

Every Babel-backed feature checks in with this module before importing
Babel, so an engine-only install fails with one consistent BabelImportError
naming the feature that needed Babel, and Babel is imported lazily at the
call site:

    def get_babel_locale(locale_code: str) -> Locale:
        require_babel("get_babel_locale")  # BabelImportError if missing
        from babel import Locale
        ...

Python 3.13+.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from babel.core import UnknownLocaleError as UnknownLocaleErrorType

__all__ = [
    "BabelImportError",
    "get_global_data",
    "get_unknown_locale_error",
    "is_babel_available",
    "require_babel",
]


@lru_cache(maxsize=1)
def _check_babel_available() -> bool:
    try:
        import babel  # noqa: F401, PLC0415
    except ImportError:
        return False
    return True


class BabelImportError(ImportError):
    """A Babel-backed feature was used on an engine-only install.

    Attributes:
        feature: Name of the function that needed Babel
    """

    def __init__(self, feature: str) -> None:
        message = (
            f"{feature} requires Babel for CLDR locale data. "
            "Install with: pip install ldmlengine[babel]"
        )
        super().__init__(message)
        self.feature = feature


def is_babel_available() -> bool:
    """True if Babel can be imported (checked once per process)."""
    return _check_babel_available()


def require_babel(feature: str) -> None:
    """Raise BabelImportError naming ``feature`` unless Babel is installed."""
    if not _check_babel_available():
        raise BabelImportError(feature)


def get_unknown_locale_error() -> type[UnknownLocaleErrorType]:
    """Exception Babel raises for identifiers it has no data for.

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_unknown_locale_error")
    from babel.core import UnknownLocaleError  # noqa: PLC0415

    return UnknownLocaleError


def get_global_data(name: str) -> Any:
    """One of Babel's global supplemental tables by name.

    Names used here: ``likely_subtags``, ``territory_languages``,
    ``territory_zones`` and ``territory_currencies``.

    Raises:
        BabelImportError: If Babel is not installed
        KeyError: If Babel has no table of that name
    """
    require_babel("get_global_data")
    from babel.core import get_global  # noqa: PLC0415

    return get_global(name)
