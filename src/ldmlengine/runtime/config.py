"""Engine configuration.

A single frozen dataclass carries every tunable bound of the engine, so the
walk limits are explicit, testable parameters rather than module globals.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from ldmlengine.constants import (
    DEFAULT_CLASSIFICATION_CACHE_SIZE,
    MAX_ALIAS_HOPS,
    MAX_ANCESTOR_DEPTH,
)
from ldmlengine.enums import DraftStatus

__all__ = ["EngineConfig"]


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable configuration for EngineContext and CoverageClassifier.

    All fields have sensible defaults; ``EngineConfig()`` is usable as is.

    Attributes:
        max_alias_hops: Alias redirects a single resolution may follow
            before failing with AliasCycleError (default: 16).
        max_ancestor_depth: Parent links allowed between any locale and
            root before the tree is rejected (default: 32).
        minimal_draft_status: Entries less trusted than this are dropped
            when a store is built (default: unconfirmed, keeps everything).
        classification_cache_size: Maximum ``(locale, key)`` results kept
            by a classifier session (default: None, keeps every result).

    Example:
        >>> config = EngineConfig(max_alias_hops=4)
        >>> config.max_ancestor_depth
        32
        >>> EngineConfig(max_alias_hops=0)
        Traceback (most recent call last):
        ...
        ValueError: max_alias_hops must be positive
    """

    max_alias_hops: int = MAX_ALIAS_HOPS
    max_ancestor_depth: int = MAX_ANCESTOR_DEPTH
    minimal_draft_status: DraftStatus = DraftStatus.UNCONFIRMED
    classification_cache_size: int | None = DEFAULT_CLASSIFICATION_CACHE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If a bound is not positive or the draft status is unknown.
        """
        if self.max_alias_hops <= 0:
            msg = "max_alias_hops must be positive"
            raise ValueError(msg)
        if self.max_ancestor_depth <= 0:
            msg = "max_ancestor_depth must be positive"
            raise ValueError(msg)
        if self.classification_cache_size is not None and self.classification_cache_size <= 0:
            msg = "classification_cache_size must be positive"
            raise ValueError(msg)
        # Accept the plain string spelling ("contributed") as well.
        object.__setattr__(self, "minimal_draft_status", DraftStatus(self.minimal_draft_status))
