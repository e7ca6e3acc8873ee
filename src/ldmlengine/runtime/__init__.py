"""Resolution runtime: stores, engine context and the resolution engine.

Python 3.13+.
"""

from .config import EngineConfig
from .context import EngineContext
from .loading import LocaleDataSource, MappingDataSource
from .registry import StoreRegistry
from .resolver import ResolutionEngine, ResolutionResult, ResolutionStep
from .rwlock import RWLock
from .store import LocaleStore, RawTable, RawValue, StoreEntry

__all__ = [
    "EngineConfig",
    "EngineContext",
    "LocaleDataSource",
    "LocaleStore",
    "MappingDataSource",
    "RWLock",
    "RawTable",
    "RawValue",
    "ResolutionEngine",
    "ResolutionResult",
    "ResolutionStep",
    "StoreEntry",
    "StoreRegistry",
]
