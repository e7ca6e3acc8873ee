"""Coverage classification: which keys a locale is required to have.

Python 3.13+.
"""

from .cache import ClassificationCache
from .classifier import CoverageClassifier
from .context import ContextProvider, CoverageContext, default_context
from .rules import CoverageRule, CoverageRuleSet, substitute_variables

__all__ = [
    "ClassificationCache",
    "ContextProvider",
    "CoverageClassifier",
    "CoverageContext",
    "CoverageRule",
    "CoverageRuleSet",
    "default_context",
    "substitute_variables",
]
