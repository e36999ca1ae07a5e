"""
Расчётные модули: кэш вычислений и базовые модели.
"""

from .builtin_models import (
    ConstantMolarVolume,
    EmpiricalCpIntegration,
    IdealGasLawVolume,
    ReactionLogKfT,
    ReactionVolumeFT,
    default_registry,
)
from .memo_cache import CacheKey, CacheMetrics, MemoCache

__all__ = [
    "CacheKey",
    "CacheMetrics",
    "ConstantMolarVolume",
    "EmpiricalCpIntegration",
    "IdealGasLawVolume",
    "MemoCache",
    "ReactionLogKfT",
    "ReactionVolumeFT",
    "default_registry",
]
