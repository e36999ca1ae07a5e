"""
Конфигурация термодинамического движка.
"""

from .engine_config import (
    APPARENT_PROPERTIES,
    ENGINE_CONFIG,
    IMPLEMENTED_CONVENTIONS,
    WATER_PROPERTIES,
    EngineConfiguration,
    get_engine_config,
    resolve_convention,
    validate_config,
)

__all__ = [
    "APPARENT_PROPERTIES",
    "ENGINE_CONFIG",
    "IMPLEMENTED_CONVENTIONS",
    "WATER_PROPERTIES",
    "EngineConfiguration",
    "get_engine_config",
    "resolve_convention",
    "validate_config",
]
