"""
Core logic modules of the thermodynamic engine.

This package contains the dispatch, recursion and caching logic:
- PreferenceResolver: dispatch flags derived from a substance record
- ModelRegistry: method tag -> model implementation
- ModelDispatcher: model selection and stage composition per property family
- ReactionSubstanceResolver: substance <-> reaction recursion
- ConventionConverter: reference-state conventions
- ThermoEngine: memoized public entry points
- ThermoBatch: tables over temperature/pressure grids
"""

from .model_registry import (
    DEFAULT_TAG,
    Auxiliary,
    FunctionModel,
    ModelFamily,
    ModelInputs,
    ModelRegistry,
    ThermoModel,
)
from .preference_resolver import PreferenceResolver, ThermoPreferences, resolve_preferences
from .evaluation_guard import EvaluationGuard
from .convention_converter import ConventionConverter, to_berman_brown, to_steam_tables
from .reaction_recursion import ReactionSubstanceResolver
from .model_dispatcher import ModelDispatcher
from .thermo_engine import ThermoEngine
from .thermo_batch import ThermoBatch, temperature_grid

__all__ = [
    'Auxiliary',
    'ConventionConverter',
    'DEFAULT_TAG',
    'EvaluationGuard',
    'FunctionModel',
    'ModelDispatcher',
    'ModelFamily',
    'ModelInputs',
    'ModelRegistry',
    'PreferenceResolver',
    'ReactionSubstanceResolver',
    'ThermoBatch',
    'ThermoEngine',
    'ThermoModel',
    'ThermoPreferences',
    'resolve_preferences',
    'temperature_grid',
    'to_berman_brown',
    'to_steam_tables',
]
