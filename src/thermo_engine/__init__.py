"""
Thermodynamic engine: model dispatch and memoized evaluation of substance,
solvent and reaction properties.
"""

from .core_logic import (
    Auxiliary,
    FunctionModel,
    ModelFamily,
    ModelInputs,
    ModelRegistry,
    ThermoBatch,
    ThermoEngine,
    ThermoModel,
    temperature_grid,
)
from .calculations import MemoCache, default_registry
from .config import EngineConfiguration
from .exceptions import (
    ConventionError,
    EntityNotFoundError,
    ReactionNotDefinedError,
    RecursiveEvaluationError,
    ThermoEngineError,
    UnsupportedMethodError,
    ZeroCoefficientError,
)
from .models import (
    AggregateState,
    Element,
    ElectroPropertiesSolvent,
    MethodCorrP,
    MethodCorrT,
    MethodGenEoS,
    PropertiesSolvent,
    Quantity,
    Reaction,
    Substance,
    SubstanceClass,
    ThermoCalculationType,
    ThermoPropertiesReaction,
    ThermoPropertiesSubstance,
)
from .storage import Database

__version__ = "0.1.0"

__all__ = [
    "AggregateState",
    "Auxiliary",
    "ConventionError",
    "Database",
    "Element",
    "ElectroPropertiesSolvent",
    "EngineConfiguration",
    "EntityNotFoundError",
    "FunctionModel",
    "MemoCache",
    "MethodCorrP",
    "MethodCorrT",
    "MethodGenEoS",
    "ModelFamily",
    "ModelInputs",
    "ModelRegistry",
    "PropertiesSolvent",
    "Quantity",
    "Reaction",
    "ReactionNotDefinedError",
    "RecursiveEvaluationError",
    "Substance",
    "SubstanceClass",
    "ThermoBatch",
    "ThermoCalculationType",
    "ThermoEngine",
    "ThermoEngineError",
    "ThermoModel",
    "ThermoPropertiesReaction",
    "ThermoPropertiesSubstance",
    "UnsupportedMethodError",
    "ZeroCoefficientError",
    "default_registry",
    "temperature_grid",
]
