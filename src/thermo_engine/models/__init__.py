"""
Модели данных движка: записи базы данных и наборы свойств.
"""

from .properties import (
    REACTION_TO_SUBSTANCE_FIELDS,
    ElectroPropertiesSolvent,
    PropertiesSolvent,
    PropertyBundle,
    Quantity,
    ThermoPropertiesReaction,
    ThermoPropertiesSubstance,
)
from .records import (
    AggregateState,
    Element,
    MethodCorrP,
    MethodCorrT,
    MethodGenEoS,
    Reaction,
    SolventState,
    Substance,
    SubstanceClass,
    ThermoCalculationType,
)

__all__ = [
    "AggregateState",
    "Element",
    "ElectroPropertiesSolvent",
    "MethodCorrP",
    "MethodCorrT",
    "MethodGenEoS",
    "PropertiesSolvent",
    "PropertyBundle",
    "Quantity",
    "REACTION_TO_SUBSTANCE_FIELDS",
    "Reaction",
    "SolventState",
    "Substance",
    "SubstanceClass",
    "ThermoCalculationType",
    "ThermoPropertiesReaction",
    "ThermoPropertiesSubstance",
]
