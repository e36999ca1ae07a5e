"""Utility functions for the thermodynamic engine."""

from .chem_utils import (
    CHARGE_ELEMENT,
    DEFAULT_ELEMENT_ENTROPIES,
    elemental_entropy,
    parse_formula,
)

__all__ = [
    "CHARGE_ELEMENT",
    "DEFAULT_ELEMENT_ENTROPIES",
    "elemental_entropy",
    "parse_formula",
]
