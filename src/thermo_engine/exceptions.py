"""
Exceptions raised by the thermodynamic engine.

Every error carries the entity type ("substance", "reaction", "element", ...),
the symbol being evaluated and the operation that was attempted, so callers
can report failures without parsing messages.
"""

from typing import Optional, Sequence, Tuple


class ThermoEngineError(Exception):
    """Base class for all engine errors."""

    def __init__(
        self,
        message: str,
        entity_type: Optional[str] = None,
        symbol: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.entity_type = entity_type
        self.symbol = symbol
        self.operation = operation


class EntityNotFoundError(ThermoEngineError):
    """Requested substance, reaction or element is absent from the database."""

    def __init__(self, entity_type: str, symbol: str, operation: Optional[str] = None):
        message = f"Cannot get an instance of the {entity_type} `{symbol}` in the database."
        if operation:
            message += f" (operation: {operation})"
        super().__init__(message, entity_type, symbol, operation)


class ReactionNotDefinedError(ThermoEngineError):
    """A reaction-derived substance has no parent reaction symbol."""

    def __init__(self, symbol: str, operation: Optional[str] = None):
        super().__init__(
            f"The substance `{symbol}` is defined by a reaction, "
            f"but no reaction symbol is set for it.",
            "substance",
            symbol,
            operation,
        )


class UnsupportedMethodError(ThermoEngineError):
    """No model is registered for a method tag of an entity."""

    def __init__(
        self,
        entity_type: str,
        symbol: str,
        family: str,
        method: str,
        operation: Optional[str] = None,
    ):
        super().__init__(
            f"No {family} model is registered for method `{method}` "
            f"required by the {entity_type} `{symbol}`.",
            entity_type,
            symbol,
            operation,
        )
        self.family = family
        self.method = method


class ZeroCoefficientError(ThermoEngineError):
    """Stoichiometric coefficient of a reaction-derived substance is zero."""

    def __init__(self, symbol: str, reaction_symbol: str, operation: Optional[str] = None):
        super().__init__(
            f"The stoichiometric coefficient of `{symbol}` in its reaction "
            f"`{reaction_symbol}` is zero (or missing); properties cannot be derived.",
            "substance",
            symbol,
            operation,
        )
        self.reaction_symbol = reaction_symbol


class RecursiveEvaluationError(ThermoEngineError):
    """An entity was re-entered while it was still being evaluated."""

    def __init__(self, entity_type: str, symbol: str, chain: Sequence[Tuple[str, str]]):
        path = " -> ".join(f"{kind}:{sym}" for kind, sym in chain)
        super().__init__(
            f"Cyclic dependency detected while evaluating the {entity_type} "
            f"`{symbol}`: {path} -> {entity_type}:{symbol}",
            entity_type,
            symbol,
            "evaluate",
        )
        self.chain = tuple(chain)


class ConventionError(ThermoEngineError):
    """Unknown convention, or a convention that cannot be applied to an entity."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        entity_type: str = "convention",
        symbol: Optional[str] = None,
    ):
        super().__init__(message, entity_type, symbol, operation)
