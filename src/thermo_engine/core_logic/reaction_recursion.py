"""
Взаимная рекурсия вещество <-> реакция.

- substance_from_reaction: свойства вещества из свойств его реакции и
  свойств остальных участников реакции
- reaction_from_reactants: свойства реакции как стехиометрическая сумма
  свойств участников

Все вложенные вызовы идут через кэшируемые точки входа движка.
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..constants import LN_TO_LG, R_CONSTANT
from ..exceptions import ReactionNotDefinedError, ZeroCoefficientError
from ..models.properties import (
    REACTION_TO_SUBSTANCE_FIELDS,
    Quantity,
    ThermoPropertiesReaction,
    ThermoPropertiesSubstance,
)
from ..models.records import Substance

if TYPE_CHECKING:
    from .model_dispatcher import Evaluator

# Подписи полей в сообщениях о происхождении значений
PROVENANCE_LABELS = {
    "reaction_heat_capacity_cp": ("heat_capacity_cp", "Cp"),
    "reaction_gibbs_energy": ("gibbs_energy", "G0"),
    "reaction_enthalpy": ("enthalpy", "H0"),
    "reaction_entropy": ("entropy", "S0"),
    "reaction_volume": ("volume", "V0"),
}


class ReactionSubstanceResolver:
    """Расчёт свойств вещества через реакцию и реакции через участников."""

    def __init__(self, evaluator: "Evaluator", logger: Optional[logging.Logger] = None):
        self.evaluator = evaluator
        self.logger = logger or logging.getLogger(__name__)

    def substance_from_reaction(
        self, temperature: float, pressure: float, substance: Substance
    ) -> ThermoPropertiesSubstance:
        """
        Свойства вещества, заданного через реакцию.

        Формула (для каждого свойства X):
            X(вещество) = [ΔrX - Σ νᵢ·X(участник i)] / ν(вещество)

        где сумма берётся по всем участникам реакции, кроме самого вещества.

        Args:
            temperature: Температура (K)
            pressure: Давление (bar)
            substance: Запись вещества с непустым reaction_symbol

        Returns:
            ThermoPropertiesSubstance

        Raises:
            ReactionNotDefinedError: У вещества не задан символ реакции
            ZeroCoefficientError: Коэффициент вещества в реакции равен нулю
            EntityNotFoundError: Реакция или участник отсутствуют в базе
        """
        reaction_symbol = substance.reaction_symbol
        if not reaction_symbol:
            raise ReactionNotDefinedError(substance.symbol, "thermo_properties_substance")

        reaction = self.evaluator.database.get_reaction(reaction_symbol)

        own_coefficient = reaction.coefficient(substance.symbol)
        if own_coefficient == 0.0:
            raise ZeroCoefficientError(substance.symbol, reaction_symbol, "thermo_properties_substance")

        tpr = self.evaluator.thermo_properties_reaction(temperature, pressure, reaction_symbol)

        values = {
            substance_field: getattr(tpr, reaction_field)
            for reaction_field, substance_field in REACTION_TO_SUBSTANCE_FIELDS.items()
        }

        for reactant, coeff in reaction.reactants.items():
            if reactant == substance.symbol:
                continue
            reactant_tps = self.evaluator.thermo_properties_substance(temperature, pressure, reactant)
            for name in values:
                contribution = getattr(reactant_tps, name) * coeff
                values[name] = values[name] - contribution.with_status(f"component {reactant}")

        message = f"Calculated from the reaction: {reaction_symbol}"
        tps = ThermoPropertiesSubstance(
            **{name: (q / own_coefficient).annotated(message) for name, q in values.items()}
        )

        self.logger.debug(
            f"✓ `{substance.symbol}` из реакции `{reaction_symbol}` "
            f"(ν={own_coefficient}, участников: {len(reaction.reactants)})"
        )
        return tps

    def reaction_from_reactants(
        self, temperature: float, pressure: float, symbol: str
    ) -> ThermoPropertiesReaction:
        """
        Свойства реакции как сумма свойств участников.

        Формулы:
            ΔrX = Σ νᵢ·X(участник i)  для Cp, G, H, S, V
            ln(K) = -ΔrG / (R·T)
            lg(K) = ln(K) / ln(10)

        Каждое слагаемое сохраняет сообщение о своём происхождении
        (участник и модель, по которой он рассчитан).

        Raises:
            EntityNotFoundError: Реакция или участник отсутствуют в базе
        """
        reaction = self.evaluator.database.get_reaction(symbol)
        message = f"Calculated from the reaction components: {reaction.symbol}; "

        totals = {name: Quantity() for name in PROVENANCE_LABELS}

        for reactant, coeff in reaction.reactants.items():
            tps = self.evaluator.thermo_properties_substance(temperature, pressure, reactant)
            for reaction_field, (substance_field, label) in PROVENANCE_LABELS.items():
                source = getattr(tps, substance_field)
                note = f"{label} of component {reactant}"
                if source.status:
                    note += f" [{source.status}]"
                totals[reaction_field] = totals[reaction_field] + (source * coeff).with_status(note)

        totals = {name: q.with_status(message + q.status) for name, q in totals.items()}
        gibbs = totals["reaction_gibbs_energy"]
        ln_k = gibbs.value / -(R_CONSTANT * temperature)

        self.logger.debug(
            f"✓ Реакция `{symbol}` из участников: ΔrG={gibbs.value:.2f} Дж/моль, lgK={ln_k * LN_TO_LG:.4f}"
        )

        return ThermoPropertiesReaction(
            ln_equilibrium_constant=Quantity(ln_k, gibbs.status),
            log_equilibrium_constant=Quantity(ln_k * LN_TO_LG, gibbs.status),
            **totals,
        )
