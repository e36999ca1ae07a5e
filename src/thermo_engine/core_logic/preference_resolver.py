"""
Определение флагов диспетчеризации для вещества.

ThermoPreferences - производное значение: вычисляется заново при каждом
вызове как чистая функция записи вещества и никогда не кэшируется
(запись уже кэшируется хранилищем, а сами флаги дёшевы).
"""

from dataclasses import dataclass

from ..constants import HYDROGEN_ION_NAME
from ..models.records import (
    AggregateState,
    MethodCorrP,
    MethodCorrT,
    MethodGenEoS,
    SolventState,
    Substance,
    SubstanceClass,
    ThermoCalculationType,
)
from ..storage.database import EntityAccessor


@dataclass(frozen=True)
class ThermoPreferences:
    """Флаги диспетчеризации и методы расчёта одного вещества."""

    substance: Substance
    method_gen_eos: MethodGenEoS
    method_t: MethodCorrT
    method_p: MethodCorrP
    solvent_state: SolventState = SolventState.LIQUID
    is_hydrogen_ion: bool = False
    is_water_vapor: bool = False
    is_aqueous_solvent: bool = False
    is_reaction_derived: bool = False

    @property
    def uses_water_model(self) -> bool:
        """Вещество рассчитывается моделью воды (растворитель или пар)."""
        return self.is_aqueous_solvent or self.is_water_vapor


def resolve_preferences(substance: Substance) -> ThermoPreferences:
    """
    Вычислить флаги диспетчеризации по записи вещества.

    Правила:
        - is_hydrogen_ion: каноническое имя совпадает с протоном ("H+")
        - is_water_vapor: EOS = CTPM_HKF и поправка по P = CPM_GAS
        - is_aqueous_solvent: класс вещества - водный растворитель
        - solvent_state: пар для газового агрегатного состояния, иначе жидкость
        - is_reaction_derived: свойства задаются через реакцию

    Args:
        substance: Запись вещества

    Returns:
        ThermoPreferences
    """
    return ThermoPreferences(
        substance=substance,
        method_gen_eos=substance.method_gen_eos,
        method_t=substance.method_t,
        method_p=substance.method_p,
        solvent_state=(
            SolventState.VAPOR
            if substance.aggregate_state == AggregateState.GAS
            else SolventState.LIQUID
        ),
        is_hydrogen_ion=substance.name == HYDROGEN_ION_NAME,
        is_water_vapor=(
            substance.method_gen_eos == MethodGenEoS.CTPM_HKF
            and substance.method_p == MethodCorrP.CPM_GAS
        ),
        is_aqueous_solvent=substance.substance_class == SubstanceClass.AQUEOUS_SOLVENT,
        is_reaction_derived=(
            substance.thermo_calculation_type == ThermoCalculationType.REACTION
        ),
    )


class PreferenceResolver:
    """Получение вещества из хранилища и расчёт его ThermoPreferences."""

    def __init__(self, database: EntityAccessor):
        self.database = database

    def resolve(self, symbol: str) -> ThermoPreferences:
        """
        Raises:
            EntityNotFoundError: Если вещества нет в базе
        """
        return resolve_preferences(self.database.get_substance(symbol))
