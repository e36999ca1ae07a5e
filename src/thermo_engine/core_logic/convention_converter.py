"""
Пересчёт свойств вещества в выбранную конвенцию стандартного состояния.

Преобразование применяется после расчёта свойств вещества (не выведенного
из реакции) и зависит от двух независимых настроек:

- water-properties = "steam-tables": для водного растворителя вычитаются
  свойства воды в тройной точке (Helgeson & Kirkham, 1974)
- apparent-properties = "Berman-Brown": для остальных веществ из G и H
  вычитается Tr·ΣSэлементов

Любые другие значения оставляют набор свойств без изменений.
"""

import logging
from typing import Callable, Mapping

from ..config.engine_config import APPARENT_PROPERTIES, WATER_PROPERTIES
from ..constants import (
    STEAM_TABLES_ENTHALPY,
    STEAM_TABLES_ENTROPY,
    STEAM_TABLES_GIBBS_ENERGY,
    STEAM_TABLES_HELMHOLTZ_ENERGY,
    STEAM_TABLES_INTERNAL_ENERGY,
)
from ..exceptions import ConventionError, EntityNotFoundError
from ..models.properties import ThermoPropertiesSubstance
from ..models.records import Substance

logger = logging.getLogger(__name__)


def to_steam_tables(tps: ThermoPropertiesSubstance) -> ThermoPropertiesSubstance:
    """Перевести свойства воды в конвенцию steam tables."""
    return tps.update(
        gibbs_energy=tps.gibbs_energy - STEAM_TABLES_GIBBS_ENERGY,
        enthalpy=tps.enthalpy - STEAM_TABLES_ENTHALPY,
        entropy=tps.entropy - STEAM_TABLES_ENTROPY,
        helmholtz_energy=tps.helmholtz_energy - STEAM_TABLES_HELMHOLTZ_ENERGY,
        internal_energy=tps.internal_energy - STEAM_TABLES_INTERNAL_ENERGY,
    )


def to_berman_brown(
    tps: ThermoPropertiesSubstance, substance: Substance, entropy_elements: float
) -> ThermoPropertiesSubstance:
    """Перевести кажущиеся свойства в конвенцию Berman-Brown."""
    shift = substance.reference_t * entropy_elements
    return tps.update(
        gibbs_energy=tps.gibbs_energy - shift,
        enthalpy=tps.enthalpy - shift,
    )


class ConventionConverter:
    """Применяет выбранные конвенции к результату расчёта вещества."""

    def __init__(self, elemental_entropy: Callable[[str], float]):
        """
        Args:
            elemental_entropy: Сумма энтропий элементов формулы, Дж/(моль·K)
        """
        self.elemental_entropy = elemental_entropy

    def convert(
        self,
        tps: ThermoPropertiesSubstance,
        substance: Substance,
        is_aqueous_solvent: bool,
        conventions: Mapping[str, str],
    ) -> ThermoPropertiesSubstance:
        """
        Применить конвенцию к набору свойств.

        Args:
            tps: Исходный результат модели
            substance: Запись вещества
            is_aqueous_solvent: Вещество - водный растворитель
            conventions: Семейство -> имя конвенции

        Returns:
            Новый набор свойств (или исходный, если преобразование не требуется)

        Raises:
            ConventionError: Berman-Brown не применим к формуле вещества
        """
        if is_aqueous_solvent:
            if conventions.get(WATER_PROPERTIES, "").lower() == "steam-tables":
                logger.debug(f"Конвенция steam-tables для {substance.symbol}")
                return to_steam_tables(tps)
            return tps

        if conventions.get(APPARENT_PROPERTIES, "").lower() == "berman-brown":
            try:
                entropy_elements = self.elemental_entropy(substance.formula)
            except (ValueError, EntityNotFoundError) as e:
                raise ConventionError(
                    f"Cannot apply the Berman-Brown convention to the substance "
                    f"`{substance.symbol}` (formula `{substance.formula}`): {e}",
                    "thermo_properties_substance",
                    entity_type="substance",
                    symbol=substance.symbol,
                ) from e
            logger.debug(
                f"Конвенция Berman-Brown для {substance.symbol}: "
                f"ΣS элементов = {entropy_elements:.4f} Дж/(моль·K)"
            )
            return to_berman_brown(tps, substance, entropy_elements)

        return tps
