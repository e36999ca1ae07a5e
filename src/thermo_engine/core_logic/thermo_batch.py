"""
Пакетный расчёт свойств по сетке температур и давлений.

Возвращает pandas.DataFrame с колонками symbol, T, P и выбранными свойствами.
Все расчёты идут через кэшируемые точки входа движка.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from tabulate import tabulate

from ..models.properties import ThermoPropertiesReaction, ThermoPropertiesSubstance
from .thermo_engine import ThermoEngine

Grid = Union[float, Sequence[float], np.ndarray]


def temperature_grid(t_start: float, t_end: float, step: float) -> np.ndarray:
    """
    Сетка температур [t_start, t_end] с шагом step (включая t_end).

    Raises:
        ValueError: Если шаг не положителен или t_end < t_start
    """
    if step <= 0:
        raise ValueError(f"Step must be positive, got {step}")
    if t_end < t_start:
        raise ValueError(f"t_end ({t_end}) must not be lower than t_start ({t_start})")
    grid = np.arange(t_start, t_end + step / 2, step)
    return grid


def _as_list(values: Grid) -> List[float]:
    if np.isscalar(values):
        return [float(values)]
    return [float(v) for v in values]


def _select_properties(bundle_type, properties: Optional[Iterable[str]]) -> List[str]:
    available = bundle_type.field_names()
    if properties is None:
        return list(available)
    selected = list(properties)
    unknown = [name for name in selected if name not in available]
    if unknown:
        raise ValueError(
            f"Unknown properties for {bundle_type.__name__}: {', '.join(unknown)}"
        )
    return selected


class ThermoBatch:
    """
    Расчёт таблиц свойств для набора веществ или реакций.

    Пример:
        batch = ThermoBatch(engine)
        df = batch.substance_table(["Quartz", "Calcite"], temperature_grid(300, 600, 100), 1.0)
    """

    def __init__(self, engine: ThermoEngine, logger: Optional[logging.Logger] = None):
        self.engine = engine
        self.logger = logger or logging.getLogger(__name__)

    def _table(self, evaluate, bundle_type, symbols, temperatures, pressures, properties) -> pd.DataFrame:
        selected = _select_properties(bundle_type, properties)
        rows = []

        for symbol in symbols:
            for P in _as_list(pressures):
                for T in _as_list(temperatures):
                    bundle = evaluate(T, P, symbol)
                    row = {"symbol": symbol, "T": T, "P": P}
                    row.update({name: getattr(bundle, name).value for name in selected})
                    rows.append(row)

        df = pd.DataFrame(rows, columns=["symbol", "T", "P", *selected])

        self.logger.info(f"✓ Расчет завершен: {len(df)} точек, {len(list(symbols))} символов")
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("\n" + tabulate(df, headers="keys", tablefmt="simple", showindex=False))
        return df

    def substance_table(
        self,
        symbols: Sequence[str],
        temperatures: Grid,
        pressures: Grid,
        properties: Optional[Iterable[str]] = None,
    ) -> pd.DataFrame:
        """
        Свойства веществ на сетке (T, P).

        Args:
            symbols: Символы веществ
            temperatures: Температура или сетка температур (K)
            pressures: Давление или сетка давлений (bar)
            properties: Имена полей ThermoPropertiesSubstance (по умолчанию все)

        Returns:
            DataFrame с колонками symbol, T, P, <свойства>
        """
        return self._table(
            self.engine.thermo_properties_substance,
            ThermoPropertiesSubstance,
            list(symbols),
            temperatures,
            pressures,
            properties,
        )

    def reaction_table(
        self,
        symbols: Sequence[str],
        temperatures: Grid,
        pressures: Grid,
        properties: Optional[Iterable[str]] = None,
        from_reactants: bool = False,
    ) -> pd.DataFrame:
        """
        Свойства реакций на сетке (T, P).

        Args:
            from_reactants: Считать реакцию как сумму свойств участников
        """
        evaluate = (
            self.engine.thermo_properties_reaction_from_reactants
            if from_reactants
            else self.engine.thermo_properties_reaction
        )
        return self._table(
            evaluate,
            ThermoPropertiesReaction,
            list(symbols),
            temperatures,
            pressures,
            properties,
        )
