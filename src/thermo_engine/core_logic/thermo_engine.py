"""
Термодинамический движок: публичные точки входа с кэшированием.

ThermoEngine владеет хранилищем (Database), реестром моделей, настройками
и четырьмя кэшами - по одному на точку входа:

- thermo_properties_substance(T, P, symbol)
- electro_properties_solvent(T, P, symbol)
- properties_solvent(T, P, symbol)
- thermo_properties_reaction(T, P, symbol)

thermo_properties_reaction_from_reactants не кэшируется сама, но использует
кэшированные свойства участников.

Ключ кэша - (T, P, symbol). Настройки (растворитель, конвенции) в ключ не
входят, поэтому при их изменении все кэши очищаются. Изменять настройки
параллельно с выполняющимися расчётами нельзя.
"""

import logging
import math
from enum import Enum
from typing import Callable, Dict, Optional, Union

from ..calculations.builtin_models import default_registry
from ..calculations.memo_cache import CacheKey, CacheMetrics, MemoCache
from ..config.engine_config import EngineConfiguration, resolve_convention
from ..models.properties import (
    ElectroPropertiesSolvent,
    PropertiesSolvent,
    ThermoPropertiesReaction,
    ThermoPropertiesSubstance,
)
from ..storage.database import Database
from .evaluation_guard import EvaluationGuard
from .model_dispatcher import ModelDispatcher
from .model_registry import ModelFamily, ModelRegistry, ThermoModel

SUBSTANCE = "substance"
ELECTRO_SOLVENT = "electro-solvent"
SOLVENT = "solvent"
REACTION = "reaction"

CacheFactory = Callable[[str, Optional[int]], MemoCache]


def _validate_conditions(temperature: float, pressure: float) -> None:
    if not math.isfinite(temperature) or temperature <= 0:
        raise ValueError(f"Temperature must be a positive number of kelvins, got {temperature}")
    if not math.isfinite(pressure) or pressure < 0:
        raise ValueError(f"Pressure must be a non-negative number of bars, got {pressure}")


class ThermoEngine:
    """
    Расчёт свойств веществ, растворителя и реакций при (T, P).

    Пример:
        engine = ThermoEngine(database)
        tps = engine.thermo_properties_substance(298.15, 1.0, "Quartz")
        tpr = engine.thermo_properties_reaction(373.15, 1.0, "CalciteDissolution")
    """

    def __init__(
        self,
        database: Database,
        registry: Optional[ModelRegistry] = None,
        configuration: Optional[EngineConfiguration] = None,
        logger: Optional[logging.Logger] = None,
        cache_factory: Optional[CacheFactory] = None,
    ):
        """
        Инициализация движка.

        Args:
            database: Хранилище записей (один движок - одна база)
            registry: Реестр моделей (по умолчанию default_registry())
            configuration: Настройки (по умолчанию EngineConfiguration())
            logger: Логгер (по умолчанию logging.getLogger(__name__))
            cache_factory: Фабрика кэшей (имя, max_size) -> MemoCache
        """
        self._database = database
        self._registry = registry if registry is not None else default_registry()
        self._configuration = configuration or EngineConfiguration()
        self.logger = logger or logging.getLogger(__name__)

        factory = cache_factory or (lambda name, max_size: MemoCache(name, max_size))
        max_size = self._configuration.cache_max_size
        self._caches: Dict[str, MemoCache] = {
            SUBSTANCE: factory(SUBSTANCE, max_size),
            ELECTRO_SOLVENT: factory(ELECTRO_SOLVENT, max_size),
            SOLVENT: factory(SOLVENT, max_size),
            REACTION: factory(REACTION, max_size),
        }

        self._guard = EvaluationGuard()
        self.dispatcher = ModelDispatcher(self, self._registry, self.logger)

        self.logger.info(
            f"ThermoEngine initialized: solvent={self._configuration.solvent_symbol}, "
            f"conventions={self._configuration.conventions}"
        )

    # ------------------------------------------------------------------
    # Настройки
    # ------------------------------------------------------------------

    @property
    def database(self) -> Database:
        return self._database

    @property
    def configuration(self) -> EngineConfiguration:
        return self._configuration

    @property
    def registry(self) -> ModelRegistry:
        """
        Реестр моделей движка.

        Изменения реестра в обход register_model/unregister_model не
        сбрасывают кэши: после них нужен clear_caches().
        """
        return self._registry

    def register_model(
        self, family: ModelFamily, tags: Union[str, Enum], model: ThermoModel
    ) -> ThermoModel:
        """Зарегистрировать (или заменить) модель. Все кэши очищаются."""
        self._registry.register(family, tags, model)
        self.clear_caches()
        self.logger.info(f"✓ Модель {model.name} для {ModelFamily(family).value}")
        return model

    def unregister_model(self, family: ModelFamily, tag: Union[str, Enum]) -> bool:
        """Удалить модель. Кэши очищаются, если модель была зарегистрирована."""
        removed = self._registry.unregister(family, tag)
        if removed:
            self.clear_caches()
        return removed

    @property
    def solvent_symbol(self) -> str:
        """Символ растворителя, используемого моделями растворённых веществ."""
        return self._configuration.solvent_symbol

    def set_solvent_symbol(self, symbol: str) -> None:
        """Сменить растворитель. Все кэши очищаются."""
        if symbol == self._configuration.solvent_symbol:
            return
        self._configuration = EngineConfiguration(
            **{**self._configuration.model_dump(), "solvent_symbol": symbol}
        )
        self.clear_caches()
        self.logger.info(f"✓ Растворитель: {symbol}")

    @property
    def conventions(self) -> Dict[str, str]:
        """Семейство -> выбранная конвенция (копия)."""
        return dict(self._configuration.conventions)

    def set_convention(self, family: str, name: str) -> None:
        """
        Выбрать конвенцию для семейства. Все кэши очищаются.

        Raises:
            ConventionError: Неизвестная конвенция или семейство
        """
        canonical = resolve_convention(family, name)
        if self._configuration.conventions.get(family, "") == canonical:
            return
        conventions = {**self._configuration.conventions, family: canonical}
        self._configuration = EngineConfiguration(
            **{**self._configuration.model_dump(), "conventions": conventions}
        )
        self.clear_caches()
        self.logger.info(f"✓ Конвенция {family}: {canonical or '(нет)'}")

    def clear_caches(self) -> None:
        """Очистить кэши всех точек входа."""
        for cache in self._caches.values():
            cache.clear()

    def cache_metrics(self) -> Dict[str, CacheMetrics]:
        """Метрики кэша каждой точки входа."""
        return {name: cache.metrics for name, cache in self._caches.items()}

    def cache(self, entry_point: str) -> MemoCache:
        """Кэш точки входа (substance, electro-solvent, solvent, reaction)."""
        return self._caches[entry_point]

    def parse_substance_formula(self, formula: str) -> Dict[str, float]:
        """Состав формулы {элемент: количество}."""
        return self._database.parse_substance_formula(formula)

    # ------------------------------------------------------------------
    # Точки входа
    # ------------------------------------------------------------------

    def _memoized(self, entry_point: str, temperature: float, pressure: float, symbol: str, compute):
        _validate_conditions(temperature, pressure)
        key = CacheKey(float(temperature), float(pressure), symbol)

        def evaluate():
            if not self._configuration.detect_cycles:
                return compute(key.temperature, key.pressure, symbol)
            with self._guard.enter(entry_point, symbol):
                return compute(key.temperature, key.pressure, symbol)

        return self._caches[entry_point].get_or_compute(key, evaluate)

    def thermo_properties_substance(
        self, temperature: float, pressure: float, symbol: str
    ) -> ThermoPropertiesSubstance:
        """
        Свойства вещества при (T, P).

        Args:
            temperature: Температура (K)
            pressure: Давление (bar)
            symbol: Символ вещества

        Raises:
            EntityNotFoundError, ReactionNotDefinedError, UnsupportedMethodError,
            ZeroCoefficientError, RecursiveEvaluationError
        """
        return self._memoized(
            SUBSTANCE, temperature, pressure, symbol, self.dispatcher.substance_properties
        )

    def electro_properties_solvent(
        self, temperature: float, pressure: float, symbol: str
    ) -> ElectroPropertiesSolvent:
        """Диэлектрические свойства растворителя при (T, P)."""
        return self._memoized(
            ELECTRO_SOLVENT, temperature, pressure, symbol, self.dispatcher.electro_properties_solvent
        )

    def properties_solvent(
        self, temperature: float, pressure: float, symbol: str
    ) -> PropertiesSolvent:
        """PVT свойства растворителя при (T, P)."""
        return self._memoized(
            SOLVENT, temperature, pressure, symbol, self.dispatcher.properties_solvent
        )

    def thermo_properties_reaction(
        self, temperature: float, pressure: float, symbol: str
    ) -> ThermoPropertiesReaction:
        """Свойства реакции при (T, P) по её собственным моделям."""
        return self._memoized(
            REACTION, temperature, pressure, symbol, self.dispatcher.reaction_properties
        )

    def thermo_properties_reaction_from_reactants(
        self, temperature: float, pressure: float, symbol: str
    ) -> ThermoPropertiesReaction:
        """
        Свойства реакции как стехиометрическая сумма свойств участников.

        lnK и lgK выводятся из ΔrG: ΔrG = -R·T·ln K.
        """
        _validate_conditions(temperature, pressure)
        return self.dispatcher.recursion.reaction_from_reactants(
            float(temperature), float(pressure), symbol
        )
