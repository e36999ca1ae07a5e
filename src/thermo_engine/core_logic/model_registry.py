"""
Реестр моделей: метод расчёта -> реализация модели.

Каждая модель реализует единственную операцию evaluate и объявляет, какие
дополнительные свойства растворителя ей нужны (requires). Диспетчер
вычисляет эти свойства через кэшируемые точки входа движка и передаёт их
в ModelInputs. Добавление новой модели - это регистрация, а не правка
диспетчера.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from ..models.properties import (
    ElectroPropertiesSolvent,
    PropertiesSolvent,
    PropertyBundle,
    ThermoPropertiesSubstance,
)
from ..models.records import Reaction, SolventState, Substance

logger = logging.getLogger(__name__)

# Тег единственной модели семейства (например, идеальный газ воды)
DEFAULT_TAG = "default"


class ModelFamily(str, Enum):
    """Семейства моделей (стадии расчёта)."""

    SUBSTANCE_EOS = "substance-eos"
    SUBSTANCE_T_CORRECTION = "substance-t-correction"
    SUBSTANCE_P_CORRECTION = "substance-p-correction"
    WATER_SUBSTANCE = "water-substance"
    SOLVENT_PVT = "solvent-pvt"
    SOLVENT_ELECTRO = "solvent-electro"
    WATER_IDEAL_GAS = "water-ideal-gas"
    REACTION_T_CORRECTION = "reaction-t-correction"
    REACTION_P_CORRECTION = "reaction-p-correction"


class Auxiliary(str, Enum):
    """Дополнительные свойства растворителя, которые может запросить модель."""

    SOLVENT_PVT = "solvent-pvt"
    SOLVENT_ELECTRO = "solvent-electro"
    SOLVENT_THERMO = "solvent-thermo"
    SOLVENT_IDEAL_GAS = "solvent-ideal-gas"
    SOLVENT_PVT_REFERENCE = "solvent-pvt-reference"
    SOLVENT_THERMO_REFERENCE = "solvent-thermo-reference"
    SOLVENT_IDEAL_GAS_REFERENCE = "solvent-ideal-gas-reference"


@dataclass(frozen=True)
class ModelInputs:
    """
    Входные данные модели помимо (T, P, запись).

    previous - результат предыдущей стадии (для поправок по T и P).
    *_reference - свойства растворителя при его стандартных (T, P).
    """

    previous: Optional[PropertyBundle] = None
    solvent_state: SolventState = SolventState.LIQUID
    solvent_properties: Optional[PropertiesSolvent] = None
    solvent_electro: Optional[ElectroPropertiesSolvent] = None
    solvent_thermo: Optional[ThermoPropertiesSubstance] = None
    solvent_ideal_gas: Optional[ThermoPropertiesSubstance] = None
    solvent_properties_reference: Optional[PropertiesSolvent] = None
    solvent_thermo_reference: Optional[ThermoPropertiesSubstance] = None
    solvent_ideal_gas_reference: Optional[ThermoPropertiesSubstance] = None


Record = Union[Substance, Reaction]


class ThermoModel(ABC):
    """
    Контракт модели: чистая детерминированная функция
    (T, P, запись[, дополнительные свойства]) -> набор свойств.
    """

    requires: FrozenSet[Auxiliary] = frozenset()

    @abstractmethod
    def evaluate(
        self, temperature: float, pressure: float, record: Record, inputs: ModelInputs
    ) -> PropertyBundle:
        """Рассчитать набор свойств."""

    @property
    def name(self) -> str:
        return type(self).__name__


class FunctionModel(ThermoModel):
    """Обёртка над функцией с сигнатурой evaluate."""

    def __init__(
        self,
        func: Callable[[float, float, Record, ModelInputs], PropertyBundle],
        requires: Iterable[Auxiliary] = (),
        name: Optional[str] = None,
    ):
        self.func = func
        self.requires = frozenset(requires)
        self._name = name or getattr(func, "__name__", "FunctionModel")

    def evaluate(self, temperature, pressure, record, inputs):
        return self.func(temperature, pressure, record, inputs)

    @property
    def name(self) -> str:
        return self._name


def _tag_key(tag: Union[str, Enum]) -> str:
    return tag.value if isinstance(tag, Enum) else str(tag)


class ModelRegistry:
    """
    Потокобезопасное отображение (семейство, метод) -> модель.
    """

    def __init__(self):
        self._models: Dict[Tuple[ModelFamily, str], ThermoModel] = {}
        self._lock = threading.RLock()

    def register(
        self,
        family: ModelFamily,
        tags: Union[str, Enum, Iterable[Union[str, Enum]]],
        model: ThermoModel,
    ) -> ThermoModel:
        """
        Зарегистрировать модель для одного или нескольких методов.

        Повторная регистрация заменяет предыдущую модель.

        Returns:
            Зарегистрированная модель
        """
        if not isinstance(model, ThermoModel):
            raise TypeError(f"Expected ThermoModel, got {type(model)}")

        if isinstance(tags, (str, Enum)):
            tags = [tags]

        with self._lock:
            for tag in tags:
                key = (ModelFamily(family), _tag_key(tag))
                if key in self._models:
                    logger.debug(f"Модель {key} заменена на {model.name}")
                self._models[key] = model
        return model

    def register_function(
        self,
        family: ModelFamily,
        tags: Union[str, Enum, Iterable[Union[str, Enum]]],
        func: Callable[[float, float, Record, ModelInputs], PropertyBundle],
        requires: Iterable[Auxiliary] = (),
    ) -> ThermoModel:
        """Зарегистрировать функцию как модель."""
        return self.register(family, tags, FunctionModel(func, requires))

    def unregister(self, family: ModelFamily, tag: Union[str, Enum]) -> bool:
        """Удалить модель. Возвращает True, если она была зарегистрирована."""
        with self._lock:
            return self._models.pop((ModelFamily(family), _tag_key(tag)), None) is not None

    def get(self, family: ModelFamily, tag: Union[str, Enum]) -> Optional[ThermoModel]:
        """Модель для метода или None."""
        with self._lock:
            return self._models.get((ModelFamily(family), _tag_key(tag)))

    def contains(self, family: ModelFamily, tag: Union[str, Enum]) -> bool:
        return self.get(family, tag) is not None

    def tags(self, family: ModelFamily) -> List[str]:
        """Все методы, зарегистрированные в семействе."""
        with self._lock:
            return sorted(tag for fam, tag in self._models if fam == family)

    def copy(self) -> "ModelRegistry":
        """Независимая копия реестра (модели общие)."""
        clone = ModelRegistry()
        with self._lock:
            clone._models = dict(self._models)
        return clone

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)
