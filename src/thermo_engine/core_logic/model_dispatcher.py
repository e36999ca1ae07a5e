"""
Диспетчер моделей: выбор и вызов модели по методам расчёта записи.

Четыре операции, по одной на семейство свойств:
- substance_properties: свойства вещества (EOS -> поправка по T -> поправка по P)
- electro_properties_solvent: диэлектрические свойства растворителя
- properties_solvent: PVT свойства растворителя
- reaction_properties: свойства реакции (поправка по T -> поправка по P)

Дополнительные свойства растворителя, которые запрашивает модель, диспетчер
получает через кэшируемые точки входа движка (Evaluator), поэтому вложенные
вызовы используют тот же кэш.
"""

import logging
from typing import Optional, Protocol

from ..config.engine_config import EngineConfiguration
from ..exceptions import UnsupportedMethodError
from ..models.properties import (
    ElectroPropertiesSolvent,
    PropertiesSolvent,
    PropertyBundle,
    ThermoPropertiesReaction,
    ThermoPropertiesSubstance,
)
from ..models.records import MethodCorrP, MethodCorrT, MethodGenEoS, SolventState
from ..storage.database import EntityAccessor
from .convention_converter import ConventionConverter
from .model_registry import (
    DEFAULT_TAG,
    Auxiliary,
    ModelFamily,
    ModelInputs,
    ModelRegistry,
    Record,
    ThermoModel,
)
from .preference_resolver import PreferenceResolver, ThermoPreferences
from .reaction_recursion import ReactionSubstanceResolver

# Поправки по давлению для реакций, которые намеренно ничего не меняют
REACTION_NOOP_P_METHODS = frozenset({MethodCorrP.NONE, MethodCorrP.CPM_NUL, MethodCorrP.CPM_CON})


class Evaluator(Protocol):
    """Кэшируемые точки входа движка, доступные диспетчеру."""

    @property
    def database(self) -> EntityAccessor:
        ...

    @property
    def configuration(self) -> EngineConfiguration:
        ...

    def thermo_properties_substance(self, temperature: float, pressure: float, symbol: str) -> ThermoPropertiesSubstance:
        ...

    def electro_properties_solvent(self, temperature: float, pressure: float, symbol: str) -> ElectroPropertiesSolvent:
        ...

    def properties_solvent(self, temperature: float, pressure: float, symbol: str) -> PropertiesSolvent:
        ...

    def thermo_properties_reaction(self, temperature: float, pressure: float, symbol: str) -> ThermoPropertiesReaction:
        ...


class ModelDispatcher:
    """
    Выбор модели по методу расчёта и композиция стадий.

    На каждой стадии (EOS, поправка по T, поправка по P) выполняется не более
    одной модели. Поправки получают результат предыдущей стадии в
    ModelInputs.previous и уточняют отдельные поля.
    """

    def __init__(
        self,
        evaluator: Evaluator,
        registry: ModelRegistry,
        logger: Optional[logging.Logger] = None,
    ):
        self.evaluator = evaluator
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)
        self.resolver = PreferenceResolver(evaluator.database)
        self.converter = ConventionConverter(evaluator.database.elemental_entropy)
        self.recursion = ReactionSubstanceResolver(evaluator, self.logger)

    # ------------------------------------------------------------------
    # Вспомогательные методы
    # ------------------------------------------------------------------

    def _require_model(
        self, family: ModelFamily, method, entity_type: str, symbol: str, operation: str
    ) -> ThermoModel:
        model = self.registry.get(family, method)
        if model is None:
            method_name = getattr(method, "value", method)
            self.logger.warning(
                f"⚠ Нет модели {family.value} для метода {method_name} ({entity_type} `{symbol}`)"
            )
            raise UnsupportedMethodError(entity_type, symbol, family.value, method_name, operation)
        return model

    def _solvent_reference_conditions(self):
        solvent = self.evaluator.database.get_substance(self.evaluator.configuration.solvent_symbol)
        return solvent.reference_t, solvent.reference_p

    def _water_ideal_gas(self, temperature: float, pressure: float) -> ThermoPropertiesSubstance:
        solvent_symbol = self.evaluator.configuration.solvent_symbol
        solvent = self.evaluator.database.get_substance(solvent_symbol)
        model = self._require_model(
            ModelFamily.WATER_IDEAL_GAS, DEFAULT_TAG, "substance", solvent_symbol, "water_ideal_gas"
        )
        return model.evaluate(temperature, pressure, solvent, ModelInputs())

    def _inputs_for(
        self,
        model: ThermoModel,
        temperature: float,
        pressure: float,
        previous: Optional[PropertyBundle] = None,
        solvent_state: SolventState = SolventState.LIQUID,
        solvent_symbol: Optional[str] = None,
    ) -> ModelInputs:
        """
        Собрать входные данные модели согласно model.requires.

        Args:
            solvent_symbol: Растворитель для SOLVENT_* (по умолчанию растворитель движка)
        """
        requires = model.requires
        if not requires:
            return ModelInputs(previous=previous, solvent_state=solvent_state)

        ev = self.evaluator
        solvent = solvent_symbol or ev.configuration.solvent_symbol
        values = {}

        if Auxiliary.SOLVENT_PVT in requires:
            values["solvent_properties"] = ev.properties_solvent(temperature, pressure, solvent)
        if Auxiliary.SOLVENT_ELECTRO in requires:
            values["solvent_electro"] = ev.electro_properties_solvent(temperature, pressure, solvent)
        if Auxiliary.SOLVENT_THERMO in requires:
            values["solvent_thermo"] = ev.thermo_properties_substance(temperature, pressure, solvent)
        if Auxiliary.SOLVENT_IDEAL_GAS in requires:
            values["solvent_ideal_gas"] = self._water_ideal_gas(temperature, pressure)

        reference = {
            Auxiliary.SOLVENT_PVT_REFERENCE,
            Auxiliary.SOLVENT_THERMO_REFERENCE,
            Auxiliary.SOLVENT_IDEAL_GAS_REFERENCE,
        }
        if requires & reference:
            tr, pr = self._solvent_reference_conditions()
            if Auxiliary.SOLVENT_PVT_REFERENCE in requires:
                values["solvent_properties_reference"] = ev.properties_solvent(tr, pr, solvent)
            if Auxiliary.SOLVENT_THERMO_REFERENCE in requires:
                values["solvent_thermo_reference"] = ev.thermo_properties_substance(tr, pr, solvent)
            if Auxiliary.SOLVENT_IDEAL_GAS_REFERENCE in requires:
                values["solvent_ideal_gas_reference"] = self._water_ideal_gas(tr, pr)

        return ModelInputs(previous=previous, solvent_state=solvent_state, **values)

    def _run(
        self,
        model: ThermoModel,
        temperature: float,
        pressure: float,
        record: Record,
        previous: Optional[PropertyBundle] = None,
        solvent_state: SolventState = SolventState.LIQUID,
        solvent_symbol: Optional[str] = None,
    ) -> PropertyBundle:
        inputs = self._inputs_for(model, temperature, pressure, previous, solvent_state, solvent_symbol)
        self.logger.debug(f"Модель {model.name} для `{record.symbol}` при T={temperature}K, P={pressure}bar")
        return model.evaluate(temperature, pressure, record, inputs)

    # ------------------------------------------------------------------
    # Вещество
    # ------------------------------------------------------------------

    def substance_properties(
        self, temperature: float, pressure: float, symbol: str
    ) -> ThermoPropertiesSubstance:
        """
        Расчёт свойств вещества.

        Алгоритм:
            1. H+ -> нулевой набор свойств (в любой конвенции)
            2. Вещество из реакции -> ReactionSubstanceResolver
            3. Не вода: EOS по method_gen_eos, затем поправки по method_t и method_p
            4. Вода (растворитель или пар): модель воды по method_t, иначе
               EmpiricalCpIntegration (CTPM_CPT)
            5. Применение конвенции

        Raises:
            EntityNotFoundError: Вещество отсутствует в базе
            UnsupportedMethodError: Для метода не зарегистрирована модель
        """
        pref = self.resolver.resolve(symbol)
        substance = pref.substance

        if pref.is_hydrogen_ion:
            return ThermoPropertiesSubstance.zero()

        if pref.is_reaction_derived:
            return self.recursion.substance_from_reaction(temperature, pressure, substance)

        if pref.uses_water_model:
            tps = self._water_substance_properties(temperature, pressure, pref)
        else:
            tps = self._staged_substance_properties(temperature, pressure, pref)

        return self.converter.convert(
            tps, substance, pref.is_aqueous_solvent, self.evaluator.configuration.conventions
        )

    def _staged_substance_properties(
        self, temperature: float, pressure: float, pref: ThermoPreferences
    ) -> ThermoPropertiesSubstance:
        substance = pref.substance
        symbol = substance.symbol

        if pref.method_gen_eos == MethodGenEoS.NONE:
            tps = ThermoPropertiesSubstance.zero()
        else:
            model = self._require_model(
                ModelFamily.SUBSTANCE_EOS, pref.method_gen_eos, "substance", symbol,
                "thermo_properties_substance",
            )
            tps = self._run(model, temperature, pressure, substance)

        if pref.method_t != MethodCorrT.NONE:
            model = self._require_model(
                ModelFamily.SUBSTANCE_T_CORRECTION, pref.method_t, "substance", symbol,
                "thermo_properties_substance",
            )
            tps = self._run(model, temperature, pressure, substance, previous=tps)

        if pref.method_p != MethodCorrP.NONE:
            model = self._require_model(
                ModelFamily.SUBSTANCE_P_CORRECTION, pref.method_p, "substance", symbol,
                "thermo_properties_substance",
            )
            tps = self._run(model, temperature, pressure, substance, previous=tps)

        return tps

    def _water_substance_properties(
        self, temperature: float, pressure: float, pref: ThermoPreferences
    ) -> ThermoPropertiesSubstance:
        substance = pref.substance

        model = self.registry.get(ModelFamily.WATER_SUBSTANCE, pref.method_t)
        if model is not None:
            return self._run(
                model, temperature, pressure, substance,
                solvent_state=pref.solvent_state, solvent_symbol=substance.symbol,
            )

        if pref.method_gen_eos == MethodGenEoS.CTPM_CPT:
            self.logger.debug(
                f"Нет модели воды для {pref.method_t.value}, `{substance.symbol}` "
                f"рассчитывается по {MethodGenEoS.CTPM_CPT.value}"
            )
            model = self._require_model(
                ModelFamily.SUBSTANCE_EOS, MethodGenEoS.CTPM_CPT, "substance", substance.symbol,
                "thermo_properties_substance",
            )
            return self._run(model, temperature, pressure, substance)

        raise UnsupportedMethodError(
            "substance", substance.symbol, ModelFamily.WATER_SUBSTANCE.value,
            pref.method_t.value, "thermo_properties_substance",
        )

    # ------------------------------------------------------------------
    # Растворитель
    # ------------------------------------------------------------------

    def electro_properties_solvent(
        self, temperature: float, pressure: float, symbol: str
    ) -> ElectroPropertiesSolvent:
        """
        Диэлектрические свойства растворителя по method_gen_eos.

        Для веществ, не являющихся водным растворителем, возвращается
        нулевой набор свойств.
        """
        pref = self.resolver.resolve(symbol)
        if not pref.is_aqueous_solvent:
            return ElectroPropertiesSolvent.zero()

        model = self._require_model(
            ModelFamily.SOLVENT_ELECTRO, pref.method_gen_eos, "solvent", symbol,
            "electro_properties_solvent",
        )
        return self._run(
            model, temperature, pressure, pref.substance,
            solvent_state=pref.solvent_state, solvent_symbol=symbol,
        )

    def properties_solvent(
        self, temperature: float, pressure: float, symbol: str
    ) -> PropertiesSolvent:
        """
        PVT свойства растворителя по method_t.

        Для веществ, не являющихся водным растворителем, возвращается
        нулевой набор свойств.
        """
        pref = self.resolver.resolve(symbol)
        if not pref.is_aqueous_solvent:
            return PropertiesSolvent.zero()

        model = self._require_model(
            ModelFamily.SOLVENT_PVT, pref.method_t, "solvent", symbol, "properties_solvent"
        )
        return self._run(
            model, temperature, pressure, pref.substance,
            solvent_state=pref.solvent_state, solvent_symbol=symbol,
        )

    # ------------------------------------------------------------------
    # Реакция
    # ------------------------------------------------------------------

    def reaction_properties(
        self, temperature: float, pressure: float, symbol: str
    ) -> ThermoPropertiesReaction:
        """
        Свойства реакции: модель по method_t, затем поправка по method_p.

        Поправки CPM_NUL и CPM_CON для реакций не меняют результат.

        Raises:
            EntityNotFoundError: Реакция отсутствует в базе
            UnsupportedMethodError: Для метода не зарегистрирована модель
        """
        reaction = self.evaluator.database.get_reaction(symbol)

        if reaction.method_t == MethodCorrT.NONE:
            self.logger.debug(f"Реакция `{symbol}` без модели по T: нулевые свойства")
            tpr = ThermoPropertiesReaction.zero()
        else:
            model = self._require_model(
                ModelFamily.REACTION_T_CORRECTION, reaction.method_t, "reaction", symbol,
                "thermo_properties_reaction",
            )
            tpr = self._run(model, temperature, pressure, reaction)

        if reaction.method_p in REACTION_NOOP_P_METHODS:
            return tpr

        model = self._require_model(
            ModelFamily.REACTION_P_CORRECTION, reaction.method_p, "reaction", symbol,
            "thermo_properties_reaction",
        )
        return self._run(model, temperature, pressure, reaction, previous=tpr)
