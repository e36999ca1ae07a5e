"""
Общие фикстуры для тестов термодинамического движка.

Модели воды, растворителя и HKF здесь - простые детерминированные заглушки,
реализующие контракт ThermoModel и считающие свои вызовы.
"""

import logging

import pytest

from thermo_engine import (
    AggregateState,
    Database,
    MethodCorrP,
    MethodCorrT,
    MethodGenEoS,
    Reaction,
    Substance,
    SubstanceClass,
    ThermoCalculationType,
    ThermoEngine,
    default_registry,
)
from thermo_engine.core_logic import Auxiliary, ModelFamily, ThermoModel
from thermo_engine.models import (
    ElectroPropertiesSolvent,
    PropertiesSolvent,
    ThermoPropertiesSubstance,
)
from thermo_engine.models.records import SolventState

T_REF = 298.15
P_REF = 1.0


class CountingModel(ThermoModel):
    """Модель-заглушка, считающая вызовы evaluate."""

    def __init__(self, func, requires=()):
        self.func = func
        self.requires = frozenset(requires)
        self.calls = 0
        self.last_inputs = None

    def evaluate(self, temperature, pressure, record, inputs):
        self.calls += 1
        self.last_inputs = inputs
        return self.func(temperature, pressure, record, inputs)

    @property
    def name(self):
        return f"Counting[{self.func.__name__}]"


def water_substance(T, P, record, inputs):
    enthalpy = -285830.0 + 75.3 * (T - T_REF)
    if inputs.solvent_state == SolventState.VAPOR:
        enthalpy += 44000.0
    return ThermoPropertiesSubstance.from_values(
        gibbs_energy=-237181.0 - 69.9 * (T - T_REF) + 1.8 * (P - P_REF),
        enthalpy=enthalpy,
        entropy=69.95,
        heat_capacity_cp=75.3,
        heat_capacity_cv=74.5,
        volume=1.807,
        helmholtz_energy=-237100.0,
        internal_energy=-285800.0,
    )


def water_pvt(T, P, record, inputs):
    return PropertiesSolvent.from_values(
        density=997.05 - 0.3 * (T - T_REF) + 0.045 * (P - P_REF),
        alpha=2.6e-4,
        beta=4.5e-5,
    )


def water_electro(T, P, record, inputs):
    epsilon = 78.47 * inputs.solvent_properties.density.value / 997.05
    return ElectroPropertiesSolvent.from_values(
        epsilon=epsilon,
        born_z=-1.0 / epsilon,
        born_y=-5.8e-5,
    )


def hkf_solute(T, P, record, inputs):
    g0 = record.parameters["g0"]
    return ThermoPropertiesSubstance.from_values(
        gibbs_energy=g0 + 10.0 * inputs.solvent_electro.epsilon.value + 0.5 * (T - T_REF),
        enthalpy=g0 - 2000.0,
        entropy=record.parameters.get("s0", 0.0),
        volume=inputs.solvent_properties.density.value / 1000.0,
        heat_capacity_cp=40.0,
    )


def water_ideal_gas(T, P, record, inputs):
    return ThermoPropertiesSubstance.from_values(
        gibbs_energy=-228582.0 - 188.8 * (T - T_REF),
        enthalpy=-241826.0,
        entropy=188.8,
    )


def akinfiev_diamond(T, P, record, inputs):
    tps = inputs.previous
    shift = (
        (inputs.solvent_thermo.gibbs_energy.value - inputs.solvent_ideal_gas.gibbs_energy.value)
        - (inputs.solvent_thermo_reference.gibbs_energy.value
           - inputs.solvent_ideal_gas_reference.gibbs_energy.value)
        + inputs.solvent_properties.density.value
        - inputs.solvent_properties_reference.density.value
    )
    return tps.update(gibbs_energy=tps.gibbs_energy + shift)


@pytest.fixture
def stub_models():
    """Заглушки внешних моделей по имени."""
    return {
        "water": CountingModel(water_substance),
        "water_pvt": CountingModel(water_pvt),
        "water_electro": CountingModel(water_electro, [Auxiliary.SOLVENT_PVT]),
        "hkf": CountingModel(hkf_solute, [Auxiliary.SOLVENT_PVT, Auxiliary.SOLVENT_ELECTRO]),
        "ideal_gas": CountingModel(water_ideal_gas),
        "aki": CountingModel(
            akinfiev_diamond,
            [
                Auxiliary.SOLVENT_THERMO,
                Auxiliary.SOLVENT_IDEAL_GAS,
                Auxiliary.SOLVENT_PVT,
                Auxiliary.SOLVENT_THERMO_REFERENCE,
                Auxiliary.SOLVENT_IDEAL_GAS_REFERENCE,
                Auxiliary.SOLVENT_PVT_REFERENCE,
            ],
        ),
    }


@pytest.fixture
def registry(stub_models):
    """Реестр по умолчанию + заглушки воды, растворителя и HKF."""
    registry = default_registry()
    registry.register(ModelFamily.WATER_SUBSTANCE, MethodCorrT.CTM_WAT, stub_models["water"])
    registry.register(ModelFamily.SOLVENT_PVT, MethodCorrT.CTM_WAT, stub_models["water_pvt"])
    registry.register(ModelFamily.SOLVENT_ELECTRO, MethodGenEoS.CTPM_WJNR, stub_models["water_electro"])
    registry.register(ModelFamily.SUBSTANCE_EOS, MethodGenEoS.CTPM_HKF, stub_models["hkf"])
    registry.register(ModelFamily.WATER_IDEAL_GAS, "default", stub_models["ideal_gas"])
    registry.register(ModelFamily.SUBSTANCE_P_CORRECTION, MethodCorrP.CPM_AKI, stub_models["aki"])
    return registry


def quartz() -> Substance:
    return Substance(
        symbol="Quartz",
        name="Quartz",
        formula="SiO2",
        substance_class=SubstanceClass.SOLID,
        aggregate_state=AggregateState.SOLID,
        method_gen_eos=MethodGenEoS.CTPM_CPT,
        method_p=MethodCorrP.CPM_CON,
        parameters={
            "reference_properties": {
                "gibbs_energy": -856288.0,
                "enthalpy": -910700.0,
                "entropy": 41.46,
                "heat_capacity_cp": 44.6,
                "volume": 2.269,
            },
            "cp_coefficients": [[80.01, -0.0035467, -240276.0, -453.0]],
        },
    )


@pytest.fixture
def database():
    """База с водой, паром, H+, кварцем, ионами и реакциями."""
    substances = [
        Substance(
            symbol="H2O@",
            name="H2O",
            formula="H2O@",
            substance_class=SubstanceClass.AQUEOUS_SOLVENT,
            aggregate_state=AggregateState.AQUEOUS,
            method_gen_eos=MethodGenEoS.CTPM_WJNR,
            method_t=MethodCorrT.CTM_WAT,
        ),
        Substance(
            symbol="H2O",
            name="H2O",
            formula="H2O",
            substance_class=SubstanceClass.GAS_FLUID,
            aggregate_state=AggregateState.GAS,
            method_gen_eos=MethodGenEoS.CTPM_HKF,
            method_t=MethodCorrT.CTM_WAT,
            method_p=MethodCorrP.CPM_GAS,
        ),
        Substance(
            symbol="H+",
            name="H+",
            formula="H+",
            substance_class=SubstanceClass.AQUEOUS_SOLUTE,
            aggregate_state=AggregateState.AQUEOUS,
            method_gen_eos=MethodGenEoS.CTPM_HKF,
            parameters={"g0": 12345.0},
        ),
        quartz(),
        Substance(
            symbol="Na+",
            name="Na+",
            formula="Na+",
            substance_class=SubstanceClass.AQUEOUS_SOLUTE,
            aggregate_state=AggregateState.AQUEOUS,
            method_gen_eos=MethodGenEoS.CTPM_HKF,
            parameters={"g0": -261881.0, "s0": 58.41},
        ),
        Substance(
            symbol="Cl-",
            name="Cl-",
            formula="Cl-",
            substance_class=SubstanceClass.AQUEOUS_SOLUTE,
            aggregate_state=AggregateState.AQUEOUS,
            method_gen_eos=MethodGenEoS.CTPM_HKF,
            parameters={"g0": -131290.0, "s0": 56.73},
        ),
        Substance(
            symbol="NaCl@",
            name="NaCl@",
            formula="NaCl@",
            substance_class=SubstanceClass.AQUEOUS_SOLUTE,
            aggregate_state=AggregateState.AQUEOUS,
            thermo_calculation_type=ThermoCalculationType.REACTION,
            reaction_symbol="NaCl@_assoc",
        ),
        Substance(
            symbol="CO2",
            name="CO2",
            formula="CO2",
            substance_class=SubstanceClass.GAS_FLUID,
            aggregate_state=AggregateState.GAS,
            method_gen_eos=MethodGenEoS.CTPM_CPT,
            method_p=MethodCorrP.CPM_OFF,
            parameters={
                "reference_properties": {
                    "gibbs_energy": -394359.0,
                    "enthalpy": -393510.0,
                    "entropy": 213.785,
                    "heat_capacity_cp": 37.135,
                }
            },
        ),
        Substance(
            symbol="CO2@",
            name="CO2@",
            formula="CO2@",
            substance_class=SubstanceClass.AQUEOUS_SOLUTE,
            aggregate_state=AggregateState.AQUEOUS,
            method_gen_eos=MethodGenEoS.CTPM_HKF,
            method_p=MethodCorrP.CPM_AKI,
            parameters={"g0": -385974.0},
        ),
    ]
    reactions = [
        Reaction(
            symbol="NaCl@_assoc",
            equation="Na+ + Cl- = NaCl@",
            reactants={"Na+": -1.0, "Cl-": -1.0, "NaCl@": 1.0},
            method_t=MethodCorrT.CTM_LGK,
            method_p=MethodCorrP.CPM_NUL,
            parameters={"log_k_coefficients": [-0.5, 0.0, 150.0]},
        ),
    ]
    return Database(substances=substances, reactions=reactions)


@pytest.fixture
def engine(database, registry):
    """Движок с заглушками моделей."""
    return ThermoEngine(database, registry, logger=logging.getLogger("test_engine"))
