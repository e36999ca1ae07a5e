"""
Pydantic models for database records: elements, substances and reactions.

Техническое описание:
Неизменяемые записи, которые движок получает из хранилища (Database).
Движок никогда не модифицирует записи и не владеет ими: все компоненты
только ссылаются на них.

Основные модели:

Element:
- Химический элемент с энтропией при 298.15 K (на атом)
- Используется конвенцией Berman-Brown (энтропия элементов формулы)

Substance:
- Вещество: символ, формула, класс, агрегатное состояние
- Стандартные условия (reference_t, reference_p)
- Методы расчёта: general EOS, поправка по T, поправка по P
- reaction_symbol: непустой только для веществ, заданных через реакцию

Reaction:
- Реакция: символ, методы поправок по T и P
- Упорядоченная стехиометрия {символ вещества: коэффициент}

Методы расчёта заданы строковыми Enum с теми же кодами, что и в базе
(CTPM_*, CTM_*, CPM_*). Значение NONE означает отсутствие модели для стадии.
"""

import math
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..constants import REFERENCE_PRESSURE, REFERENCE_TEMPERATURE


class SubstanceClass(str, Enum):
    """Class of a substance."""

    GAS_FLUID = "gasfluid"
    AQUEOUS_SOLUTE = "aqsolute"
    AQUEOUS_SOLVENT = "aqsolvent"
    SOLID = "solid"
    COMPONENT = "component"
    OTHER = "other"


class AggregateState(str, Enum):
    """Aggregate state of a substance."""

    GAS = "gas"
    LIQUID = "liquid"
    SOLID = "solid"
    AQUEOUS = "aqueous"


class SolventState(str, Enum):
    """Phase state of the solvent passed to water models."""

    LIQUID = "liquid"
    VAPOR = "vapor"


class ThermoCalculationType(str, Enum):
    """How the properties of a substance are obtained."""

    DIRECT = "direct"
    REACTION = "derived-from-reaction"


class MethodGenEoS(str, Enum):
    """General equation-of-state methods."""

    NONE = "none"
    CTPM_CPT = "CTPM_CPT"  # empirical Cp integration
    CTPM_HKF = "CTPM_HKF"  # HKF solute (GEMS formulation)
    CTPM_HKFR = "CTPM_HKFR"  # HKF solute (Reaktoro formulation)
    CTPM_WJNR = "CTPM_WJNR"  # Johnson-Norton dielectric (Reaktoro)
    CTPM_WJNG = "CTPM_WJNG"  # Johnson-Norton dielectric (GEMS)
    CTPM_WSV14 = "CTPM_WSV14"  # Sverjensky et al. 2014 dielectric
    CTPM_WF97 = "CTPM_WF97"  # Fernandez et al. 1997 dielectric


class MethodCorrT(str, Enum):
    """Temperature correction methods."""

    NONE = "none"
    CTM_CHP = "CTM_CHP"  # Holland-Powell Landau transition
    CTM_WAT = "CTM_WAT"  # water HGK (GEMS)
    CTM_WAR = "CTM_WAR"  # water HGK (Reaktoro)
    CTM_WWP = "CTM_WWP"  # water Wagner-Pruss 95 (Reaktoro)
    CTM_WZD = "CTM_WZD"  # water Zhang-Duan 2005
    CTM_LGX = "CTM_LGX"  # log K = f(T) correlations
    CTM_LGK = "CTM_LGK"
    CTM_EK0 = "CTM_EK0"
    CTM_EK1 = "CTM_EK1"
    CTM_EK2 = "CTM_EK2"
    CTM_EK3 = "CTM_EK3"
    CTM_DKR = "CTM_DKR"  # Marshall-Franck density model
    CTM_MRB = "CTM_MRB"  # modified Ryzhenko-Bryzgalin model
    CTM_IKZ = "CTM_IKZ"  # interpolation of log K


class MethodCorrP(str, Enum):
    """Pressure correction methods."""

    NONE = "none"
    CPM_OFF = "CPM_OFF"  # ideal gas law volume
    CPM_NUL = "CPM_NUL"
    CPM_CON = "CPM_CON"  # constant molar volume
    CPM_VKE = "CPM_VKE"  # volume as a function of T
    CPM_VBE = "CPM_VBE"  # Berman 1988
    CPM_VBM = "CPM_VBM"  # Birch-Murnaghan (Gottschalk)
    CPM_CEH = "CPM_CEH"  # Murnaghan (Holland-Powell 98)
    CPM_AKI = "CPM_AKI"  # Akinfiev-Diamond
    CPM_GAS = "CPM_GAS"
    CPM_CORK = "CPM_CORK"
    CPM_PRSV = "CPM_PRSV"
    CPM_EMP = "CPM_EMP"  # Churakov-Gottschalk
    CPM_SRK = "CPM_SRK"
    CPM_PR78 = "CPM_PR78"
    CPM_STP = "CPM_STP"


def _validate_symbol(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Symbol must be a non-empty string")
    return value


def _freeze(value: Any) -> Any:
    """Словари -> MappingProxyType, списки -> кортежи (рекурсивно)."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class Element(BaseModel):
    """Chemical element used for elemental entropy calculations."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., description="Element symbol (e.g. 'O', 'Zz' for charge)")
    name: Optional[str] = Field(None, description="Element name")
    entropy: float = Field(0.0, description="Entropy at 298.15 K per atom, J/(mol·K)")
    atomic_mass: float = Field(0.0, description="Atomic mass, g/mol")
    valence: int = Field(0, description="Default valence")

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        """Symbol must be a non-empty string."""
        return _validate_symbol(v)


class Substance(BaseModel):
    """
    Substance record.

    `parameters` holds model coefficients keyed by name (e.g. "cp_coefficients",
    "hkf_coefficients"); the engine itself never reads them.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., description="Unique symbol of the substance")
    name: str = Field("", description="Canonical name (e.g. 'H+')")
    formula: str = Field("", description="Chemical formula")
    substance_class: SubstanceClass = Field(SubstanceClass.OTHER)
    aggregate_state: AggregateState = Field(AggregateState.SOLID)
    thermo_calculation_type: ThermoCalculationType = Field(ThermoCalculationType.DIRECT)
    reference_t: float = Field(REFERENCE_TEMPERATURE, description="Reference temperature (K)")
    reference_p: float = Field(REFERENCE_PRESSURE, description="Reference pressure (bar)")
    reaction_symbol: str = Field("", description="Symbol of the defining reaction")
    method_gen_eos: MethodGenEoS = Field(MethodGenEoS.NONE)
    method_t: MethodCorrT = Field(MethodCorrT.NONE)
    method_p: MethodCorrP = Field(MethodCorrP.NONE)
    parameters: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        """Symbol must be a non-empty string."""
        return _validate_symbol(v)

    @field_validator("parameters")
    @classmethod
    def freeze_parameters(cls, v):
        return _freeze(v)

    @field_serializer("parameters")
    def serialize_parameters(self, v):
        return _thaw(v)

    @field_validator("reference_t", "reference_p")
    @classmethod
    def validate_reference_conditions(cls, v):
        """Reference temperature and pressure must be positive."""
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"Reference conditions must be positive, got {v}")
        return v


class Reaction(BaseModel):
    """
    Reaction record.

    Coefficients are signed: reactants on the left side negative, products
    positive (or any consistent convention the data source uses).
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., description="Unique symbol of the reaction")
    name: str = Field("", description="Reaction name")
    equation: str = Field("", description="Human readable equation")
    reactants: Mapping[str, float] = Field(..., description="Substance symbol -> coefficient")
    reference_t: float = Field(REFERENCE_TEMPERATURE)
    reference_p: float = Field(REFERENCE_PRESSURE)
    method_t: MethodCorrT = Field(MethodCorrT.NONE)
    method_p: MethodCorrP = Field(MethodCorrP.NONE)
    parameters: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        """Symbol must be a non-empty string."""
        return _validate_symbol(v)

    @field_validator("reactants")
    @classmethod
    def validate_reactants(cls, v):
        """Stoichiometry must be non-empty with finite coefficients."""
        if not v:
            raise ValueError("Reaction must have at least one reactant")
        for symbol, coeff in v.items():
            if not math.isfinite(coeff):
                raise ValueError(f"Coefficient of {symbol} is not finite: {coeff}")
        return MappingProxyType(dict(v))

    @field_validator("parameters")
    @classmethod
    def freeze_parameters(cls, v):
        return _freeze(v)

    @field_serializer("reactants", "parameters")
    def serialize_mappings(self, v):
        return _thaw(v)

    def coefficient(self, symbol: str) -> float:
        """Stoichiometric coefficient of a substance, 0.0 if it does not take part."""
        return self.reactants.get(symbol, 0.0)
