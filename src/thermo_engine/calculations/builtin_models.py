"""
Базовые модели, регистрируемые в реестре по умолчанию.

Реализует простые детерминированные модели, не требующие свойств
растворителя:

- EmpiricalCpIntegration (CTPM_CPT): интегрирование полинома Cp(T) от
  стандартной температуры, с кусочным интегрированием по интервалам
- ConstantMolarVolume (CPM_CON): мольный объём не зависит от T и P
- IdealGasLawVolume (CPM_OFF): V = R·T/P
- ReactionLogKfT (CTM_LGX, CTM_LGK, CTM_EK0..CTM_EK3): lg K = f(T)
- ReactionVolumeFT (CPM_VKE, CPM_VBE): ΔrV(T) и поправка на давление

Модели HKF, уравнения состояния воды, кубические уравнения состояния и
другие специализированные корреляции регистрируются вызывающим кодом.

Параметры моделей берутся из record.parameters:

Вещество:
    reference_properties: {gibbs_energy, enthalpy, entropy, heat_capacity_cp, volume}
    cp_coefficients: [[a0, a1, ...], ...] - по одному списку на интервал
    cp_intervals: [[Tmin, Tmax], ...] - границы интервалов (необязательно)

Cp(T) = a0 + a1·T + a2·T⁻² + a3·T⁻⁰·⁵ + a4·T² + a5·T³ + a6·T⁴ + a7·T⁻³ + a8·T⁻¹ + a9·T⁰·⁵ + a10·ln(T)

Реакция:
    reference_properties: {log_k, enthalpy, entropy, heat_capacity_cp, volume}
    log_k_coefficients: [A0..A6]
    volume_coefficients: [b0, b1, b2]

lg K(T) = A0 + A1·T + A2/T + A3·ln(T) + A4/T² + A5·T² + A6/√T
ΔrV(T) = b0 + b1·(T - Tr) + b2·(T - Tr)²
"""

import logging
import math
from typing import Dict, List, Sequence, Tuple

import numpy as np
from scipy.integrate import quad

from ..constants import R_CONSTANT
from ..core_logic.model_registry import (
    ModelFamily,
    ModelRegistry,
    ThermoModel,
)
from ..models.properties import Quantity, ThermoPropertiesReaction, ThermoPropertiesSubstance
from ..models.records import MethodCorrP, MethodCorrT, MethodGenEoS, Reaction, Substance

logger = logging.getLogger(__name__)

LN10 = math.log(10.0)
CP_COEFFICIENTS_COUNT = 11
LOG_K_COEFFICIENTS_COUNT = 7


def _reference_properties(record) -> Dict[str, float]:
    return dict(record.parameters.get("reference_properties", {}))


def _padded(coefficients: Sequence[float], size: int) -> np.ndarray:
    values = np.zeros(size)
    coefficients = list(coefficients)
    if len(coefficients) > size:
        raise ValueError(f"Expected at most {size} coefficients, got {len(coefficients)}")
    values[: len(coefficients)] = coefficients
    return values


def heat_capacity(a: np.ndarray, T: float) -> float:
    """Cp(T) по коэффициентам a0..a10."""
    T = float(T)
    return float(
        a[0]
        + a[1] * T
        + a[2] / T**2
        + a[3] / math.sqrt(T)
        + a[4] * T**2
        + a[5] * T**3
        + a[6] * T**4
        + a[7] / T**3
        + a[8] / T
        + a[9] * math.sqrt(T)
        + a[10] * math.log(T)
    )


class EmpiricalCpIntegration(ThermoModel):
    """
    Интегрирование Cp(T) от стандартной температуры Tr до T.

    Формулы:
        H(T) = H(Tr) + ∫Cp dT
        S(T) = S(Tr) + ∫Cp/T dT
        G(T) = G(Tr) - S(Tr)·(T - Tr) + ∫Cp dT - T·∫Cp/T dT
        U = H - P·V, A = G - P·V

    Интегрирование кусочное: каждый интервал [Tmin, Tmax] использует
    свои коэффициенты. Ниже первого интервала используются коэффициенты
    первого, выше последнего - последнего.
    """

    def _intervals(self, substance: Substance) -> List[Tuple[float, float, np.ndarray]]:
        coefficients = substance.parameters.get("cp_coefficients")
        if not coefficients:
            return []
        if isinstance(coefficients[0], (int, float)):
            coefficients = [coefficients]

        bounds = substance.parameters.get("cp_intervals")
        if bounds is None:
            bounds = [(0.0, math.inf)] * len(coefficients)
        if len(bounds) != len(coefficients):
            raise ValueError(
                f"{substance.symbol}: {len(coefficients)} Cp coefficient sets "
                f"for {len(bounds)} temperature intervals"
            )

        intervals = [
            (float(tmin), float(tmax), _padded(a, CP_COEFFICIENTS_COUNT))
            for (tmin, tmax), a in zip(bounds, coefficients)
        ]
        return sorted(intervals, key=lambda interval: interval[0])

    def _integrate(
        self, intervals: List[Tuple[float, float, np.ndarray]], t_start: float, t_end: float
    ) -> Tuple[float, float]:
        """∫Cp dT и ∫Cp/T dT от t_start до t_end (t_end может быть < t_start)."""
        if t_end == t_start or not intervals:
            return 0.0, 0.0

        sign = 1.0
        low, high = t_start, t_end
        if high < low:
            low, high, sign = high, low, -1.0

        delta_h = 0.0
        delta_s = 0.0
        for index, (tmin, tmax, a) in enumerate(intervals):
            segment_low = low if index == 0 else max(low, tmin)
            segment_high = high if index == len(intervals) - 1 else min(high, tmax)
            if segment_high <= segment_low:
                continue
            delta_h += quad(lambda t: heat_capacity(a, t), segment_low, segment_high)[0]
            delta_s += quad(lambda t: heat_capacity(a, t) / t, segment_low, segment_high)[0]

        return sign * delta_h, sign * delta_s

    def _coefficients_at(self, intervals, T: float) -> np.ndarray:
        """Коэффициенты для T по тем же правилам, что и в _integrate."""
        if T < intervals[0][0]:
            return intervals[0][2]
        # Ближайший интервал снизу: покрывает и разрывы между интервалами
        selected = intervals[0][2]
        for tmin, tmax, a in intervals:
            if tmin <= T:
                selected = a
            if tmin <= T <= tmax:
                return a
        return selected

    def evaluate(self, temperature, pressure, record, inputs):
        reference = _reference_properties(record)
        tr = record.reference_t
        g0 = reference.get("gibbs_energy", 0.0)
        h0 = reference.get("enthalpy", 0.0)
        s0 = reference.get("entropy", 0.0)
        v0 = reference.get("volume", 0.0)

        intervals = self._intervals(record)
        if intervals:
            cp = heat_capacity(self._coefficients_at(intervals, temperature), temperature)
        else:
            cp = reference.get("heat_capacity_cp", 0.0)

        if abs(temperature - tr) < 1e-9:
            delta_h, delta_s = 0.0, 0.0
        elif intervals:
            delta_h, delta_s = self._integrate(intervals, tr, temperature)
        else:
            # Постоянная теплоёмкость
            delta_h = cp * (temperature - tr)
            delta_s = cp * math.log(temperature / tr)

        enthalpy = h0 + delta_h
        entropy = s0 + delta_s
        gibbs_energy = g0 - s0 * (temperature - tr) + delta_h - temperature * delta_s

        return ThermoPropertiesSubstance.from_values(
            gibbs_energy=gibbs_energy,
            enthalpy=enthalpy,
            entropy=entropy,
            heat_capacity_cp=cp,
            heat_capacity_cv=cp,
            volume=v0,
            internal_energy=enthalpy - pressure * v0,
            helmholtz_energy=gibbs_energy - pressure * v0,
        )


class ConstantMolarVolume(ThermoModel):
    """Мольный объём постоянен: G и H получают поправку V·(P - Pr)."""

    def evaluate(self, temperature, pressure, record, inputs):
        tps = inputs.previous or ThermoPropertiesSubstance.zero()
        v0 = _reference_properties(record).get("volume", tps.volume.value)
        correction = v0 * (pressure - record.reference_p)
        gibbs_energy = tps.gibbs_energy + correction
        enthalpy = tps.enthalpy + correction
        return tps.update(
            volume=Quantity(v0, tps.volume.status),
            gibbs_energy=gibbs_energy,
            enthalpy=enthalpy,
            helmholtz_energy=gibbs_energy - pressure * v0,
            internal_energy=enthalpy - pressure * v0,
        )


class IdealGasLawVolume(ThermoModel):
    """Мольный объём идеального газа V = R·T/P (Дж/бар)."""

    def evaluate(self, temperature, pressure, record, inputs):
        tps = inputs.previous or ThermoPropertiesSubstance.zero()
        if pressure <= 0:
            return tps
        return tps.update(volume=Quantity(R_CONSTANT * temperature / pressure, tps.volume.status))


class ReactionLogKfT(ThermoModel):
    """
    Свойства реакции из зависимости lg K от температуры.

    Для CTM_EK0/EK1/EK2 коэффициенты выводятся из стандартных свойств
    реакции (lg K, ΔrH, ΔrCp), если log_k_coefficients не заданы:
        EK0: lg K = const
        EK1: ΔrH = const
        EK2: ΔrCp = const

    ΔrG = -R·T·ln(10)·lg K
    ΔrH = R·T²·ln(10)·d(lg K)/dT
    ΔrS = (ΔrH - ΔrG)/T
    ΔrCp = dΔrH/dT
    """

    def coefficients(self, reaction: Reaction) -> np.ndarray:
        explicit = reaction.parameters.get("log_k_coefficients")
        if explicit is not None:
            return _padded(explicit, LOG_K_COEFFICIENTS_COUNT)

        reference = _reference_properties(reaction)
        method = reaction.method_t
        if "log_k" not in reference or method not in (
            MethodCorrT.CTM_EK0, MethodCorrT.CTM_EK1, MethodCorrT.CTM_EK2,
        ):
            raise ValueError(
                f"Reaction `{reaction.symbol}` ({method.value}) needs log_k_coefficients"
            )

        tr = reaction.reference_t
        log_k = reference["log_k"]
        dh = reference.get("enthalpy", 0.0)
        dcp = reference.get("heat_capacity_cp", 0.0)
        a = np.zeros(LOG_K_COEFFICIENTS_COUNT)

        if method == MethodCorrT.CTM_EK0:
            a[0] = log_k
        elif method == MethodCorrT.CTM_EK1:
            a[2] = -dh / (R_CONSTANT * LN10)
            a[0] = log_k - a[2] / tr
        else:
            a[3] = dcp / (R_CONSTANT * LN10)
            a[2] = (dcp * tr - dh) / (R_CONSTANT * LN10)
            a[0] = log_k - a[2] / tr - a[3] * math.log(tr)
        return a

    def evaluate(self, temperature, pressure, record, inputs):
        a = self.coefficients(record)
        T = float(temperature)

        log_k = a[0] + a[1] * T + a[2] / T + a[3] * math.log(T) + a[4] / T**2 + a[5] * T**2 + a[6] / math.sqrt(T)
        d1 = a[1] - a[2] / T**2 + a[3] / T - 2 * a[4] / T**3 + 2 * a[5] * T - 0.5 * a[6] * T**-1.5
        d2 = 2 * a[2] / T**3 - a[3] / T**2 + 6 * a[4] / T**4 + 2 * a[5] + 0.75 * a[6] * T**-2.5

        gibbs_energy = -R_CONSTANT * T * LN10 * log_k
        enthalpy = R_CONSTANT * LN10 * T**2 * d1
        entropy = (enthalpy - gibbs_energy) / T
        heat_capacity_cp = R_CONSTANT * LN10 * (2 * T * d1 + T**2 * d2)
        volume = _reference_properties(record).get("volume", 0.0)

        return ThermoPropertiesReaction.from_values(
            log_equilibrium_constant=log_k,
            ln_equilibrium_constant=log_k * LN10,
            reaction_gibbs_energy=gibbs_energy,
            reaction_enthalpy=enthalpy,
            reaction_entropy=entropy,
            reaction_heat_capacity_cp=heat_capacity_cp,
            reaction_heat_capacity_cv=heat_capacity_cp,
            reaction_volume=volume,
            reaction_internal_energy=enthalpy - pressure * volume,
            reaction_helmholtz_energy=gibbs_energy - pressure * volume,
        )


class ReactionVolumeFT(ThermoModel):
    """
    Поправка свойств реакции на давление при ΔrV = f(T).

    ΔrG += ΔrV·(P - Pr)
    ΔrH += (ΔrV - T·dΔrV/dT)·(P - Pr)
    ΔrS -= dΔrV/dT·(P - Pr)
    lg K -= ΔrV·(P - Pr) / (R·T·ln(10))
    """

    def evaluate(self, temperature, pressure, record, inputs):
        tpr = inputs.previous or ThermoPropertiesReaction.zero()
        reference = _reference_properties(record)
        b = _padded(
            record.parameters.get("volume_coefficients", [reference.get("volume", 0.0)]), 3
        )

        dt = temperature - record.reference_t
        volume = b[0] + b[1] * dt + b[2] * dt**2
        volume_t = b[1] + 2 * b[2] * dt
        dp = pressure - record.reference_p

        delta_log_k = volume * dp / (R_CONSTANT * temperature * LN10)
        return tpr.update(
            reaction_volume=Quantity(volume, tpr.reaction_volume.status),
            reaction_gibbs_energy=tpr.reaction_gibbs_energy + volume * dp,
            reaction_helmholtz_energy=tpr.reaction_helmholtz_energy + volume * dp,
            reaction_enthalpy=tpr.reaction_enthalpy + (volume - temperature * volume_t) * dp,
            reaction_internal_energy=tpr.reaction_internal_energy + (volume - temperature * volume_t) * dp,
            reaction_entropy=tpr.reaction_entropy - volume_t * dp,
            log_equilibrium_constant=tpr.log_equilibrium_constant - delta_log_k,
            ln_equilibrium_constant=tpr.ln_equilibrium_constant - delta_log_k * LN10,
        )


def default_registry() -> ModelRegistry:
    """Реестр с базовыми моделями."""
    registry = ModelRegistry()
    registry.register(ModelFamily.SUBSTANCE_EOS, MethodGenEoS.CTPM_CPT, EmpiricalCpIntegration())
    registry.register(ModelFamily.SUBSTANCE_P_CORRECTION, MethodCorrP.CPM_CON, ConstantMolarVolume())
    registry.register(ModelFamily.SUBSTANCE_P_CORRECTION, MethodCorrP.CPM_OFF, IdealGasLawVolume())
    registry.register(
        ModelFamily.REACTION_T_CORRECTION,
        [
            MethodCorrT.CTM_LGX,
            MethodCorrT.CTM_LGK,
            MethodCorrT.CTM_EK0,
            MethodCorrT.CTM_EK1,
            MethodCorrT.CTM_EK2,
            MethodCorrT.CTM_EK3,
        ],
        ReactionLogKfT(),
    )
    registry.register(
        ModelFamily.REACTION_P_CORRECTION,
        [MethodCorrP.CPM_VKE, MethodCorrP.CPM_VBE],
        ReactionVolumeFT(),
    )
    logger.debug(f"Реестр по умолчанию: {len(registry)} моделей")
    return registry
