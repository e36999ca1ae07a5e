"""
Property bundles returned by the engine.

Each bundle is a frozen dataclass of `Quantity` fields. A Quantity is a numeric
value plus a status message used to carry provenance ("computed from component
X"). Bundles are created fresh per evaluation and never mutated afterwards, so
they can be cached and shared between threads.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Callable, Dict, Iterator, Tuple, TypeVar, Union

Number = Union[int, float]
B = TypeVar("B", bound="PropertyBundle")


def _join(first: str, second: str) -> str:
    if first and second:
        return f"{first}; {second}"
    return first or second


@dataclass(frozen=True)
class Quantity:
    """Numeric value with an optional status/provenance message."""

    value: float = 0.0
    status: str = ""

    def __float__(self) -> float:
        return float(self.value)

    def __add__(self, other: Union["Quantity", Number]) -> "Quantity":
        if isinstance(other, Quantity):
            return Quantity(self.value + other.value, _join(self.status, other.status))
        return Quantity(self.value + other, self.status)

    __radd__ = __add__

    def __sub__(self, other: Union["Quantity", Number]) -> "Quantity":
        if isinstance(other, Quantity):
            return Quantity(self.value - other.value, _join(self.status, other.status))
        return Quantity(self.value - other, self.status)

    def __neg__(self) -> "Quantity":
        return Quantity(-self.value, self.status)

    def __mul__(self, factor: Number) -> "Quantity":
        return Quantity(self.value * factor, self.status)

    __rmul__ = __mul__

    def __truediv__(self, divisor: Number) -> "Quantity":
        return Quantity(self.value / divisor, self.status)

    def with_status(self, status: str) -> "Quantity":
        """Copy with a replaced status message."""
        return Quantity(self.value, status)

    def annotated(self, message: str) -> "Quantity":
        """Copy with `message` appended to the status."""
        return Quantity(self.value, _join(self.status, message))


def _q() -> Quantity:
    return field(default_factory=Quantity)


@dataclass(frozen=True)
class PropertyBundle:
    """Common helpers for all bundles."""

    @classmethod
    def zero(cls: type) -> "PropertyBundle":
        """Bundle with every quantity equal to zero."""
        return cls()

    @classmethod
    def from_values(cls: type, **values: Number) -> "PropertyBundle":
        """Build a bundle from plain numbers; omitted fields are zero."""
        return cls(**{name: Quantity(float(value)) for name, value in values.items()})

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def items(self) -> Iterator[Tuple[str, Quantity]]:
        for f in fields(self):
            yield f.name, getattr(self, f.name)

    def values(self) -> Dict[str, float]:
        """Plain {field: value} dict."""
        return {name: quantity.value for name, quantity in self.items()}

    def statuses(self) -> Dict[str, str]:
        return {name: quantity.status for name, quantity in self.items()}

    def map(self: B, func: Callable[[str, Quantity], Quantity]) -> B:
        """New bundle with `func(name, quantity)` applied to every field."""
        return replace(self, **{name: func(name, q) for name, q in self.items()})

    def update(self: B, **changes: Union[Quantity, Number]) -> B:
        """New bundle with some fields replaced (numbers are wrapped in Quantity)."""
        wrapped = {
            name: value if isinstance(value, Quantity) else Quantity(float(value))
            for name, value in changes.items()
        }
        return replace(self, **wrapped)

    def is_zero(self) -> bool:
        return all(q.value == 0.0 for _, q in self.items())


@dataclass(frozen=True)
class ThermoPropertiesSubstance(PropertyBundle):
    """Thermodynamic properties of a substance at (T, P)."""

    gibbs_energy: Quantity = _q()  # J/mol
    helmholtz_energy: Quantity = _q()  # J/mol
    internal_energy: Quantity = _q()  # J/mol
    enthalpy: Quantity = _q()  # J/mol
    entropy: Quantity = _q()  # J/(mol·K)
    volume: Quantity = _q()  # J/bar
    heat_capacity_cp: Quantity = _q()  # J/(mol·K)
    heat_capacity_cv: Quantity = _q()  # J/(mol·K)


@dataclass(frozen=True)
class ThermoPropertiesReaction(PropertyBundle):
    """Standard thermodynamic properties of a reaction at (T, P)."""

    ln_equilibrium_constant: Quantity = _q()
    log_equilibrium_constant: Quantity = _q()
    reaction_gibbs_energy: Quantity = _q()
    reaction_helmholtz_energy: Quantity = _q()
    reaction_internal_energy: Quantity = _q()
    reaction_enthalpy: Quantity = _q()
    reaction_entropy: Quantity = _q()
    reaction_volume: Quantity = _q()
    reaction_heat_capacity_cp: Quantity = _q()
    reaction_heat_capacity_cv: Quantity = _q()


@dataclass(frozen=True)
class PropertiesSolvent(PropertyBundle):
    """PVT and transport properties of the solvent."""

    density: Quantity = _q()  # kg/m3
    density_t: Quantity = _q()
    density_p: Quantity = _q()
    density_tt: Quantity = _q()
    density_tp: Quantity = _q()
    density_pp: Quantity = _q()
    alpha: Quantity = _q()  # isobaric expansivity, 1/K
    beta: Quantity = _q()  # isothermal compressibility, 1/bar
    alpha_t: Quantity = _q()
    pressure: Quantity = _q()
    speed_of_sound: Quantity = _q()
    dynamic_viscosity: Quantity = _q()
    thermal_conductivity: Quantity = _q()
    surface_tension: Quantity = _q()
    gibbs_energy: Quantity = _q()
    enthalpy: Quantity = _q()
    entropy: Quantity = _q()
    heat_capacity_cp: Quantity = _q()
    heat_capacity_cv: Quantity = _q()


@dataclass(frozen=True)
class ElectroPropertiesSolvent(PropertyBundle):
    """Dielectric constant, its derivatives and Born functions of the solvent."""

    epsilon: Quantity = _q()
    epsilon_t: Quantity = _q()
    epsilon_p: Quantity = _q()
    epsilon_tt: Quantity = _q()
    epsilon_tp: Quantity = _q()
    epsilon_pp: Quantity = _q()
    born_z: Quantity = _q()
    born_y: Quantity = _q()
    born_q: Quantity = _q()
    born_n: Quantity = _q()
    born_u: Quantity = _q()
    born_x: Quantity = _q()


# Field-for-field correspondence used when a substance is derived from a reaction
REACTION_TO_SUBSTANCE_FIELDS: Dict[str, str] = {
    "reaction_gibbs_energy": "gibbs_energy",
    "reaction_helmholtz_energy": "helmholtz_energy",
    "reaction_internal_energy": "internal_energy",
    "reaction_enthalpy": "enthalpy",
    "reaction_entropy": "entropy",
    "reaction_volume": "volume",
    "reaction_heat_capacity_cp": "heat_capacity_cp",
    "reaction_heat_capacity_cv": "heat_capacity_cv",
}
