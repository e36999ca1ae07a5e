"""Utilities for chemical formula parsing and elemental properties."""

import logging
import re
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

# Element symbol or opening/closing bracket, followed by an optional count
TOKEN_RE = re.compile(r"([A-Z][a-z]?|\(|\)|\[|\])(\d+(?:\.\d+)?)?")
# Valence annotations such as Fe|3|
VALENCE_RE = re.compile(r"\|-?\d+\|")
# Trailing charge: "+", "-2", "+3" (after the last element/count)
CHARGE_RE = re.compile(r"([+\-])(\d*)$")

# Delimiters for composite formulas
COMPOSITE_DELIMITERS = ["*", "·"]

# Pseudo-element holding the charge of a species
CHARGE_ELEMENT = "Zz"

# Standard entropies of the elements at 298.15 K and 1 bar per atom, J/(mol·K)
# (CODATA key values; diatomic gases divided by two)
DEFAULT_ELEMENT_ENTROPIES: Dict[str, float] = {
    "H": 65.340,
    "O": 102.576,
    "N": 95.8045,
    "F": 101.3955,
    "Cl": 111.5405,
    "Br": 76.105,
    "I": 58.070,
    "C": 5.74,
    "S": 32.054,
    "Si": 18.81,
    "Al": 28.30,
    "Ca": 41.59,
    "Mg": 32.67,
    "Na": 51.30,
    "K": 64.68,
    "Li": 29.12,
    "Fe": 27.28,
    "Ti": 30.72,
    "Mn": 32.01,
    "Ba": 62.42,
    "Zn": 41.63,
    "Cu": 33.15,
    "Ag": 42.55,
    "Pb": 64.80,
    CHARGE_ELEMENT: 0.0,
}


def _split_charge(formula: str) -> Tuple[str, float]:
    """Split a trailing charge off a formula ("CO3-2" -> ("CO3", -2))."""
    match = CHARGE_RE.search(formula)
    if not match:
        return formula, 0.0
    sign = 1.0 if match.group(1) == "+" else -1.0
    magnitude = float(match.group(2)) if match.group(2) else 1.0
    return formula[: match.start()], sign * magnitude


def _parse_part(part: str) -> Dict[str, float]:
    """Parse one formula without composite delimiters, brackets allowed."""
    stack: List[Dict[str, float]] = [{}]
    position = 0

    for match in TOKEN_RE.finditer(part):
        if match.start() != position:
            raise ValueError(f"Unexpected character in formula '{part}' at {position}")
        position = match.end()

        token, count_str = match.group(1), match.group(2)
        count = float(count_str) if count_str else 1.0

        if token in ("(", "["):
            if count_str:
                raise ValueError(f"Count after opening bracket in formula '{part}'")
            stack.append({})
        elif token in (")", "]"):
            if len(stack) == 1:
                raise ValueError(f"Unbalanced brackets in formula '{part}'")
            group = stack.pop()
            for element, n in group.items():
                stack[-1][element] = stack[-1].get(element, 0.0) + n * count
        else:
            stack[-1][token] = stack[-1].get(token, 0.0) + count

    if position != len(part):
        raise ValueError(f"Unexpected character in formula '{part}' at {position}")
    if len(stack) != 1:
        raise ValueError(f"Unbalanced brackets in formula '{part}'")

    return stack[0]


def parse_formula(formula: str) -> Dict[str, float]:
    """
    Parse a chemical formula into element counts.

    Handles brackets, fractional counts, valence annotations (`Fe|3|`),
    the aqueous marker `@` and a trailing charge, which is reported under
    the pseudo-element `Zz`.
    Examples:
        - "CO2" -> {"C": 1, "O": 2}
        - "Al(OH)4-" -> {"Al": 1, "O": 4, "H": 4, "Zz": -1}
        - "Ca+2" -> {"Ca": 1, "Zz": 2}
        - "H2O@" -> {"H": 2, "O": 1}

    Args:
        formula: Chemical formula string

    Returns:
        Dictionary mapping element symbols to their counts

    Raises:
        ValueError: If the formula cannot be parsed
    """
    clean_formula = VALENCE_RE.sub("", formula.strip()).replace("@", "")
    if not clean_formula:
        raise ValueError("Empty chemical formula")

    clean_formula, charge = _split_charge(clean_formula)
    for delim in COMPOSITE_DELIMITERS:
        clean_formula = clean_formula.replace(delim, " ")

    total_counts: Dict[str, float] = {}
    for part in clean_formula.split():
        for element, count in _parse_part(part).items():
            total_counts[element] = total_counts.get(element, 0.0) + count

    if charge:
        total_counts[CHARGE_ELEMENT] = charge

    return total_counts


def elemental_entropy(formula: str, entropy_of: Callable[[str], float]) -> float:
    """
    Sum of the entropies of the elements composing a formula.

    Args:
        formula: Chemical formula
        entropy_of: Returns the entropy per atom of an element symbol

    Returns:
        Σ nᵢ·Sᵢ in J/(mol·K)
    """
    total = 0.0
    for element, count in parse_formula(formula).items():
        total += count * entropy_of(element)
    logger.debug(f"Elemental entropy of {formula}: {total:.4f} J/(mol·K)")
    return total
