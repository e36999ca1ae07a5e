"""Unit tests for chemical utilities."""

import pytest

from thermo_engine.utils.chem_utils import (
    CHARGE_ELEMENT,
    DEFAULT_ELEMENT_ENTROPIES,
    elemental_entropy,
    parse_formula,
)


class TestParseFormula:
    """Test parse_formula function."""

    def test_simple_formula(self):
        """Test parsing simple chemical formulas."""
        assert parse_formula("CO2") == {"C": 1, "O": 2}

    def test_complex_formula(self):
        """Test parsing more complex formulas."""
        assert parse_formula("Li2TiO3") == {"Li": 2, "Ti": 1, "O": 3}

    def test_single_element(self):
        assert parse_formula("Na") == {"Na": 1}

    def test_with_spaces(self):
        assert parse_formula(" H2O ") == {"H": 2, "O": 1}

    def test_composite_formula(self):
        """Test parsing composite formulas."""
        assert parse_formula("Li2O*TiO2") == {"Li": 2, "O": 3, "Ti": 1}
        assert parse_formula("CaSO4·H2O") == {"Ca": 1, "S": 1, "O": 5, "H": 2}

    def test_brackets(self):
        """Группы в скобках умножаются на индекс."""
        assert parse_formula("Ca(OH)2") == {"Ca": 1, "O": 2, "H": 2}
        assert parse_formula("K[Fe(CN)6]") == {"K": 1, "Fe": 1, "C": 6, "N": 6}

    def test_fractional_counts(self):
        assert parse_formula("Fe0.947O") == {"Fe": 0.947, "O": 1}

    def test_aqueous_marker_is_ignored(self):
        assert parse_formula("H2O@") == {"H": 2, "O": 1}
        assert parse_formula("CO2@") == {"C": 1, "O": 2}

    def test_valence_annotation_is_ignored(self):
        assert parse_formula("Fe|3|2O3") == {"Fe": 2, "O": 3}


class TestCharge:
    """Заряд частицы - псевдоэлемент Zz."""

    def test_single_charge(self):
        assert parse_formula("Na+") == {"Na": 1, CHARGE_ELEMENT: 1}
        assert parse_formula("Cl-") == {"Cl": 1, CHARGE_ELEMENT: -1}

    def test_multiple_charge(self):
        assert parse_formula("Ca+2") == {"Ca": 1, CHARGE_ELEMENT: 2}
        assert parse_formula("CO3-2") == {"C": 1, "O": 3, CHARGE_ELEMENT: -2}

    def test_charged_group(self):
        assert parse_formula("Al(OH)4-") == {"Al": 1, "O": 4, "H": 4, CHARGE_ELEMENT: -1}


class TestInvalidFormula:
    """Некорректные формулы."""

    @pytest.mark.parametrize("formula", ["", "   ", "@"])
    def test_empty(self, formula):
        with pytest.raises(ValueError):
            parse_formula(formula)

    @pytest.mark.parametrize("formula", ["Ca(OH2", "CaOH)2", "h2o", "Na$Cl"])
    def test_malformed(self, formula):
        with pytest.raises(ValueError):
            parse_formula(formula)


class TestElementalEntropy:
    """Тесты суммы энтропий элементов."""

    def test_quartz(self):
        expected = DEFAULT_ELEMENT_ENTROPIES["Si"] + 2 * DEFAULT_ELEMENT_ENTROPIES["O"]
        assert elemental_entropy("SiO2", DEFAULT_ELEMENT_ENTROPIES.__getitem__) == pytest.approx(expected)

    def test_charge_contributes_nothing(self):
        neutral = elemental_entropy("Na", DEFAULT_ELEMENT_ENTROPIES.__getitem__)
        charged = elemental_entropy("Na+", DEFAULT_ELEMENT_ENTROPIES.__getitem__)
        assert charged == pytest.approx(neutral)

    def test_unknown_element_propagates(self):
        with pytest.raises(KeyError):
            elemental_entropy("Xe", DEFAULT_ELEMENT_ENTROPIES.__getitem__)
