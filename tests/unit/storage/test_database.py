"""
Тесты для Database.

Проверяют получение записей по символу, ошибки отсутствующих записей
и расчёт энтропии элементов формулы.
"""

import threading

import pytest

from thermo_engine import Database, Element, EntityNotFoundError, Reaction, Substance
from thermo_engine.utils.chem_utils import DEFAULT_ELEMENT_ENTROPIES


class TestDatabase:
    """Тесты для Database."""

    def test_basic_operations(self):
        """Тест добавления и получения записей."""
        db = Database()
        db.add_substance(Substance(symbol="Quartz", formula="SiO2"))
        db.add_reaction(Reaction(symbol="R1", reactants={"Quartz": 1.0}))

        assert db.get_substance("Quartz").formula == "SiO2"
        assert db.get_reaction("R1").coefficient("Quartz") == 1.0
        assert db.contains_substance("Quartz") is True
        assert db.contains_reaction("R2") is False
        assert [s.symbol for s in db.substances()] == ["Quartz"]
        assert [r.symbol for r in db.reactions()] == ["R1"]

    def test_replace_record(self):
        db = Database([Substance(symbol="A", formula="H2")])
        db.add_substance(Substance(symbol="A", formula="O2"))
        assert db.get_substance("A").formula == "O2"

    def test_missing_substance(self):
        """Сообщение об ошибке содержит тип и символ."""
        db = Database()
        with pytest.raises(EntityNotFoundError) as exc_info:
            db.get_substance("Unobtainium")

        error = exc_info.value
        assert error.entity_type == "substance"
        assert error.symbol == "Unobtainium"
        assert "Cannot get an instance of the substance `Unobtainium`" in str(error)

    def test_missing_reaction(self):
        db = Database()
        with pytest.raises(EntityNotFoundError) as exc_info:
            db.get_reaction("NoSuchReaction")
        assert exc_info.value.entity_type == "reaction"

    def test_default_elements(self):
        db = Database()
        assert db.get_element("O").entropy == DEFAULT_ELEMENT_ENTROPIES["O"]

    def test_custom_elements(self):
        db = Database(elements=[Element(symbol="O", entropy=100.0)])
        assert db.elemental_entropy("O2") == pytest.approx(200.0)
        with pytest.raises(EntityNotFoundError):
            db.get_element("H")


class TestFormulaHelpers:
    """Тесты разбора формул через хранилище."""

    def test_parse_substance_formula(self):
        db = Database()
        assert db.parse_substance_formula("SiO2") == {"Si": 1, "O": 2}

    def test_parse_formula_with_unknown_element(self):
        db = Database(elements=[Element(symbol="O", entropy=102.576)])
        with pytest.raises(EntityNotFoundError) as exc_info:
            db.parse_substance_formula("SiO2")
        assert exc_info.value.entity_type == "element"
        assert exc_info.value.symbol == "Si"

    def test_elemental_entropy(self):
        db = Database()
        expected = DEFAULT_ELEMENT_ENTROPIES["Si"] + 2 * DEFAULT_ELEMENT_ENTROPIES["O"]
        assert db.elemental_entropy("SiO2") == pytest.approx(expected)


def test_concurrent_reads():
    """Параллельное чтение и добавление записей."""
    db = Database([Substance(symbol=f"S{i}") for i in range(50)])
    errors = []

    def reader():
        try:
            for i in range(50):
                db.get_substance(f"S{i}")
        except Exception as e:
            errors.append(e)

    def writer():
        for i in range(50, 100):
            db.add_substance(Substance(symbol=f"S{i}"))

    threads = [threading.Thread(target=reader) for _ in range(4)] + [threading.Thread(target=writer)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(db.substances()) == 100
