"""
Хранилище записей веществ, реакций и элементов в памяти.

Реализует контракт Entity Accessor, который использует движок:
- get_substance(symbol) -> Substance | EntityNotFoundError
- get_reaction(symbol) -> Reaction | EntityNotFoundError

Загрузка записей из внешних источников выполняется вызывающим кодом:
хранилище только принимает уже провалидированные pydantic модели.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, Protocol

from ..exceptions import EntityNotFoundError
from ..models.records import Element, Reaction, Substance
from ..utils.chem_utils import DEFAULT_ELEMENT_ENTROPIES, elemental_entropy, parse_formula


class EntityAccessor(Protocol):
    """Минимальный интерфейс хранилища, от которого зависит движок."""

    def get_substance(self, symbol: str) -> Substance:
        ...

    def get_reaction(self, symbol: str) -> Reaction:
        ...

    def elemental_entropy(self, formula: str) -> float:
        ...


class Database:
    """
    Потокобезопасное хранилище записей в памяти.

    Записи неизменяемы, поэтому get_* возвращает их без копирования.
    """

    def __init__(
        self,
        substances: Optional[Iterable[Substance]] = None,
        reactions: Optional[Iterable[Reaction]] = None,
        elements: Optional[Iterable[Element]] = None,
    ):
        """
        Инициализация хранилища.

        Args:
            substances: Начальный набор веществ
            reactions: Начальный набор реакций
            elements: Набор элементов. Если None, используются стандартные
                      энтропии элементов (DEFAULT_ELEMENT_ENTROPIES)
        """
        self._substances: Dict[str, Substance] = {}
        self._reactions: Dict[str, Reaction] = {}
        self._elements: Dict[str, Element] = {}
        self._lock = threading.RLock()

        if elements is None:
            elements = [
                Element(symbol=symbol, entropy=entropy)
                for symbol, entropy in DEFAULT_ELEMENT_ENTROPIES.items()
            ]

        for element in elements:
            self.add_element(element)
        for substance in substances or ():
            self.add_substance(substance)
        for reaction in reactions or ():
            self.add_reaction(reaction)

    def add_substance(self, substance: Substance) -> None:
        """Добавить или заменить вещество."""
        with self._lock:
            self._substances[substance.symbol] = substance

    def add_reaction(self, reaction: Reaction) -> None:
        """Добавить или заменить реакцию."""
        with self._lock:
            self._reactions[reaction.symbol] = reaction

    def add_element(self, element: Element) -> None:
        """Добавить или заменить элемент."""
        with self._lock:
            self._elements[element.symbol] = element

    def get_substance(self, symbol: str) -> Substance:
        """
        Получить вещество по символу.

        Raises:
            EntityNotFoundError: Если вещества нет в базе
        """
        with self._lock:
            substance = self._substances.get(symbol)
        if substance is None:
            raise EntityNotFoundError("substance", symbol, "get_substance")
        return substance

    def get_reaction(self, symbol: str) -> Reaction:
        """
        Получить реакцию по символу.

        Raises:
            EntityNotFoundError: Если реакции нет в базе
        """
        with self._lock:
            reaction = self._reactions.get(symbol)
        if reaction is None:
            raise EntityNotFoundError("reaction", symbol, "get_reaction")
        return reaction

    def get_element(self, symbol: str) -> Element:
        """
        Получить элемент по символу.

        Raises:
            EntityNotFoundError: Если элемента нет в базе
        """
        with self._lock:
            element = self._elements.get(symbol)
        if element is None:
            raise EntityNotFoundError("element", symbol, "get_element")
        return element

    def contains_substance(self, symbol: str) -> bool:
        with self._lock:
            return symbol in self._substances

    def contains_reaction(self, symbol: str) -> bool:
        with self._lock:
            return symbol in self._reactions

    def substances(self) -> List[Substance]:
        with self._lock:
            return list(self._substances.values())

    def reactions(self) -> List[Reaction]:
        with self._lock:
            return list(self._reactions.values())

    def parse_substance_formula(self, formula: str) -> Dict[str, float]:
        """
        Разобрать формулу и проверить, что все элементы есть в базе.

        Raises:
            EntityNotFoundError: Если элемент формулы отсутствует в базе
            ValueError: Если формулу невозможно разобрать
        """
        composition = parse_formula(formula)
        for element in composition:
            self.get_element(element)
        return composition

    def elemental_entropy(self, formula: str) -> float:
        """Сумма энтропий элементов формулы, Дж/(моль·K)."""
        return elemental_entropy(formula, lambda symbol: self.get_element(symbol).entropy)
