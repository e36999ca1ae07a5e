"""
Защита от циклических зависимостей вещество -> реакция -> вещество.

Стек вычисляемых (точка входа, символ) хранится отдельно для каждого потока:
рекурсивные вызовы выполняются в вызывающем потоке.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Tuple

from ..exceptions import RecursiveEvaluationError

logger = logging.getLogger(__name__)


class EvaluationGuard:
    """Обнаруживает повторный вход в вычисление того же символа."""

    def __init__(self):
        self._local = threading.local()

    def _stack(self) -> List[Tuple[str, str]]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = []
            self._local.stack = stack
        return stack

    @contextmanager
    def enter(self, entity_type: str, symbol: str) -> Iterator[None]:
        """
        Отметить начало вычисления (entity_type, symbol) в текущем потоке.

        Raises:
            RecursiveEvaluationError: Если символ уже вычисляется выше по стеку
        """
        stack = self._stack()
        frame = (entity_type, symbol)
        if frame in stack:
            logger.warning(
                f"⚠ Обнаружен цикл при расчёте {entity_type} `{symbol}`: "
                f"{' -> '.join(s for _, s in stack)} -> {symbol}"
            )
            raise RecursiveEvaluationError(entity_type, symbol, list(stack))

        stack.append(frame)
        try:
            yield
        finally:
            stack.pop()

    def depth(self) -> int:
        """Текущая глубина вложенных вычислений в этом потоке."""
        return len(self._stack())
