"""
Таймеры для замера стадий обучения.

``Timer``: контекстный менеджер на ``time.perf_counter()``;
``StageTimings`` накапливает время шагов назначения и обновления
за один вызов ``fit``.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict


class Timer:
    """
    Контекстный менеджер для измерения времени выполнения кода.

    Пример использования:
        with Timer() as t:
            ...
        elapsed_time = t.elapsed
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start


@dataclass
class StageTimings:
    """Суммарное время стадий за один запуск обучения (секунды)."""

    t_assign_total: float = 0.0
    t_update_total: float = 0.0

    @property
    def t_iter_total(self) -> float:
        return self.t_assign_total + self.t_update_total

    def add(self, t_assign: float, t_update: float) -> None:
        self.t_assign_total += t_assign
        self.t_update_total += t_update

    def as_dict(self) -> Dict[str, float]:
        return {
            "T_assign_total": self.t_assign_total,
            "T_update_total": self.t_update_total,
            "T_iter_total": self.t_iter_total,
        }
