from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from somkmeans.errors import UnsupportedMethodError


class Method(str, Enum):
    SEQUENTIAL = "seq"
    BATCH = "batch"

    @classmethod
    def parse(cls, value: Any) -> Method:
        """Метод по имени ('seq' / 'sequential' / 'batch') или уже готовому значению Method."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in _ALIASES:
            return _ALIASES[value]
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedMethodError(str(value)) from None


_ALIASES = {"sequential": Method.SEQUENTIAL}

DEFAULT_EPOCHS = 100


@dataclass
class KMeansConfig:
    """Параметры одного запуска обучения."""

    method: Method = Method.BATCH
    n_clusters: Optional[int] = None
    epochs: int = DEFAULT_EPOCHS
    verbose: bool = False
    seed: Optional[int] = None
    # >1 включает многопроцессорное назначение (только для batch)
    n_processes: int = 1

    def __post_init__(self) -> None:
        self.method = Method.parse(self.method)
        if self.n_clusters is not None and self.n_clusters < 1:
            raise ValueError(f"n_clusters must be positive, got {self.n_clusters}")
        if self.epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {self.epochs}")
        if self.n_processes < 1:
            raise ValueError(f"n_processes must be positive, got {self.n_processes}")
