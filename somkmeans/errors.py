"""
Исключения пакета somkmeans.

Все ошибки наследуются от ``ValueError``, чтобы вызывающий код, который уже
ловит ``ValueError`` на некорректных аргументах, продолжал работать.
"""

from __future__ import annotations


class SomKMeansError(Exception):
    """Базовое исключение пакета."""


class UnsupportedMethodError(SomKMeansError, ValueError):
    """Неизвестный метод обучения (ожидается 'seq' или 'batch')."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unknown method: {method!r} (expected 'seq' or 'batch')")


class ShapeMismatchError(SomKMeansError, ValueError):
    """Размерность центроидов не совпадает с размерностью данных."""

    def __init__(self, expected_dim: int, got_dim: int) -> None:
        self.expected_dim = expected_dim
        self.got_dim = got_dim
        super().__init__(
            f"Centroid dimension {got_dim} does not match data dimension {expected_dim}"
        )
