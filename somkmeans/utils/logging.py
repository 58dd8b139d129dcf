import logging
from typing import Any, Dict


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает корневой логгер проекта ``somkmeans``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("somkmeans")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Чтобы сообщения не дублировались через root-логгер
    logger.propagate = False

    return logger


def format_run_prefix(meta: Dict[str, Any]) -> str:
    """
    Текстовый префикс для логов запуска: метод, размер данных, число кластеров.
    """
    return (
        f"[method={meta['method']} N={meta['N']} D={meta['D']} K={meta['K']}"
        f"{' missing' if meta.get('has_missing') else ''}]"
    )
