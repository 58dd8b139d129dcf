"""
Вспомогательные скрипты проекта.

Модули:
- generate_datasets: генерация синтетических датасетов (blobs, sin(x), пропуски)
"""
