"""
Domain logic — сверка собранных данных с инвентарём.

Не зависит от CLI сессий: принимает промежуточные таблицы парсеров
и снимок интерфейсов устройства.
"""

from .neighbors import NeighborValidator

__all__ = ["NeighborValidator"]
