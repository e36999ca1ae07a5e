"""
Хранилище записей для термодинамического движка.
"""

from .database import Database, EntityAccessor

__all__ = ["Database", "EntityAccessor"]
