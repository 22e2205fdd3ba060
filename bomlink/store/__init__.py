from .base import ComponentStore
from .memory import InMemoryComponentStore
from .postgres_client import PostgresComponentStore

__all__ = ["ComponentStore", "InMemoryComponentStore", "PostgresComponentStore"]
