"""Model store collaborators.

- base: the ModelStore and TransactionService contracts
- memory: in-process implementation over a Document
"""

from creation_model.store.base import ModelStore, TransactionService
from creation_model.store.memory import InMemoryModelStore

__all__ = ["ModelStore", "TransactionService", "InMemoryModelStore"]
