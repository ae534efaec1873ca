"""Port interface for transaction boundaries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class UnitOfWork(ABC):
    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Commit everything written inside the block, or nothing.

        Any exception raised inside the block rolls the whole unit back and
        propagates to the caller.
        """
        ...
