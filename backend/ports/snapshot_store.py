"""SnapshotStorePort - abstract interface for persisting group snapshots."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class SnapshotStorePort(ABC):
    @abstractmethod
    def load(self) -> Optional[Any]:
        """Return the saved snapshot payload, or None if nothing is saved."""

    @abstractmethod
    def save(self, groups: list, active_group_id: Optional[str] = None) -> None:
        """Persist a snapshot (the array produced by GroupStore.snapshot())."""

    @abstractmethod
    def active_group_id(self) -> Optional[str]:
        """Active group id stored alongside the last snapshot, if any."""
