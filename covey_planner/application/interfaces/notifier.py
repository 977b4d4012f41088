"""Abstract interface (port) for surfacing sync warnings to the user."""

from abc import ABC, abstractmethod

from covey_planner.domain.entities import SyncWarning


class Notifier(ABC):
    """Port for toast-style, non-blocking user notifications."""

    @abstractmethod
    async def notify(self, warning: SyncWarning) -> None:
        """Deliver a warning. Must not block on the user."""
        ...
