"""Notifier port — transient, non-blocking messages shown to the user."""

from abc import ABC, abstractmethod
from enum import Enum


class NoticeVariant(Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class NotifierPort(ABC):
    """Abstract interface for user-visible notices raised by the checkout."""

    @abstractmethod
    def notify(self, title: str, description: str = "", variant: NoticeVariant = NoticeVariant.DEFAULT) -> None:
        """Show a notice. Must not block or raise into the caller."""
        ...
