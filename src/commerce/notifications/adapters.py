"""Notifier adapters: one that writes notices to the log, one that records them."""

import structlog

from commerce.notifications.port import NoticeVariant, NotifierPort

logger = structlog.get_logger(__name__)


class LogNotifier(NotifierPort):
    """Writes notices to the structured log; used when no UI is attached."""

    def notify(self, title: str, description: str = "", variant: NoticeVariant = NoticeVariant.DEFAULT) -> None:
        logger.info("Notice", title=title, description=description, variant=NoticeVariant(variant).value)


class RecordingNotifier(NotifierPort):
    """Keeps notices in memory for test assertions."""

    def __init__(self) -> None:
        self.notices: list[dict] = []

    def notify(self, title: str, description: str = "", variant: NoticeVariant = NoticeVariant.DEFAULT) -> None:
        self.notices.append({"title": title, "description": description, "variant": NoticeVariant(variant).value})

    @property
    def titles(self) -> list[str]:
        return [notice["title"] for notice in self.notices]

    def reset(self) -> None:
        self.notices.clear()
