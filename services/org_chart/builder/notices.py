"""
Builder Notices
===============

Transient user-visible notifications raised by chart actions.

Version: 0.1.0
"""

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel


class NoticeVariant(str, Enum):
    """Visual weight of a notice."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notice(BaseModel):
    """One notification."""

    title: str
    description: str
    variant: NoticeVariant = NoticeVariant.DEFAULT

    @property
    def is_rejection(self) -> bool:
        return self.variant == NoticeVariant.DESTRUCTIVE


class NoticeBoard:
    """Collects notices and forwards each to an optional listener."""

    def __init__(self, listener: Callable[[Notice], None] | None = None) -> None:
        self.notices: list[Notice] = []
        self._listener = listener

    def post(
        self,
        title: str,
        description: str,
        variant: NoticeVariant = NoticeVariant.DEFAULT,
    ) -> Notice:
        notice = Notice(title=title, description=description, variant=variant)
        self.notices.append(notice)
        if self._listener is not None:
            self._listener(notice)
        return notice

    def reject(self, title: str, description: str) -> Notice:
        return self.post(title, description, NoticeVariant.DESTRUCTIVE)

    def drain(self) -> list[Notice]:
        """Return the collected notices and clear the board."""
        notices, self.notices = self.notices, []
        return notices

    @property
    def rejections(self) -> list[Notice]:
        return [n for n in self.notices if n.is_rejection]
