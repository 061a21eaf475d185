"""
Chart Builder
=============

Interactive chart construction: palette drops, connection drawing,
drag-end repositioning, hierarchy re-layout and export.
"""

from services.org_chart.builder.notices import Notice, NoticeBoard, NoticeVariant
from services.org_chart.builder.session import ChartBuilder, DropEvent, NodeChange
from services.org_chart.builder.store import (
    BuilderSessionStore,
    SessionNotFoundError,
    get_session_store,
)

__all__ = [
    "BuilderSessionStore",
    "ChartBuilder",
    "DropEvent",
    "NodeChange",
    "Notice",
    "NoticeBoard",
    "NoticeVariant",
    "SessionNotFoundError",
    "get_session_store",
]
