"""
Builder Session Store
=====================

In-process registry of open chart builder sessions. Sessions live only as
long as the service process.

Version: 0.1.0
"""

from collections import OrderedDict
from collections.abc import Callable
from uuid import uuid4

from shared.logging import get_logger

from services.org_chart.builder.session import ChartBuilder
from services.org_chart.canvas.base import ChartCanvas
from services.org_chart.canvas.raster import RasterCanvas


logger = get_logger(__name__)


class SessionNotFoundError(KeyError):
    """No builder session with the requested id."""


class BuilderSessionStore:
    """
    Open builder sessions keyed by session id.

    When ``max_sessions`` is reached the least recently created session is
    dropped.
    """

    def __init__(
        self,
        canvas_factory: Callable[[], ChartCanvas] = RasterCanvas,
        max_sessions: int = 100,
    ) -> None:
        self._sessions: OrderedDict[str, ChartBuilder] = OrderedDict()
        self._canvas_factory = canvas_factory
        self.max_sessions = max_sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(self) -> tuple[str, ChartBuilder]:
        """Open a new, empty builder session."""
        while len(self._sessions) >= self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("builder_session_evicted", session_id=evicted)

        session_id = uuid4().hex
        builder = ChartBuilder(canvas=self._canvas_factory())
        self._sessions[session_id] = builder

        logger.info("builder_session_created", session_id=session_id)
        return session_id, builder

    def get(self, session_id: str) -> ChartBuilder:
        """
        Look up a session.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def delete(self, session_id: str) -> None:
        """
        Close a session.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info("builder_session_closed", session_id=session_id)

    def clear(self) -> None:
        self._sessions.clear()


session_store = BuilderSessionStore()


def get_session_store() -> BuilderSessionStore:
    """FastAPI dependency returning the process-wide session store."""
    return session_store
