"""In-memory session registry for the API.

Each session holds the transient dataset storage and the chart renderer for
one analysis page.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field

from csv_insight.core.dataset import Dataset
from csv_insight.core.session import SessionStorage, load_dataset, store_dataset
from csv_insight.visualization.charts import ChartRenderer

logger = logging.getLogger(__name__)


@dataclass
class ReportSession:
    """State for one analysis page session."""

    session_id: str
    storage: SessionStorage = field(default_factory=SessionStorage)
    renderer: ChartRenderer = field(default_factory=ChartRenderer)

    def load(self) -> tuple[Dataset, str]:
        """Restore the stored dataset.

        Raises:
            EmptySessionError: If nothing usable is stored
        """
        return load_dataset(self.storage)

    def clear(self) -> None:
        """Drop the stored dataset and dispose any live charts."""
        self.storage.clear()
        self.renderer.dispose_all()


class SessionStore:
    """Session id -> ReportSession."""

    def __init__(self) -> None:
        self._sessions: dict[str, ReportSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, dataset: Dataset, file_name: str) -> ReportSession:
        """Open a new session holding the dataset."""
        session = ReportSession(session_id=uuid.uuid4().hex)
        store_dataset(session.storage, dataset, file_name)
        self._sessions[session.session_id] = session
        logger.info(f"Created session {session.session_id[:8]} for {file_name!r}")
        return session

    def get(self, session_id: str) -> ReportSession | None:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        """Clear and forget a session. Returns True if it existed."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.clear()
        logger.info(f"Discarded session {session_id[:8]}")
        return True


# Singleton instance for convenience
_session_store: SessionStore | None = None


def get_session_store(force_new: bool = False) -> SessionStore:
    """Get the shared session store."""
    global _session_store

    if _session_store is None or force_new:
        _session_store = SessionStore()

    return _session_store
