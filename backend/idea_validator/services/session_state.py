"""Per-user hand-off state between the input, processing and results screens.

``SessionState`` is immutable; every change produces a new value that is
written back through a ``SessionStore``. The store is injected (see
``get_session_store``) so a shared backend such as Redis can replace the
in-process default without touching callers.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Protocol, Tuple


@dataclass(frozen=True)
class SessionState:
    idea_text: str = ""
    selected_tools: Tuple[str, ...] = ()
    # Serialized ValidationResponse of the most recent run
    last_run: Optional[Dict[str, Any]] = None

    def with_draft(self, idea_text: str, selected_tools) -> "SessionState":
        """New idea and tools; a stale last run is dropped."""
        return replace(
            self,
            idea_text=idea_text.strip(),
            selected_tools=tuple(selected_tools),
            last_run=None,
        )

    def with_run(self, idea_text: str, selected_tools, run: Dict[str, Any]) -> "SessionState":
        return replace(
            self,
            idea_text=idea_text.strip(),
            selected_tools=tuple(selected_tools),
            last_run=run,
        )


class SessionStore(Protocol):
    def get(self, owner_id: str) -> SessionState: ...

    def put(self, owner_id: str, state: SessionState) -> None: ...

    def clear(self, owner_id: str) -> None: ...


class InMemorySessionStore:
    """Process-local store. Lost on restart and not shared across workers."""

    def __init__(self):
        self._states: Dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def get(self, owner_id: str) -> SessionState:
        with self._lock:
            return self._states.get(owner_id, SessionState())

    def put(self, owner_id: str, state: SessionState) -> None:
        with self._lock:
            self._states[owner_id] = state

    def clear(self, owner_id: str) -> None:
        with self._lock:
            self._states.pop(owner_id, None)


_store: SessionStore = InMemorySessionStore()


def get_session_store() -> SessionStore:
    """FastAPI dependency returning the process-wide session store."""
    return _store
