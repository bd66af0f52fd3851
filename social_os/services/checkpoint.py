"""Checkpoint stores holding the latest conversation state per session."""

import asyncio
import hashlib
import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, Protocol

from cuid2 import cuid_wrapper
from langchain_core.messages import messages_from_dict, messages_to_dict

from social_os.errors import CheckpointUnavailableError
from social_os.graphs.state import ConversationState
from social_os.utils.logging import get_logger

logger = get_logger(__name__)

cuid = cuid_wrapper()


def generate_session_id() -> str:
    """Generate a new CUID-based session ID."""
    return cuid()


class CheckpointStore(Protocol):
    """Interface for conversation checkpoint stores.

    Implementations keep the latest settled state of each session. External
    actions are never part of a checkpoint.
    """

    async def load(self, session_id: str) -> ConversationState | None:
        """Return the saved state for a session, or None if there is none."""
        ...

    async def save(self, session_id: str, state: ConversationState) -> None:
        """Overwrite the saved state for a session."""
        ...

    async def delete(self, session_id: str) -> bool:
        """Delete a session's state. Returns False if it did not exist."""
        ...


class InMemoryCheckpointStore:
    """Process-wide in-memory checkpoint store."""

    def __init__(self, session_timeout_minutes: int | None = None):
        """Initialize the store.

        Args:
            session_timeout_minutes: Minutes of inactivity before a session is
                evicted. Sessions are kept forever when None.
        """
        self._states: dict[str, ConversationState] = {}
        self._last_activity: dict[str, datetime] = {}
        self.session_timeout = timedelta(minutes=session_timeout_minutes) if session_timeout_minutes else None

    async def load(self, session_id: str) -> ConversationState | None:
        self._cleanup_expired_sessions()

        state = self._states.get(session_id)
        if state is None:
            return None

        self._last_activity[session_id] = datetime.now(UTC)
        return state.model_copy(deep=True)

    async def save(self, session_id: str, state: ConversationState) -> None:
        self._states[session_id] = state.model_copy(update={"external_actions": []}, deep=True)
        self._last_activity[session_id] = datetime.now(UTC)

    async def delete(self, session_id: str) -> bool:
        self._last_activity.pop(session_id, None)
        return self._states.pop(session_id, None) is not None

    def get_session_count(self) -> int:
        """Get current number of stored sessions."""
        self._cleanup_expired_sessions()
        return len(self._states)

    def _cleanup_expired_sessions(self) -> None:
        """Remove expired sessions from memory."""
        if self.session_timeout is None:
            return

        current_time = datetime.now(UTC)
        expired_sessions = [
            session_id
            for session_id, last_activity in self._last_activity.items()
            if current_time - last_activity > self.session_timeout
        ]

        for session_id in expired_sessions:
            logger.info(f"Evicting expired session {session_id}")
            self._states.pop(session_id, None)
            del self._last_activity[session_id]


class JsonFileCheckpointStore:
    """Checkpoint store keeping one JSON file per session in a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Path:
        # Session ids come from clients; hash them so distinct ids never share a file
        digest = hashlib.sha256(session_id.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    async def load(self, session_id: str) -> ConversationState | None:
        path = self._path(session_id)
        try:
            payload = await asyncio.to_thread(_read_json, path)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise CheckpointUnavailableError(f"Failed to load checkpoint for session {session_id}: {e}") from e

        if not isinstance(payload, dict) or payload.get("session_id") != session_id:
            raise CheckpointUnavailableError(f"Checkpoint file for session {session_id} belongs to another session")

        try:
            return ConversationState(
                messages=messages_from_dict(payload["messages"]),
                session_id=session_id,
                user_name=payload.get("user_name"),
                user_style=payload.get("user_style"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CheckpointUnavailableError(f"Corrupt checkpoint for session {session_id}: {e}") from e

    async def save(self, session_id: str, state: ConversationState) -> None:
        payload = {
            "session_id": session_id,
            "user_name": state.user_name,
            "user_style": state.user_style,
            "messages": messages_to_dict(list(state.messages)),
            "saved_at": datetime.now(UTC).isoformat(),
        }
        try:
            await asyncio.to_thread(_write_json, self._path(session_id), payload)
        except (OSError, TypeError, ValueError) as e:
            raise CheckpointUnavailableError(f"Failed to save checkpoint for session {session_id}: {e}") from e

    async def delete(self, session_id: str) -> bool:
        path = self._path(session_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CheckpointUnavailableError(f"Failed to delete checkpoint for session {session_id}: {e}") from e
        return True


def _read_json(path: Path) -> dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    # Atomic replace
    tmp_path = path.with_suffix(".json.tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False)
    tmp_path.replace(path)
