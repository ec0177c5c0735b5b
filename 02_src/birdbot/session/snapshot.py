"""Periodic JSON snapshot of conversation states and prompt records."""

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from ..config import SNAPSHOT_INTERVAL_SECONDS, SNAPSHOT_MAX_AGE_SECONDS
from ..errors import PersistenceError
from ..logging_config import get_logger
from ..models import ConversationStateMap, PromptRecordMap
from .stores import ConversationStateStore, PromptRecoveryStore

logger = get_logger(__name__)


class SessionSnapshotter:
    """Saves both stores every ``interval`` seconds and once more on stop.

    Snapshots older than ``max_age_seconds`` or that fail to parse are
    deleted on restore and the stores start empty.
    """

    def __init__(
        self,
        states: ConversationStateStore,
        prompts: PromptRecoveryStore,
        path: str | Path,
        interval: float = SNAPSHOT_INTERVAL_SECONDS,
        max_age_seconds: float = SNAPSHOT_MAX_AGE_SECONDS,
        now: Callable[[], datetime] | None = None,
    ):
        self._states = states
        self._prompts = prompts
        self._path = Path(path)
        self._interval = interval
        self._max_age_seconds = max_age_seconds
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def path(self) -> Path:
        return self._path

    async def start(self) -> None:
        """Restore the last snapshot and begin periodic saving."""
        self.restore()
        self._running = True
        self._task = asyncio.create_task(self._autosave_loop())
        logger.info(
            "Session auto-save started",
            extra={"context": {"interval_sec": self._interval, "path": str(self._path)}},
        )

    async def stop(self) -> None:
        """Cancel the timer and write a final snapshot."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self.save_async()
        logger.info("Session auto-save stopped")

    async def _autosave_loop(self) -> None:
        try:
            while self._running:
                await asyncio.sleep(self._interval)
                try:
                    await self.save_async()
                except Exception as e:
                    logger.error(f"Session auto-save failed: {e}", exc_info=True)
        except asyncio.CancelledError:
            pass

    async def save_async(self) -> bool:
        """Write the snapshot off the event loop."""
        return await asyncio.to_thread(self.save)

    def save(self) -> bool:
        """Best-effort write. Failures are logged, never raised."""
        try:
            self._write(self._serialize())
        except PersistenceError as e:
            logger.error("Failed to save sessions: %s", e)
            return False
        logger.debug("Sessions saved", extra={"context": {"users": len(self._states)}})
        return True

    def _serialize(self) -> dict:
        return {
            "savedAt": self._now().isoformat(),
            "conversationStates": ConversationStateMap.dump_python(
                self._states.snapshot(), mode="json"
            ),
            "promptRecords": PromptRecordMap.dump_python(
                self._prompts.snapshot(), mode="json"
            ),
        }

    def _write(self, data: dict) -> None:
        temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except (OSError, TypeError, ValueError) as e:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
            raise PersistenceError(f"cannot write {self._path}: {e}") from e

    def restore(self) -> bool:
        """Load the snapshot once. Returns True when entries were restored."""
        if not self._path.exists():
            return False

        try:
            data = self._read()
        except PersistenceError as e:
            logger.error("Failed to restore sessions: %s", e)
            self._cleanup()
            return False

        saved_at, states, prompts = data
        age = (self._now() - saved_at).total_seconds()
        if age > self._max_age_seconds:
            logger.info(
                "Discarded stale session file",
                extra={"context": {"age_min": round(age / 60)}},
            )
            self._cleanup()
            return False

        self._states.load(states)
        self._prompts.load(prompts)
        logger.info(
            "Sessions restored",
            extra={"context": {"users": len(states), "saved_at": saved_at.isoformat()}},
        )
        return True

    def _read(self):
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            saved_at = datetime.fromisoformat(raw["savedAt"])
            if saved_at.tzinfo is None:
                saved_at = saved_at.replace(tzinfo=timezone.utc)
            states = ConversationStateMap.validate_python(
                raw.get("conversationStates") or {}
            )
            prompts = PromptRecordMap.validate_python(raw.get("promptRecords") or {})
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
            raise PersistenceError(f"corrupt snapshot {self._path}: {e}") from e
        return saved_at, states, prompts

    def _cleanup(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove session file %s: %s", self._path, e)
