"""Per-session record of generated headlines and feature titles.

Used to steer later generations in the same session away from repeating
copy. Advisory only: nothing downstream enforces non-repetition.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import logging
import threading
from typing import Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentSnapshot:
    headlines: Tuple[str, ...] = ()
    feature_titles: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.headlines and not self.feature_titles


def _push_recent(items: Tuple[str, ...], new_items: Iterable[str], limit: int) -> Tuple[str, ...]:
    values = list(items)
    for item in new_items:
        cleaned = (item or "").strip()
        if not cleaned:
            continue
        values = [value for value in values if value.lower() != cleaned.lower()]
        values.append(cleaned)
    if limit <= 0:
        return ()
    return tuple(values[-limit:])


class ContentMemory:
    """In-process content memory keyed by session id.

    Each session holds an immutable snapshot; ``track`` swaps in a new one
    under a per-session lock, so readers never wait on writers. At most
    ``max_sessions`` sessions are kept; tracking a new session beyond that
    drops the least recently tracked one.
    """

    def __init__(
        self,
        *,
        max_headlines: int = 5,
        max_feature_titles: int = 15,
        max_sessions: int = 1000,
    ) -> None:
        self.max_headlines = max_headlines
        self.max_feature_titles = max_feature_titles
        self.max_sessions = max(1, int(max_sessions))
        self._snapshots: Dict[str, ContentSnapshot] = {}
        self._locks: "OrderedDict[str, threading.Lock]" = OrderedDict()
        self._locks_guard = threading.Lock()

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[session_id] = lock
            else:
                self._locks.move_to_end(session_id)
            while len(self._locks) > self.max_sessions:
                evicted, _ = self._locks.popitem(last=False)
                self._snapshots.pop(evicted, None)
                logger.debug("Evicted content memory session", extra={"data": {"session_id": evicted}})
            return lock

    def snapshot(self, session_id: Optional[str]) -> ContentSnapshot:
        if not session_id:
            return ContentSnapshot()
        return self._snapshots.get(session_id, ContentSnapshot())

    def track(self, session_id: Optional[str], headline: Optional[str], feature_titles: Iterable[str] = ()) -> None:
        if not session_id:
            return
        titles = list(feature_titles or ())
        with self._lock_for(session_id):
            current = self._snapshots.get(session_id, ContentSnapshot())
            updated = ContentSnapshot(
                headlines=_push_recent(current.headlines, [headline or ""], self.max_headlines),
                feature_titles=_push_recent(current.feature_titles, titles, self.max_feature_titles),
            )
            with self._locks_guard:
                # An evicted session stays evicted.
                if session_id in self._locks:
                    self._snapshots[session_id] = updated
        logger.debug(
            "Tracked generated content",
            extra={"data": {"session_id": session_id, "headline": headline, "feature_titles": len(titles)}},
        )

    def warning_for(self, session_id: Optional[str]) -> str:
        """Prompt block listing content already shown in this session, or ``""``."""
        current = self.snapshot(session_id)
        if current.is_empty:
            return ""
        lines = ["PREVIOUSLY USED CONTENT - DO NOT REPEAT:"]
        if current.headlines:
            lines.append("Headlines already shown to this user:")
            lines.extend(f'  - "{headline}"' for headline in current.headlines)
        if current.feature_titles:
            lines.append("Feature titles already used:")
            lines.extend(f'  - "{title}"' for title in current.feature_titles)
        lines.append(
            "Write fresh headlines and feature titles. Do not reuse these verbatim "
            "or with only minor word changes."
        )
        return "\n".join(lines)

    def clear(self, session_id: Optional[str] = None) -> None:
        with self._locks_guard:
            if session_id is None:
                self._snapshots.clear()
                self._locks.clear()
                return
            self._snapshots.pop(session_id, None)
            self._locks.pop(session_id, None)


__all__ = ["ContentSnapshot", "ContentMemory"]
