"""Per-session track queue with a current-track pointer and play history."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable

from lavalink_session.domain.music.entities import QueueSnapshot, Track
from lavalink_session.domain.music.repository import QueueSaver
from lavalink_session.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class Queue:
    """Ordered pending tracks (insertion order is play order) plus ``current``.

    ``current`` is either None or a track that was a member of the pending
    sequence at some point (or the node-loaded form of one); played tracks
    leave the pending sequence.
    Every structural mutation is persisted through the saver before the
    mutating call returns.
    """

    def __init__(self, guild_id: str, saver: QueueSaver) -> None:
        self.guild_id = guild_id
        self._saver = saver
        self._tracks: list[Track] = []
        self._previous: list[Track] = []
        self._current: Track | None = None

    @property
    def tracks(self) -> list[Track]:
        """Copy of the pending tracks."""
        return list(self._tracks)

    @property
    def previous(self) -> list[Track]:
        """Copy of the play history, most recent first."""
        return list(self._previous)

    @property
    def current(self) -> Track | None:
        return self._current

    @property
    def size(self) -> int:
        return len(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def contains(self, track: object) -> bool:
        return isinstance(track, Track) and track in self._tracks

    def peek(self) -> Track | None:
        return self._tracks[0] if self._tracks else None

    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(
            guild_id=self.guild_id,
            current=self._current,
            tracks=list(self._tracks),
            previous=list(self._previous),
        )

    async def save(self) -> None:
        await self._saver.save(self.guild_id, self.snapshot())

    async def restore(self) -> bool:
        """Load the stored snapshot of this session, if the store has one."""
        snapshot = await self._saver.load(self.guild_id)
        if snapshot is None:
            return False

        self._current = snapshot.current
        self._tracks = list(snapshot.tracks)
        self._previous = list(snapshot.previous)
        logger.info(LogTemplates.QUEUE_RESTORED, self.guild_id, len(self._tracks))
        return True

    async def add(self, tracks: Track | Iterable[Track], index: int | None = None) -> int:
        """Add one or more tracks at ``index`` (default: the end). Returns the new size."""
        new_tracks = [tracks] if isinstance(tracks, Track) else list(tracks)
        if index is None or index >= len(self._tracks):
            self._tracks.extend(new_tracks)
        else:
            index = max(0, index)
            self._tracks[index:index] = new_tracks
        await self.save()
        return len(self._tracks)

    async def splice(
        self,
        start: int,
        delete_count: int,
        tracks: Track | Iterable[Track] | None = None,
    ) -> list[Track]:
        """Remove ``delete_count`` tracks from ``start`` and insert ``tracks`` there.

        Returns the removed tracks.
        """
        start = max(0, min(start, len(self._tracks)))
        delete_count = max(0, delete_count)
        if tracks is None:
            inserted: list[Track] = []
        elif isinstance(tracks, Track):
            inserted = [tracks]
        else:
            inserted = list(tracks)

        removed = self._tracks[start : start + delete_count]
        self._tracks[start : start + delete_count] = inserted
        await self.save()
        return removed

    async def remove(self, index: int) -> Track | None:
        """Remove and return the pending track at ``index``."""
        if not 0 <= index < len(self._tracks):
            return None
        track = self._tracks.pop(index)
        await self.save()
        return track

    async def clear(self) -> int:
        """Remove all pending tracks and return the count removed."""
        count = len(self._tracks)
        self._tracks.clear()
        await self.save()
        return count

    async def shuffle(self) -> int:
        if len(self._tracks) > 1:
            random.shuffle(self._tracks)
            await self.save()
        return len(self._tracks)

    async def set_current(self, track: Track | None) -> None:
        """Make ``track`` the current track; it leaves the pending sequence."""
        if track is not None and track in self._tracks:
            self._tracks.remove(track)
        self._current = track
        await self.save()

    async def track_end(self, repeat_queue: bool = False) -> Track | None:
        """Advance past the current track and return the new current track.

        The finished track goes to the front of the history; with
        ``repeat_queue`` it is also appended back to the pending sequence.
        """
        finished = self._current
        if finished is not None:
            self._previous.insert(0, finished)
            del self._previous[self._saver.max_previous_tracks :]
            if repeat_queue:
                self._tracks.append(finished)

        self._current = self._tracks.pop(0) if self._tracks else None
        await self.save()
        return self._current

    async def destroy(self) -> None:
        """Forget the stored snapshot of this session."""
        self._tracks.clear()
        self._previous.clear()
        self._current = None
        await self._saver.delete(self.guild_id)
