"""Player - one session's playback state machine and lifecycle."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from ...domain.music.entities import PlayerOptions, SearchResult, Track
from ...domain.music.normalizer import normalize_search
from ...domain.music.playback import (
    PlayOptions,
    build_play_payload,
    clamp_position,
    clamp_volume,
    coerce_number,
    decrement_volume,
    derive_lavalink_volume,
    latency_seconds,
    volume_payload,
)
from ...domain.music.queue import Queue
from ...domain.music.value_objects import PlaybackState, RepeatMode, VoiceState
from ...domain.shared.constants import (
    GatewayOpCodes,
    NodeEndpoints,
    PayloadKeys,
    PlayerConstants,
    SearchPlatforms,
)
from ...domain.shared.events import PlayerCreated, PlayerDestroyed
from ...domain.shared.exceptions import (
    AlreadyPausedError,
    InvalidPositionError,
    InvalidRepeatModeError,
    InvalidVolumeError,
    NotPausedError,
    NoTrackError,
    NotSeekableError,
    NoVoiceChannelError,
    PlayerDestroyedError,
    QueueEmptyError,
    SkipOutOfRangeError,
    TrackNotResolvedError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shared.types import utcnow
from .node_selector import select_node_from_pool

if TYPE_CHECKING:
    from ..interfaces.node_client import LavalinkNodeClient
    from .manager import PlayerManager

logger = logging.getLogger(__name__)

_URL_RE = re.compile(SearchPlatforms.URL_PATTERN)


def is_reserved(key: str) -> bool:
    """Reserved data keys survive ``Player.clear_data``."""
    return key.startswith(PlayerConstants.INTERNAL_DATA_PREFIX)


class Player:
    """Aggregate owning the playback state, data bag and queue of one guild.

    Operations on one player are expected to be awaited sequentially; the
    player does not serialize overlapping calls itself. Every update sent
    to the node records its round-trip latency in ``ping`` (seconds).
    """

    def __init__(self, options: PlayerOptions, manager: PlayerManager) -> None:
        self.options = options
        self.manager = manager

        self.guild_id = options.guild_id
        self.voice_channel_id: str | None = options.voice_channel_id
        self.text_channel_id: str | None = options.text_channel_id

        self.playing = False
        self.paused = False
        self.destroyed = False
        self.repeat_mode = RepeatMode.OFF
        self.ping = 0.0
        self.position: float = 0
        self.connected: bool | None = False
        self.voice = VoiceState()
        self.created_at = utcnow()
        self._data: dict[str, Any] = {}

        settings = manager.player_settings
        self._decrementer = settings.volume_decrementer
        if options.apply_volume_as_filter is not None:
            self._volume_as_filter = options.apply_volume_as_filter
        else:
            self._volume_as_filter = settings.apply_volume_as_filter

        self.node: LavalinkNodeClient = select_node_from_pool(
            manager.node_pool, options.vc_region, options.node
        )

        self.volume: float = settings.default_volume
        self.lavalink_volume = self._derive_volume(self.volume)

        self.queue = Queue(self.guild_id, manager.queue_saver)

    @classmethod
    async def create(cls, options: PlayerOptions, manager: PlayerManager) -> Player:
        """Construct a player, announce it and apply the starting volume.

        Raises:
            NoNodeAvailableError: If the manager's pool has no node; nothing
                is created or announced in that case.
        """
        player = cls(options, manager)
        logger.info(LogTemplates.PLAYER_CREATED, player.guild_id, player.node.id)
        await manager.events.publish(
            PlayerCreated(
                guild_id=player.guild_id,
                node_id=player.node.id,
                voice_channel_id=player.voice_channel_id,
                text_channel_id=player.text_channel_id,
            )
        )
        if coerce_number(options.volume) is not None:
            await player.set_volume(options.volume)
        return player

    # ── State ──────────────────────────────────────────────────────

    @property
    def state(self) -> PlaybackState:
        if self.destroyed:
            return PlaybackState.DESTROYED
        if self.queue.current is None:
            return PlaybackState.IDLE
        if self.paused:
            return PlaybackState.PAUSED
        return PlaybackState.PLAYING if self.playing else PlaybackState.IDLE

    @property
    def volume_as_filter(self) -> bool:
        return self._volume_as_filter

    def _derive_volume(self, volume: float, *, ignore_decrementer: bool = False) -> float:
        # filter-mode volume is never decremented
        return derive_lavalink_volume(
            volume,
            self._decrementer,
            ignore_decrementer=ignore_decrementer or self._volume_as_filter,
        )

    # ── Data bag ───────────────────────────────────────────────────

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def clear_data(self) -> None:
        """Drop all caller data except reserved ``internal_`` keys."""
        self._data = {k: v for k, v in self._data.items() if is_reserved(k)}

    def get_all_data(self) -> dict[str, Any]:
        """Caller data without reserved keys."""
        return {k: v for k, v in self._data.items() if not is_reserved(k)}

    # ── Dispatch ───────────────────────────────────────────────────

    def _ensure_alive(self, operation: str) -> None:
        if self.destroyed:
            raise PlayerDestroyedError(
                operation,
                ErrorMessages.PLAYER_DESTROYED.format(guild_id=self.guild_id, operation=operation),
            )

    async def _dispatch(
        self, player_options: dict[str, Any], *, no_replace: bool = False, operation: str
    ) -> None:
        self._ensure_alive(operation)

        started = time.perf_counter()
        await self.node.update_player(self.guild_id, player_options, no_replace=no_replace)
        self.ping = latency_seconds((time.perf_counter() - started) * 1000)
        logger.debug(
            LogTemplates.PLAYER_UPDATE_SENT, self.guild_id, self.node.id, self.ping, player_options
        )

    async def _resolve(self, track: Track) -> Track:
        """Load an unresolved track through the node and make it the current one.

        Raises:
            TrackNotResolvedError: If the track has no uri or the node finds nothing.
        """
        resolved: Track | None = None
        if track.info.uri:
            raw = await self.node.make_request(
                NodeEndpoints.LOAD_TRACKS.format(identifier=quote(track.info.uri, safe=""))
            )
            result = normalize_search(raw, track.requester)
            if result.playlist is not None and result.playlist.selected_track is not None:
                resolved = result.playlist.selected_track
            elif result.tracks:
                resolved = result.tracks[0]

        if resolved is None or not resolved.is_resolved:
            raise TrackNotResolvedError(
                ErrorMessages.TRACK_NOT_RESOLVED.format(
                    node_id=self.node.id, title=track.display_title
                )
            )

        resolved = resolved.model_copy(
            update={"user_data": {**resolved.user_data, **track.user_data}}
        )
        await self.queue.set_current(resolved)
        logger.debug(LogTemplates.TRACK_RESOLVED, track.display_title, self.guild_id, self.node.id)
        return resolved

    # ── Playback ───────────────────────────────────────────────────

    async def play(self, options: PlayOptions | None = None, **kwargs: Any) -> None:
        """Play the current track, or the next queued one when there is none.

        Keyword arguments are accepted as a shorthand for ``PlayOptions``.
        Tracks without an encoded payload (from search sources that bypass
        the node) are loaded through the node by their uri first, unless
        the caller supplies an encoded track or identifier.

        Raises:
            NoTrackError: If neither the queue nor the options yield a track.
            TrackNotResolvedError: If an unresolved track can't be loaded.
            InvalidPlayOptionError: If position, volume or end time are invalid.
        """
        self._ensure_alive("play")
        options = options or PlayOptions(**kwargs)

        if options.track is not None and self.queue.contains(options.track):
            await self.queue.set_current(options.track)
        if self.queue.current is None and self.queue.size:
            await self.queue.track_end(self.repeat_mode == RepeatMode.QUEUE)

        track = self.queue.current
        if track is None:
            raise NoTrackError(ErrorMessages.NO_TRACK)
        if not track.is_resolved and options.encoded_track is None and options.identifier is None:
            track = await self._resolve(track)

        volume = coerce_number(options.volume)
        if volume is not None:
            self.volume = clamp_volume(volume)
            self.lavalink_volume = self._derive_volume(self.volume)
            options = replace(
                options,
                volume=decrement_volume(
                    self.volume, self._decrementer, ignore_decrementer=self._volume_as_filter
                ),
            )

        self.set(PlayerConstants.LAST_POSITION_KEY, self.position)

        payload = build_play_payload(
            track, self.lavalink_volume, options, as_filter=self._volume_as_filter
        )
        await self._dispatch(payload, no_replace=options.no_replace, operation="play")

        self.playing = True
        self.paused = bool(payload.get(PayloadKeys.PAUSED, False))
        self.position = coerce_number(payload.get(PayloadKeys.POSITION)) or 0
        logger.info(LogTemplates.PLAYER_PLAYING, self.guild_id, track.display_title)

    async def set_volume(self, volume: Any, ignore_decrementer: bool = False) -> None:
        """Set the user-facing volume, clamped into [0, 500].

        Raises:
            InvalidVolumeError: If ``volume`` is not a number.
        """
        self._ensure_alive("set volume")
        number = coerce_number(volume)
        if number is None:
            raise InvalidVolumeError(ErrorMessages.VOLUME_NOT_A_NUMBER)

        self.volume = clamp_volume(number)
        self.lavalink_volume = self._derive_volume(
            self.volume, ignore_decrementer=ignore_decrementer
        )
        await self._dispatch(
            volume_payload(self.lavalink_volume, as_filter=self._volume_as_filter),
            operation="set volume",
        )

    async def pause(self) -> None:
        self._ensure_alive("pause")
        if self.paused and not self.playing:
            raise AlreadyPausedError(ErrorMessages.ALREADY_PAUSED)

        self.paused = True
        self.playing = False
        await self._dispatch({PayloadKeys.PAUSED: True}, operation="pause")

    async def resume(self) -> None:
        self._ensure_alive("resume")
        if not self.paused:
            raise NotPausedError(ErrorMessages.NOT_PAUSED)

        self.paused = False
        self.playing = self.queue.current is not None
        await self._dispatch({PayloadKeys.PAUSED: False}, operation="resume")

    async def seek(self, position: Any) -> None:
        """Seek within the current track; out-of-range positions are clamped.

        Does nothing when there is no current track.

        Raises:
            InvalidPositionError: If ``position`` is not a number.
            NotSeekableError: If the current track is a stream or not seekable.
        """
        self._ensure_alive("seek")
        track = self.queue.current
        if track is None:
            return None

        number = coerce_number(position)
        if number is None:
            raise InvalidPositionError(ErrorMessages.POSITION_NOT_A_NUMBER)
        if not track.info.is_seekable or track.info.is_stream:
            raise NotSeekableError(ErrorMessages.TRACK_NOT_SEEKABLE)

        self.position = int(clamp_position(number, track.info.duration))
        self.set(PlayerConstants.INTERNAL_LAST_POSITION_KEY, self.position)
        await self._dispatch({PayloadKeys.POSITION: self.position}, operation="seek")
        return None

    def set_repeat_mode(self, repeat_mode: RepeatMode | str) -> RepeatMode:
        mode = RepeatMode.parse(repeat_mode)
        if mode is None:
            raise InvalidRepeatModeError(ErrorMessages.INVALID_REPEAT_MODE)
        self.repeat_mode = mode
        return mode

    async def skip(self, skip_to: int = 0) -> bool:
        """Ask the node to stop the current track so playback advances.

        With ``skip_to > 1`` the ``skip_to - 1`` pending tracks in front of
        the target are dropped first.

        Raises:
            QueueEmptyError: If there is no pending track.
            SkipOutOfRangeError: If ``skip_to`` exceeds the queue size.
        """
        self._ensure_alive("skip")
        if not self.queue.size:
            raise QueueEmptyError(ErrorMessages.QUEUE_EMPTY)

        if isinstance(skip_to, int) and skip_to > 1:
            if skip_to > self.queue.size:
                raise SkipOutOfRangeError(
                    ErrorMessages.SKIP_OUT_OF_RANGE.format(skip_to=skip_to, size=self.queue.size),
                    skip_to=skip_to,
                    queue_size=self.queue.size,
                )
            await self.queue.splice(0, skip_to - 1)

        await self._dispatch({PayloadKeys.ENCODED_TRACK: None}, operation="skip")
        logger.info(LogTemplates.PLAYER_SKIPPED, self.guild_id, max(skip_to, 1))
        return True

    async def handle_track_end(self) -> None:
        """Advance the queue after the node reported the current track ended.

        Called by whatever ingests the node's events; repeats the track or
        re-queues it according to ``repeat_mode``.
        """
        if self.destroyed:
            return

        if self.repeat_mode == RepeatMode.TRACK and self.queue.current is not None:
            await self.play()
            return

        next_track = await self.queue.track_end(self.repeat_mode == RepeatMode.QUEUE)
        if next_track is None:
            self.playing = False
            self.position = 0
            return
        await self.play()

    # ── Search ─────────────────────────────────────────────────────

    async def search(
        self, query: str, requester: Any = None, *, source: str | None = None
    ) -> SearchResult:
        """Search through the node (or a registered search source) and normalize the result.

        URL queries are loaded as-is; other queries get the source prefix.
        Transport failures propagate, node-reported failures come back as
        a ``load_type == error`` result.
        """
        platform = source or self.manager.player_settings.default_search_platform
        platform = SearchPlatforms.ALIASES.get(platform.lower(), platform)
        is_url = bool(_URL_RE.match(query))

        plugin = self.manager.search_sources.get(platform)
        if plugin is not None and not is_url:
            logger.debug(LogTemplates.SEARCH_REQUEST, query, plugin.prefix)
            raw = await plugin.search(query)
        else:
            prefix = "" if is_url else f"{platform}:"
            logger.debug(LogTemplates.SEARCH_REQUEST, query, self.node.id)
            raw = await self.node.make_request(
                NodeEndpoints.LOAD_TRACKS.format(identifier=prefix + quote(query, safe=""))
            )

        return normalize_search(raw, requester)

    # ── Voice / lifecycle ──────────────────────────────────────────

    def update_voice(
        self,
        *,
        endpoint: str | None = None,
        session_id: str | None = None,
        token: str | None = None,
    ) -> VoiceState:
        """Merge voice credentials mirrored from the gateway."""
        self.voice = VoiceState(
            endpoint=endpoint if endpoint is not None else self.voice.endpoint,
            session_id=session_id if session_id is not None else self.voice.session_id,
            token=token if token is not None else self.voice.token,
        )
        return self.voice

    async def connect(self) -> None:
        channel_id = self.options.voice_channel_id
        if not channel_id:
            raise NoVoiceChannelError(ErrorMessages.NO_VOICE_CHANNEL)

        logger.info(LogTemplates.PLAYER_CONNECTING, self.guild_id, channel_id)
        await self.manager.shard_sender.send_to_shard(
            self.guild_id,
            {
                "op": GatewayOpCodes.VOICE_STATE_UPDATE,
                "d": {
                    "guild_id": self.guild_id,
                    "channel_id": channel_id,
                    "self_mute": self.options.self_mute,
                    "self_deaf": self.options.self_deaf,
                },
            },
        )
        self.voice_channel_id = channel_id

    async def disconnect(self) -> None:
        if not self.options.voice_channel_id:
            raise NoVoiceChannelError(ErrorMessages.NO_VOICE_CHANNEL)

        logger.info(LogTemplates.PLAYER_DISCONNECTING, self.guild_id)
        await self.manager.shard_sender.send_to_shard(
            self.guild_id,
            {
                "op": GatewayOpCodes.VOICE_STATE_UPDATE,
                "d": {
                    "guild_id": self.guild_id,
                    "channel_id": None,
                    "self_mute": False,
                    "self_deaf": False,
                },
            },
        )
        self.voice_channel_id = None

    async def destroy(self, disconnect: bool = True) -> None:
        """Disconnect (optionally), drop the node-side player and forget this session."""
        if disconnect:
            await self.disconnect()

        await self.node.destroy_player(self.guild_id)
        self.destroyed = True
        self.playing = False
        await self.queue.destroy()

        await self.manager.events.publish(
            PlayerDestroyed(guild_id=self.guild_id, node_id=self.node.id, disconnected=disconnect)
        )
        self.manager.delete_player(self.guild_id)
        logger.info(LogTemplates.PLAYER_DESTROYED, self.guild_id)
