"""Centralized message constants for error messages and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Construction
    NO_NODE_AVAILABLE = (
        "No available node was found, add a node to the manager's node pool first"
    )

    # Play options
    NO_TRACK = "There is no track in the queue, nor provided in the play options"
    PLAY_POSITION_OUT_OF_RANGE = (
        "PlayOptions.position must be a positive number, less than the track's duration"
    )
    PLAY_VOLUME_NEGATIVE = "PlayOptions.volume must be a positive number"
    PLAY_END_TIME_OUT_OF_RANGE = (
        "PlayOptions.end_time must be a positive number, less than the track's duration"
    )
    PLAY_END_TIME_BEFORE_POSITION = (
        "PlayOptions.end_time must be bigger than PlayOptions.position"
    )

    # Volume / seek / repeat
    VOLUME_NOT_A_NUMBER = "Volume must be a number"
    POSITION_NOT_A_NUMBER = "Position must be a number"
    TRACK_NOT_SEEKABLE = "Current track is not seekable / a stream"
    TRACK_NOT_RESOLVED = "Node '{node_id}' could not resolve track {title!r}"
    INVALID_REPEAT_MODE = "Repeat mode must be either 'off', 'track', or 'queue'"

    # Pause / resume
    ALREADY_PAUSED = "Player is already paused - not able to pause"
    NOT_PAUSED = "Player isn't paused - not able to resume"

    # Skip
    QUEUE_EMPTY = "Can't skip, the queue is empty"
    SKIP_OUT_OF_RANGE = "Can't skip more than the queue size ({skip_to} > {size})"

    # Voice
    NO_VOICE_CHANNEL = "No voice channel id has been set"

    # Lifecycle
    PLAYER_DESTROYED = "Player for guild {guild_id} was destroyed, can't {operation}"

    # Node transport
    NODE_REQUEST_FAILED = "Request to node '{node_id}' failed: {error}"
    NODE_BAD_STATUS = "Node '{node_id}' answered {method} {path} with HTTP {status}"
    NODE_NO_SESSION = "Node '{node_id}' has no session id, can't address players"

    # Config
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_STORE_URL = "Queue store URL must start with memory:// or sqlite://"
    INVALID_DECREMENTER = "volume_decrementer must be within (0, 1]"


class LogTemplates:
    """Log message templates; pass values as logger arguments."""

    # Player lifecycle
    PLAYER_CREATED = "Player created for guild %s on node %s"
    PLAYER_DESTROYED = "Player destroyed for guild %s"
    PLAYER_CONNECTING = "Connecting guild %s to voice channel %s"
    PLAYER_DISCONNECTING = "Disconnecting guild %s from voice"
    PLAYER_ALREADY_EXISTS = "Player for guild %s already exists, reusing it"

    # Dispatch
    PLAYER_UPDATE_SENT = "Sent update for guild %s to node %s in %.2fs: %s"
    PLAYER_PLAYING = "Guild %s now playing %r"
    PLAYER_SKIPPED = "Guild %s skipped to upcoming track %d"
    TRACK_RESOLVED = "Resolved %r for guild %s through node %s"

    # Node selection
    NODE_SELECTED = "Selected node %s for region %s"
    NODE_REGION_FALLBACK = "No node serves region %s, falling back to least used node %s"
    NODE_PINNED = "Using pinned node %s"
    NODE_ADDED = "Node %s added to the pool"
    NODE_REMOVED = "Node %s removed from the pool"

    # Search
    SEARCH_REQUEST = "Searching %r via %s"
    SEARCH_SOURCE_FAILED = "Search source %s failed for %r"
    SEARCH_MALFORMED = "Malformed %s search response, normalized to empty result"

    # Queue store
    QUEUE_SAVED = "Queue saved for guild %s (%d pending)"
    QUEUE_RESTORED = "Queue restored for guild %s (%d pending)"
    QUEUE_STORE_INITIALIZED = "Queue store initialized at %s"
    QUEUE_STORE_CLOSED = "Queue store closed"

    # Events
    EVENT_NO_HANDLERS = "No handlers for %s"
    EVENT_PUBLISHING = "Publishing %s to %d handlers"
