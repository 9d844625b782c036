"""Centralized constants for the player, the node protocol and configuration keys."""

from __future__ import annotations


class PlayerConstants:
    """Limits and defaults of the player state."""

    MIN_VOLUME = 0
    MAX_VOLUME = 500
    DEFAULT_VOLUME = 100

    # Keys prefixed with this survive Player.clear_data()
    INTERNAL_DATA_PREFIX = "internal_"
    LAST_POSITION_KEY = "lastposition"
    INTERNAL_LAST_POSITION_KEY = "internal_lastposition"

    MAX_PREVIOUS_TRACKS = 25


class GatewayOpCodes:
    """Op codes of the real-time gateway directives sent through the shard sender."""

    VOICE_STATE_UPDATE = 4


class PayloadKeys:
    """Field names of the node's player update payload."""

    ENCODED_TRACK = "encodedTrack"
    IDENTIFIER = "identifier"
    POSITION = "position"
    END_TIME = "endTime"
    VOLUME = "volume"
    PAUSED = "paused"
    FILTERS = "filters"
    VOICE = "voice"

    # Accepted by Player.play but never forwarded in the payload body
    TRACK = "track"
    NO_REPLACE = "noReplace"


class LoadTypes:
    """Raw ``loadType`` values reported by a node's loadtracks endpoint."""

    TRACK = "track"
    PLAYLIST = "playlist"
    SEARCH = "search"
    EMPTY = "empty"
    ERROR = "error"


class SearchPlatforms:
    """Search source prefixes understood by nodes and their friendly aliases."""

    YOUTUBE = "ytsearch"
    YOUTUBE_MUSIC = "ytmsearch"
    SOUNDCLOUD = "scsearch"
    BANDCAMP = "bcsearch"
    SPOTIFY = "spsearch"
    DEEZER = "dzsearch"
    APPLE_MUSIC = "amsearch"
    YANDEX_MUSIC = "ymsearch"

    DEFAULT = YOUTUBE

    ALIASES: dict[str, str] = {
        "youtube": YOUTUBE,
        "yt": YOUTUBE,
        "youtube music": YOUTUBE_MUSIC,
        "youtubemusic": YOUTUBE_MUSIC,
        "ytm": YOUTUBE_MUSIC,
        "soundcloud": SOUNDCLOUD,
        "sc": SOUNDCLOUD,
        "bandcamp": BANDCAMP,
        "bc": BANDCAMP,
        "spotify": SPOTIFY,
        "sp": SPOTIFY,
        "deezer": DEEZER,
        "dz": DEEZER,
        "apple music": APPLE_MUSIC,
        "applemusic": APPLE_MUSIC,
        "am": APPLE_MUSIC,
        "yandex": YANDEX_MUSIC,
        "yandex music": YANDEX_MUSIC,
        "ym": YANDEX_MUSIC,
    }

    URL_PATTERN = r"^https?://"


class EventNames:
    """Lifecycle notification names emitted on the event bus."""

    PLAYER_CREATE = "playerCreate"
    PLAYER_DESTROY = "playerDestroy"


class NodeEndpoints:
    """REST paths of the node protocol (v4)."""

    VERSION_PREFIX = "/v4"
    PLAYER = "/sessions/{session_id}/players/{guild_id}"
    LOAD_TRACKS = "/loadtracks?identifier={identifier}"
    STATS = "/stats"


class HTTPHeaders:
    """HTTP header names and common values."""

    AUTHORIZATION = "Authorization"
    USER_AGENT = "User-Agent"
    CONTENT_TYPE = "Content-Type"
    COOKIE = "Cookie"

    JSON = "application/json"


class QueueStoreSchemes:
    """Valid queue store URL schemes."""

    MEMORY = "memory://"
    SQLITE = "sqlite://"

    MEMORY_DB = ":memory:"
    MEMORY_SHARED_URI = "file:lavalink-session?mode=memory&cache=shared"


class SQLPragmas:
    """SQLite PRAGMA statements applied to each queue store connection."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"


class LogLevels:
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
