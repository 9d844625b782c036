"""Guild-scoped Lavalink player sessions: queue, playback control and search."""

__version__ = "0.1.0"
