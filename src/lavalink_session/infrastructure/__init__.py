"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Lavalink (httpx REST node client and node pool)
- Persistence (in-memory and SQLite queue stores)
- Search (Bandcamp autocomplete source)
"""
