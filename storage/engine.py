from __future__ import annotations
import asyncio
from typing import Protocol, Optional
from models.roster import Roster
from .github import ContentsClient

# High-level abstraction: the session only talks to this, never to the HTTP client.

async def _run_blocking(func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: func(*args, **kwargs))

class CharacterStorage(Protocol):
    async def load_roster(self) -> Roster: ...
    async def save_roster(self, roster: Roster) -> str: ...

class GitHubStorageEngine(CharacterStorage):
    """Character file on GitHub; blocking requests run in the default executor."""
    def __init__(self, client: Optional[ContentsClient] = None):
        self.client = client or ContentsClient()

    async def load_roster(self) -> Roster:
        return await _run_blocking(self.client.fetch_file)

    async def save_roster(self, roster: Roster) -> str:
        return await _run_blocking(self.client.write_file, roster.characters, roster.version)

# Simple registry / factory
_default_engine: CharacterStorage | None = None

async def get_engine() -> CharacterStorage:
    global _default_engine
    if _default_engine is None:
        _default_engine = GitHubStorageEngine()
    return _default_engine

__all__ = [
    "CharacterStorage",
    "GitHubStorageEngine",
    "get_engine",
]
