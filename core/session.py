"""Owner of the bot's view of the character file.

Every mutation follows the same path: validate the input, mutate a copy of the last
fetched roster, write it conditioned on that roster's sha, then re-fetch so the
displayed state is GitHub's, not ours.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Callable, Optional, TypeVar

from core.hooks import HOOKS, HookRegistry  # type: ignore
from models.character import Character
from models.roster import Roster
from storage.engine import CharacterStorage
from storage.exceptions import RepositoryError, StaleVersionError

logger = logging.getLogger('tavern.session')

T = TypeVar('T')


def parse_amount(value: Any) -> Optional[int]:
    """Positive integer from user input, or None when there is nothing to award."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        amount = value
    else:
        try:
            amount = int(str(value).strip())
        except ValueError:
            return None
    return amount if amount > 0 else None


class TavernSession:
    def __init__(self, engine: CharacterStorage, hooks: HookRegistry = HOOKS):
        self.engine = engine
        self.hooks = hooks
        self.roster: Optional[Roster] = None
        self._lock = asyncio.Lock()

    async def refresh(self) -> Roster:
        roster = await self.engine.load_roster()
        self.roster = roster
        await self.hooks.emit('roster.loaded', roster=roster)
        return roster

    async def current(self) -> Roster:
        if self.roster is None:
            return await self.refresh()
        return self.roster

    async def _commit(self, mutate: Callable[[Roster], T]) -> T:
        async with self._lock:
            base = await self.current()
            working = base.copy()
            result = mutate(working)
            try:
                new_version = await self.engine.save_roster(working)
            except StaleVersionError:
                # Someone else wrote first; our copy is worthless, re-read on next view.
                self.roster = None
                raise
            await self.hooks.emit('roster.saved', roster=working, version=new_version)
            try:
                await self.refresh()
            except RepositoryError:
                logger.warning('Re-fetch after save failed; keeping the saved copy at %s', new_version)
                working.version = new_version
                self.roster = working
            return result

    async def award_exp(self, char_id: int, amount: Any) -> Optional[Character]:
        value = parse_amount(amount)
        if value is None:
            logger.debug('Ignoring award of %r to %s', amount, char_id)
            return None

        def _award(roster: Roster) -> Character:
            return roster.award(char_id, value)

        char = await self._commit(_award)
        logger.info('Awarded %d XP to %s (now %d, level %d)', value, char.name, char.exp, char.level)
        return char

    async def create_character(self, name: str, char_class: str, now: Optional[float] = None) -> Optional[Character]:
        name = (name or '').strip()
        char_class = (char_class or '').strip()
        if not name or not char_class:
            return None
        char = await self._commit(lambda roster: roster.add(name, char_class, now=now))
        logger.info('Created %s the %s (%s)', char.name, char.char_class, char.id)
        return char

    async def remove_character(self, char_id: int) -> Character:
        char = await self._commit(lambda roster: roster.remove(char_id))
        logger.info('Banished %s (%s)', char.name, char.id)
        return char


__all__ = ['TavernSession', 'parse_amount']
