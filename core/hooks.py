"""Session events.

``roster.loaded`` fires after every fetch (``roster=``). ``roster.saved`` fires after
every accepted write, before the re-fetch (``roster=``, ``version=``).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List

Listener = Callable[..., Awaitable[None]]

EVENTS = ('roster.loaded', 'roster.saved')

logger = logging.getLogger('tavern.hooks')

class HookRegistry:
    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown event {event!r}; expected one of {', '.join(EVENTS)}")
        self._listeners[event].append(listener)

    async def emit(self, event: str, **payload) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                await listener(**payload)
            except Exception:
                # A failing listener must not undo a save that already happened
                logger.exception('Hook listener for %s failed', event)


HOOKS = HookRegistry()

def hook(event: str):
    """Decorator registering an async listener on the global registry."""
    def deco(fn: Listener) -> Listener:
        HOOKS.on(event, fn)
        return fn
    return deco
