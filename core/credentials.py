"""GitHub token storage.

The token lives in a single named slot of a dotenv file, in plain text, next to the
bot's other secrets. When the slot is empty the operator is asked once on the console.
"""
from __future__ import annotations
import getpass
import logging
import os
from pathlib import Path
from typing import Callable, Optional

from dotenv import dotenv_values, set_key, unset_key  # type: ignore

from core.config import CREDENTIAL_FILE, CREDENTIAL_SLOT  # type: ignore

logger = logging.getLogger('tavern.credentials')

Prompt = Callable[[str], Optional[str]]

PROMPT_TEXT = "Enter your GitHub PAT to access the Tavern: "


def _console_prompt(text: str) -> Optional[str]:
    try:
        return getpass.getpass(text)
    except (EOFError, KeyboardInterrupt):
        return None


class CredentialStore:
    def __init__(self, path: str | os.PathLike = CREDENTIAL_FILE, slot: str = CREDENTIAL_SLOT, prompt: Prompt | None = None):
        self.path = Path(path)
        self.slot = slot
        self.prompt = prompt or _console_prompt

    def _stored(self) -> Optional[str]:
        env = os.getenv(self.slot)
        if env:
            return env
        if self.path.is_file():
            value = dotenv_values(self.path).get(self.slot)
            if value:
                return value
        return None

    def peek(self) -> Optional[str]:
        """Return the stored token without ever prompting."""
        return self._stored()

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        set_key(str(self.path), self.slot, token)
        try:
            os.chmod(self.path, 0o600)
        except OSError as e:
            logger.debug('Could not restrict permissions on %s: %s', self.path, e)
        os.environ[self.slot] = token
        logger.info('Saved GitHub token to %s (%s)', self.path, self.slot)

    def get(self) -> Optional[str]:
        token = self._stored()
        if token:
            return token
        entered = (self.prompt(PROMPT_TEXT) or '').strip()
        if not entered:
            logger.warning('Access denied: token required.')
            return None
        self.save(entered)
        return entered

    def forget(self) -> None:
        os.environ.pop(self.slot, None)
        if self.path.is_file():
            unset_key(str(self.path), self.slot)


_default_store: CredentialStore | None = None


def get_store() -> CredentialStore:
    global _default_store
    if _default_store is None:
        _default_store = CredentialStore()
    return _default_store


def get_credential() -> Optional[str]:
    return get_store().get()


__all__ = ['CredentialStore', 'get_store', 'get_credential']
