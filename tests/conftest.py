"""
Pytest fixtures for the Tavern bot test suite.

Provides sample characters, a fake ``requests`` session for the GitHub client,
an in-memory storage engine that enforces sha checks the way GitHub does, and
stand-ins for the parts of ``discord.Interaction`` the cogs touch.
"""

import base64
import copy
import json
from types import SimpleNamespace

import pytest

from models.character import Character
from models.roster import Roster
from storage.exceptions import StaleVersionError


SAMPLE_RECORDS = [
    {"id": 1700000000000, "name": "Thorin", "class": "Fighter", "exp": 250, "level": 1},
    {"id": 1700000000001, "name": "Elowen", "class": "Wizard", "exp": 900, "level": 3},
    {"id": 1700000000002, "name": "Pip", "class": "Rogue", "exp": 355000, "level": 20},
]


def b64_json(payload, wrap=None):
    """Base64 of indented JSON, optionally line-wrapped like GitHub does."""
    raw = base64.b64encode(json.dumps(payload, indent=2).encode("utf-8")).decode("ascii")
    if wrap:
        raw = "\n".join(raw[i:i + wrap] for i in range(0, len(raw), wrap)) + "\n"
    return raw


# =============================================================================
# HTTP FAKES
# =============================================================================


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload or {})

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """Records calls and replays queued responses."""

    def __init__(self, get=None, put=None):
        self.get_responses = list(get or [])
        self.put_responses = list(put or [])
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self.get_responses.pop(0)

    def put(self, url, **kwargs):
        self.calls.append(("PUT", url, kwargs))
        return self.put_responses.pop(0)


# =============================================================================
# STORAGE FAKE
# =============================================================================


class MemoryEngine:
    """CharacterStorage kept in memory; rejects writes carrying a stale sha."""

    def __init__(self, records=None):
        self.records = copy.deepcopy(records if records is not None else SAMPLE_RECORDS)
        self.revision = 1
        self.loads = 0
        self.saves = []
        self.fail_next_load = None

    @property
    def sha(self):
        return f"sha-{self.revision}"

    async def load_roster(self):
        self.loads += 1
        if self.fail_next_load is not None:
            exc, self.fail_next_load = self.fail_next_load, None
            raise exc
        return Roster(characters=[Character.from_dict(r) for r in self.records], version=self.sha)

    async def save_roster(self, roster):
        if roster.version != self.sha:
            raise StaleVersionError("The character file changed since it was read.", status=409)
        self.records = [c.to_dict() for c in roster.characters]
        self.revision += 1
        self.saves.append(copy.deepcopy(self.records))
        return self.sha

    def external_write(self, records):
        """Someone else rewrote the file."""
        self.records = copy.deepcopy(records)
        self.revision += 1


@pytest.fixture
def sample_records():
    return copy.deepcopy(SAMPLE_RECORDS)


@pytest.fixture
def roster(sample_records):
    return Roster(characters=[Character.from_dict(r) for r in sample_records], version="abc123")


@pytest.fixture
def engine():
    return MemoryEngine()


# =============================================================================
# DISCORD FAKES
# =============================================================================


class FakeResponder:
    """Stands in for ``Interaction.response``; records every reply."""

    def __init__(self):
        self.sent = []
        self._done = False

    def is_done(self):
        return self._done

    async def send_message(self, content=None, **kwargs):
        self._done = True
        self.sent.append(("send_message", content, kwargs))

    async def defer(self, **kwargs):
        self._done = True
        self.sent.append(("defer", None, kwargs))

    async def edit_message(self, content=None, **kwargs):
        self._done = True
        self.sent.append(("edit_message", content, kwargs))

    async def send_modal(self, modal):
        self._done = True
        self.sent.append(("send_modal", modal, {}))


class FakeFollowup:
    def __init__(self):
        self.sent = []

    async def send(self, content=None, **kwargs):
        self.sent.append((content, kwargs))


class FakeMessage:
    def __init__(self, message_id=99):
        self.id = message_id
        self.edits = []

    async def edit(self, **kwargs):
        self.edits.append(kwargs)


class FakeInteraction:
    def __init__(self, user_id=7, message=None):
        self.user = SimpleNamespace(id=user_id)
        self.guild = None
        self.command = None
        self.message = message
        self.response = FakeResponder()
        self.followup = FakeFollowup()
        self.original_edits = []

    async def edit_original_response(self, **kwargs):
        self.original_edits.append(kwargs)
