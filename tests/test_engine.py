"""
Tests for the async GitHub storage engine wrapper.
"""

import asyncio

import pytest

from conftest import FakeResponse, FakeSession, b64_json
from storage.engine import GitHubStorageEngine
from storage.exceptions import StaleVersionError
from storage.github import ContentsClient


def make_engine(session):
    client = ContentsClient(lambda: "ghp_test", owner="o", repo="r", path="players.json", branch=None, session=session)
    return GitHubStorageEngine(client)


def test_load_and_save_round_trip(sample_records):
    session = FakeSession(
        get=[FakeResponse(200, {"content": b64_json(sample_records), "sha": "s1"})],
        put=[FakeResponse(200, {"content": {"sha": "s2"}})],
    )
    engine = make_engine(session)

    async def go():
        roster = await engine.load_roster()
        roster.award(1700000000000, 50)
        return roster, await engine.save_roster(roster)

    roster, new_sha = asyncio.run(go())
    assert roster.version == "s1"
    assert new_sha == "s2"
    assert session.calls[1][2]["json"]["sha"] == "s1"


def test_stale_save_propagates(roster):
    session = FakeSession(put=[FakeResponse(409, {"message": "does not match"})])
    with pytest.raises(StaleVersionError):
        asyncio.run(make_engine(session).save_roster(roster))
