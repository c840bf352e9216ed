"""
Tests for the GitHub token store.
"""

import os

import pytest
from dotenv import dotenv_values

from core.credentials import CredentialStore

SLOT = "TAVERN_TEST_PAT"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so teardown restores the variable to unset
    monkeypatch.setenv(SLOT, "placeholder")
    monkeypatch.delenv(SLOT)


class Prompt:
    def __init__(self, answer):
        self.answer = answer
        self.asked = 0

    def __call__(self, text):
        self.asked += 1
        return self.answer


class TestGet:
    def test_prompt_once_then_persist(self, tmp_path):
        path = tmp_path / "token.env"
        prompt = Prompt("  ghp_secret  ")
        store = CredentialStore(path, SLOT, prompt)
        assert store.get() == "ghp_secret"
        assert dotenv_values(path)[SLOT] == "ghp_secret"
        assert os.environ[SLOT] == "ghp_secret"
        assert store.get() == "ghp_secret"
        assert prompt.asked == 1

    def test_reads_existing_file_without_prompting(self, tmp_path):
        path = tmp_path / "token.env"
        path.write_text(f"{SLOT}=ghp_saved\nOTHER=1\n", encoding="utf-8")
        prompt = Prompt("never")
        assert CredentialStore(path, SLOT, prompt).get() == "ghp_saved"
        assert prompt.asked == 0

    def test_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(SLOT, "ghp_env")
        prompt = Prompt("never")
        assert CredentialStore(tmp_path / "token.env", SLOT, prompt).get() == "ghp_env"
        assert prompt.asked == 0

    @pytest.mark.parametrize("answer", [None, "", "   "])
    def test_refusal_returns_none(self, tmp_path, answer):
        path = tmp_path / "token.env"
        assert CredentialStore(path, SLOT, Prompt(answer)).get() is None
        assert not path.exists()

    def test_keeps_other_keys(self, tmp_path):
        path = tmp_path / "token.env"
        path.write_text("DISCORD_TOKEN=abc\n", encoding="utf-8")
        CredentialStore(path, SLOT, Prompt("ghp_new")).get()
        values = dotenv_values(path)
        assert values["DISCORD_TOKEN"] == "abc"
        assert values[SLOT] == "ghp_new"


class TestPeekAndForget:
    def test_peek_never_prompts(self, tmp_path):
        prompt = Prompt("ghp_x")
        assert CredentialStore(tmp_path / "token.env", SLOT, prompt).peek() is None
        assert prompt.asked == 0

    def test_forget(self, tmp_path):
        path = tmp_path / "token.env"
        store = CredentialStore(path, SLOT, Prompt("ghp_x"))
        store.get()
        store.forget()
        assert SLOT not in os.environ
        assert SLOT not in dotenv_values(path)
        assert store.peek() is None
