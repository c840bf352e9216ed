"""
GitHub contents API client for the character file.

Reads and conditionally rewrites one JSON file in a repository. The blob sha returned
on read must be sent back on write; GitHub refuses the write when it is stale.
"""
from __future__ import annotations
import logging
from typing import Callable, Iterable, Optional

import requests

from core.config import (  # type: ignore
    COMMIT_MESSAGE,
    FILE_PATH,
    GITHUB_API_BASE,
    REPO_BRANCH,
    REPO_NAME,
    REPO_OWNER,
    REQUEST_TIMEOUT,
)
from core.credentials import get_credential  # type: ignore
from models.character import Character
from models.roster import Roster
from .codec import decode_roster, encode_roster
from .exceptions import MissingCredentialError, RepositoryError, RosterDecodeError, StaleVersionError

logger = logging.getLogger('tavern.github')

TokenProvider = Callable[[], Optional[str]]


class ContentsClient:
    def __init__(
        self,
        token_provider: TokenProvider = get_credential,
        *,
        owner: str = REPO_OWNER,
        repo: str = REPO_NAME,
        path: str = FILE_PATH,
        branch: Optional[str] = REPO_BRANCH,
        api_base: str = GITHUB_API_BASE,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.token_provider = token_provider
        self.owner = owner
        self.repo = repo
        self.path = path.lstrip('/')
        self.branch = branch
        self.api_base = api_base.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.api_base}/repos/{self.owner}/{self.repo}/contents/{self.path}"

    def _headers(self) -> dict:
        token = self.token_provider()
        if not token:
            raise MissingCredentialError("A GitHub token is required.")
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
        }

    def fetch_file(self) -> Roster:
        """
        Read the character file.

        Returns:
            Roster with the decoded characters and the file's blob sha.

        Raises:
            MissingCredentialError: No token; nothing was requested.
            RosterDecodeError: The content is not a JSON list of characters.
            RepositoryError: Any non-2xx status or transport failure.
        """
        headers = self._headers()
        params = {"ref": self.branch} if self.branch else None
        logger.debug('GET %s', self.url)
        try:
            response = self.session.get(self.url, headers=headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RepositoryError(f"Could not reach GitHub: {e}") from e
        if not response.ok:
            logger.warning('Load failed: HTTP %s %s', response.status_code, response.text[:200])
            raise RepositoryError(f"Error: {response.status_code}", status=response.status_code)
        try:
            data = response.json()
        except ValueError as e:
            raise RosterDecodeError(f"GitHub returned a non-JSON body: {e}") from e
        characters = decode_roster(data.get("content", ""))
        logger.debug('Loaded %d characters at %s', len(characters), data.get("sha"))
        return Roster(characters=characters, version=data.get("sha"))

    def write_file(self, characters: Iterable[Character], version: Optional[str], message: Optional[str] = None) -> str:
        """
        Replace the character file, conditioned on ``version``.

        Returns:
            The new blob sha.

        Raises:
            MissingCredentialError: No token; nothing was requested.
            StaleVersionError: The file changed since ``version`` was read.
            RepositoryError: Any other non-2xx status or transport failure.
        """
        headers = self._headers()
        headers["Content-Type"] = "application/json"
        body = {
            "message": message or COMMIT_MESSAGE,
            "content": encode_roster(characters),
            "sha": version,
        }
        if self.branch:
            body["branch"] = self.branch
        logger.debug('PUT %s (sha=%s)', self.url, version)
        try:
            response = self.session.put(self.url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise RepositoryError(f"Could not reach GitHub: {e}") from e
        if not response.ok:
            status = response.status_code
            text = response.text or ''
            logger.warning('Save failed: HTTP %s %s', status, text[:200])
            if status == 409 or (status == 422 and 'sha' in text.lower()):
                raise StaleVersionError("The character file changed since it was read.", status=status)
            raise RepositoryError(f"Save failed: {status}", status=status)
        try:
            data = response.json()
        except ValueError:
            # Committed already; the caller re-fetches for the new sha
            logger.warning('Save succeeded but the response was not JSON (HTTP %s)', response.status_code)
            data = {}
        content = data.get("content") if isinstance(data, dict) else None
        new_sha = content.get("sha", "") if isinstance(content, dict) else ""
        logger.info('Saved character file %s (sha %s -> %s)', self.path, version, new_sha)
        return new_sha


__all__ = ["ContentsClient"]
