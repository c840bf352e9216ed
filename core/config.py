from __future__ import annotations
import os

from dotenv import load_dotenv  # type: ignore

# token.env holds DISCORD_TOKEN and, once entered, the GitHub token; silent if missing.
load_dotenv(dotenv_path=os.getenv('TAVERN_ENV_FILE', 'token.env'))

# ---- Repository holding the character file ----
REPO_OWNER = os.getenv('REPO_OWNER', 'Axowobble')
REPO_NAME = os.getenv('REPO_NAME', 'DNDSYS')
FILE_PATH = os.getenv('FILE_PATH', 'players.json')
REPO_BRANCH = os.getenv('REPO_BRANCH') or None
GITHUB_API_BASE = os.getenv('GITHUB_API_BASE', 'https://api.github.com').rstrip('/')
COMMIT_MESSAGE = os.getenv('COMMIT_MESSAGE', 'Update player data via DnD Dashboard')

try:
    REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', '10'))
except ValueError:
    REQUEST_TIMEOUT = 10.0

# ---- Credential slot ----
CREDENTIAL_FILE = os.getenv('CREDENTIAL_FILE', 'token.env')
CREDENTIAL_SLOT = os.getenv('CREDENTIAL_SLOT', 'DND_PAT')

__all__ = [
    'REPO_OWNER',
    'REPO_NAME',
    'FILE_PATH',
    'REPO_BRANCH',
    'GITHUB_API_BASE',
    'COMMIT_MESSAGE',
    'REQUEST_TIMEOUT',
    'CREDENTIAL_FILE',
    'CREDENTIAL_SLOT',
]
