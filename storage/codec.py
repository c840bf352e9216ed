import base64
import binascii
import json
from typing import Iterable, List

from models.character import Character
from .exceptions import RosterDecodeError

__all__ = [
    "dumps_roster",
    "loads_roster",
    "encode_roster",
    "decode_roster",
]


def dumps_roster(characters: Iterable[Character]) -> str:
    return json.dumps([c.to_dict() for c in characters], indent=2, ensure_ascii=False)


def loads_roster(text: str) -> List[Character]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise RosterDecodeError(f"Character file is not valid JSON: {e}") from e
    if not isinstance(raw, list):
        raise RosterDecodeError(f"Character file must hold a JSON array, got {type(raw).__name__}")
    out: List[Character] = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise RosterDecodeError(f"Entry {i} is not an object")
        out.append(Character.from_dict(entry))
    return out


def encode_roster(characters: Iterable[Character]) -> str:
    return base64.b64encode(dumps_roster(characters).encode("utf-8")).decode("ascii")


def decode_roster(payload: str) -> List[Character]:
    # GitHub wraps the base64 body at 60 columns; b64decode drops the newlines.
    try:
        text = base64.b64decode(payload or "").decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise RosterDecodeError(f"Could not decode file content: {e}") from e
    return loads_roster(text)
