from __future__ import annotations
import copy
import time
from dataclasses import dataclass, field
from typing import List, Optional

from models.character import Character
from modules.progression import level_for


class CharacterNotFound(LookupError):
    def __init__(self, char_id: int):
        super().__init__(f"No character with id {char_id}")
        self.char_id = char_id


@dataclass
class Roster:
    """The character list as last read from the repository, plus its version token."""
    characters: List[Character] = field(default_factory=list)
    version: Optional[str] = None

    def copy(self) -> "Roster":
        return copy.deepcopy(self)

    def find(self, char_id: int) -> Character:
        for c in self.characters:
            if c.id == char_id:
                return c
        raise CharacterNotFound(char_id)

    def resolve(self, value: str) -> Character:
        """Look up by id (autocomplete values) or, failing that, by exact name."""
        text = str(value or "").strip()
        # int() parses decimal digits only
        is_id = text.isdecimal()
        if is_id:
            try:
                return self.find(int(text))
            except CharacterNotFound:
                pass
        for c in self.characters:
            if c.name.lower() == text.lower():
                return c
        raise CharacterNotFound(int(text) if is_id else 0)

    def search(self, text: str, limit: int = 25) -> List[Character]:
        q = (text or "").strip().lower()
        hits = [c for c in self.characters if not q or q in c.name.lower()]
        return hits[:limit]

    # ---- mutations (in place; callers work on a copy) ----
    def award(self, char_id: int, amount: int) -> Character:
        c = self.find(char_id)
        c.exp = int(c.exp) + int(amount)
        c.level = level_for(c.exp)
        return c

    def add(self, name: str, char_class: str, now: Optional[float] = None) -> Character:
        stamp = int((time.time() if now is None else now) * 1000)
        taken = {c.id for c in self.characters}
        while stamp in taken:
            stamp += 1
        c = Character(id=stamp, name=name, char_class=char_class, exp=0, level=1)
        self.characters.append(c)
        return c

    def remove(self, char_id: int) -> Character:
        for i, c in enumerate(self.characters):
            if c.id == char_id:
                return self.characters.pop(i)
        raise CharacterNotFound(char_id)

__all__ = ["Roster", "CharacterNotFound"]
