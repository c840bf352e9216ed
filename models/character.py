from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any

# Keys owned by Character; anything else in a record is carried through untouched.
KNOWN_KEYS = ("id", "name", "class", "exp", "level")


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Character:
    id: int
    name: str
    char_class: str = ""
    exp: int = 0
    level: int = 1
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Character":
        return Character(
            id=_as_int(data.get("id"), 0),
            name=str(data.get("name", "Unnamed")),
            char_class=str(data.get("class", "")),
            exp=_as_int(data.get("exp"), 0),
            level=_as_int(data.get("level"), 1),
            extra={k: v for k, v in data.items() if k not in KNOWN_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "class": self.char_class,
            "exp": self.exp,
            "level": self.level,
        }
        out.update(self.extra)
        return out

__all__ = ["Character", "KNOWN_KEYS"]
