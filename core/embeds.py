from __future__ import annotations
import discord
from typing import Optional

from models.character import Character
from models.roster import Roster
from modules.progression import next_threshold, progress_bar, progress_percent

PALETTE = {
    'success': 0x2ecc71,
    'error': 0xe74c3c,
    'tavern': 0xca8a04,
}

# Discord embed limits
MAX_FIELDS = 25
MAX_DESCRIPTION = 4096

def _base(title: str, description: Optional[str], color: int) -> discord.Embed:
    return discord.Embed(title=title, description=description, color=color)

def success(desc: str, title: str='Success') -> discord.Embed:
    return _base(title, desc, PALETTE['success'])

def error(desc: str, title: str='Error') -> discord.Embed:
    return _base(title, desc, PALETTE['error'])

# ---- Roster views ----

def character_card(c: Character) -> tuple[str, str]:
    """(field name, field value) for one dashboard card."""
    nxt = next_threshold(c.level)
    pct = progress_percent(c.exp, c.level)
    value = "\n".join([
        f"*{c.char_class or 'Unknown'}*",
        f"XP: {c.exp} · Next: {nxt}",
        f"{progress_bar(pct)} {pct:.0f}%",
    ])
    return f"{c.name} — Lvl {c.level}", value

def dashboard_embed(roster: Roster) -> discord.Embed:
    emb = _base('The Tavern', None, PALETTE['tavern'])
    if not roster.characters:
        emb.description = 'No adventurers yet. An admin can add one with /roster add.'
        return emb
    for c in roster.characters[:MAX_FIELDS]:
        name, value = character_card(c)
        emb.add_field(name=name[:256], value=value[:1024], inline=True)
    hidden = len(roster.characters) - MAX_FIELDS
    if hidden > 0:
        emb.set_footer(text=f"… and {hidden} more adventurers not shown")
    return emb

def admin_table(roster: Roster) -> str:
    rows = [("Name", "Class", "Lvl", "ID")]
    rows += [(c.name, c.char_class, str(c.level), str(c.id)) for c in roster.characters]
    widths = [max(len(r[i]) for r in rows) for i in range(4)]
    lines = ["  ".join(cell.ljust(widths[i]) for i, cell in enumerate(r)).rstrip() for r in rows]
    lines.insert(1, "  ".join("-" * w for w in widths))
    return "\n".join(lines)

def admin_embed(roster: Roster) -> discord.Embed:
    emb = _base('Tavern Roster', None, PALETTE['tavern'])
    if not roster.characters:
        emb.description = 'The roster is empty.'
        return emb
    table = admin_table(roster)
    # Keep room for the code fence
    budget = MAX_DESCRIPTION - 8
    if len(table) > budget:
        table = table[:budget - 1] + '…'
    emb.description = f"```\n{table}\n```"
    emb.set_footer(text=f"{len(roster.characters)} adventurers")
    return emb
