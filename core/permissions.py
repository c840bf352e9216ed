from __future__ import annotations
import os
from typing import Optional
import discord

def _parse_id_list(value: Optional[str]) -> set[int]:
    if not value:
        return set()
    out: set[int] = set()
    for part in value.replace(';', ',').split(','):
        part = part.strip()
        if not part:
            continue
        try:
            out.add(int(part))
        except ValueError:
            continue
    return out

def check_admin_permission(interaction: discord.Interaction) -> tuple[bool, str | None]:
    """Who may add or remove characters.

    Env vars:
      - ADMIN_ROLE_IDS: comma/semicolon-separated role IDs that count as tavern admins

    Guild administrators and members with Manage Server are always allowed.
    Returns (allowed, reason). If not allowed, reason is a short message.
    """
    if interaction.guild is None:
        return False, "Roster changes must be made in a server."
    member = interaction.guild.get_member(interaction.user.id) if interaction.user else None
    if member is None:
        return False, "Could not verify your roles; try again in a moment."
    perms = getattr(member, 'guild_permissions', None)
    if perms and (perms.administrator or perms.manage_guild):
        return True, None
    role_ids = _parse_id_list(os.getenv('ADMIN_ROLE_IDS'))
    if role_ids and any(r.id in role_ids for r in getattr(member, 'roles', [])):
        return True, None
    return False, "Only tavern admins can change the roster."
