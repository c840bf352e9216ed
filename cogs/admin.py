import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from core import embeds  # type: ignore
from core.permissions import check_admin_permission  # type: ignore
from core.session import TavernSession  # type: ignore
from cogs.errors import send_failure  # type: ignore

logger = logging.getLogger('tavern.admin')

CONFIRM_TEXT = "Are you sure you want to banish this soul?"


def admin_only():
    async def predicate(interaction: discord.Interaction) -> bool:
        ok, reason = check_admin_permission(interaction)
        if not ok:
            raise app_commands.CheckFailure(reason or "Not authorized.")
        return True
    return app_commands.check(predicate)


class ConfirmView(discord.ui.View):
    """Yes/no prompt answered only by the member who asked for the removal."""
    def __init__(self, session: TavernSession, char_id: int, author_id: int, *, timeout: Optional[float] = 60):
        super().__init__(timeout=timeout)
        self.session = session
        self.char_id = char_id
        self.author_id = author_id

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.author_id:
            await interaction.response.send_message("This prompt isn't yours.", ephemeral=True)
            return False
        return True

    @discord.ui.button(label="Banish", style=discord.ButtonStyle.danger)
    async def confirm(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.stop()
        await interaction.response.edit_message(content="Banishing…", view=None)
        char = await self.session.remove_character(self.char_id)
        await interaction.edit_original_response(
            content=f"✅ Saved to Chronicles! {char.name} has been banished.",
            embed=embeds.admin_embed(self.session.roster),
        )

    @discord.ui.button(label="Cancel", style=discord.ButtonStyle.secondary)
    async def cancel(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.stop()
        await interaction.response.edit_message(content="The soul remains.", view=None)

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item):
        logger.warning('Removal failed: %s', error)
        await send_failure(interaction, error)


class AdminCog(commands.Cog):
    """Add and remove adventurers."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @property
    def session(self) -> TavernSession:
        return self.bot.tavern  # type: ignore[attr-defined]

    roster = app_commands.Group(name="roster", description="Tavern admin: manage adventurers")

    @roster.command(name="list", description="List every adventurer")
    @admin_only()
    async def roster_list(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True, thinking=True)
        roster = await self.session.refresh()
        await interaction.followup.send(embed=embeds.admin_embed(roster), ephemeral=True)

    @roster.command(name="add", description="Add a new adventurer at level 1")
    @app_commands.describe(name="Character name", klass="Character class")
    @app_commands.rename(klass="class")
    @admin_only()
    async def roster_add(self, interaction: discord.Interaction, name: str, klass: str):
        if not name.strip() or not klass.strip():
            await interaction.response.send_message("Both a name and a class are required.", ephemeral=True)
            return
        await interaction.response.defer(ephemeral=True, thinking=True)
        char = await self.session.create_character(name, klass)
        await interaction.followup.send(
            content=f"✅ Saved to Chronicles! {char.name} the {char.char_class} joins the tavern.",
            embed=embeds.admin_embed(self.session.roster),
            ephemeral=True,
        )

    @roster.command(name="remove", description="Banish an adventurer")
    @app_commands.describe(character="Adventurer to remove")
    @admin_only()
    async def roster_remove(self, interaction: discord.Interaction, character: str):
        roster = await self.session.current()
        target = roster.resolve(character)
        view = ConfirmView(self.session, target.id, interaction.user.id)
        await interaction.response.send_message(
            f"{CONFIRM_TEXT}\n**{target.name}** ({target.char_class}, level {target.level})",
            view=view,
            ephemeral=True,
        )

    @roster_remove.autocomplete('character')
    async def character_ac(self, interaction: discord.Interaction, current: str):
        roster = self.session.roster
        if roster is None:
            try:
                roster = await self.session.refresh()
            except Exception:
                logger.exception('Autocomplete could not load the roster')
                return []
        return [app_commands.Choice(name=f"{c.name} ({c.char_class})"[:100], value=str(c.id)) for c in roster.search(current)]


async def setup(bot: commands.Bot):
    await bot.add_cog(AdminCog(bot))
