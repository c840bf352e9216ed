import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from core import embeds  # type: ignore
from core.session import TavernSession, parse_amount  # type: ignore
from cogs.errors import send_failure  # type: ignore

logger = logging.getLogger('tavern.dashboard')

SAVED_TEXT = "Saved to Chronicles!"


class AwardModal(discord.ui.Modal, title="Award Experience"):
    amount = discord.ui.TextInput(label="XP to add", placeholder="Add XP", max_length=9)

    def __init__(self, session: TavernSession, char_id: int, char_name: str, dashboard: Optional[discord.Message] = None):
        super().__init__()
        self.session = session
        self.char_id = char_id
        self.dashboard = dashboard
        self.amount.label = f"XP to add to {char_name}"[:45]

    async def on_submit(self, interaction: discord.Interaction):
        if parse_amount(self.amount.value) is None:
            await interaction.response.send_message("Enter a positive whole number of XP.", ephemeral=True)
            return
        await interaction.response.defer(ephemeral=True, thinking=True)
        char = await self.session.award_exp(self.char_id, self.amount.value)
        await interaction.followup.send(
            embed=embeds.success(f"{char.name} is now level {char.level} with {char.exp} XP.", title=SAVED_TEXT),
            ephemeral=True,
        )
        if self.dashboard is not None and self.session.roster is not None:
            try:
                await self.dashboard.edit(embed=embeds.dashboard_embed(self.session.roster), view=AwardView(self.session))
            except discord.HTTPException:
                logger.warning('Could not refresh dashboard message %s', self.dashboard.id)

    async def on_error(self, interaction: discord.Interaction, error: Exception):
        logger.warning('Award failed: %s', error)
        await send_failure(interaction, error)


class CharacterSelect(discord.ui.Select):
    def __init__(self, session: TavernSession):
        roster = session.roster
        chars = roster.characters[:25] if roster else []
        options = [
            discord.SelectOption(label=c.name[:100], value=str(c.id), description=f"{c.char_class} · Lvl {c.level}"[:100])
            for c in chars
        ]
        super().__init__(
            placeholder="Give XP to…",
            options=options or [discord.SelectOption(label="No adventurers", value="0")],
            disabled=not options,
            min_values=1,
            max_values=1,
        )
        self.session = session

    async def callback(self, interaction: discord.Interaction):
        roster = await self.session.current()
        char = roster.find(int(self.values[0]))
        await interaction.response.send_modal(AwardModal(self.session, char.id, char.name, interaction.message))


class AwardView(discord.ui.View):
    """Dashboard controls: pick a character, then enter an XP amount."""
    def __init__(self, session: TavernSession, *, timeout: Optional[float] = 600):
        super().__init__(timeout=timeout)
        self.add_item(CharacterSelect(session))

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item):
        logger.warning('Dashboard interaction failed: %s', error)
        await send_failure(interaction, error)


class DashboardCog(commands.Cog):
    """Read the tavern ledger and hand out experience."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @property
    def session(self) -> TavernSession:
        return self.bot.tavern  # type: ignore[attr-defined]

    tavern = app_commands.Group(name="tavern", description="Tavern dashboard")

    @tavern.command(name="show", description="Show every adventurer's level and XP")
    async def tavern_show(self, interaction: discord.Interaction):
        await interaction.response.defer(thinking=True)
        # Every view reads fresh state from GitHub
        roster = await self.session.refresh()
        await interaction.followup.send(embed=embeds.dashboard_embed(roster), view=AwardView(self.session))

    @tavern.command(name="give", description="Give XP to an adventurer")
    @app_commands.describe(character="Adventurer to reward", amount="XP to add")
    async def tavern_give(self, interaction: discord.Interaction, character: str, amount: int):
        if parse_amount(amount) is None:
            await interaction.response.send_message("Enter a positive whole number of XP.", ephemeral=True)
            return
        await interaction.response.defer(thinking=True)
        roster = await self.session.current()
        target = roster.resolve(character)
        char = await self.session.award_exp(target.id, amount)
        await interaction.followup.send(
            content=f"✅ {SAVED_TEXT} {char.name}: +{amount} XP → {char.exp} (level {char.level})",
            embed=embeds.dashboard_embed(self.session.roster),
        )

    @tavern_give.autocomplete('character')
    async def character_ac(self, interaction: discord.Interaction, current: str):
        roster = self.session.roster
        if roster is None:
            try:
                roster = await self.session.refresh()
            except Exception:
                logger.exception('Autocomplete could not load the roster')
                return []
        return [app_commands.Choice(name=c.name[:100], value=str(c.id)) for c in roster.search(current)]


async def setup(bot: commands.Bot):
    await bot.add_cog(DashboardCog(bot))
