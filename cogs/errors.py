import logging
import discord
from discord.ext import commands
from discord import app_commands

from core import embeds  # type: ignore
from models.roster import CharacterNotFound
from storage.exceptions import (
    MissingCredentialError,
    RepositoryError,
    RosterDecodeError,
    StaleVersionError,
)

logger = logging.getLogger('errors')


def describe_failure(exc: BaseException) -> str:
    """User-facing text for a failed tavern action."""
    if isinstance(exc, MissingCredentialError):
        return "Access Denied: a GitHub token is required. Ask the bot operator to set one."
    if isinstance(exc, StaleVersionError):
        return "Save failed: the ledger changed since it was read. Reload and try again."
    if isinstance(exc, RosterDecodeError):
        return "The ledger file could not be read. Check that it holds a JSON list of characters."
    if isinstance(exc, CharacterNotFound):
        return "That character is no longer in the ledger."
    if isinstance(exc, RepositoryError):
        if exc.status in (401, 403, 404):
            return "Failed to load data. Check your Token and Repo settings."
        return f"Save failed. {exc}"
    return "An unexpected error occurred. Check the logs."


async def send_failure(interaction: discord.Interaction, exc: BaseException) -> None:
    await _reply(interaction, embeds.error(describe_failure(exc)))


async def _reply(interaction: discord.Interaction, emb: discord.Embed) -> None:
    if interaction.response.is_done():
        await interaction.followup.send(embed=emb, ephemeral=True)
    else:
        await interaction.response.send_message(embed=emb, ephemeral=True)


class ErrorHandlerCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self._previous_handler = None

    async def cog_load(self):
        self._previous_handler = self.bot.tree.on_error
        self.bot.tree.on_error = self.on_app_command_error

    async def cog_unload(self):
        if self._previous_handler is not None:
            self.bot.tree.on_error = self._previous_handler

    @commands.Cog.listener()
    async def on_app_command_completion(self, interaction: discord.Interaction, command: app_commands.Command):
        logger.info('Slash command completed: /%s by %s', command.qualified_name, interaction.user)

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        orig = getattr(error, 'original', error)
        if isinstance(orig, app_commands.CheckFailure):
            emb = embeds.error(str(orig) or 'Not allowed.')
        elif isinstance(orig, (RepositoryError, CharacterNotFound)):
            logger.warning('Tavern action failed: %s', orig)
            emb = embeds.error(describe_failure(orig))
        else:
            logger.error('App command invoke error: %s', orig, exc_info=orig)
            emb = embeds.error(describe_failure(orig))
        try:
            await _reply(interaction, emb)
        except discord.HTTPException:
            logger.warning('Could not report error for /%s', getattr(interaction.command, 'qualified_name', '?'))

async def setup(bot: commands.Bot):
    await bot.add_cog(ErrorHandlerCog(bot))
