import logging
import os
from pathlib import Path

from dotenv import load_dotenv  # type: ignore

import discord
from discord.ext import commands

from core.config import FILE_PATH, REPO_NAME, REPO_OWNER  # type: ignore
from core.credentials import get_credential  # type: ignore
from core.hooks import hook  # type: ignore
from core.session import TavernSession  # type: ignore
from storage.engine import get_engine
from storage.exceptions import RepositoryError

# Basic logging
logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(name)s: %(message)s')
logger = logging.getLogger('tavern')

INTENTS = discord.Intents.default()
INTENTS.members = True

BOT_PREFIX = '!'

class TavernBot(commands.Bot):
    """Launcher bot.

    - Discover & load cogs in ./cogs (single pass)
    - Own the TavernSession every cog reads and writes through
    - Sync slash commands
    """
    tavern: TavernSession

    def __init__(self):
        super().__init__(command_prefix=BOT_PREFIX, intents=INTENTS)

    async def setup_hook(self):
        self.tavern = TavernSession(await get_engine())
        cogs_dir = Path(__file__).parent / 'cogs'
        if cogs_dir.exists():
            for py in sorted(cogs_dir.glob('*.py')):
                if py.name.startswith('_'):
                    continue
                mod_name = f'cogs.{py.stem}'
                try:
                    await self.load_extension(mod_name)
                    logger.info('Loaded cog module %s', mod_name)
                except Exception as e:
                    logger.exception('Failed loading %s: %s', mod_name, e)
        try:
            await self.tavern.refresh()
        except RepositoryError as e:
            # Not fatal: every view re-fetches and reports its own failure
            logger.error('Initial ledger load failed: %s', e)
        # Sync slash commands (prefer fast per-guild availability)
        try:
            guild_id = os.getenv('GUILD_ID')
            if guild_id:
                guild = discord.Object(id=int(guild_id))
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.info('Synced %d guild app commands for %s', len(synced), guild_id)
            else:
                synced = await self.tree.sync()
                logger.info('Synced %d global app commands', len(synced))
        except (discord.HTTPException, ValueError):
            logger.exception('Failed syncing app commands')
        logger.info('Setup complete.')

bot = TavernBot()

@hook('roster.loaded')
async def _log_load(roster):
    logger.info('Ledger %s/%s:%s at %s holds %d characters', REPO_OWNER, REPO_NAME, FILE_PATH, roster.version, len(roster.characters))

@hook('roster.saved')
async def _log_save(roster, version):
    logger.info('Ledger saved at %s (%d characters)', version, len(roster.characters))

@bot.event
async def on_ready():
    logger.info('Logged in as %s (%s)', bot.user, bot.user and bot.user.id)
    logger.info('Guilds seen: %s', [g.id for g in bot.guilds])


# ---- Slash Commands ----
@bot.tree.command(name="help", description="Show available commands")
async def help_slash(interaction: discord.Interaction):
    lines: list[str] = []
    for cmd in bot.tree.walk_commands():
        if isinstance(cmd, discord.app_commands.Group):
            continue
        lines.append(f"/{cmd.qualified_name} - {cmd.description or 'No description'}")
    text = "\n".join(sorted(lines)) or "No commands registered."
    await interaction.response.send_message(f"```\n{text}\n```", ephemeral=True)


@bot.tree.command(name="sync", description="Owner: sync slash commands now")
async def sync_slash(interaction: discord.Interaction):
    # Defer immediately to keep the interaction token alive regardless of latency
    await interaction.response.defer(ephemeral=True)
    app_info = await bot.application_info()
    if interaction.user.id != app_info.owner.id:
        await interaction.followup.send("Not authorized.", ephemeral=True)
        return
    if interaction.guild:
        bot.tree.copy_global_to(guild=interaction.guild)
        synced = await bot.tree.sync(guild=interaction.guild)
    else:
        synced = await bot.tree.sync()
    names = ", ".join(sorted(c.name for c in synced))
    await interaction.followup.send(f"✅ Synced {len(synced)} commands.\nNames: {names[:1800]}", ephemeral=True)


def main():
    # Load environment variables from token.env (if present)
    load_dotenv(dotenv_path='token.env')
    token = os.getenv('DISCORD_TOKEN') or os.getenv('BOT_TOKEN')
    if not token:
        raise SystemExit('DISCORD_TOKEN environment variable not set')
    # Ask for the GitHub token once, up front, while a console is attached
    if not get_credential():
        raise SystemExit('Access Denied: a GitHub token is required to open the ledger.')
    bot.run(token, log_handler=None)

if __name__ == '__main__':
    main()
