#!/usr/bin/env python3
"""
Register the bot's slash commands with Discord.

Registers to DISCORD_GUILD_ID when set (visible immediately),
otherwise globally.
"""

import asyncio


async def register():
    from app.config import settings
    from app.discord.client import DiscordClient
    from app.discord.commands import COMMANDS

    client = DiscordClient()
    registered = await client.register_commands(COMMANDS, guild_id=settings.discord_guild_id)

    scope = f"guild {settings.discord_guild_id}" if settings.discord_guild_id else "global"
    print(f"Registered {len(registered)} commands ({scope}):")
    for command in registered:
        print(f"  /{command['name']}")


if __name__ == "__main__":
    asyncio.run(register())
