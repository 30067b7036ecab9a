"""
Bot infrastructure and Discord integration layer.

- `src.bot.base_cog`: shared cog plumbing (embed sending)
- `src.bot.keyauth_bot`: the bot class, imported directly by the entrypoint

The bot class is not re-exported here: feature cogs import `BaseCog` from
this package, and the bot module imports those cogs.
"""
