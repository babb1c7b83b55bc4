"""Command-line surface: bootstrap (composition root), slash commands, entrypoint."""
