"""CLI subcommands for mdlink."""
