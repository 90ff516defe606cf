"""mdlink - turn HTTP links into nice Markdown links."""

__version__ = "0.3.0"
