"""LaunchPad backend: startups, investors and moderation."""

__version__ = "0.1.0"
