"""
Hallowmoon - game-state core for a moonlit manor idle RPG.

A persona occupies slots in a manor, performs timed actions that yield
resources and cards, and the game advances through a deterministic
reducer driven by an injected clock and random source.
"""

__version__ = "0.4.0"


class HallowmoonError(Exception):
    """Base error for the hallowmoon package."""
    pass


class ContentError(HallowmoonError):
    """Static content is misconfigured (unknown template key, bad persona)."""
    pass
