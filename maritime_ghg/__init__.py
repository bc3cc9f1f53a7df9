"""Maritime GHG compliance calculations."""

__version__ = "0.1.0"
