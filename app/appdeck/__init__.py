"""appdeck - application inventory and launcher cache engine."""

__version__ = "0.1.0"
