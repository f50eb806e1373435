"""A small pygame arcade game: title menu, lobby, options screen, timed brawler and savable battle stage."""

__version__ = "0.1.0"