"""webcron: periodic URL checks with log history and mail notification."""

__version__ = "0.1.0"
