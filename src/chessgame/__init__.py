"""Chess and Chess960 rules engine with a PyQt6 front-end."""

__version__ = "1.0.0"
