"""CookMate: personalised meal suggestions with ranked recipe videos."""

__version__ = "1.0.0"
