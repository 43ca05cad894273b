"""timeblock: chat with an assistant, get time-blocked calendar events."""

__version__ = "0.1.0"
