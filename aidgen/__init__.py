"""AidGen relay: turns coffee details into a Fellow Aiden recipe via OpenAI."""

__version__ = "1.0.0"
