"""Emissary: message-processing runtime for configurable conversational agents."""

__version__ = "0.1.0"
