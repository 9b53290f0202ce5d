"""Personal task tracker with natural-language task intake."""

__version__ = "0.1.0"
