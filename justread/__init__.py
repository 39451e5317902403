"""Personalized "just read" feed: refresh job, feed store, and read API."""

__version__ = "0.1.0"
