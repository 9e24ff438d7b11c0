"""Local notification daemon: text in over HTTP, speech out locally or on a cast device."""

__version__ = "0.1.0"
