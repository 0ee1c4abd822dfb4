"""Generate application manifests from a catalogue and sync them into team repositories on GitHub."""

__version__ = "0.1.0"