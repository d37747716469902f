"""BigNote: single-note staff renderer for MIDI input."""

__version__ = "0.1.0"
