"""Exception types raised by bignote."""


class BigNoteError(Exception):
    """Base class for all bignote errors."""


class InvalidPitch(BigNoteError, ValueError):
    """A MIDI note number outside 0..127, or an unparsable note name."""


class DegenerateConfig(BigNoteError, ValueError):
    """A staff configuration that cannot produce a usable staff."""


class AssetMissing(BigNoteError, LookupError):
    """A glyph asset could not be found or parsed."""
