"""Exception hierarchy for windkeys."""


class WindkeysError(Exception):
    """Base class for all windkeys errors."""


class MalformedSourceError(WindkeysError):
    """The source file could not be decoded into tracks."""


class ConfigurationError(WindkeysError, ValueError):
    """A converter setting is out of its valid range."""


class SongFormatError(WindkeysError, ValueError):
    """A persisted song does not match the song record format."""
