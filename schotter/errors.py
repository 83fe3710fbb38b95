class SchotterError(Exception):
    """Base class for errors raised by schotter."""


class RecordingError(SchotterError):
    """A recording session cannot proceed, e.g. its directory cannot be created."""
