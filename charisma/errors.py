"""Charisma — errors.py"""


class CharismaError(Exception):
    """Base class for every error raised by charisma."""


class GenerationError(CharismaError):
    """The model call failed or returned nothing usable."""


class FormatterExecutionError(CharismaError):
    """A formatter was found but exited with an error."""


class PersistenceError(CharismaError):
    """The history file could not be read, parsed or written."""


class PublishError(CharismaError):
    """The gist API rejected the request or could not be reached."""
