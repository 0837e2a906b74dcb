"""
Exception hierarchy for playwright-video.
"""


class PlaywrightVideoError(Exception):
    """Base class for all errors raised by playwright-video."""


class ChoreographyError(PlaywrightVideoError):
    """An interaction with the page could not be performed."""


class InvalidTargetError(ChoreographyError, ValueError):
    """A target was given no discriminant, or more than one."""


class ElementNotFoundError(ChoreographyError, LookupError):
    """A target did not resolve to any element at call time."""


class WaitTimeoutError(ChoreographyError, TimeoutError):
    """A bounded wait was exhausted without the condition being met."""


class ScriptError(PlaywrightVideoError):
    """The user script could not be loaded."""


class TranscodeError(PlaywrightVideoError):
    """Post-processing the raw capture failed."""
