"""Error hierarchy.

All quackx errors inherit from QuackxError. Exceptions raised by user
callbacks (effects, computeds, components) are never wrapped.
"""


class QuackxError(Exception):
    """Base error for all quackx operations."""


class TrackingError(QuackxError, RuntimeError):
    """The computation stack was popped without a matching push.

    Always a bug in the caller: every later read would be attributed to
    the wrong subscriber, so it is never ignored.
    """


class CycleError(QuackxError, RuntimeError):
    """A computed value read itself while computing."""


class MountNotFoundError(QuackxError, LookupError):
    """The render target a component should be mounted on does not exist."""


class SchedulerError(QuackxError, RuntimeError):
    """No deferred-callback queue is available for a re-render."""
