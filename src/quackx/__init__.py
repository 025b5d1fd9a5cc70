"""quackx: signals, computed values and effects with automatic dependency tracking."""

from importlib.metadata import version as _version

__version__ = _version("quackx")

from quackx._tracking import ComputationStack, default_stack
from quackx.signal import Signal, signal
from quackx.computed import Computed, computed
from quackx.effect import Effect, effect
from quackx.render import (
    Component,
    MicrotaskQueue,
    Mount,
    RenderBinding,
    TextMount,
    bind,
    set_scheduler,
)
from quackx.errors import (
    CycleError,
    MountNotFoundError,
    QuackxError,
    SchedulerError,
    TrackingError,
)
# textual and demo NOT auto-imported — opt-in only

__all__ = [
    "ComputationStack",
    "default_stack",
    "Signal",
    "signal",
    "Computed",
    "computed",
    "Effect",
    "effect",
    "Component",
    "Mount",
    "TextMount",
    "MicrotaskQueue",
    "RenderBinding",
    "bind",
    "set_scheduler",
    "QuackxError",
    "TrackingError",
    "CycleError",
    "MountNotFoundError",
    "SchedulerError",
]
