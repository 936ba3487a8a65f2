"""Interview session state machine and countdown."""

from .session_machine import Activate, Intent, SessionStateMachine, Submit, Tick, UpdateDraft
from .timer import CountdownTimer

__all__ = [
    "Activate",
    "Intent",
    "SessionStateMachine",
    "Submit",
    "Tick",
    "UpdateDraft",
    "CountdownTimer",
]
