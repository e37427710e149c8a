"""LinguaSync utilities."""

from .events import EventChannel, StateChanged, Subscriber

__all__ = [
    "EventChannel",
    "StateChanged",
    "Subscriber",
]
