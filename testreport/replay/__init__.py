"""Replay of recorded event streams into a report builder."""

from testreport.replay.events import (
    Event,
    EventError,
    ReplayResult,
    apply_event,
    event_from_dict,
    load_events,
    replay,
)

__all__ = [
    "Event",
    "EventError",
    "ReplayResult",
    "apply_event",
    "event_from_dict",
    "load_events",
    "replay",
]
