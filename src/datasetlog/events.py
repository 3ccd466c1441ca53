"""
Event records queued for the addEvents API.
"""

import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional, Union

from .utils import flatten_nested_object


class Severity(IntEnum):
    """
    Event severities.

    Anything at or below INFO is informational, above ERROR is DANGER.
    """

    INFO = 3
    WARN = 4
    ERROR = 5
    DANGER = 6


@dataclass(frozen=True)
class Event:
    """A single structured log entry."""

    attrs: Dict[str, Any]
    ts: Optional[int] = None  # nanoseconds since epoch
    sev: int = Severity.INFO
    thread: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation of the event."""
        data: Dict[str, Any] = {
            "ts": self.ts,
            "sev": int(self.sev),
            "attrs": self.attrs,
        }
        if self.thread is not None:
            data["thread"] = self.thread
        return data


EventInput = Union[str, Event, Mapping[str, Any]]


def build_event(raw: EventInput, flatten: bool = False) -> Event:
    """
    Normalize caller input into a queued Event.

    A plain string becomes ``{"message": raw}``. Missing timestamps are set
    to the current time and missing severities default to INFO. Attributes
    are copied (and flattened when requested) so later changes by the caller
    don't leak into the queue.

    Args:
        raw: Message string, Event, or mapping with attrs/sev/ts/thread keys
        flatten: Flatten nested attributes into dotted keys

    Returns:
        A new Event
    """
    if isinstance(raw, str):
        attrs: Mapping[str, Any] = {"message": raw}
        ts = sev = thread = None
    elif isinstance(raw, Event):
        attrs, ts, sev, thread = raw.attrs, raw.ts, raw.sev, raw.thread
    elif isinstance(raw, Mapping):
        attrs = raw.get("attrs") or {}
        ts = raw.get("ts")
        sev = raw.get("sev")
        thread = raw.get("thread")
    else:
        raise TypeError(f"Unsupported event type: {type(raw).__name__}")

    # bool is an int subclass but never a valid timestamp or severity
    if ts is not None and (not isinstance(ts, int) or isinstance(ts, bool)):
        raise TypeError(f"Event ts must be an int, got {type(ts).__name__}")
    if sev is not None and (not isinstance(sev, int) or isinstance(sev, bool)):
        raise TypeError(f"Event sev must be an int, got {type(sev).__name__}")
    if not isinstance(attrs, Mapping):
        raise TypeError(f"Event attrs must be a mapping, got {type(attrs).__name__}")
    if thread is not None and not isinstance(thread, str):
        raise TypeError(f"Event thread must be a str, got {type(thread).__name__}")

    return Event(
        attrs=flatten_nested_object(attrs) if flatten else dict(attrs),
        ts=ts if ts is not None else time.time_ns(),
        sev=sev if sev is not None else Severity.INFO,
        thread=thread,
    )
