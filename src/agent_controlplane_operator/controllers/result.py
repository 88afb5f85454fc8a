"""Outcome of a single reconcile call."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Result:
    """Successful outcome of a reconcile.

    Failures are raised, never returned. ``requeue_after`` asks the caller to
    deliver the object again no sooner than that many seconds. ``events`` are
    ``(reason, message)`` pairs describing what the reconcile changed.
    """

    requeue_after: float | None = None
    events: tuple[tuple[str, str], ...] = ()

    @classmethod
    def done(cls, *events: tuple[str, str]) -> Result:
        return cls(events=tuple(events))

    @classmethod
    def retry_after(cls, seconds: float, reason: str, message: str) -> Result:
        return cls(requeue_after=seconds, events=((reason, message),))

    @property
    def requeue(self) -> bool:
        return self.requeue_after is not None
