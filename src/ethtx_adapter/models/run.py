"""Run input/output types exchanged with the task scheduler."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RunStatus(str, Enum):
    """Lifecycle status of a task run as the scheduler persists it."""

    UNSTARTED = "unstarted"
    IN_PROGRESS = "in_progress"
    PENDING_CONNECTION = "pending_connection"
    PENDING_CONFIRMATIONS = "pending_confirmations"  # tx submitted, awaiting receipt
    COMPLETED = "completed"
    ERRORED = "errored"

    @property
    def pending_confirmations(self) -> bool:
        return self is RunStatus.PENDING_CONFIRMATIONS


@dataclass(frozen=True)
class RunInput:
    """Per-attempt context handed over by the scheduler. Never mutated here."""

    run_id: str
    status: RunStatus = RunStatus.IN_PROGRESS
    result: Any = None  # upstream task result, or the tx hash once submitted
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> RunInput:
        """Build a RunInput from the scheduler's JSON document.

        Without a top-level ``result`` the persisted ``data["result"]`` is used,
        which is where a submitted tx hash lives between ticks.
        """
        data = dict(raw.get("data") or {})
        return cls(
            run_id=str(raw["runId"]),
            status=RunStatus(raw.get("status", RunStatus.IN_PROGRESS.value)),
            result=raw["result"] if "result" in raw else data.get("result"),
            data=data,
        )


@dataclass(frozen=True)
class RunOutput:
    """Proposed next state of the run.

    One of errored(reason), pending_connection, pending_confirmations(data)
    or completed(data). Use the classmethod constructors; ``data`` is a deep
    copy of what was passed in.
    """

    status: RunStatus
    data: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def errored(cls, reason: str) -> RunOutput:
        return cls(status=RunStatus.ERRORED, error=reason)

    @classmethod
    def pending_connection(cls) -> RunOutput:
        return cls(status=RunStatus.PENDING_CONNECTION)

    @classmethod
    def pending_confirmations(cls, data: dict[str, Any]) -> RunOutput:
        return cls(status=RunStatus.PENDING_CONFIRMATIONS, data=copy.deepcopy(data))

    @classmethod
    def completed(cls, data: dict[str, Any]) -> RunOutput:
        return cls(status=RunStatus.COMPLETED, data=copy.deepcopy(data))

    @property
    def has_error(self) -> bool:
        return self.status is RunStatus.ERRORED

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"status": self.status.value}
        if self.data is not None:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error
        return out
