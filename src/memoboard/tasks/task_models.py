# src/memoboard/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ResolvePhase(StrEnum):
    """
    Terminal phase reached by one resolve() call.

    Created -> gate check -> GATE_REJECTED
                          -> (delay) -> DISCARDED_STALE   (superseded while waiting)
                                     -> fn runs -> COMMITTED | DISCARDED_STALE

    DISCARDED_STALE after fn ran means the success arrived for an old generation:
    the caller still gets the value, controller state is left untouched.
    A failing fn produces no outcome: resolve()/run() re-raise it, whatever
    the generation.
    """

    GATE_REJECTED = "gate_rejected"
    DISCARDED_STALE = "discarded_stale"
    COMMITTED = "committed"


@dataclass(slots=True)
class ControllerState(Generic[T]):
    value: T | None = None
    resolving: bool = False
    resolved_count: int = 0
    rejected_count: int = 0


@dataclass(frozen=True, slots=True)
class ResolveOutcome:
    phase: ResolvePhase
    generation: int
    value: Any = None
    invoked: bool = False
