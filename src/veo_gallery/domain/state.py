"""Observable states of the generation orchestrator."""

from dataclasses import dataclass
from enum import Enum

FAILURE_MESSAGES: tuple[str, ...] = (
    "Video generation failed.",
    "Please check your API key and try again.",
)


class GenerationContext(Enum):
    """Why a generation run was started."""

    NEW = "new"
    REMIX = "remix"


class RunPhase(Enum):
    """Progress of a running job."""

    SUBMITTING = "submitting"
    POLLING = "polling"
    FETCHING = "fetching"


@dataclass(frozen=True)
class IdleState:
    """No job is running."""

    kind: str = "idle"


@dataclass(frozen=True)
class RunningState:
    """A job is in flight."""

    context: GenerationContext
    origin_title: str | None = None
    phase: RunPhase = RunPhase.SUBMITTING
    kind: str = "running"


@dataclass(frozen=True)
class FailedState:
    """The last job failed; messages are safe to show to the user."""

    messages: tuple[str, ...] = FAILURE_MESSAGES
    kind: str = "failed"


OrchestratorState = IdleState | RunningState | FailedState
