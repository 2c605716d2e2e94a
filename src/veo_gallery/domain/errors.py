"""Error types raised by the generation pipeline."""


class TransportError(Exception):
    """Raised by remote job clients on network, auth or HTTP failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GenerationError(Exception):
    """Base class for failures surfaced by the orchestrator."""


class EmptyPromptError(GenerationError, ValueError):
    """The prompt is blank after trimming."""

    def __init__(self) -> None:
        super().__init__("Prompt must not be empty")


class BusyError(GenerationError):
    """A run was requested while another one is in progress."""

    def __init__(self) -> None:
        super().__init__("A generation job is already running")


class SubmitFailedError(GenerationError):
    """The generation request could not be submitted."""


class JobFailedError(GenerationError):
    """The remote service reported that the job failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Generation job failed: {reason}")
        self.reason = reason


class EmptyResultError(GenerationError):
    """The job completed without producing any artifact."""

    def __init__(self) -> None:
        super().__init__("No videos generated")


class FetchFailedError(GenerationError):
    """Downloading the finished artifact failed."""

    def __init__(self, status_code: int | None) -> None:
        super().__init__(f"Failed to fetch video: status={status_code}")
        self.status_code = status_code


class IncompleteReadError(GenerationError):
    """The artifact bytes could not be fully read."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            f"Incomplete artifact read: expected {expected} bytes, got {received}"
        )
        self.expected = expected
        self.received = received


class GenerationTimeoutError(GenerationError):
    """The job stayed pending past the configured poll limits."""

    def __init__(self, polls: int, elapsed_seconds: float) -> None:
        super().__init__(
            f"Job still pending after {polls} polls ({elapsed_seconds:.1f}s)"
        )
        self.polls = polls
        self.elapsed_seconds = elapsed_seconds


class GenerationCancelledError(GenerationError):
    """The caller cancelled the run."""

    def __init__(self) -> None:
        super().__init__("Generation cancelled")
