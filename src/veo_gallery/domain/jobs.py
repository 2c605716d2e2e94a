"""Domain models for remote generation jobs."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GenerationOptions:
    """Fixed options sent with every generation request."""

    aspect_ratio: str = "16:9"
    number_of_videos: int = 1


@dataclass(frozen=True)
class JobHandle:
    """Opaque token identifying one in-flight remote job."""

    name: str


@dataclass(frozen=True)
class GeneratedArtifact:
    """Locator for one produced video."""

    uri: str
    media_type: str | None = None


@dataclass(frozen=True)
class JobResult:
    """Outcome of a completed job."""

    artifacts: list[GeneratedArtifact] = field(default_factory=list)


@dataclass(frozen=True)
class JobPending:
    """The job is still running."""


@dataclass(frozen=True)
class JobDone:
    """The job finished and produced a result."""

    result: JobResult


@dataclass(frozen=True)
class JobFailed:
    """The remote service reported the job failed."""

    reason: str


JobStatus = JobPending | JobDone | JobFailed


@dataclass(frozen=True)
class ArtifactPayload:
    """Raw downloaded artifact bytes with their declared metadata."""

    content: bytes
    media_type: str
    declared_length: int | None = None
