"""Domain models for gallery records."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ArtifactRef:
    """Self-contained encoded artifact that replays without network access."""

    data_uri: str
    media_type: str


@dataclass(frozen=True)
class VideoRecord:
    """A generated video kept in the gallery."""

    id: UUID
    title: str
    description: str
    artifact: ArtifactRef
    created_at: datetime
