"""Request and response bodies for the gallery API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from veo_gallery.domain.gallery import SortKey
from veo_gallery.domain.records import VideoRecord
from veo_gallery.domain.state import FailedState, OrchestratorState, RunningState


class GenerateRequest(BaseModel):
    """Prompt for a new video."""

    prompt: str


class RemixRequest(BaseModel):
    """Edited description for a remix."""

    description: str


class SortPreference(BaseModel):
    """Gallery sort order."""

    sort: SortKey


class VideoOut(BaseModel):
    """Video metadata with its embeddable source."""

    id: UUID
    title: str
    description: str
    media_type: str
    video_url: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: VideoRecord) -> "VideoOut":
        return cls(
            id=record.id,
            title=record.title,
            description=record.description,
            media_type=record.artifact.media_type,
            video_url=record.artifact.data_uri,
            created_at=record.created_at,
        )


class GenerationStateOut(BaseModel):
    """Orchestrator state as seen by clients."""

    kind: str
    context: str | None = None
    origin_title: str | None = None
    phase: str | None = None
    messages: list[str] = []
    last_record_id: UUID | None = None

    @classmethod
    def from_state(
        cls, state: OrchestratorState, last_record_id: UUID | None = None
    ) -> "GenerationStateOut":
        if isinstance(state, RunningState):
            return cls(
                kind=state.kind,
                context=state.context.value,
                origin_title=state.origin_title,
                phase=state.phase.value,
            )
        if isinstance(state, FailedState):
            return cls(kind=state.kind, messages=list(state.messages))
        return cls(kind=state.kind, last_record_id=last_record_id)
