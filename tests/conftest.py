"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import pytest

from veo_gallery.adapters.veo_client import RemoteJobClient
from veo_gallery.config import Settings
from veo_gallery.containers import AppContainer
from veo_gallery.domain.errors import TransportError
from veo_gallery.domain.jobs import (
    ArtifactPayload,
    GeneratedArtifact,
    GenerationOptions,
    JobDone,
    JobHandle,
    JobResult,
    JobStatus,
)
from veo_gallery.domain.records import ArtifactRef, VideoRecord
from veo_gallery.services.codec import ArtifactCodec
from veo_gallery.services.gallery import GalleryStore
from veo_gallery.services.orchestrator import JobOrchestrator
from veo_gallery.services.preferences import (
    PreferenceRepository,
    SortPreferenceService,
)
from veo_gallery.services.session import GallerySession

VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42fake-video"


def done_with(*uris: str) -> JobDone:
    """Build a done status with one artifact per uri."""
    return JobDone(
        result=JobResult(artifacts=[GeneratedArtifact(uri=uri) for uri in uris])
    )


def make_record(title: str, created_at: float, description: str = "") -> VideoRecord:
    """Build a record with a tiny payload and a POSIX creation time."""
    return VideoRecord(
        id=uuid4(),
        title=title,
        description=description or title,
        artifact=ArtifactCodec().encode(title.encode(), "video/mp4"),
        created_at=datetime.fromtimestamp(created_at, tz=UTC),
    )


@dataclass
class ScriptedJobClient(RemoteJobClient):
    """Fake job client that replays a scripted sequence of statuses."""

    statuses: list[JobStatus] = field(default_factory=lambda: [done_with("u1")])
    payload: ArtifactPayload = field(
        default_factory=lambda: ArtifactPayload(
            content=VIDEO_BYTES, media_type="video/mp4"
        )
    )
    submit_error: TransportError | None = None
    poll_error: TransportError | None = None
    fetch_error: TransportError | None = None
    submitted: list[tuple[str, GenerationOptions]] = field(default_factory=list)
    poll_calls: int = 0
    fetched: list[GeneratedArtifact] = field(default_factory=list)

    async def submit(self, prompt: str, options: GenerationOptions) -> JobHandle:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append((prompt, options))
        return JobHandle(name="models/veo/operations/op-1")

    async def poll(self, handle: JobHandle) -> JobStatus:
        if self.poll_error is not None:
            raise self.poll_error
        index = min(self.poll_calls, len(self.statuses) - 1)
        self.poll_calls += 1
        return self.statuses[index]

    async def fetch(self, artifact: GeneratedArtifact) -> ArtifactPayload:
        if self.fetch_error is not None:
            raise self.fetch_error
        self.fetched.append(artifact)
        return self.payload


@dataclass
class BlockingJobClient(ScriptedJobClient):
    """Fake job client whose submit never completes."""

    async def submit(self, prompt: str, options: GenerationOptions) -> JobHandle:
        self.submitted.append((prompt, options))
        await asyncio.Event().wait()
        raise AssertionError("unreachable")


@dataclass
class InMemoryPreferenceRepository(PreferenceRepository):
    """In-memory preference storage for tests."""

    values: dict[str, str] = field(default_factory=dict)
    reads: int = 0

    def get(self, key: str) -> str | None:
        self.reads += 1
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        gemini_api_key="test-key",
        poll_interval_seconds=0,
        preferences_path=tmp_path / "preferences.json",
    )


@pytest.fixture
def job_client() -> ScriptedJobClient:
    return ScriptedJobClient()


@pytest.fixture
def store() -> GalleryStore:
    return GalleryStore()


@pytest.fixture
def orchestrator(job_client: ScriptedJobClient, store: GalleryStore) -> JobOrchestrator:
    return JobOrchestrator(
        client=job_client,
        codec=ArtifactCodec(),
        store=store,
        poll_interval_seconds=0,
    )


@pytest.fixture
def preference_repository() -> InMemoryPreferenceRepository:
    return InMemoryPreferenceRepository()


@pytest.fixture
def gallery(
    orchestrator: JobOrchestrator,
    store: GalleryStore,
    preference_repository: InMemoryPreferenceRepository,
) -> GallerySession:
    return GallerySession(
        orchestrator=orchestrator,
        store=store,
        preferences=SortPreferenceService(preference_repository),
    )


@pytest.fixture
def container(
    settings: Settings,
    job_client: ScriptedJobClient,
    store: GalleryStore,
    orchestrator: JobOrchestrator,
    gallery: GallerySession,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        job_client=job_client,
        codec=orchestrator.codec,
        store=store,
        orchestrator=orchestrator,
        preferences=gallery.preferences,
        gallery=gallery,
        close_resources=close_resources,
    )
