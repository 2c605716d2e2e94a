"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from veo_gallery.adapters.json_preference_repository import JsonPreferenceRepository
from veo_gallery.adapters.veo_client import HttpxVeoJobClient, RemoteJobClient
from veo_gallery.config import Settings
from veo_gallery.domain.jobs import GenerationOptions
from veo_gallery.services.codec import ArtifactCodec
from veo_gallery.services.gallery import GalleryStore
from veo_gallery.services.orchestrator import JobOrchestrator
from veo_gallery.services.preferences import SortPreferenceService
from veo_gallery.services.session import GallerySession


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    job_client: RemoteJobClient
    codec: ArtifactCodec
    store: GalleryStore
    orchestrator: JobOrchestrator
    preferences: SortPreferenceService
    gallery: GallerySession
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    job_client = HttpxVeoJobClient.create(
        api_key=resolved_settings.gemini_api_key,
        base_url=resolved_settings.gemini_base_url,
        model=resolved_settings.veo_model,
    )
    codec = ArtifactCodec()
    store = GalleryStore()
    orchestrator = JobOrchestrator(
        client=job_client,
        codec=codec,
        store=store,
        options=GenerationOptions(
            aspect_ratio=resolved_settings.aspect_ratio,
            number_of_videos=resolved_settings.number_of_videos,
        ),
        poll_interval_seconds=resolved_settings.poll_interval_seconds,
        max_poll_attempts=resolved_settings.max_poll_attempts,
        poll_timeout_seconds=resolved_settings.poll_timeout_seconds,
    )
    preferences = SortPreferenceService(
        JsonPreferenceRepository(resolved_settings.preferences_path)
    )
    gallery = GallerySession(
        orchestrator=orchestrator,
        store=store,
        preferences=preferences,
    )

    async def close_resources() -> None:
        orchestrator.cancel()
        await job_client.close()

    return AppContainer(
        settings=resolved_settings,
        job_client=job_client,
        codec=codec,
        store=store,
        orchestrator=orchestrator,
        preferences=preferences,
        gallery=gallery,
        close_resources=close_resources,
    )
