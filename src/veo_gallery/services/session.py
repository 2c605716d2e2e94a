"""Gallery actions exposed to callers."""

import asyncio
from dataclasses import dataclass
from uuid import UUID

from veo_gallery.domain.gallery import SortKey
from veo_gallery.domain.records import VideoRecord
from veo_gallery.domain.state import GenerationContext
from veo_gallery.services.gallery import GalleryStore
from veo_gallery.services.orchestrator import JobOrchestrator
from veo_gallery.services.preferences import SortPreferenceService


class RecordNotFoundError(LookupError):
    """No record with the requested id exists."""

    def __init__(self, record_id: UUID) -> None:
        super().__init__(f"Video {record_id} not found")
        self.record_id = record_id


@dataclass
class GallerySession:
    """Generate, remix and list videos for one client session."""

    orchestrator: JobOrchestrator
    store: GalleryStore
    preferences: SortPreferenceService

    async def generate(self, prompt: str) -> VideoRecord:
        """Create a new video from a typed prompt."""
        return await self.orchestrator.run(prompt.strip(), GenerationContext.NEW)

    async def remix(self, record_id: UUID, description: str) -> VideoRecord:
        """Create a derived video from an edited description.

        The source record is left untouched; its title becomes the origin of
        the new record's title.
        """
        source = self.get(record_id)
        return await self.orchestrator.run(
            description, GenerationContext.REMIX, origin_title=source.title
        )

    def start_generate(self, prompt: str) -> "asyncio.Task[VideoRecord]":
        """Start a new video in the background."""
        return self.orchestrator.start(prompt.strip(), GenerationContext.NEW)

    def start_remix(
        self, record_id: UUID, description: str
    ) -> "asyncio.Task[VideoRecord]":
        """Start a remix of an existing video in the background."""
        source = self.get(record_id)
        return self.orchestrator.start(
            description, GenerationContext.REMIX, origin_title=source.title
        )

    def get(self, record_id: UUID) -> VideoRecord:
        """Return a record or raise ``RecordNotFoundError``."""
        record = self.store.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    def list_videos(self, sort_key: SortKey | None = None) -> list[VideoRecord]:
        """Return records in view order, defaulting to the saved preference."""
        return self.store.view_ordered_by(sort_key or self.preferences.sort_key)
