"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, Response, status

from veo_gallery.api.models import (
    GenerateRequest,
    GenerationStateOut,
    RemixRequest,
    VideoOut,
)
from veo_gallery.api.preferences import router as preferences_router
from veo_gallery.app_logging import configure_logging
from veo_gallery.containers import AppContainer
from veo_gallery.domain.errors import BusyError, EmptyPromptError
from veo_gallery.domain.gallery import SortKey
from veo_gallery.domain.records import VideoRecord
from veo_gallery.services.session import RecordNotFoundError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    generation_tasks: set[asyncio.Task[VideoRecord]] = set()

    def track(task: "asyncio.Task[VideoRecord]") -> None:
        generation_tasks.add(task)

        def finished(done: "asyncio.Task[VideoRecord]") -> None:
            generation_tasks.discard(done)
            # failures are already logged and reflected in the state
            if not done.cancelled() and done.exception() is not None:
                logger.info("Background generation ended with an error")

        task.add_done_callback(finished)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.container.orchestrator.cancel()
        if generation_tasks:
            await asyncio.gather(*generation_tasks, return_exceptions=True)
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(preferences_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/videos")
    async def list_videos(
        request: Request, sort: SortKey | None = None
    ) -> list[VideoOut]:
        """List gallery videos, ordered by ``sort`` or the saved preference."""
        state_container: AppContainer = request.app.state.container
        return [
            VideoOut.from_record(record)
            for record in state_container.gallery.list_videos(sort)
        ]

    @app.get("/videos/{video_id}")
    async def get_video(video_id: UUID, request: Request) -> VideoOut:
        """Return one video."""
        state_container: AppContainer = request.app.state.container
        return VideoOut.from_record(_get_record(state_container, video_id))

    @app.get("/videos/{video_id}/content")
    async def get_video_content(video_id: UUID, request: Request) -> Response:
        """Serve the decoded video bytes."""
        state_container: AppContainer = request.app.state.container
        record = _get_record(state_container, video_id)
        content = state_container.codec.decode(record.artifact)
        return Response(content=content, media_type=record.artifact.media_type)

    @app.post("/videos", status_code=status.HTTP_202_ACCEPTED)
    async def create_video(
        body: GenerateRequest, request: Request
    ) -> GenerationStateOut:
        """Start generating a new video."""
        state_container: AppContainer = request.app.state.container
        try:
            track(state_container.gallery.start_generate(body.prompt))
        except (EmptyPromptError, BusyError) as exc:
            raise _precondition_error(exc) from exc
        return _state_out(state_container)

    @app.post("/videos/{video_id}/remix", status_code=status.HTTP_202_ACCEPTED)
    async def remix_video(
        video_id: UUID, body: RemixRequest, request: Request
    ) -> GenerationStateOut:
        """Start a remix of an existing video."""
        state_container: AppContainer = request.app.state.container
        try:
            track(state_container.gallery.start_remix(video_id, body.description))
        except RecordNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
        except (EmptyPromptError, BusyError) as exc:
            raise _precondition_error(exc) from exc
        return _state_out(state_container)

    @app.get("/generation")
    async def generation_state(request: Request) -> GenerationStateOut:
        """Return the current generation state."""
        state_container: AppContainer = request.app.state.container
        return _state_out(state_container)

    @app.post("/generation/cancel")
    async def cancel_generation(request: Request) -> dict[str, bool]:
        """Cancel the running generation job, if any."""
        state_container: AppContainer = request.app.state.container
        return {"cancelled": state_container.orchestrator.cancel()}

    @app.delete("/generation/error")
    async def dismiss_generation_error(request: Request) -> GenerationStateOut:
        """Acknowledge a failed generation."""
        state_container: AppContainer = request.app.state.container
        state_container.orchestrator.dismiss_error()
        return _state_out(state_container)

    return app


def _get_record(container: AppContainer, video_id: UUID) -> VideoRecord:
    try:
        return container.gallery.get(video_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc


def _precondition_error(exc: Exception) -> HTTPException:
    if isinstance(exc, BusyError):
        return HTTPException(status.HTTP_409_CONFLICT, str(exc))
    return HTTPException(422, str(exc))


def _state_out(container: AppContainer) -> GenerationStateOut:
    orchestrator = container.orchestrator
    return GenerationStateOut.from_state(
        orchestrator.state, last_record_id=orchestrator.last_record_id
    )
