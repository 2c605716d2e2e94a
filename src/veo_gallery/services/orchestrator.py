"""Orchestration of a single video generation job."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TypeVar
from uuid import UUID, uuid4

from veo_gallery.adapters.veo_client import RemoteJobClient
from veo_gallery.domain.errors import (
    BusyError,
    EmptyPromptError,
    EmptyResultError,
    FetchFailedError,
    GenerationCancelledError,
    GenerationError,
    GenerationTimeoutError,
    JobFailedError,
    SubmitFailedError,
    TransportError,
)
from veo_gallery.domain.jobs import (
    ArtifactPayload,
    GeneratedArtifact,
    GenerationOptions,
    JobDone,
    JobFailed,
    JobHandle,
    JobResult,
    JobStatus,
)
from veo_gallery.domain.records import VideoRecord
from veo_gallery.domain.state import (
    FailedState,
    GenerationContext,
    IdleState,
    OrchestratorState,
    RunningState,
    RunPhase,
)
from veo_gallery.services.codec import ArtifactCodec
from veo_gallery.services.gallery import GalleryStore

_logger = logging.getLogger(__name__)

_TITLE_PROMPT_CHARS = 40

T = TypeVar("T")
StateListener = Callable[[OrchestratorState], None]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class CancellationToken:
    """One-shot signal shared by every suspension point of a run."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


@dataclass
class JobOrchestrator:
    """State machine driving one generation job from submit to gallery record.

    At most one run is in flight; a second ``run`` while Running raises
    ``BusyError``. Pending jobs are polled every ``poll_interval_seconds``.
    ``max_poll_attempts`` and ``poll_timeout_seconds`` bound the loop when set.
    """

    client: RemoteJobClient
    codec: ArtifactCodec
    store: GalleryStore
    options: GenerationOptions = field(default_factory=GenerationOptions)
    poll_interval_seconds: float = 10.0
    max_poll_attempts: int | None = None
    poll_timeout_seconds: float | None = None
    clock: Callable[[], float] = time.monotonic
    now: Callable[[], datetime] = field(default=_utcnow)
    _state: OrchestratorState = field(default_factory=IdleState, init=False)
    _listeners: list[StateListener] = field(default_factory=list, init=False)
    _token: CancellationToken | None = field(default=None, init=False)
    _last_record_id: UUID | None = field(default=None, init=False)

    @property
    def state(self) -> OrchestratorState:
        """Current orchestrator state."""
        return self._state

    @property
    def last_record_id(self) -> UUID | None:
        """Id of the record added by the most recent run, if it succeeded."""
        return self._last_record_id

    @property
    def is_running(self) -> bool:
        return isinstance(self._state, RunningState)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def cancel(self) -> bool:
        """Signal the running job to stop. Returns False when nothing runs."""
        if self._token is None or self._token.cancelled:
            return False
        self._token.cancel()
        return True

    def dismiss_error(self) -> None:
        """Clear the failure messages after the user acknowledged them."""
        if isinstance(self._state, FailedState):
            self._set_state(IdleState())

    async def run(
        self,
        prompt: str,
        context: GenerationContext = GenerationContext.NEW,
        origin_title: str | None = None,
    ) -> VideoRecord:
        """Generate a video for ``prompt`` and prepend it to the gallery."""
        token = self._begin(prompt, context, origin_title)
        return await self._execute(prompt, context, origin_title, token)

    def start(
        self,
        prompt: str,
        context: GenerationContext = GenerationContext.NEW,
        origin_title: str | None = None,
    ) -> "asyncio.Task[VideoRecord]":
        """Validate and enter Running now, then run the job as a task.

        Precondition errors (``EmptyPromptError``, ``BusyError``) are raised
        synchronously; everything else surfaces through the task.
        """
        token = self._begin(prompt, context, origin_title)
        task = asyncio.ensure_future(
            self._execute(prompt, context, origin_title, token)
        )
        task.add_done_callback(lambda _: self._release(token))
        return task

    def _begin(
        self, prompt: str, context: GenerationContext, origin_title: str | None
    ) -> CancellationToken:
        if not prompt.strip():
            raise EmptyPromptError()
        if self.is_running:
            raise BusyError()
        token = CancellationToken()
        self._token = token
        self._last_record_id = None
        self._set_state(RunningState(context=context, origin_title=origin_title))
        return token

    def _release(self, token: CancellationToken) -> None:
        # a task cancelled before its first step never reaches _execute
        if self._token is token:
            self._token = None
            self._set_state(IdleState())

    async def _execute(
        self,
        prompt: str,
        context: GenerationContext,
        origin_title: str | None,
        token: CancellationToken,
    ) -> VideoRecord:
        try:
            record = await self._generate(prompt, context, origin_title, token)
        except GenerationCancelledError:
            _logger.info("Video generation cancelled")
            self._set_state(IdleState())
            raise
        except asyncio.CancelledError:
            self._set_state(IdleState())
            raise
        except GenerationError as exc:
            _logger.warning("Video generation failed: %s", exc, exc_info=True)
            self._set_state(FailedState())
            raise
        except Exception as exc:
            _logger.exception("Video generation failed unexpectedly")
            self._set_state(FailedState())
            raise GenerationError(str(exc)) from exc
        finally:
            self._token = None

        self.store.prepend(record)
        self._last_record_id = record.id
        _logger.info("Added video %s to the gallery", record.id)
        self._set_state(IdleState())
        return record

    async def _generate(
        self,
        prompt: str,
        context: GenerationContext,
        origin_title: str | None,
        token: CancellationToken,
    ) -> VideoRecord:
        handle = await self._submit(prompt, token)
        self._set_phase(RunPhase.POLLING)
        result = await self._wait_for_result(handle, token)
        if not result.artifacts:
            raise EmptyResultError()
        if len(result.artifacts) > 1:
            _logger.info(
                "Job %s produced %s videos; keeping the first",
                handle.name,
                len(result.artifacts),
            )

        self._set_phase(RunPhase.FETCHING)
        payload = await self._fetch(result.artifacts[0], token)
        artifact = self.codec.encode(
            payload.content, payload.media_type, payload.declared_length
        )
        return VideoRecord(
            id=uuid4(),
            title=build_title(prompt, context, origin_title),
            description=prompt,
            artifact=artifact,
            created_at=self._created_at(),
        )

    async def _submit(self, prompt: str, token: CancellationToken) -> JobHandle:
        _logger.info("Submitting generation job: %s", prompt[:50])
        try:
            handle = await _until_cancelled(
                self.client.submit(prompt, self.options), token
            )
        except TransportError as exc:
            raise SubmitFailedError(str(exc)) from exc
        _logger.info("Submitted generation job %s", handle.name)
        return handle

    async def _wait_for_result(
        self, handle: JobHandle, token: CancellationToken
    ) -> JobResult:
        started = self.clock()
        polls = 0
        while True:
            status = await self._poll(handle, token)
            polls += 1
            if isinstance(status, JobFailed):
                raise JobFailedError(status.reason)
            if isinstance(status, JobDone):
                _logger.info("Job %s done after %s polls", handle.name, polls)
                return status.result

            elapsed = self.clock() - started
            if self._poll_limit_reached(polls, elapsed):
                raise GenerationTimeoutError(polls=polls, elapsed_seconds=elapsed)
            _logger.info("Job %s still generating (poll %s)", handle.name, polls)
            await _until_cancelled(asyncio.sleep(self.poll_interval_seconds), token)

    async def _poll(self, handle: JobHandle, token: CancellationToken) -> JobStatus:
        try:
            return await _until_cancelled(self.client.poll(handle), token)
        except TransportError as exc:
            raise JobFailedError(str(exc)) from exc

    async def _fetch(
        self, artifact: GeneratedArtifact, token: CancellationToken
    ) -> ArtifactPayload:
        try:
            return await _until_cancelled(self.client.fetch(artifact), token)
        except TransportError as exc:
            raise FetchFailedError(exc.status_code) from exc

    def _created_at(self) -> datetime:
        # never older than the newest stored record
        stamp = self.now()
        newest = max((r.created_at for r in self.store.records()), default=None)
        if newest is not None and stamp < newest:
            return newest
        return stamp

    def _poll_limit_reached(self, polls: int, elapsed: float) -> bool:
        if self.max_poll_attempts is not None and polls >= self.max_poll_attempts:
            return True
        if self.poll_timeout_seconds is None:
            return False
        return elapsed >= self.poll_timeout_seconds

    def _set_phase(self, phase: RunPhase) -> None:
        if isinstance(self._state, RunningState):
            self._set_state(replace(self._state, phase=phase))

    def _set_state(self, state: OrchestratorState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.exception("State listener failed")


def build_title(
    prompt: str, context: GenerationContext, origin_title: str | None
) -> str:
    """Title for a new record: remix lineage or a truncated prompt."""
    if context is GenerationContext.REMIX and origin_title:
        return f'Remix of "{origin_title}"'
    return f'New: "{prompt[:_TITLE_PROMPT_CHARS]}..."'


async def _until_cancelled(awaitable: Awaitable[T], token: CancellationToken) -> T:
    """Await ``awaitable`` unless ``token`` fires first."""
    task = asyncio.ensure_future(awaitable)
    if token.cancelled:
        task.cancel()
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
    if task.cancelled():
        raise GenerationCancelledError()
    return task.result()
