"""Gemini API client for Veo long-running video generation."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import unquote

import httpx
from pydantic import ValidationError

from veo_gallery.domain.errors import TransportError
from veo_gallery.domain.jobs import (
    ArtifactPayload,
    GeneratedArtifact,
    GenerationOptions,
    JobDone,
    JobFailed,
    JobHandle,
    JobPending,
    JobResult,
    JobStatus,
)
from veo_gallery.domain.operations import VeoOperation

DEFAULT_MEDIA_TYPE = "video/mp4"


class RemoteJobClient(Protocol):
    """Interface for a remote long-running generation service."""

    async def submit(self, prompt: str, options: GenerationOptions) -> JobHandle:
        """Start a generation job and return its handle."""

    async def poll(self, handle: JobHandle) -> JobStatus:
        """Return the current status of a job."""

    async def fetch(self, artifact: GeneratedArtifact) -> ArtifactPayload:
        """Download the raw bytes of a produced artifact."""


@dataclass
class HttpxVeoJobClient(RemoteJobClient):
    """Veo client talking to the Gemini REST API through httpx."""

    api_key: str
    base_url: str
    model: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str, model: str) -> "HttpxVeoJobClient":
        """Create a Veo client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            model=model,
            http_client=httpx.AsyncClient(),
        )

    async def submit(self, prompt: str, options: GenerationOptions) -> JobHandle:
        """Submit a predictLongRunning request."""
        url = f"{self.base_url}/models/{self.model}:predictLongRunning"
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "aspectRatio": options.aspect_ratio,
                "sampleCount": options.number_of_videos,
            },
        }
        data = await self._send("POST", url, json=payload)
        operation = _parse_operation(data)
        return JobHandle(name=operation.name)

    async def poll(self, handle: JobHandle) -> JobStatus:
        """Fetch the operation and translate it into a job status."""
        url = f"{self.base_url}/{handle.name}"
        data = await self._send("GET", url)
        return _to_status(_parse_operation(data))

    async def fetch(self, artifact: GeneratedArtifact) -> ArtifactPayload:
        """Download the artifact, appending the API key to its locator."""
        try:
            url = httpx.URL(unquote(artifact.uri)).copy_merge_params(
                {"key": self.api_key}
            )
            response = await self.http_client.get(
                url,
                follow_redirects=True,
                timeout=120,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise _transport_error("fetch", exc) from exc

        media_type = _media_type(response.headers.get("content-type"))
        return ArtifactPayload(
            content=response.content,
            media_type=media_type or artifact.media_type or DEFAULT_MEDIA_TYPE,
            declared_length=_declared_length(response.headers),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _send(self, method: str, url: str, json: dict | None = None) -> dict:
        try:
            response = await self.http_client.request(
                method,
                url,
                headers={"x-goog-api-key": self.api_key},
                json=json,
                timeout=30,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise _transport_error(method, exc) from exc
        except ValueError as exc:
            raise TransportError(f"{method} {url} returned invalid JSON") from exc


def _parse_operation(data: dict) -> VeoOperation:
    try:
        return VeoOperation.model_validate(data)
    except ValidationError as exc:
        raise TransportError("Malformed operation payload") from exc


def _to_status(operation: VeoOperation) -> JobStatus:
    """Map a Gemini operation onto the pending/done/failed variants."""
    if not operation.done:
        return JobPending()
    if operation.error is not None:
        reason = operation.error.message or f"error code {operation.error.code}"
        return JobFailed(reason=reason)
    video_response = (
        operation.response.generate_video_response if operation.response else None
    )
    if video_response is None:
        return JobDone(result=JobResult())
    artifacts = [
        GeneratedArtifact(uri=sample.video.uri, media_type=sample.video.mime_type)
        for sample in video_response.generated_samples
        if sample.video is not None and sample.video.uri
    ]
    return JobDone(result=JobResult(artifacts=artifacts))


def _transport_error(action: str, exc: httpx.HTTPError) -> TransportError:
    status_code = None
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
    return TransportError(f"Veo {action} failed: {exc}", status_code=status_code)


def _media_type(content_type: str | None) -> str | None:
    if not content_type:
        return None
    value = content_type.split(";", 1)[0].strip()
    return value or None


def _declared_length(headers: httpx.Headers) -> int | None:
    """Return Content-Length when it describes the decoded body."""
    if headers.get("content-encoding"):
        return None
    raw = headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)
