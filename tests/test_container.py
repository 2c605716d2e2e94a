"""Tests for container wiring."""

import asyncio

from veo_gallery.adapters.veo_client import HttpxVeoJobClient
from veo_gallery.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.job_client, HttpxVeoJobClient)
    assert container.orchestrator.client is container.job_client
    assert container.orchestrator.poll_interval_seconds == 0
    assert container.gallery.store is container.store
    asyncio.run(container.close_resources())
