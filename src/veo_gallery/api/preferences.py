"""Sort preference endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from veo_gallery.api.models import SortPreference

if TYPE_CHECKING:
    from veo_gallery.containers import AppContainer

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/sort")
async def get_sort(request: Request) -> SortPreference:
    """Return the saved gallery sort order."""
    container: AppContainer = request.app.state.container
    return SortPreference(sort=container.preferences.sort_key)


@router.put("/sort")
async def put_sort(body: SortPreference, request: Request) -> SortPreference:
    """Change and persist the gallery sort order."""
    container: AppContainer = request.app.state.container
    container.preferences.set_sort_key(body.sort)
    return SortPreference(sort=container.preferences.sort_key)
