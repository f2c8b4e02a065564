"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from notedesk.backend.api.v1.endpoints import notes, tags, tasks

router = APIRouter()

router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(tags.router, prefix="/tags", tags=["tags"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
