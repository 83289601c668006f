"""API router package."""

from fastapi import APIRouter

from taskboard.api.v1 import (
    auth,
    boards,
    cards,
    checklist,
    comments,
    health,
    invites,
    labels,
    lists,
    members,
)

router = APIRouter()

# Include all API routers
router.include_router(health.router, tags=["Health"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
# The invite inbox must be matched before /boards/{board_id}
router.include_router(invites.router, prefix="/boards", tags=["Invites"])
router.include_router(boards.router, prefix="/boards", tags=["Boards"])
router.include_router(members.router, prefix="/boards", tags=["Members"])
router.include_router(lists.router, prefix="/boards", tags=["Lists"])
router.include_router(cards.router, prefix="/boards", tags=["Cards"])
router.include_router(labels.router, prefix="/boards", tags=["Labels"])
router.include_router(checklist.router, prefix="/boards", tags=["Checklist"])
router.include_router(comments.router, prefix="/boards", tags=["Comments"])
