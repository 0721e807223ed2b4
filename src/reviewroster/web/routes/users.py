"""User REST API endpoints for ReviewRoster."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from reviewroster.domain import User, UserReviews
from reviewroster.logging import bind_operation_context
from reviewroster.services import UserService
from reviewroster.web.dependencies import get_user_service


class SetIsActiveRequest(BaseModel):
    """Request schema for flipping a user's active flag."""

    user_id: str = Field(..., min_length=1)
    is_active: bool


class UserResponse(BaseModel):
    """Response wrapper for a single user."""

    user: User


def create_users_router() -> APIRouter:
    """Create the user router.

    Routes:
        POST /users/setIsActive - Set a user's active flag
        GET /users/getReview - Pull requests the user reviews
    """
    router = APIRouter(prefix="/users", tags=["users"])

    @router.post("/setIsActive", response_model=UserResponse)
    async def set_is_active(
        payload: SetIsActiveRequest,
        service: UserService = Depends(get_user_service),  # noqa: B008
    ) -> UserResponse:
        bind_operation_context("set_is_active", user_id=payload.user_id)
        user = await service.set_is_active(payload.user_id, payload.is_active)
        return UserResponse(user=user)

    @router.get("/getReview", response_model=UserReviews)
    async def get_review(
        user_id: str = Query(..., min_length=1),
        service: UserService = Depends(get_user_service),  # noqa: B008
    ) -> UserReviews:
        bind_operation_context("get_user_reviews", user_id=user_id)
        return await service.get_user_reviews(user_id)

    return router
