"""
Habit Tracker Backend — Habit Route Handlers
=============================================

What:  The /habit HTTP surface: list, create, get, update, delete, archive, restore.
Why:   Entry point for every habit operation the frontend performs.
How:   Passes raw path parameters and raw JSON bodies to HabitService and
       wraps results in the success envelope {"success": true, "data": ...}.
Who:   Called by the frontend data layer (see habit_api.client).

Route Inventory:
    GET    /habit                 → 200 list of summaries
    POST   /habit                 → 201 full habit
    GET    /habit/{id}            → 200 full habit
    PUT    /habit/{id}            → 200 full habit
    DELETE /habit/{id}            → 200 confirmation message
    POST   /habit/{id}/archive    → 200 confirmation message
    POST   /habit/{id}/restore    → 200 confirmation message

Errors are NOT handled here. Every HabitError propagates to the global
handler in main.py, which renders the failure envelope and status code.

Why raw bodies (Body(default=None) typed as Any):
    FastAPI would otherwise reject bad payloads with its own 422 format.
    The service validates instead, so every caller gets the same
    VALIDATION_ERROR response with the complete violation list.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends

from habit_api.schemas.habit import (
    ErrorResponse,
    HabitListItem,
    HabitResponse,
    MessageResponse,
    SuccessResponse,
)
from habit_api.services.habit_service import HabitService, get_habit_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/habit", tags=["Habits"])

_ERRORS = {
    400: {"description": "Validation or business rule failure", "model": ErrorResponse},
    404: {"description": "Habit not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=SuccessResponse[List[HabitListItem]],
    summary="List habits",
    description="Returns every habit as a summary (no description, owner or timezone).",
)
async def list_habits(
    service: HabitService = Depends(get_habit_service),
) -> SuccessResponse[List[HabitListItem]]:
    return SuccessResponse(data=service.list_habits())


@router.post(
    "",
    status_code=201,
    response_model=SuccessResponse[HabitResponse],
    responses={400: _ERRORS[400]},
    summary="Create a habit",
    description=(
        "Creates a new Active habit. Fails with LIMIT_REACHED when the active-habit "
        "cap is reached and with DUPLICATE_NAME when any habit already uses the name."
    ),
)
async def create_habit(
    body: Any = Body(default=None),
    service: HabitService = Depends(get_habit_service),
) -> SuccessResponse[HabitResponse]:
    return SuccessResponse(data=service.create_habit(body))


@router.get(
    "/{habit_id}",
    response_model=SuccessResponse[HabitResponse],
    responses=_ERRORS,
    summary="Get a habit by ID",
)
async def get_habit(
    habit_id: str,
    service: HabitService = Depends(get_habit_service),
) -> SuccessResponse[HabitResponse]:
    return SuccessResponse(data=service.get_habit({"id": habit_id}))


@router.put(
    "/{habit_id}",
    response_model=SuccessResponse[HabitResponse],
    responses=_ERRORS,
    summary="Update a habit",
    description="Replaces name, description, category and icon. Status and timezone are untouched.",
)
async def update_habit(
    habit_id: str,
    body: Any = Body(default=None),
    service: HabitService = Depends(get_habit_service),
) -> SuccessResponse[HabitResponse]:
    return SuccessResponse(data=service.update_habit({"id": habit_id}, body))


@router.delete(
    "/{habit_id}",
    response_model=SuccessResponse[MessageResponse],
    responses=_ERRORS,
    summary="Delete a habit permanently",
)
async def delete_habit(
    habit_id: str,
    service: HabitService = Depends(get_habit_service),
) -> SuccessResponse[MessageResponse]:
    return SuccessResponse(data=service.delete_habit({"id": habit_id}))


@router.post(
    "/{habit_id}/archive",
    response_model=SuccessResponse[MessageResponse],
    responses=_ERRORS,
    summary="Archive a habit",
    description="Requires motivo_arquivamento (1-200 chars). The reason is not stored.",
)
async def archive_habit(
    habit_id: str,
    body: Any = Body(default=None),
    service: HabitService = Depends(get_habit_service),
) -> SuccessResponse[MessageResponse]:
    return SuccessResponse(data=service.archive_habit({"id": habit_id}, body))


@router.post(
    "/{habit_id}/restore",
    response_model=SuccessResponse[MessageResponse],
    responses=_ERRORS,
    summary="Restore an archived habit",
)
async def restore_habit(
    habit_id: str,
    service: HabitService = Depends(get_habit_service),
) -> SuccessResponse[MessageResponse]:
    return SuccessResponse(data=service.restore_habit({"id": habit_id}))
