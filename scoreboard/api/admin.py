"""
Admin endpoints for challenge, people and score management
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from scoreboard import state
from scoreboard.models import (
    CreateChallengeRequest,
    CreatePersonRequest,
    MutationResult,
    SetScoreRequest,
)


logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    "validation": 400,
    "not_found": 404,
    "backend": 502,
}


def require_admin():
    """Only the admin role may change data"""
    if state.ROLE != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")
    if state.SCOREBOARD is None:
        raise HTTPException(status_code=503, detail="Backend not initialised")


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _respond(result: MutationResult) -> dict:
    if not result.success:
        raise HTTPException(
            status_code=STATUS_BY_ERROR.get(result.error_kind, 500),
            detail=result.message,
        )
    return result.model_dump()


@router.post("/challenges")
async def create_challenge(request: CreateChallengeRequest):
    """
    Admin: Create a challenge

    Request:
        {
            "name": "Quiz",
            "description": "Opening quiz",  # optional
            "max_score": 100                 # optional, default from config
        }
    """
    return _respond(await state.SCOREBOARD.create_challenge(
        request.name, request.description, request.max_score
    ))


@router.delete("/challenges/{challenge_id}")
async def delete_challenge(challenge_id: str):
    """Admin: Delete a challenge and its scores (people are kept)"""
    return _respond(await state.SCOREBOARD.delete_challenge(challenge_id))


@router.post("/people")
async def create_person(request: CreatePersonRequest):
    """
    Admin: Create a person

    Request:
        {"name": "Ana"}
    """
    return _respond(await state.SCOREBOARD.create_person(request.name))


@router.delete("/people/{person_id}")
async def delete_person(person_id: str):
    """Admin: Delete a person"""
    return _respond(await state.SCOREBOARD.delete_person(person_id))


@router.put("/scores")
async def set_score(request: SetScoreRequest):
    """
    Admin: Set one score (clamped to the challenge's max score)

    Request:
        {"person_id": "p1", "challenge_id": "c1", "value": 80}
    """
    return _respond(await state.SCOREBOARD.set_score(
        request.person_id, request.challenge_id, request.value
    ))


@router.post("/reload")
async def reload_store():
    """Admin: Reload everything from the backend"""
    result = await state.SCOREBOARD.reload()
    state.ROLE = await state.BACKEND.current_user_role()
    return _respond(result)
