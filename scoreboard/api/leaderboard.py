"""
Entity, score and ranking endpoints
"""
from typing import Optional

from fastapi import APIRouter, HTTPException

from scoreboard import state
from scoreboard.services.leaderboard import (
    get_challenge_ranking_data,
    get_overall_ranking_data,
    get_overall_table_data,
)
from scoreboard.utils import next_number


router = APIRouter(prefix="/api", tags=["leaderboard"])


@router.get("/challenges")
async def list_challenges():
    """List all challenges in display-number order"""
    return {"challenges": [c.model_dump() for c in state.STORE.challenges]}


@router.get("/challenges/next-number")
async def next_challenge_number():
    """Preview the number the next challenge will get"""
    return {"next_number": next_number(state.STORE.challenges, "display_number")}


@router.get("/people")
async def list_people():
    """List all people in enrollment-number order"""
    return {"people": [p.model_dump() for p in state.STORE.people]}


@router.get("/people/next-number")
async def next_enrollment_number():
    """Preview the enrollment number the next person will get"""
    return {"next_number": next_number(state.STORE.people, "enrollment_number")}


@router.get("/scores")
async def get_scores():
    """
    Score index: person_id -> challenge_id -> score

    Pairs missing from the index are 0.
    """
    return {"scores": state.STORE.views().score_index}


@router.get("/rankings/challenges")
async def get_challenge_rankings(challenge_id: Optional[str] = None, selected: bool = False):
    """
    Per-challenge ranking

    Query:
        challenge_id: only this challenge
        selected: with no challenge_id, return the first challenge only
    """
    data = get_challenge_ranking_data(challenge_id, selected)
    if data is None:
        raise HTTPException(status_code=404, detail=f"Challenge {challenge_id} not found")
    return data


@router.get("/rankings/overall")
async def get_overall_ranking():
    """Total per person, highest first"""
    return get_overall_ranking_data()


@router.get("/table")
async def get_overall_table():
    """Person x challenge table, same order as the overall ranking"""
    return get_overall_table_data()
