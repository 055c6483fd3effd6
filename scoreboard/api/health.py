"""
Health check and system status endpoints
"""
from fastapi import APIRouter
from scoreboard import state


router = APIRouter(tags=["health"])


@router.get("/")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "message": "Scoreboard Server",
        "version": "1.0.0",
        "store_version": state.STORE.version,
        "total_challenges": len(state.STORE.challenges),
        "total_people": len(state.STORE.people),
        "total_scores": len(state.STORE.scores),
    }
