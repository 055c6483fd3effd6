"""
Configuration endpoints
"""
from fastapi import APIRouter

from scoreboard import state


router = APIRouter(tags=["config"])


@router.get("/config")
async def get_config():
    """Get non-secret settings, the current role and the last backend error"""
    settings = state.SETTINGS
    return {
        "role": state.ROLE,
        "last_api_error": state.SCOREBOARD.last_error if state.SCOREBOARD else None,
        "backend_configured": bool(settings.supabase_url),
        "request_timeout": settings.request_timeout,
        "default_max_score": settings.default_max_score,
        "tables": {
            "challenges": settings.challenges_table,
            "people": settings.people_table,
            "scores": settings.scores_table,
            "roles": settings.roles_table,
        },
    }
