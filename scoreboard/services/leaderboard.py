"""
Leaderboard service - Assemble and format view data
"""
from typing import Dict, Optional

from scoreboard import state


def get_challenge_ranking_data(challenge_id: Optional[str] = None, selected: bool = False) -> Dict:
    """
    Get per-challenge ranking data for display

    Args:
        challenge_id: Optional challenge ID (only that challenge is returned)
        selected: If True and no challenge_id, use the first challenge

    Returns:
        Formatted ranking data, or None when challenge_id is unknown
    """
    views = state.STORE.views()
    challenges = {c.id: c for c in state.STORE.challenges}

    if challenge_id is None and selected and state.STORE.challenges:
        challenge_id = state.STORE.challenges[0].id

    if challenge_id is None:
        return {
            "challenges": [
                {
                    "challenge": challenges[cid].model_dump(),
                    "ranking": [e.model_dump() for e in entries],
                }
                for cid, entries in views.per_challenge.items()
            ]
        }

    if challenge_id not in challenges:
        return None

    return {
        "challenge": challenges[challenge_id].model_dump(),
        "ranking": [e.model_dump() for e in views.per_challenge[challenge_id]],
    }


def get_overall_ranking_data() -> Dict:
    """Overall ranking with position numbers"""
    ranking = state.STORE.views().overall_ranking
    return {
        "ranking": [
            {"position": i, **entry.model_dump()}
            for i, entry in enumerate(ranking, start=1)
        ],
        "total_people": len(ranking),
    }


def get_overall_table_data() -> Dict:
    """Overall table: challenge headers plus one row per person"""
    return {
        "challenges": [c.model_dump() for c in state.STORE.challenges],
        "rows": [row.model_dump() for row in state.STORE.views().overall_table],
    }
