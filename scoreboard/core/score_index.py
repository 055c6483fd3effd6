"""
Score index: person_id -> challenge_id -> score

Built in one pass over people and scores. Every known person gets an entry,
even with no scores; rows pointing at people that no longer exist are
dropped. Absent pairs read as 0.
"""
from typing import Dict, Iterable

from scoreboard.models import Person, Score
from scoreboard.utils import coerce_score


ScoreIndex = Dict[str, Dict[str, int]]


def build_score_index(people: Iterable[Person], scores: Iterable[Score]) -> ScoreIndex:
    """
    Build the two-level score lookup

    Args:
        people: Current person collection
        scores: Current score rows (unordered)

    Returns:
        Mapping person_id -> {challenge_id: score}
    """
    index: ScoreIndex = {person.id: {} for person in people}

    for row in scores:
        per_person = index.get(row.person_id)
        if per_person is None:
            # Orphan left behind by a deleted person
            continue
        per_person[row.challenge_id] = coerce_score(row.value)

    return index


def lookup_score(index: ScoreIndex, person_id: str, challenge_id: str) -> int:
    """Score of a pair, 0 when absent"""
    return index.get(person_id, {}).get(challenge_id, 0)
