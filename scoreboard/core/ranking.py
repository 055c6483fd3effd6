"""
Ranking engine - derives the displayed views from the entity snapshot

Views:
  - Per-challenge ranking: every person with their score on one challenge
  - Overall ranking: total score and total attainable score per person
  - Overall table: one row per person, one cell per challenge, plus total

Rules:
  - Missing scores count as 0
  - Sorted by score (or total) descending
  - Ties broken by person name ascending, compared like a human would:
    accents and case only decide when the names are otherwise equal
  - The three views share the tie-break so people appear in the same
    relative order everywhere
  - Challenges keep their creation order (display number) in table cells

All functions are pure: they never touch the store or the backend.
"""
import unicodedata
from typing import Dict, Iterable, List, Sequence, Tuple

from scoreboard.core.score_index import ScoreIndex, build_score_index, lookup_score
from scoreboard.models import (
    Challenge,
    ChallengeRankingEntry,
    OverallRankingEntry,
    OverallTableRow,
    Person,
    Snapshot,
    TableCell,
    Views,
)
from scoreboard.utils import to_int


def name_sort_key(name: str) -> Tuple[str, str, str]:
    """
    Locale-aware sort key for person names

    Primary: base letters only (accents stripped, case folded)
    Secondary: case folded with accents
    Final: the exact string, so the order is total

    Example:
        >>> sorted(["bruno", "Ana", "Álvaro"], key=name_sort_key)
        ['Álvaro', 'Ana', 'bruno']
    """
    name = name or ""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), name.casefold(), name


def per_challenge_ranking(
    challenges: Iterable[Challenge],
    people: Sequence[Person],
    index: ScoreIndex,
) -> Dict[str, List[ChallengeRankingEntry]]:
    """
    Rank every person on each challenge

    Args:
        challenges: Challenge collection
        people: Person collection
        index: Score index built from the same snapshot

    Returns:
        Mapping challenge_id -> entries sorted by score desc, name asc
    """
    ranking: Dict[str, List[ChallengeRankingEntry]] = {}

    for challenge in challenges:
        entries = [
            ChallengeRankingEntry(
                person_id=person.id,
                person_name=person.name,
                score=lookup_score(index, person.id, challenge.id),
            )
            for person in people
        ]
        entries.sort(key=lambda e: (-e.score, name_sort_key(e.person_name)))
        ranking[challenge.id] = entries

    return ranking


def overall_ranking(
    challenges: Sequence[Challenge],
    people: Iterable[Person],
    index: ScoreIndex,
) -> List[OverallRankingEntry]:
    """
    Total score per person over all challenges

    max is the sum of every challenge's max_score, the same for everyone.
    """
    max_total = sum(to_int(c.max_score) for c in challenges)

    entries = []
    for person in people:
        total = sum(lookup_score(index, person.id, c.id) for c in challenges)
        entries.append(OverallRankingEntry(
            person_id=person.id,
            person_name=person.name,
            total=total,
            max=max_total,
        ))

    entries.sort(key=lambda e: (-e.total, name_sort_key(e.person_name)))
    return entries


def overall_table(
    challenges: Sequence[Challenge],
    people: Iterable[Person],
    index: ScoreIndex,
) -> List[OverallTableRow]:
    """Full person x challenge table, ordered like the overall ranking"""
    rows = []
    for person in people:
        cells = [
            TableCell(
                challenge_id=c.id,
                score=lookup_score(index, person.id, c.id),
                max_score=to_int(c.max_score),
            )
            for c in challenges
        ]
        rows.append(OverallTableRow(
            person_id=person.id,
            person_name=person.name,
            cells=cells,
            total=sum(cell.score for cell in cells),
        ))

    rows.sort(key=lambda r: (-r.total, name_sort_key(r.person_name)))
    return rows


def build_views(snapshot: Snapshot) -> Views:
    """Recompute every derived view from a snapshot"""
    challenges = list(snapshot.challenges)
    people = list(snapshot.people)
    index = build_score_index(people, snapshot.scores)

    return Views(
        score_index=index,
        per_challenge=per_challenge_ranking(challenges, people, index),
        overall_ranking=overall_ranking(challenges, people, index),
        overall_table=overall_table(challenges, people, index),
    )
